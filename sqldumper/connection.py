"""
Database connection management for SQL Dumper.

Two drivers sit behind the same small interface: mysql-connector-python for
MySQL servers and the standard sqlite3 module for SQLite files.
"""

import logging
import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector.conversion import MySQLConverter

from .dsn import ConnectionDescriptor
from .exceptions import ConnectionError
from .models import Dialect


def _format_timedelta(value: timedelta) -> str:
    """Render a MySQL TIME value returned as timedelta."""
    micros = value // timedelta(microseconds=1)
    sign = '-' if micros < 0 else ''
    seconds, micros = divmod(abs(micros), 1000000)
    text = f"{sign}{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"
    if micros:
        text += f".{micros:06d}"
    return text


class DatabaseConnection:
    """Manages MySQL database connections with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: Optional[str],
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        unix_socket: Optional[str] = None,
        charset: str = DEFAULT_CHARSET
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.unix_socket = unix_socket
        self.charset = charset
        self.connection = None
        self._converter = MySQLConverter(charset)

        # Pre-build type formatters for values the driver hands back as objects
        self._type_formatters: dict[type, callable] = {
            bytes: lambda v: f"X'{v.hex()}'",
            bytearray: lambda v: f"X'{bytes(v).hex()}'",
            datetime: lambda v: self._quote_text(v.isoformat(sep=' ')),
            date: lambda v: self._quote_text(v.isoformat()),
            timedelta: lambda v: self._quote_text(_format_timedelta(v)),
            # SET columns come back as a set of member names
            set: lambda v: self._quote_text(','.join(sorted(v))),
            frozenset: lambda v: self._quote_text(','.join(sorted(v))),
        }

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    @property
    def dialect(self) -> Dialect:
        return Dialect.MYSQL

    def connect(self) -> None:
        """Establish database connection."""
        params: dict[str, Any] = {
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'charset': self.charset,
            'use_unicode': True,
        }
        if self.unix_socket:
            params['unix_socket'] = self.unix_socket
        else:
            params['host'] = self.host
            params['port'] = self.port

        try:
            self.connection = mysql.connector.connect(**params)
            logging.info(f"Connected to {self.host or self.unix_socket}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise ConnectionError(f"Connection to mysql failed with message: {e}") from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    @property
    def server_version(self) -> str:
        return self.connection.get_server_info() or ''

    def execute(self, statement: str) -> None:
        """Execute a statement that returns no rows."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(statement)
        except MySQLError as e:
            raise ConnectionError(f"Statement failed ({statement}): {e}") from e
        finally:
            cursor.close()

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        except MySQLError as e:
            raise ConnectionError(f"Query failed ({query}): {e}") from e
        finally:
            cursor.close()

    def query_dicts(self, query: str) -> list[dict[str, Any]]:
        """Execute a query and return rows keyed by column name."""
        cursor = self.connection.cursor(dictionary=True)
        try:
            cursor.execute(query)
            return cursor.fetchall()
        except MySQLError as e:
            raise ConnectionError(f"Query failed ({query}): {e}") from e
        finally:
            cursor.close()

    def get_cursor(self, buffered: bool = False):
        """Get a cursor for streaming large results.

        Args:
            buffered: If False (default), uses server-side cursor for memory-efficient
                     streaming of large result sets. If True, uses buffered cursor.
        """
        return self.connection.cursor(buffered=buffered)

    def iter_rows(self, query: str) -> Iterator[tuple]:
        """Stream rows of a query through an unbuffered cursor."""
        cursor = self.get_cursor()
        try:
            cursor.execute(query)
            yield from cursor
        except MySQLError as e:
            raise ConnectionError(f"Query failed ({query[:200]}): {e}") from e
        finally:
            cursor.close()

    def _quote_text(self, text: str) -> str:
        return f"'{self._converter.escape(text)}'"

    def quote(self, value: Any) -> str:
        """Quote a value as a MySQL string literal."""
        formatter = self._type_formatters.get(type(value))
        if formatter:
            return formatter(value)
        return self._quote_text(str(value))


class SQLiteConnection:
    """Manages SQLite database connections with context manager support."""

    def __init__(self, database: str):
        self.database = database
        self.connection: Optional[sqlite3.Connection] = None

    def __enter__(self) -> "SQLiteConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    @property
    def dialect(self) -> Dialect:
        return Dialect.SQLITE

    def connect(self) -> None:
        """Open the database file read-only; a missing file is an error."""
        try:
            if self.database == ':memory:':
                self.connection = sqlite3.connect(self.database, isolation_level=None)
            else:
                uri = Path(self.database).resolve().as_uri() + '?mode=ro'
                self.connection = sqlite3.connect(uri, uri=True, isolation_level=None)
            logging.info(f"Connected to sqlite database {self.database}")
        except sqlite3.Error as e:
            logging.error(f"Failed to connect to database: {e}")
            raise ConnectionError(f"Connection to sqlite failed with message: {e}") from e

    def disconnect(self) -> None:
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            logging.debug("Database connection closed")

    @property
    def server_version(self) -> str:
        return sqlite3.sqlite_version

    def execute(self, statement: str) -> None:
        try:
            self.connection.execute(statement)
        except sqlite3.Error as e:
            raise ConnectionError(f"Statement failed ({statement}): {e}") from e

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        try:
            return self.connection.execute(query, params or ()).fetchall()
        except sqlite3.Error as e:
            raise ConnectionError(f"Query failed ({query}): {e}") from e

    def query_dicts(self, query: str) -> list[dict[str, Any]]:
        try:
            cursor = self.connection.execute(query)
            names = [d[0] for d in cursor.description or ()]
            return [dict(zip(names, row)) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise ConnectionError(f"Query failed ({query}): {e}") from e

    def iter_rows(self, query: str) -> Iterator[tuple]:
        cursor = self.connection.cursor()
        try:
            cursor.execute(query)
            yield from cursor
        except sqlite3.Error as e:
            raise ConnectionError(f"Query failed ({query[:200]}): {e}") from e
        finally:
            cursor.close()

    def quote(self, value: Any) -> str:
        """Quote a value with SQLite's own quote() function."""
        return self.execute_query("SELECT quote(?)", (value,))[0][0]


def open_connection(
    descriptor: ConnectionDescriptor,
    user: str = '',
    password: str = '',
    charset: Optional[str] = None
):
    """Build the (not yet connected) connection matching the descriptor's engine."""
    if descriptor.dialect is Dialect.SQLITE:
        return SQLiteConnection(descriptor.dbname)
    return DatabaseConnection(
        host=descriptor.host,
        port=descriptor.port or DatabaseConnection.DEFAULT_PORT,
        user=user,
        password=password,
        database=descriptor.dbname,
        unix_socket=descriptor.unix_socket,
        charset=descriptor.options.get('charset') or charset or DatabaseConnection.DEFAULT_CHARSET,
    )
