"""
Unit tests for dsn.py
"""

import pytest

from sqldumper.dsn import parse_dsn
from sqldumper.exceptions import ConfigurationError, ConnectionError
from sqldumper.models import Dialect


class TestParseDsn:
    """Tests for parse_dsn function."""

    def test_mysql_host(self):
        descriptor = parse_dsn("mysql:host=localhost;dbname=testdb")
        assert descriptor.dialect is Dialect.MYSQL
        assert descriptor.host == "localhost"
        assert descriptor.dbname == "testdb"
        assert descriptor.port is None
        assert descriptor.location == "localhost"

    def test_mysql_port_and_charset(self):
        descriptor = parse_dsn("mysql:host=db;port=3307;dbname=shop;charset=latin1")
        assert descriptor.port == 3307
        assert descriptor.options == {"charset": "latin1"}

    def test_mysql_unix_socket(self):
        descriptor = parse_dsn("mysql:unix_socket=/tmp/mysql.sock;dbname=shop")
        assert descriptor.host is None
        assert descriptor.unix_socket == "/tmp/mysql.sock"
        assert descriptor.location == "/tmp/mysql.sock"

    def test_keys_case_insensitive_and_trailing_separator(self):
        descriptor = parse_dsn("MySQL:Host=db;DBName=shop;")
        assert descriptor.dialect is Dialect.MYSQL
        assert descriptor.host == "db"
        assert descriptor.dbname == "shop"

    def test_sqlite_path(self):
        descriptor = parse_dsn("sqlite:/var/lib/app/data.db")
        assert descriptor.dialect is Dialect.SQLITE
        assert descriptor.dbname == "/var/lib/app/data.db"
        assert descriptor.location == "/var/lib/app/data.db"

    def test_sqlite_path_with_separators(self):
        assert parse_dsn("sqlite:C:/data/a;b=c.db").dbname == "C:/data/a;b=c.db"

    @pytest.mark.parametrize("dsn", ["", "mysql", ":host=x;dbname=y"])
    def test_empty_or_missing_scheme(self, dsn):
        with pytest.raises(ConfigurationError):
            parse_dsn(dsn)

    def test_missing_host(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_dsn("mysql:dbname=shop")
        assert "Missing host" in str(exc_info.value)

    def test_missing_dbname(self):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_dsn("mysql:host=localhost")
        assert "Missing database name" in str(exc_info.value)

    def test_malformed_segment(self):
        with pytest.raises(ConfigurationError):
            parse_dsn("mysql:host=localhost;dbname")

    def test_invalid_port(self):
        with pytest.raises(ConfigurationError):
            parse_dsn("mysql:host=localhost;port=abc;dbname=shop")

    def test_missing_sqlite_path(self):
        with pytest.raises(ConfigurationError):
            parse_dsn("sqlite:")

    def test_unsupported_scheme(self):
        with pytest.raises(ConnectionError) as exc_info:
            parse_dsn("pgsql:host=localhost;dbname=shop")
        assert "Unsupported database type (pgsql)" in str(exc_info.value)
