"""
Connection descriptor (DSN) parsing for SQL Dumper.

Examples:
    mysql:host=localhost;dbname=testdb
    mysql:host=localhost;port=3307;dbname=testdb
    mysql:unix_socket=/tmp/mysql.sock;dbname=testdb
    sqlite:/var/lib/app/data.db
"""

from dataclasses import dataclass, field
from typing import Optional

from .exceptions import ConfigurationError, ConnectionError
from .models import Dialect


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Parsed DSN."""
    dialect: Dialect
    dbname: str
    host: Optional[str] = None
    unix_socket: Optional[str] = None
    port: Optional[int] = None
    options: dict[str, str] = field(default_factory=dict)

    @property
    def location(self) -> str:
        """Host, socket path or database file shown in the dump header."""
        return self.host or self.unix_socket or self.dbname


def parse_dsn(dsn: str) -> ConnectionDescriptor:
    """
    Parse a DSN string into a ConnectionDescriptor.

    Raises:
        ConfigurationError: If the DSN is empty or misses a mandatory key.
        ConnectionError: If the scheme names an unsupported engine.
    """
    if not dsn or ':' not in dsn:
        raise ConfigurationError("Empty DSN string")

    scheme, _, rest = dsn.partition(':')
    scheme = scheme.strip().lower()
    if not scheme:
        raise ConfigurationError("Missing database type from DSN string")

    try:
        dialect = Dialect(scheme)
    except ValueError:
        raise ConnectionError(f"Unsupported database type ({scheme})") from None

    if dialect is Dialect.SQLITE:
        if not rest:
            raise ConfigurationError("Missing database file from DSN string")
        return ConnectionDescriptor(dialect=dialect, dbname=rest)

    pairs: dict[str, str] = {}
    for kvp in rest.split(';'):
        if not kvp.strip():
            continue
        key, sep, value = kvp.partition('=')
        if not sep:
            raise ConfigurationError(f"Malformed DSN segment '{kvp}'")
        pairs[key.strip().lower()] = value.strip()

    host = pairs.pop('host', '') or None
    unix_socket = pairs.pop('unix_socket', '') or None
    if not host and not unix_socket:
        raise ConfigurationError("Missing host from DSN string")

    dbname = pairs.pop('dbname', '')
    if not dbname:
        raise ConfigurationError("Missing database name from DSN string")

    port = pairs.pop('port', None)
    if port is not None:
        try:
            port = int(port)
        except ValueError:
            raise ConfigurationError(f"Invalid port '{port}' in DSN string") from None

    return ConnectionDescriptor(
        dialect=dialect,
        dbname=dbname,
        host=host,
        unix_socket=unix_socket,
        port=port,
        options=pairs,
    )
