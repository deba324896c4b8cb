"""
Data models and enums for SQL Dumper.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Optional, Union

from .exceptions import ConfigurationError


class Dialect(Enum):
    """Supported database engines, keyed by DSN scheme."""
    MYSQL = "mysql"
    SQLITE = "sqlite"


class CompressMethod(Enum):
    """Supported output compression methods."""
    NONE = "none"
    GZIP = "gzip"
    BZIP2 = "bzip2"

    @property
    def extension(self) -> str:
        return {"none": "", "gzip": ".gz", "bzip2": ".bz2"}[self.value]


class DumpState(Enum):
    """Lifecycle of a single dump run."""
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    HEADER_WRITTEN = "header_written"
    STRUCTURE_DISCOVERED = "structure_discovered"
    EXPORTING_TABLES = "exporting_tables"
    EXPORTING_TRIGGERS = "exporting_triggers"
    EXPORTING_VIEWS = "exporting_views"
    EXPORTING_PROCEDURES = "exporting_procedures"
    EXPORTING_EVENTS = "exporting_events"
    FINALIZED = "finalized"
    CLOSED = "closed"


@dataclass
class ColumnInfo:
    """Database column metadata."""
    name: str
    type: str
    nullable: str
    key: str
    default: Any
    extra: str


@dataclass(frozen=True)
class ColumnTypeInfo:
    """Classification of a column used when selecting and escaping values."""
    type: str
    is_numeric: bool
    is_blob: bool
    is_virtual: bool
    type_sql: str = ""


@dataclass
class ObjectInventory:
    """Names of the database objects selected for export."""
    tables: list[str] = field(default_factory=list)
    views: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    procedures: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    pending_includes: list[str] = field(default_factory=list)


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: int = 0
    views: int = 0
    triggers: int = 0
    procedures: int = 0
    events: int = 0
    total_rows: int = 0


def _option(default: Any, name: str, kind: str):
    """Declare a dump option with its external name and value kind."""
    return field(default=default, metadata={"option": name, "kind": kind})


MAX_LINE_SIZE = 1000000


@dataclass(frozen=True)
class DumpSettings:
    """Immutable dump options.

    Built once with from_dict(); option names follow mysqldump's spelling
    ('add-drop-table', 'net_buffer_length', ...).
    """
    include_tables: tuple[str, ...] = _option((), "include-tables", "list")
    exclude_tables: tuple[str, ...] = _option((), "exclude-tables", "list")
    compress: CompressMethod = _option(CompressMethod.NONE, "compress", "compress")
    init_commands: tuple[str, ...] = _option((), "init_commands", "list")
    no_data: Union[bool, tuple[str, ...]] = _option((), "no-data", "bool_or_list")
    reset_auto_increment: bool = _option(False, "reset-auto-increment", "bool")
    add_drop_database: bool = _option(False, "add-drop-database", "bool")
    add_drop_table: bool = _option(False, "add-drop-table", "bool")
    add_drop_trigger: bool = _option(True, "add-drop-trigger", "bool")
    add_locks: bool = _option(True, "add-locks", "bool")
    complete_insert: bool = _option(False, "complete-insert", "bool")
    databases: bool = _option(False, "databases", "bool")
    default_character_set: str = _option("utf8mb4", "default-character-set", "str")
    disable_keys: bool = _option(True, "disable-keys", "bool")
    extended_insert: bool = _option(True, "extended-insert", "bool")
    events: bool = _option(False, "events", "bool")
    hex_blob: bool = _option(True, "hex-blob", "bool")
    net_buffer_length: int = _option(MAX_LINE_SIZE, "net_buffer_length", "int")
    no_autocommit: bool = _option(True, "no-autocommit", "bool")
    no_create_info: bool = _option(False, "no-create-info", "bool")
    lock_tables: bool = _option(True, "lock-tables", "bool")
    routines: bool = _option(False, "routines", "bool")
    single_transaction: bool = _option(True, "single-transaction", "bool")
    skip_triggers: bool = _option(False, "skip-triggers", "bool")
    skip_tz_utc: bool = _option(False, "skip-tz-utc", "bool")
    skip_comments: bool = _option(False, "skip-comments", "bool")
    skip_dump_date: bool = _option(False, "skip-dump-date", "bool")
    skip_definer: bool = _option(False, "skip-definer", "bool")
    where: str = _option("", "where", "str")

    @classmethod
    def option_names(cls) -> dict[str, str]:
        """Map external option names to attribute names."""
        return {f.metadata["option"]: f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, overrides: Optional[dict[str, Any]] = None) -> "DumpSettings":
        """
        Create DumpSettings from defaults overlaid with the given options.

        Raises:
            ConfigurationError: If an option is unknown or has the wrong type.
        """
        overrides = overrides or {}
        names = cls.option_names()

        unknown = [key for key in overrides if key not in names]
        if unknown:
            raise ConfigurationError(
                f"Unexpected value in dump settings: ({', '.join(map(str, unknown))})"
            )

        kinds = {f.metadata["option"]: f.metadata["kind"] for f in fields(cls)}
        values = {
            names[key]: _coerce(key, kinds[key], value)
            for key, value in overrides.items()
        }
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Return the settings keyed by external option name."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, CompressMethod):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            result[f.metadata["option"]] = value
        return result


def _coerce(name: str, kind: str, value: Any) -> Any:
    """Validate a single option value and convert it to its stored form."""
    if kind == "bool":
        if not isinstance(value, bool):
            raise ConfigurationError(f"Option '{name}' must be a boolean, got {value!r}")
        return value

    if kind == "list":
        return _coerce_list(name, value)

    if kind == "bool_or_list":
        if isinstance(value, bool):
            return value
        return _coerce_list(name, value)

    if kind == "int":
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"Option '{name}' must be a positive integer, got {value!r}")
        return value

    if kind == "compress":
        if isinstance(value, CompressMethod):
            return value
        try:
            return CompressMethod(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Compression method ({value}) is not defined yet"
            ) from None

    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigurationError(f"Option '{name}' must be a string, got {value!r}")
    return value


def _coerce_list(name: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"Option '{name}' must be a list of strings, got {value!r}")
    return tuple(value)
