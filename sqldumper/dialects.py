"""
Dialect adapters for SQL Dumper.

Every piece of engine specific SQL text the dumper emits or runs lives here.
An adapter holds a reference to the live connection and the dump settings and
nothing else.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from .exceptions import ConfigurationError, StructureError
from .models import ColumnInfo, ColumnTypeInfo, Dialect, DumpSettings

DEFINER_RE = r'DEFINER=`(?:[^`]|``)*`@`(?:[^`]|``)*`'

MYSQL_NUMERIC_TYPES = frozenset({
    'bit',
    'tinyint',
    'smallint',
    'mediumint',
    'int',
    'integer',
    'bigint',
    'real',
    'double',
    'float',
    'decimal',
    'numeric',
})

MYSQL_BLOB_TYPES = frozenset({
    'tinyblob',
    'blob',
    'mediumblob',
    'longblob',
    'binary',
    'varbinary',
    'bit',
    'geometry',  # http://bugs.mysql.com/bug.php?id=43544
    'point',
    'linestring',
    'polygon',
    'multipoint',
    'multilinestring',
    'multipolygon',
    'geometrycollection',
})

SQLITE_NUMERIC_TYPES = frozenset({
    'integer',
    'int',
    'tinyint',
    'smallint',
    'mediumint',
    'bigint',
    'unsigned',
    'int2',
    'int8',
    'real',
    'double',
    'float',
    'numeric',
    'decimal',
    'boolean',
})

SQLITE_BLOB_TYPES = frozenset({
    'blob',
})

_VIEW_RE = re.compile(
    r'^(CREATE(?:\s+ALGORITHM=(?:UNDEFINED|MERGE|TEMPTABLE))?)\s+('
    + DEFINER_RE
    + r'(?:\s+SQL SECURITY (?:DEFINER|INVOKER))?)?\s+(VIEW .+)$'
)
_TRIGGER_RE = re.compile(r'^(CREATE)\s+(?:(' + DEFINER_RE + r')\s+)?(TRIGGER\s.*)$', re.DOTALL)
_EVENT_RE = re.compile(r'^(CREATE)\s+(?:(' + DEFINER_RE + r')\s+)?(EVENT .*)$', re.DOTALL)
_AUTO_INCREMENT_RE = re.compile(r' AUTO_INCREMENT=[0-9]+')


def as_text(value: Any) -> Any:
    """Some driver versions hand back metadata columns as bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8')
    return value


def _literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _require(row: dict[str, Any], key: str, message: str) -> str:
    """Fetch a DDL column from a SHOW CREATE row or fail loudly."""
    value = as_text(row.get(key)) if row else None
    if not value:
        raise StructureError(message)
    return value


def _guard_create(match: re.Match, version: str, definer_version: str, skip_definer: bool) -> str:
    """Wrap a CREATE [DEFINER] statement in version comments."""
    definer = ''
    if match.group(2) and not skip_definer:
        definer = f"/*!{definer_version} {match.group(2)}*/ "
    return f"/*!{version} {match.group(1)}*/ {definer}/*!{version} {match.group(3)} */"


def _classify(column: ColumnInfo, numeric_types: frozenset, blob_types: frozenset) -> ColumnTypeInfo:
    """Decode a declared column type into its classification."""
    declared = as_text(column.type) or ''
    base = declared.strip().split(' ')[0].split('(')[0].lower()
    extra = as_text(column.extra) or ''
    # Generated columns show up as "VIRTUAL GENERATED" or "STORED GENERATED"
    is_virtual = 'VIRTUAL GENERATED' in extra or 'STORED GENERATED' in extra
    return ColumnTypeInfo(
        type=base,
        is_numeric=base in numeric_types,
        is_blob=base in blob_types,
        is_virtual=is_virtual,
        type_sql=declared,
    )


class DialectAdapter(ABC):
    """Contract every supported engine must fulfil."""

    dialect: Dialect

    def __init__(self, connection, settings: DumpSettings):
        self.connection = connection
        self.settings = settings

    # -- Identifiers -------------------------------------------------------

    @abstractmethod
    def quote_identifier(self, name: str) -> str: ...

    @abstractmethod
    def hex_expression(self, column: str, col_type: ColumnTypeInfo) -> str: ...

    @abstractmethod
    def hex_literal(self, hex_text: str) -> str: ...

    # -- Introspection queries --------------------------------------------

    @abstractmethod
    def show_tables(self, database: str) -> str: ...

    @abstractmethod
    def show_views(self, database: str) -> str: ...

    @abstractmethod
    def show_triggers(self, database: str) -> str: ...

    @abstractmethod
    def show_procedures(self, database: str) -> str: ...

    @abstractmethod
    def show_events(self, database: str) -> str: ...

    @abstractmethod
    def show_columns(self, table: str) -> str: ...

    @abstractmethod
    def show_create_table(self, table: str) -> str: ...

    @abstractmethod
    def show_create_view(self, view: str) -> str: ...

    @abstractmethod
    def show_create_trigger(self, trigger: str) -> str: ...

    @abstractmethod
    def show_create_procedure(self, procedure: str) -> str: ...

    @abstractmethod
    def show_create_event(self, event: str) -> str: ...

    @abstractmethod
    def to_column_info(self, row: dict[str, Any]) -> ColumnInfo: ...

    @abstractmethod
    def parse_column_type(self, column: ColumnInfo) -> ColumnTypeInfo: ...

    # -- DDL -----------------------------------------------------------------

    @abstractmethod
    def databases(self, database: str) -> str: ...

    @abstractmethod
    def create_table(self, row: dict[str, Any]) -> str: ...

    @abstractmethod
    def create_view(self, row: dict[str, Any]) -> str: ...

    @abstractmethod
    def create_trigger(self, row: dict[str, Any]) -> str: ...

    @abstractmethod
    def create_procedure(self, row: dict[str, Any]) -> str: ...

    @abstractmethod
    def create_event(self, row: dict[str, Any]) -> str: ...

    @abstractmethod
    def add_drop_database(self, database: str) -> str: ...

    @abstractmethod
    def add_drop_trigger(self, trigger: str) -> str: ...

    @abstractmethod
    def drop_table(self, table: str) -> str: ...

    @abstractmethod
    def drop_view(self, view: str) -> str: ...

    # -- Session control ---------------------------------------------------

    @abstractmethod
    def init_commands(self) -> list[str]: ...

    @abstractmethod
    def backup_parameters(self) -> str: ...

    @abstractmethod
    def restore_parameters(self) -> str: ...

    @abstractmethod
    def setup_transaction(self) -> str: ...

    @abstractmethod
    def start_transaction(self) -> str: ...

    @abstractmethod
    def commit_transaction(self) -> str: ...

    @abstractmethod
    def lock_table(self, table: str) -> None: ...

    @abstractmethod
    def unlock_table(self, table: str) -> None: ...

    @abstractmethod
    def start_add_lock_table(self, table: str) -> str: ...

    @abstractmethod
    def end_add_lock_table(self, table: str) -> str: ...

    @abstractmethod
    def start_add_disable_keys(self, table: str) -> str: ...

    @abstractmethod
    def end_add_disable_keys(self, table: str) -> str: ...

    @abstractmethod
    def start_disable_autocommit(self) -> str: ...

    @abstractmethod
    def end_disable_autocommit(self) -> str: ...

    # -- Shared helpers ------------------------------------------------------

    def database_header(self, database: str) -> str:
        return (
            "--\n"
            f"-- Current Database: {self.quote_identifier(database)}\n"
            "--\n\n"
        )

    def create_stand_in_table(self, view: str, column_types: dict[str, ColumnTypeInfo]) -> str:
        """
        Write a CREATE TABLE statement standing in for a view.

        SHOW CREATE TABLE would return the view algorithm, so the column list
        is rebuilt from the view's declared column types.
        """
        columns = ",\n".join(
            f"{self.quote_identifier(name)} {col_type.type_sql}".rstrip()
            for name, col_type in column_types.items()
        )
        return f"CREATE TABLE IF NOT EXISTS {self.quote_identifier(view)} (\n{columns}\n);\n"


class MySQLAdapter(DialectAdapter):
    """MySQL and MariaDB servers."""

    dialect = Dialect.MYSQL

    def quote_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def hex_expression(self, column: str, col_type: ColumnTypeInfo) -> str:
        quoted = self.quote_identifier(column)
        if col_type.type == 'bit':
            return f"LPAD(HEX({quoted}),2,'0')"
        return f"HEX({quoted})"

    def hex_literal(self, hex_text: str) -> str:
        return f"0x{hex_text}"

    def show_tables(self, database: str) -> str:
        return (
            "SELECT TABLE_NAME AS tbl_name "
            "FROM INFORMATION_SCHEMA.TABLES "
            f"WHERE TABLE_TYPE='BASE TABLE' AND TABLE_SCHEMA={_literal(database)}"
        )

    def show_views(self, database: str) -> str:
        return (
            "SELECT TABLE_NAME AS tbl_name "
            "FROM INFORMATION_SCHEMA.TABLES "
            f"WHERE TABLE_TYPE='VIEW' AND TABLE_SCHEMA={_literal(database)}"
        )

    def show_triggers(self, database: str) -> str:
        return f"SHOW TRIGGERS FROM {self.quote_identifier(database)}"

    def show_procedures(self, database: str) -> str:
        return (
            "SELECT SPECIFIC_NAME AS procedure_name "
            "FROM INFORMATION_SCHEMA.ROUTINES "
            f"WHERE ROUTINE_TYPE='PROCEDURE' AND ROUTINE_SCHEMA={_literal(database)}"
        )

    def show_events(self, database: str) -> str:
        return (
            "SELECT EVENT_NAME AS event_name "
            "FROM INFORMATION_SCHEMA.EVENTS "
            f"WHERE EVENT_SCHEMA={_literal(database)}"
        )

    def show_columns(self, table: str) -> str:
        return f"SHOW COLUMNS FROM {self.quote_identifier(table)}"

    def show_create_table(self, table: str) -> str:
        return f"SHOW CREATE TABLE {self.quote_identifier(table)}"

    def show_create_view(self, view: str) -> str:
        return f"SHOW CREATE VIEW {self.quote_identifier(view)}"

    def show_create_trigger(self, trigger: str) -> str:
        return f"SHOW CREATE TRIGGER {self.quote_identifier(trigger)}"

    def show_create_procedure(self, procedure: str) -> str:
        return f"SHOW CREATE PROCEDURE {self.quote_identifier(procedure)}"

    def show_create_event(self, event: str) -> str:
        return f"SHOW CREATE EVENT {self.quote_identifier(event)}"

    def to_column_info(self, row: dict[str, Any]) -> ColumnInfo:
        return ColumnInfo(
            name=as_text(row['Field']),
            type=as_text(row['Type']),
            nullable=as_text(row.get('Null')),
            key=as_text(row.get('Key')),
            default=row.get('Default'),
            extra=as_text(row.get('Extra')) or '',
        )

    def parse_column_type(self, column: ColumnInfo) -> ColumnTypeInfo:
        return _classify(column, MYSQL_NUMERIC_TYPES, MYSQL_BLOB_TYPES)

    def databases(self, database: str) -> str:
        character_set = self.connection.execute_query(
            "SHOW VARIABLES LIKE 'character_set_database'"
        )[0][1]
        collation = self.connection.execute_query(
            "SHOW VARIABLES LIKE 'collation_database'"
        )[0][1]
        quoted = self.quote_identifier(database)
        return (
            f"CREATE DATABASE /*!32312 IF NOT EXISTS*/ {quoted}"
            f" /*!40100 DEFAULT CHARACTER SET {character_set} "
            f" COLLATE {collation} */;\n\n"
            f"USE {quoted};\n\n"
        )

    def create_table(self, row: dict[str, Any]) -> str:
        create_table = _require(row, 'Create Table', "Error getting table code, unknown output")
        if self.settings.reset_auto_increment:
            create_table = _AUTO_INCREMENT_RE.sub('', create_table)

        charset = self.settings.default_character_set
        return (
            "/*!40101 SET @saved_cs_client     = @@character_set_client */;\n"
            f"/*!40101 SET character_set_client = {charset} */;\n"
            f"{create_table};\n"
            "/*!40101 SET character_set_client = @saved_cs_client */;\n"
            "\n"
        )

    def create_view(self, row: dict[str, Any]) -> str:
        view_stmt = _require(row, 'Create View', "Error getting view structure, unknown output")
        definer = '' if self.settings.skip_definer else '/*!50013 \\2 */\n'
        view_stmt, _ = _VIEW_RE.subn('/*!50001 \\1 */\n' + definer + '/*!50001 \\3 */', view_stmt, count=1)
        return f"{view_stmt};\n\n"

    def create_trigger(self, row: dict[str, Any]) -> str:
        trigger_stmt = _require(row, 'SQL Original Statement', "Error getting trigger code, unknown output")
        trigger_stmt, _ = _TRIGGER_RE.subn(
            lambda m: _guard_create(m, '50003', '50017', self.settings.skip_definer), trigger_stmt, count=1
        )
        return (
            "DELIMITER ;;\n"
            f"{trigger_stmt};;\n"
            "DELIMITER ;\n\n"
        )

    def create_procedure(self, row: dict[str, Any]) -> str:
        procedure_stmt = _require(
            row, 'Create Procedure',
            "Error getting procedure code, unknown output. "
            "Please check 'https://bugs.mysql.com/bug.php?id=14564'"
        )
        charset = self.settings.default_character_set
        name = self.quote_identifier(as_text(row['Procedure']))
        return (
            f"/*!50003 DROP PROCEDURE IF EXISTS {name} */;\n"
            "/*!40101 SET @saved_cs_client     = @@character_set_client */;\n"
            f"/*!40101 SET character_set_client = {charset} */;\n"
            "DELIMITER ;;\n"
            f"{procedure_stmt} ;;\n"
            "DELIMITER ;\n"
            "/*!40101 SET character_set_client = @saved_cs_client */;\n\n"
        )

    def create_event(self, row: dict[str, Any]) -> str:
        event_stmt = _require(
            row, 'Create Event',
            "Error getting event code, unknown output. "
            "Please check 'http://stackoverflow.com/questions/10853826/mysql-5-5-create-event-gives-syntax-error'"
        )
        name = self.quote_identifier(as_text(row['Event']))
        sql_mode = as_text(row.get('sql_mode')) or ''
        event_stmt, _ = _EVENT_RE.subn(
            lambda m: _guard_create(m, '50106', '50117', self.settings.skip_definer), event_stmt, count=1
        )
        return (
            "/*!50106 SET @save_time_zone= @@TIME_ZONE */ ;\n"
            f"/*!50106 DROP EVENT IF EXISTS {name} */;\n"
            "DELIMITER ;;\n"
            "/*!50003 SET @saved_cs_client      = @@character_set_client */ ;;\n"
            "/*!50003 SET @saved_cs_results     = @@character_set_results */ ;;\n"
            "/*!50003 SET @saved_col_connection = @@collation_connection */ ;;\n"
            "/*!50003 SET character_set_client  = utf8 */ ;;\n"
            "/*!50003 SET character_set_results = utf8 */ ;;\n"
            "/*!50003 SET collation_connection  = utf8_general_ci */ ;;\n"
            "/*!50003 SET @saved_sql_mode       = @@sql_mode */ ;;\n"
            f"/*!50003 SET sql_mode              = '{sql_mode}' */ ;;\n"
            "/*!50003 SET @saved_time_zone      = @@time_zone */ ;;\n"
            "/*!50003 SET time_zone             = 'SYSTEM' */ ;;\n"
            f"{event_stmt} ;;\n"
            "/*!50003 SET time_zone             = @saved_time_zone */ ;;\n"
            "/*!50003 SET sql_mode              = @saved_sql_mode */ ;;\n"
            "/*!50003 SET character_set_client  = @saved_cs_client */ ;;\n"
            "/*!50003 SET character_set_results = @saved_cs_results */ ;;\n"
            "/*!50003 SET collation_connection  = @saved_col_connection */ ;;\n"
            "DELIMITER ;\n"
            "/*!50106 SET TIME_ZONE= @save_time_zone */ ;\n\n"
        )

    def add_drop_database(self, database: str) -> str:
        return f"/*!40000 DROP DATABASE IF EXISTS {self.quote_identifier(database)}*/;\n\n"

    def add_drop_trigger(self, trigger: str) -> str:
        return f"DROP TRIGGER IF EXISTS {self.quote_identifier(trigger)};\n"

    def drop_table(self, table: str) -> str:
        return f"DROP TABLE IF EXISTS {self.quote_identifier(table)};\n"

    def drop_view(self, view: str) -> str:
        quoted = self.quote_identifier(view)
        return (
            f"DROP TABLE IF EXISTS {quoted};\n"
            f"/*!50001 DROP VIEW IF EXISTS {quoted}*/;\n"
        )

    def init_commands(self) -> list[str]:
        commands = [f"SET NAMES {self.settings.default_character_set}"]
        if not self.settings.skip_tz_utc:
            commands.append("SET TIME_ZONE='+00:00'")
        return commands

    def backup_parameters(self) -> str:
        ret = (
            "/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;\n"
            "/*!40101 SET @OLD_CHARACTER_SET_RESULTS=@@CHARACTER_SET_RESULTS */;\n"
            "/*!40101 SET @OLD_COLLATION_CONNECTION=@@COLLATION_CONNECTION */;\n"
            f"/*!40101 SET NAMES {self.settings.default_character_set} */;\n"
        )
        if not self.settings.skip_tz_utc:
            ret += (
                "/*!40103 SET @OLD_TIME_ZONE=@@TIME_ZONE */;\n"
                "/*!40103 SET TIME_ZONE='+00:00' */;\n"
            )
        ret += (
            "/*!40014 SET @OLD_UNIQUE_CHECKS=@@UNIQUE_CHECKS, UNIQUE_CHECKS=0 */;\n"
            "/*!40014 SET @OLD_FOREIGN_KEY_CHECKS=@@FOREIGN_KEY_CHECKS, FOREIGN_KEY_CHECKS=0 */;\n"
            "/*!40101 SET @OLD_SQL_MODE=@@SQL_MODE, SQL_MODE='NO_AUTO_VALUE_ON_ZERO' */;\n"
            "/*!40111 SET @OLD_SQL_NOTES=@@SQL_NOTES, SQL_NOTES=0 */;\n\n"
        )
        return ret

    def restore_parameters(self) -> str:
        ret = ''
        if not self.settings.skip_tz_utc:
            ret += "/*!40103 SET TIME_ZONE=@OLD_TIME_ZONE */;\n"
        ret += (
            "/*!40101 SET SQL_MODE=@OLD_SQL_MODE */;\n"
            "/*!40014 SET FOREIGN_KEY_CHECKS=@OLD_FOREIGN_KEY_CHECKS */;\n"
            "/*!40014 SET UNIQUE_CHECKS=@OLD_UNIQUE_CHECKS */;\n"
            "/*!40101 SET CHARACTER_SET_CLIENT=@OLD_CHARACTER_SET_CLIENT */;\n"
            "/*!40101 SET CHARACTER_SET_RESULTS=@OLD_CHARACTER_SET_RESULTS */;\n"
            "/*!40101 SET COLLATION_CONNECTION=@OLD_COLLATION_CONNECTION */;\n"
            "/*!40111 SET SQL_NOTES=@OLD_SQL_NOTES */;\n\n"
        )
        return ret

    def setup_transaction(self) -> str:
        return "SET SESSION TRANSACTION ISOLATION LEVEL REPEATABLE READ"

    def start_transaction(self) -> str:
        return "START TRANSACTION"

    def commit_transaction(self) -> str:
        return "COMMIT"

    def lock_table(self, table: str) -> None:
        self.connection.execute(f"LOCK TABLES {self.quote_identifier(table)} READ LOCAL")

    def unlock_table(self, table: str) -> None:
        self.connection.execute("UNLOCK TABLES")

    def start_add_lock_table(self, table: str) -> str:
        return f"LOCK TABLES {self.quote_identifier(table)} WRITE;\n"

    def end_add_lock_table(self, table: str) -> str:
        return "UNLOCK TABLES;\n"

    def start_add_disable_keys(self, table: str) -> str:
        return f"/*!40000 ALTER TABLE {self.quote_identifier(table)} DISABLE KEYS */;\n"

    def end_add_disable_keys(self, table: str) -> str:
        return f"/*!40000 ALTER TABLE {self.quote_identifier(table)} ENABLE KEYS */;\n"

    def start_disable_autocommit(self) -> str:
        return "SET autocommit=0;\n"

    def end_disable_autocommit(self) -> str:
        return "COMMIT;\n"


class SQLiteAdapter(DialectAdapter):
    """SQLite database files.

    SQLite has no stored procedures, events, table locks or version-guarded
    comments, so those parts of the contract produce no output.
    """

    dialect = Dialect.SQLITE

    def quote_identifier(self, name: str) -> str:
        return '"' + name.replace('"', '""') + '"'

    def hex_expression(self, column: str, col_type: ColumnTypeInfo) -> str:
        # hex(NULL) is an empty string in SQLite
        quoted = self.quote_identifier(column)
        return f"CASE WHEN {quoted} IS NULL THEN NULL ELSE hex({quoted}) END"

    def hex_literal(self, hex_text: str) -> str:
        # 0x literals are integers in SQLite
        return f"X'{hex_text}'"

    def show_tables(self, database: str) -> str:
        return (
            "SELECT name AS tbl_name FROM sqlite_master "
            "WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        )

    def show_views(self, database: str) -> str:
        return "SELECT name AS tbl_name FROM sqlite_master WHERE type='view'"

    def show_triggers(self, database: str) -> str:
        return 'SELECT name AS "Trigger", tbl_name AS "Table" FROM sqlite_master WHERE type=\'trigger\''

    def show_procedures(self, database: str) -> str:
        return "SELECT NULL AS procedure_name WHERE 0"

    def show_events(self, database: str) -> str:
        return "SELECT NULL AS event_name WHERE 0"

    def show_columns(self, table: str) -> str:
        return f"PRAGMA table_xinfo({self.quote_identifier(table)})"

    def show_create_table(self, table: str) -> str:
        return (
            'SELECT tbl_name AS "Table", sql AS "Create Table" '
            "FROM sqlite_master "
            f"WHERE type='table' AND name={_literal(table)}"
        )

    def show_create_view(self, view: str) -> str:
        return (
            'SELECT tbl_name AS "View", sql AS "Create View" '
            "FROM sqlite_master "
            f"WHERE type='view' AND name={_literal(view)}"
        )

    def show_create_trigger(self, trigger: str) -> str:
        return (
            'SELECT name AS "Trigger", sql AS "SQL Original Statement" '
            "FROM sqlite_master "
            f"WHERE type='trigger' AND name={_literal(trigger)}"
        )

    def show_create_procedure(self, procedure: str) -> str:
        return 'SELECT NULL AS "Procedure", NULL AS "Create Procedure" WHERE 0'

    def show_create_event(self, event: str) -> str:
        return 'SELECT NULL AS "Event", NULL AS "Create Event" WHERE 0'

    def to_column_info(self, row: dict[str, Any]) -> ColumnInfo:
        # table_xinfo marks generated columns with hidden=2 (virtual) or 3 (stored)
        hidden = row.get('hidden', 0)
        extra = {2: 'VIRTUAL GENERATED', 3: 'STORED GENERATED'}.get(hidden, '')
        return ColumnInfo(
            name=row['name'],
            type=row.get('type') or '',
            nullable='NO' if row.get('notnull') else 'YES',
            key='PRI' if row.get('pk') else '',
            default=row.get('dflt_value'),
            extra=extra,
        )

    def parse_column_type(self, column: ColumnInfo) -> ColumnTypeInfo:
        return _classify(column, SQLITE_NUMERIC_TYPES, SQLITE_BLOB_TYPES)

    def databases(self, database: str) -> str:
        return ''

    def create_table(self, row: dict[str, Any]) -> str:
        create_table = _require(row, 'Create Table', "Error getting table code, unknown output")
        return f"{create_table};\n\n"

    def create_view(self, row: dict[str, Any]) -> str:
        view_stmt = _require(row, 'Create View', "Error getting view structure, unknown output")
        return f"{view_stmt};\n\n"

    def create_trigger(self, row: dict[str, Any]) -> str:
        trigger_stmt = _require(row, 'SQL Original Statement', "Error getting trigger code, unknown output")
        return f"{trigger_stmt};\n\n"

    def create_procedure(self, row: dict[str, Any]) -> str:
        return _require(row, 'Create Procedure', "Error getting procedure code, unknown output") + ";\n\n"

    def create_event(self, row: dict[str, Any]) -> str:
        return _require(row, 'Create Event', "Error getting event code, unknown output") + ";\n\n"

    def add_drop_database(self, database: str) -> str:
        return ''

    def add_drop_trigger(self, trigger: str) -> str:
        return f"DROP TRIGGER IF EXISTS {self.quote_identifier(trigger)};\n"

    def drop_table(self, table: str) -> str:
        return f"DROP TABLE IF EXISTS {self.quote_identifier(table)};\n"

    def drop_view(self, view: str) -> str:
        quoted = self.quote_identifier(view)
        return (
            f"DROP TABLE IF EXISTS {quoted};\n"
            f"DROP VIEW IF EXISTS {quoted};\n"
        )

    def init_commands(self) -> list[str]:
        return []

    def backup_parameters(self) -> str:
        return "PRAGMA foreign_keys=OFF;\n\n"

    def restore_parameters(self) -> str:
        return ''

    def setup_transaction(self) -> str:
        return ''

    def start_transaction(self) -> str:
        return "BEGIN"

    def commit_transaction(self) -> str:
        return "COMMIT"

    def lock_table(self, table: str) -> None:
        pass

    def unlock_table(self, table: str) -> None:
        pass

    def start_add_lock_table(self, table: str) -> str:
        return ''

    def end_add_lock_table(self, table: str) -> str:
        return ''

    def start_add_disable_keys(self, table: str) -> str:
        return ''

    def end_add_disable_keys(self, table: str) -> str:
        return ''

    def start_disable_autocommit(self) -> str:
        return "BEGIN TRANSACTION;\n"

    def end_disable_autocommit(self) -> str:
        return "COMMIT;\n"


ADAPTERS: dict[Dialect, type[DialectAdapter]] = {
    Dialect.MYSQL: MySQLAdapter,
    Dialect.SQLITE: SQLiteAdapter,
}


def create_adapter(dialect: Dialect, connection, settings: DumpSettings) -> DialectAdapter:
    """Instantiate the adapter registered for a dialect."""
    try:
        adapter_class = ADAPTERS[dialect]
    except KeyError:
        raise ConfigurationError(f"Database type support for ({dialect}) not yet available") from None
    return adapter_class(connection, settings)
