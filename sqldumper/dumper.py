"""
Main dump orchestration for SQL Dumper.
"""

import logging
import re
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from . import __version__
from .batcher import InsertBatcher
from .connection import open_connection
from .dialects import DialectAdapter, as_text, create_adapter
from .dsn import parse_dsn
from .escaper import ValueEscaper, select_columns
from .exceptions import ConfigurationError, DiscoveryError, StructureError
from .models import ColumnTypeInfo, DumpSettings, DumpState, DumpStats, ObjectInventory
from .output import create_sink

_REGEX_FLAGS = {'i': re.IGNORECASE, 'm': re.MULTILINE, 's': re.DOTALL, 'x': re.VERBOSE}


def compile_name_patterns(entries: tuple[str, ...]) -> list[re.Pattern]:
    """
    Compile the regular expression entries of a name list.

    Entries starting with '/' are patterns written as /pattern/flags; every
    other entry is a literal table name and is skipped here.
    """
    compiled = []
    for entry in entries:
        if not entry.startswith('/'):
            continue
        end = entry.rfind('/')
        body, flag_chars = (entry[1:end], entry[end + 1:]) if end > 0 else (entry[1:], '')
        flags = 0
        for char in flag_chars:
            if char not in _REGEX_FLAGS:
                raise ConfigurationError(f"Unsupported regex flag '{char}' in pattern '{entry}'")
            flags |= _REGEX_FLAGS[char]
        try:
            compiled.append(re.compile(body, flags))
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern '{entry}': {e}") from e
    return compiled


def matches(name: str, entries: tuple[str, ...], patterns: list[re.Pattern]) -> bool:
    """Check a name against literal entries and compiled patterns."""
    if name in entries:
        return True
    return any(pattern.search(name) for pattern in patterns)


def _rfc2822_now() -> str:
    return datetime.now().astimezone().strftime('%a, %d %b %Y %H:%M:%S %z')


class Dumper:
    """Dumps one database into a single SQL script."""

    def __init__(
        self,
        dsn: str,
        user: str = '',
        password: str = '',
        settings: Union[DumpSettings, dict[str, Any], None] = None
    ):
        if isinstance(settings, DumpSettings):
            self.settings = settings
        else:
            self.settings = DumpSettings.from_dict(settings)

        self.descriptor = parse_dsn(dsn)
        self.db_name = self.descriptor.dbname
        self.user = user
        self.password = password

        self._exclude_patterns = compile_name_patterns(self.settings.exclude_tables)
        self._no_data_patterns = (
            compile_name_patterns(self.settings.no_data)
            if isinstance(self.settings.no_data, tuple) else []
        )

        self.sink = create_sink(self.settings.compress)
        self.connection = None
        self.adapter: Optional[DialectAdapter] = None
        self.escaper: Optional[ValueEscaper] = None
        self.version = ''

        self.inventory = ObjectInventory()
        self.column_types: dict[str, dict[str, ColumnTypeInfo]] = {}
        self.stats = DumpStats()
        self.state = DumpState.DISCONNECTED

    def _transition(self, state: DumpState) -> None:
        logging.debug(f"Dump state {self.state.value} -> {state.value}")
        self.state = state

    def _connect(self) -> None:
        """Connect, run init commands and select the dialect adapter."""
        self.connection = open_connection(
            self.descriptor,
            self.user,
            self.password,
            charset=self.settings.default_character_set
        )
        self.connection.connect()
        self.adapter = create_adapter(self.descriptor.dialect, self.connection, self.settings)
        self.escaper = ValueEscaper(self.connection.quote, self.settings.hex_blob, self.adapter.hex_literal)

        for statement in [*self.settings.init_commands, *self.adapter.init_commands()]:
            self.connection.execute(statement)

        self.version = self.connection.server_version
        self._transition(DumpState.CONNECTED)

    def start(self, destination: Union[str, Path, None] = None) -> DumpStats:
        """
        Run the dump.

        Args:
            destination: Output file path; None or '-' writes to standard output.

        Returns:
            DumpStats with counts of exported objects and rows.

        Raises:
            DumpError: On the first failure. A partially written file is left
                in place.
        """
        logging.info(f"Starting dump of '{self.db_name}'")
        try:
            self._connect()
            self.sink.open(destination)
            try:
                self._dump()
            finally:
                self.sink.close()
        finally:
            if self.connection is not None:
                self.connection.disconnect()

        self._transition(DumpState.CLOSED)
        return self.stats

    def _dump(self) -> None:
        self.sink.write(self._get_dump_file_header())
        self._transition(DumpState.HEADER_WRITTEN)

        self.sink.write(self.adapter.backup_parameters())

        if self.settings.databases:
            self.sink.write(self.adapter.database_header(self.db_name))
            if self.settings.add_drop_database:
                self.sink.write(self.adapter.add_drop_database(self.db_name))

        self._get_database_structure()

        if self.inventory.pending_includes:
            names = ','.join(self.inventory.pending_includes)
            raise DiscoveryError(f"Table ({names}) not found in database")

        if self.settings.databases:
            self.sink.write(self.adapter.databases(self.db_name))
        self._transition(DumpState.STRUCTURE_DISCOVERED)

        self._transition(DumpState.EXPORTING_TABLES)
        self._export_tables()
        self._transition(DumpState.EXPORTING_TRIGGERS)
        self._export_triggers()
        self._transition(DumpState.EXPORTING_VIEWS)
        self._export_views()
        self._transition(DumpState.EXPORTING_PROCEDURES)
        self._export_procedures()
        self._transition(DumpState.EXPORTING_EVENTS)
        self._export_events()

        self.sink.write(self.adapter.restore_parameters())
        self.sink.write(self._get_dump_file_footer())
        self._transition(DumpState.FINALIZED)

        logging.info(
            f"Dumped {self.stats.tables} table(s), {self.stats.views} view(s), "
            f"{self.stats.triggers} trigger(s), {self.stats.total_rows} row(s)"
        )

    def _get_dump_file_header(self) -> str:
        if self.settings.skip_comments:
            return ''

        header = (
            f"-- SQL Dumper {__version__}\n"
            "-- ------------------------------------------------------\n"
            f"-- Host: {self.descriptor.location}\tDatabase: {self.db_name}\n"
        )
        if self.version:
            header += f"-- Server version \t{self.version}\n"
        if not self.settings.skip_dump_date:
            header += f"-- Date: {_rfc2822_now()}\n"
        header += "-- ------------------------------------------------------\n\n"
        return header

    def _get_dump_file_footer(self) -> str:
        if self.settings.skip_comments:
            return ''

        footer = "-- Dump completed"
        if not self.settings.skip_dump_date:
            footer += f" on: {_rfc2822_now()}"
        return footer + "\n"

    def _comment(self, text: str) -> None:
        if not self.settings.skip_comments:
            self.sink.write(f"--\n-- {text}\n--\n\n")

    # -- Discovery -------------------------------------------------------------

    def _list_rows(self, query: str) -> list[dict[str, Any]]:
        return self.connection.query_dicts(query)

    def _is_included(self, name: str) -> bool:
        """Check the include list, consuming the entry that matched."""
        if not self.settings.include_tables:
            return True
        if name not in self.settings.include_tables:
            return False
        if name in self.inventory.pending_includes:
            self.inventory.pending_includes.remove(name)
        return True

    def _is_excluded(self, name: str) -> bool:
        if matches(name, self.settings.exclude_tables, self._exclude_patterns):
            logging.debug(f"'{name}' excluded by exclude-tables")
            return True
        return False

    def _discover(self, query: str, key: str) -> list[str]:
        """List table or view names, applying include and exclude rules."""
        names = []
        excluded = 0
        for row in self._list_rows(query):
            name = as_text(row[key])
            if not self._is_included(name):
                continue
            if self._is_excluded(name):
                excluded += 1
                continue
            names.append(name)
        if excluded:
            logging.info(f"Excluded {excluded} object(s) matching exclusion patterns")
        return names

    def _get_database_structure(self) -> None:
        """Read table, view, trigger, routine and event names from the database."""
        self.inventory = ObjectInventory(pending_includes=list(self.settings.include_tables))
        adapter = self.adapter

        self.inventory.tables = self._discover(adapter.show_tables(self.db_name), 'tbl_name')
        self.inventory.views = self._discover(adapter.show_views(self.db_name), 'tbl_name')

        if not self.settings.skip_triggers:
            for row in self._list_rows(adapter.show_triggers(self.db_name)):
                table = as_text(row.get('Table'))
                if table is not None and table not in self.inventory.tables:
                    continue
                self.inventory.triggers.append(as_text(row['Trigger']))

        if self.settings.routines:
            self.inventory.procedures = [
                as_text(row['procedure_name'])
                for row in self._list_rows(adapter.show_procedures(self.db_name))
            ]

        if self.settings.events:
            self.inventory.events = [
                as_text(row['event_name'])
                for row in self._list_rows(adapter.show_events(self.db_name))
            ]

        logging.info(
            f"Found {len(self.inventory.tables)} table(s), {len(self.inventory.views)} view(s), "
            f"{len(self.inventory.triggers)} trigger(s), {len(self.inventory.procedures)} procedure(s), "
            f"{len(self.inventory.events)} event(s)"
        )

    # -- Structure -------------------------------------------------------------

    def _show_create(self, kind: str, name: str, query: str) -> dict[str, Any]:
        rows = self._list_rows(query)
        if not rows:
            raise StructureError(f"Error getting {kind} code for '{name}', unknown output")
        return rows[0]

    def _render(self, kind: str, name: str, render: Callable[[dict[str, Any]], str], row: dict[str, Any]) -> str:
        try:
            return render(row)
        except StructureError as e:
            raise StructureError(f"{e} ({kind} '{name}')") from e

    def _get_table_column_types(self, name: str) -> dict[str, ColumnTypeInfo]:
        """Store column types to create data dumps and for stand-in tables."""
        column_types = {}
        for row in self._list_rows(self.adapter.show_columns(name)):
            column = self.adapter.to_column_info(row)
            column_types[column.name] = self.adapter.parse_column_type(column)
        return column_types

    def _get_table_structure(self, table: str) -> None:
        if not self.settings.no_create_info:
            row = self._show_create('table', table, self.adapter.show_create_table(table))
            ddl = self._render('table', table, self.adapter.create_table, row)
            self._comment(f"Table structure for table {self.adapter.quote_identifier(table)}")
            if self.settings.add_drop_table:
                self.sink.write(self.adapter.drop_table(table))
            self.sink.write(ddl)
        self.column_types[table] = self._get_table_column_types(table)

    def _get_view_structure_table(self, view: str) -> None:
        """Write a stand-in table for a view so dependent views resolve."""
        self._comment(f"Stand-In structure for view {self.adapter.quote_identifier(view)}")
        self._show_create('view', view, self.adapter.show_create_view(view))
        if self.settings.add_drop_table:
            self.sink.write(self.adapter.drop_view(view))
        self.sink.write(self.adapter.create_stand_in_table(view, self.column_types[view]))

    def _get_view_structure_view(self, view: str) -> None:
        """Replace a stand-in table with the real view."""
        self._comment(f"View structure for view {self.adapter.quote_identifier(view)}")
        row = self._show_create('view', view, self.adapter.show_create_view(view))
        ddl = self._render('view', view, self.adapter.create_view, row)
        self.sink.write(self.adapter.drop_view(view))
        self.sink.write(ddl)

    def _get_trigger_structure(self, trigger: str) -> None:
        row = self._show_create('trigger', trigger, self.adapter.show_create_trigger(trigger))
        ddl = self._render('trigger', trigger, self.adapter.create_trigger, row)
        if self.settings.add_drop_trigger:
            self.sink.write(self.adapter.add_drop_trigger(trigger))
        self.sink.write(ddl)

    def _get_procedure_structure(self, procedure: str) -> None:
        self._comment(f"Dumping routines for database '{self.db_name}'")
        row = self._show_create('procedure', procedure, self.adapter.show_create_procedure(procedure))
        self.sink.write(self._render('procedure', procedure, self.adapter.create_procedure, row))

    def _get_event_structure(self, event: str) -> None:
        self._comment(f"Dumping events for database '{self.db_name}'")
        row = self._show_create('event', event, self.adapter.show_create_event(event))
        self.sink.write(self._render('event', event, self.adapter.create_event, row))

    # -- Export ----------------------------------------------------------------

    def _skips_data(self, table: str) -> bool:
        no_data = self.settings.no_data
        if isinstance(no_data, bool):
            return no_data
        return matches(table, no_data, self._no_data_patterns)

    def _export_tables(self) -> None:
        for table in self.inventory.tables:
            self._get_table_structure(table)
            self.stats.tables += 1
            if self._skips_data(table):
                logging.info(f"  - {table}: structure only")
                continue
            rows = self._list_values(table)
            self.stats.total_rows += rows
            logging.info(f"  ✓ {table}: {rows} rows")

    def _export_views(self) -> None:
        if self.settings.no_create_info:
            return
        for view in self.inventory.views:
            self.column_types[view] = self._get_table_column_types(view)
            self._get_view_structure_table(view)
        for view in self.inventory.views:
            self._get_view_structure_view(view)
            self.stats.views += 1

    def _export_triggers(self) -> None:
        for trigger in self.inventory.triggers:
            self._get_trigger_structure(trigger)
            self.stats.triggers += 1

    def _export_procedures(self) -> None:
        for procedure in self.inventory.procedures:
            self._get_procedure_structure(procedure)
            self.stats.procedures += 1

    def _export_events(self) -> None:
        for event in self.inventory.events:
            self._get_event_structure(event)
            self.stats.events += 1

    def build_select_query(self, table: str, expressions: list[str]) -> str:
        """Build the SELECT used to stream a table's rows."""
        query = f"SELECT {','.join(expressions)} FROM {self.adapter.quote_identifier(table)}"
        if self.settings.where:
            query += f" WHERE {self.settings.where}"
        return query

    def _list_values(self, table: str) -> int:
        """Write a table's rows as INSERT statements and return the row count."""
        expressions, insert_columns, col_types, forces_complete_insert = select_columns(
            self.column_types[table], self.adapter, self.settings.hex_blob
        )
        if not expressions:
            logging.warning(f"Table '{table}' has no stored columns, skipping data")
            return 0

        complete_insert = self.settings.complete_insert or forces_complete_insert
        query = self.build_select_query(table, expressions)
        logging.debug(f"Dumping table '{table}' with query: {query[:200]}")

        batcher = InsertBatcher(
            self.sink,
            self.adapter.quote_identifier(table),
            columns=insert_columns if complete_insert else None,
            extended_insert=self.settings.extended_insert,
            net_buffer_length=self.settings.net_buffer_length
        )
        with self._list_values_guard(table):
            for row in self.connection.iter_rows(query):
                batcher.add(self.escaper.escape_row(row, col_types))
            batcher.close()
        return batcher.rows

    @contextmanager
    def _list_values_guard(self, table: str) -> Iterator[None]:
        """Pair prepare_list_values with end_list_values, even on failure."""
        self.prepare_list_values(table)
        try:
            yield
        finally:
            self.end_list_values(table)

    def _execute(self, statement: str) -> None:
        if statement:
            self.connection.execute(statement)

    def prepare_list_values(self, table: str) -> None:
        """Open transaction, locks and restore-time brackets before the rows."""
        self._comment(f"Dumping data for table {self.adapter.quote_identifier(table)}")

        if self.settings.single_transaction:
            self._execute(self.adapter.setup_transaction())
            self._execute(self.adapter.start_transaction())

        if self.settings.lock_tables:
            self.adapter.lock_table(table)

        if self.settings.add_locks:
            self.sink.write(self.adapter.start_add_lock_table(table))

        if self.settings.disable_keys:
            self.sink.write(self.adapter.start_add_disable_keys(table))

        # Disable autocommit for faster reload
        if self.settings.no_autocommit:
            self.sink.write(self.adapter.start_disable_autocommit())

    def end_list_values(self, table: str) -> None:
        """Close everything prepare_list_values opened."""
        if self.settings.disable_keys:
            self.sink.write(self.adapter.end_add_disable_keys(table))

        if self.settings.add_locks:
            self.sink.write(self.adapter.end_add_lock_table(table))

        if self.settings.single_transaction:
            self._execute(self.adapter.commit_transaction())

        if self.settings.lock_tables:
            self.adapter.unlock_table(table)

        # Commit to enable autocommit
        if self.settings.no_autocommit:
            self.sink.write(self.adapter.end_disable_autocommit())

        self.sink.write("\n")
