"""
INSERT statement batching for SQL Dumper.
"""

from typing import Optional

from .models import MAX_LINE_SIZE
from .output import OutputSink


class InsertBatcher:
    """Writes rows as single-row or extended multi-row INSERT statements.

    Statement size is measured with the byte counts the sink reports back, so
    a statement is closed once the bytes actually written since it was opened
    exceed net_buffer_length.
    """

    def __init__(
        self,
        sink: OutputSink,
        table: str,
        columns: Optional[list[str]] = None,
        extended_insert: bool = True,
        net_buffer_length: int = MAX_LINE_SIZE
    ):
        self.sink = sink
        self.table = table
        self.columns = columns
        self.extended_insert = extended_insert
        self.net_buffer_length = net_buffer_length

        self.rows = 0
        self.statements = 0
        self._line_size = 0
        self._open_statement = False

    def _statement_prefix(self) -> str:
        if self.columns:
            return f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES "
        return f"INSERT INTO {self.table} VALUES "

    def add(self, values: list[str]) -> None:
        """Append one row of already escaped literals."""
        tuple_sql = f"({','.join(values)})"

        if not self._open_statement or not self.extended_insert:
            self._line_size += self.sink.write(self._statement_prefix() + tuple_sql)
            self._open_statement = True
            self.statements += 1
        else:
            self._line_size += self.sink.write(',' + tuple_sql)
        self.rows += 1

        if self._line_size > self.net_buffer_length or not self.extended_insert:
            self._open_statement = False
            self._line_size = self.sink.write(";\n")

    def close(self) -> None:
        """Terminate the statement left open by the last row, if any."""
        if self._open_statement:
            self.sink.write(";\n")
            self._open_statement = False
