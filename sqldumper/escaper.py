"""
Value escaping and column selection for SQL Dumper.
"""

from typing import Any, Callable

from .models import ColumnTypeInfo


class ValueEscaper:
    """Renders single column values as SQL literals.

    Quoting of text is delegated to the live connection so that the escaping
    always matches the engine the dump was taken from.
    """

    def __init__(
        self,
        quote: Callable[[Any], str],
        hex_blob: bool = True,
        hex_literal: Callable[[str], str] = "0x{}".format
    ):
        self.quote = quote
        self.hex_blob = hex_blob
        self.hex_literal = hex_literal

    def escape(self, value: Any, col_type: ColumnTypeInfo) -> str:
        """Escape a value with quotes when needed."""
        if value is None:
            return 'NULL'

        if self.hex_blob and col_type.is_blob:
            # Selected through a HEX() expression, so value is already hex text
            if isinstance(value, (bytes, bytearray)):
                value = bytes(value).decode('ascii')
            if value or col_type.type == 'bit':
                return self.hex_literal(value)
            return "''"

        if col_type.is_numeric:
            return str(value)

        return self.quote(value)

    def escape_row(self, row: tuple, col_types: list[ColumnTypeInfo]) -> list[str]:
        """Escape every value of a row against its column types."""
        return [self.escape(value, col_type) for value, col_type in zip(row, col_types)]


def select_columns(
    column_types: dict[str, ColumnTypeInfo],
    dialect,
    hex_blob: bool = True
) -> tuple[list[str], list[str], list[ColumnTypeInfo], bool]:
    """
    Build the SELECT list for dumping a table's rows.

    Args:
        column_types: Column name to type info, in table order.
        dialect: Adapter used for identifier quoting and hex expressions.
        hex_blob: Rewrite bit and blob columns to hex-encoding expressions.

    Returns:
        Tuple of (select expressions, quoted insert column names, types of the
        selected columns, whether a virtual column forces complete inserts).
    """
    expressions = []
    insert_columns = []
    selected_types = []
    forces_complete_insert = False

    for name, col_type in column_types.items():
        if col_type.is_virtual:
            forces_complete_insert = True
            continue

        quoted = dialect.quote_identifier(name)
        if hex_blob and (col_type.is_blob or col_type.type == 'bit'):
            expressions.append(f"{dialect.hex_expression(name, col_type)} AS {quoted}")
        else:
            expressions.append(quoted)
        insert_columns.append(quoted)
        selected_types.append(col_type)

    return expressions, insert_columns, selected_types, forces_complete_insert
