"""
Unit tests for escaper.py
"""

from unittest import mock

import pytest

from sqldumper.dialects import MySQLAdapter, SQLiteAdapter
from sqldumper.escaper import ValueEscaper, select_columns
from sqldumper.models import ColumnTypeInfo, DumpSettings

INT = ColumnTypeInfo(type="int", is_numeric=True, is_blob=False, is_virtual=False, type_sql="int(11)")
TEXT = ColumnTypeInfo(type="varchar", is_numeric=False, is_blob=False, is_virtual=False, type_sql="varchar(20)")
BLOB = ColumnTypeInfo(type="blob", is_numeric=False, is_blob=True, is_virtual=False, type_sql="blob")
BIT = ColumnTypeInfo(type="bit", is_numeric=True, is_blob=True, is_virtual=False, type_sql="bit(1)")
VIRTUAL = ColumnTypeInfo(type="int", is_numeric=True, is_blob=False, is_virtual=True, type_sql="int(11)")


def fake_quote(value):
    return "'" + str(value).replace("'", "''") + "'"


class TestValueEscaper:
    """Tests for ValueEscaper class."""

    @pytest.fixture
    def escaper(self):
        return ValueEscaper(fake_quote)

    def test_null(self, escaper):
        assert escaper.escape(None, TEXT) == "NULL"
        assert escaper.escape(None, BLOB) == "NULL"

    def test_numeric_unquoted(self, escaper):
        assert escaper.escape(42, INT) == "42"
        assert escaper.escape("42", INT) == "42"

    def test_text_quoted_by_connection(self):
        quote = mock.Mock(return_value="'x'")
        escaper = ValueEscaper(quote)

        assert escaper.escape("x", TEXT) == "'x'"
        quote.assert_called_once_with("x")

    def test_hex_blob(self, escaper):
        assert escaper.escape("414243", BLOB) == "0x414243"
        assert escaper.escape(b"414243", BLOB) == "0x414243"

    def test_empty_blob(self, escaper):
        assert escaper.escape("", BLOB) == "''"

    def test_empty_bit_keeps_hex(self, escaper):
        assert escaper.escape("", BIT) == "0x"
        assert escaper.escape("01", BIT) == "0x01"

    def test_custom_hex_literal(self):
        escaper = ValueEscaper(fake_quote, hex_literal=lambda v: f"X'{v}'")
        assert escaper.escape("00FF", BLOB) == "X'00FF'"

    def test_hex_blob_disabled_quotes_value(self):
        quote = mock.Mock(return_value="X'00ff'")
        escaper = ValueEscaper(quote, hex_blob=False)

        assert escaper.escape(b"\x00\xff", BLOB) == "X'00ff'"
        quote.assert_called_once_with(b"\x00\xff")

    def test_escape_row(self, escaper):
        row = (1, "it's", None)
        assert escaper.escape_row(row, [INT, TEXT, TEXT]) == ["1", "'it''s'", "NULL"]


class TestSelectColumns:
    """Tests for select_columns function."""

    @pytest.fixture
    def mysql(self):
        return MySQLAdapter(mock.MagicMock(), DumpSettings())

    def test_plain_columns(self, mysql):
        expressions, columns, types, forced = select_columns({"id": INT, "name": TEXT}, mysql)

        assert expressions == ["`id`", "`name`"]
        assert columns == ["`id`", "`name`"]
        assert types == [INT, TEXT]
        assert forced is False

    def test_hex_rewrites(self, mysql):
        expressions, columns, types, _ = select_columns({"data": BLOB, "flag": BIT}, mysql)

        assert expressions == [
            "HEX(`data`) AS `data`",
            "LPAD(HEX(`flag`),2,'0') AS `flag`",
        ]
        assert columns == ["`data`", "`flag`"]

    def test_no_hex_rewrite_when_disabled(self, mysql):
        expressions, _, _, _ = select_columns({"data": BLOB}, mysql, hex_blob=False)
        assert expressions == ["`data`"]

    def test_virtual_column_dropped(self, mysql):
        expressions, columns, types, forced = select_columns(
            {"id": INT, "total": VIRTUAL, "name": TEXT}, mysql
        )

        assert expressions == ["`id`", "`name`"]
        assert columns == ["`id`", "`name`"]
        assert types == [INT, TEXT]
        assert forced is True

    def test_sqlite_quoting(self):
        sqlite = SQLiteAdapter(mock.MagicMock(), DumpSettings())
        expressions, columns, _, _ = select_columns({"id": INT, "data": BLOB}, sqlite)

        assert expressions == ['"id"', 'CASE WHEN "data" IS NULL THEN NULL ELSE hex("data") END AS "data"']
        assert columns == ['"id"', '"data"']
