"""
Unit tests for batcher.py
"""

import pytest

from sqldumper.batcher import InsertBatcher


class FakeSink:
    """Collects text and reports one byte per character."""

    def __init__(self):
        self.chunks = []

    def write(self, text):
        self.chunks.append(text)
        return len(text)

    @property
    def text(self):
        return "".join(self.chunks)


class TestInsertBatcher:
    """Tests for InsertBatcher class."""

    @pytest.fixture
    def sink(self):
        return FakeSink()

    def test_extended_insert_single_statement(self, sink):
        batcher = InsertBatcher(sink, "`t`")
        for value in ("1", "2", "3"):
            batcher.add([value])
        batcher.close()

        assert sink.text == "INSERT INTO `t` VALUES (1),(2),(3);\n"
        assert batcher.rows == 3
        assert batcher.statements == 1

    def test_extended_insert_off(self, sink):
        batcher = InsertBatcher(sink, "`t`", extended_insert=False)
        for value in ("1", "2", "3"):
            batcher.add([value])
        batcher.close()

        assert sink.text == (
            "INSERT INTO `t` VALUES (1);\n"
            "INSERT INTO `t` VALUES (2);\n"
            "INSERT INTO `t` VALUES (3);\n"
        )
        assert batcher.statements == 3

    def test_splits_when_buffer_exceeded(self, sink):
        # "INSERT INTO t VALUES " is 21 bytes, each extra row adds 4
        batcher = InsertBatcher(sink, "t", net_buffer_length=30)
        for value in ("1", "2", "3", "4", "5"):
            batcher.add([value])
        batcher.close()

        assert sink.text == (
            "INSERT INTO t VALUES (1),(2),(3);\n"
            "INSERT INTO t VALUES (4),(5);\n"
        )
        assert batcher.statements == 2
        assert batcher.rows == 5

    def test_complete_insert_columns(self, sink):
        batcher = InsertBatcher(sink, "`t`", columns=["`id`", "`name`"])
        batcher.add(["1", "'a'"])
        batcher.close()

        assert sink.text == "INSERT INTO `t` (`id`, `name`) VALUES (1,'a');\n"

    def test_close_without_rows(self, sink):
        batcher = InsertBatcher(sink, "`t`")
        batcher.close()

        assert sink.text == ""
        assert batcher.statements == 0

    def test_close_after_terminated_statement(self, sink):
        batcher = InsertBatcher(sink, "`t`", net_buffer_length=1)
        batcher.add(["1"])
        batcher.close()

        assert sink.text == "INSERT INTO `t` VALUES (1);\n"
