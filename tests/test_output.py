"""
Unit tests for output.py
"""

import bz2
import gzip
import io
from unittest import mock

import pytest

from sqldumper.exceptions import OutputError
from sqldumper.models import CompressMethod
from sqldumper.output import Bzip2Sink, GzipSink, PlainSink, create_sink


class TestCreateSink:
    """Tests for create_sink function."""

    @pytest.mark.parametrize("method,sink_class", [
        (CompressMethod.NONE, PlainSink),
        (CompressMethod.GZIP, GzipSink),
        (CompressMethod.BZIP2, Bzip2Sink),
    ])
    def test_selects_variant(self, method, sink_class):
        sink = create_sink(method)
        assert type(sink) is sink_class
        assert sink.is_open is False


class TestPlainSink:
    """Tests for uncompressed output."""

    def test_write_file(self, tmp_path):
        path = tmp_path / "dump.sql"
        with PlainSink() as sink:
            sink.open(path)
            assert sink.write("SELECT 1;\n") == 10
            assert sink.write("-- é\n") == 6
            assert sink.write("") == 0

        assert path.read_text(encoding="utf-8") == "SELECT 1;\n-- é\n"
        assert sink.bytes_written == 16
        assert sink.is_open is False

    def test_write_stdout(self):
        buffer = io.BytesIO()
        with mock.patch("sqldumper.output.sys") as mock_sys:
            mock_sys.stdout.buffer = buffer
            sink = PlainSink()
            sink.open("-")
            sink.write("abc")
            sink.close()

        assert buffer.getvalue() == b"abc"
        assert buffer.closed is False

    def test_write_before_open(self):
        with pytest.raises(OutputError):
            PlainSink().write("x")

    def test_write_after_close(self, tmp_path):
        sink = PlainSink()
        sink.open(tmp_path / "dump.sql")
        sink.close()

        with pytest.raises(OutputError):
            sink.write("x")

    def test_close_is_idempotent(self, tmp_path):
        sink = PlainSink()
        sink.open(tmp_path / "dump.sql")
        sink.close()
        sink.close()

    def test_open_twice(self, tmp_path):
        sink = PlainSink()
        sink.open(tmp_path / "a.sql")
        with pytest.raises(OutputError):
            sink.open(tmp_path / "b.sql")
        sink.close()

    def test_unwritable_destination(self, tmp_path):
        with pytest.raises(OutputError) as exc_info:
            PlainSink().open(tmp_path / "missing" / "dump.sql")
        assert "not writable" in str(exc_info.value)

    def test_short_write(self, tmp_path):
        sink = PlainSink()
        handle = mock.MagicMock()
        handle.write.return_value = 1
        with mock.patch.object(PlainSink, "_open_handle", return_value=handle):
            sink.open(tmp_path / "dump.sql")

        with pytest.raises(OutputError) as exc_info:
            sink.write("abc")
        assert "no more free space left" in str(exc_info.value)

    def test_failed_write(self, tmp_path):
        sink = PlainSink()
        handle = mock.MagicMock()
        handle.write.side_effect = OSError(28, "No space left on device")
        with mock.patch.object(PlainSink, "_open_handle", return_value=handle):
            sink.open(tmp_path / "dump.sql")

        with pytest.raises(OutputError):
            sink.write("abc")


class TestCompressedSinks:
    """Tests for gzip and bzip2 output."""

    def test_gzip_roundtrip(self, tmp_path):
        path = tmp_path / "dump.sql.gz"
        sink = GzipSink()
        sink.open(path)
        written = sink.write("INSERT INTO t VALUES (1);\n")
        sink.close()

        assert written == 26
        with gzip.open(path, "rt", encoding="utf-8") as f:
            assert f.read() == "INSERT INTO t VALUES (1);\n"

    def test_bzip2_roundtrip(self, tmp_path):
        path = tmp_path / "dump.sql.bz2"
        with Bzip2Sink() as sink:
            sink.open(path)
            sink.write("-- a\n")
            sink.write("-- b\n")

        with bz2.open(path, "rt", encoding="utf-8") as f:
            assert f.read() == "-- a\n-- b\n"

    def test_missing_codec(self):
        with mock.patch("sqldumper.output.importlib.import_module", side_effect=ImportError):
            with pytest.raises(OutputError) as exc_info:
                GzipSink()
        assert "gzip lib is not installed" in str(exc_info.value)
