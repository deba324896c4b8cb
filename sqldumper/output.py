"""
Output sinks for SQL Dumper.

All dump text passes through exactly one sink, which is where compression is
applied. A sink is opened once, written sequentially and closed once.
"""

import importlib
import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .exceptions import OutputError
from .models import CompressMethod

STDOUT = '-'


class OutputSink(ABC):
    """Open/write/close contract shared by every output variant."""

    def __init__(self):
        self._handle: Optional[BinaryIO] = None
        self._closed = False
        self.destination: Optional[str] = None
        self.bytes_written = 0

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._handle is not None and not self._closed

    def open(self, destination: Union[str, Path, None] = None) -> None:
        """Open the destination; None or '-' means standard output."""
        if self._handle is not None or self._closed:
            raise OutputError("Output sink can only be opened once")

        use_stdout = destination is None or str(destination) == STDOUT
        self.destination = STDOUT if use_stdout else str(destination)
        try:
            self._handle = self._open_handle(None if use_stdout else self.destination)
        except OSError as e:
            raise OutputError(f"Output file is not writable: {self.destination} ({e})") from e
        logging.debug(f"Opened {type(self).__name__} for {self.destination}")

    def write(self, text: str) -> int:
        """Write text and return the number of bytes written."""
        if not self.is_open:
            raise OutputError("Write to an output sink that is not open")
        if not text:
            return 0

        data = text.encode('utf-8')
        try:
            written = self._handle.write(data)
        except OSError as e:
            raise OutputError(
                f"Writing to file failed! Probably, there is no more free space left? ({e})"
            ) from e
        if written != len(data):
            raise OutputError("Writing to file failed! Probably, there is no more free space left?")

        self.bytes_written += written
        return written

    def close(self) -> None:
        """Release the destination handle; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        if self._handle is None:
            return
        try:
            self._close_handle(self._handle)
        except OSError as e:
            raise OutputError(f"Closing output failed: {e}") from e
        finally:
            self._handle = None
        logging.debug(f"Closed output {self.destination} after {self.bytes_written} bytes")

    @abstractmethod
    def _open_handle(self, path: Optional[str]) -> BinaryIO: ...

    def _close_handle(self, handle: BinaryIO) -> None:
        if handle is sys.stdout.buffer:
            handle.flush()
        else:
            handle.close()


class PlainSink(OutputSink):
    """Uncompressed output."""

    def _open_handle(self, path: Optional[str]) -> BinaryIO:
        if path is None:
            return sys.stdout.buffer
        return open(path, 'wb')


class _CodecSink(OutputSink):
    """Output wrapped by a compression module from the standard library."""

    module_name = ''

    def __init__(self):
        super().__init__()
        try:
            self.codec = importlib.import_module(self.module_name)
        except ImportError as e:
            raise OutputError(
                f"Compression is enabled, but {self.module_name} lib is not installed or configured properly"
            ) from e

    def _close_handle(self, handle: BinaryIO) -> None:
        # Closing the codec stream flushes its trailer without closing stdout
        handle.close()
        if self.destination == STDOUT:
            sys.stdout.buffer.flush()


class GzipSink(_CodecSink):
    """Gzip compressed output."""

    module_name = 'gzip'

    def _open_handle(self, path: Optional[str]) -> BinaryIO:
        if path is None:
            return self.codec.GzipFile(fileobj=sys.stdout.buffer, mode='wb')
        return self.codec.GzipFile(path, 'wb')


class Bzip2Sink(_CodecSink):
    """Bzip2 compressed output."""

    module_name = 'bz2'

    def _open_handle(self, path: Optional[str]) -> BinaryIO:
        return self.codec.BZ2File(path if path is not None else sys.stdout.buffer, 'wb')


SINKS: dict[CompressMethod, type[OutputSink]] = {
    CompressMethod.NONE: PlainSink,
    CompressMethod.GZIP: GzipSink,
    CompressMethod.BZIP2: Bzip2Sink,
}


def create_sink(method: CompressMethod) -> OutputSink:
    """Create an unopened sink for a compression method."""
    return SINKS[method]()
