from __future__ import annotations

import logging
from typing import AnyStr, Iterable, Iterator, Protocol, Union

from jobtail.errors import LineTooLong, StreamReadError


LOGGER = logging.getLogger(__name__)

MAX_LINE_LENGTH = 1024 * 1024
CHUNK_SIZE = 64 * 1024

Chunk = Union[bytes, str]


class SupportsRead(Protocol):
    def read(self, size: int = ...) -> Chunk: ...


def read_chunks(stream: SupportsRead, chunk_size: int = CHUNK_SIZE) -> Iterator[Chunk]:
    while True:
        chunk = stream.read(chunk_size)
        if chunk is None:
            # non-blocking stream with nothing ready; not the same as end of file
            raise BlockingIOError("stream returned no data; a blocking stream is required")
        if not chunk:
            return
        yield chunk


class LineScanner:
    """Lazily split a stream of byte or text chunks into lines.

    Lines end at ``"\\n"``; a final terminator does not start an extra empty
    line, and a single ``"\\r"`` before the terminator is dropped. Byte
    chunks are split before decoding, so the encoding must be ASCII
    compatible (utf-8, latin-1, ...). A line longer than ``max_line_length``
    (bytes for byte chunks, characters for text) raises ``LineTooLong``.

    The scanner consumes its source once and cannot be restarted.
    """

    def __init__(
        self,
        chunks: Iterable[Chunk],
        max_line_length: int = MAX_LINE_LENGTH,
        encoding: str = "utf-8",
        errors: str = "replace",
    ) -> None:
        if max_line_length <= 0:
            raise ValueError("max_line_length must be positive")
        self._chunks = iter(chunks)
        self.max_line_length = max_line_length
        self.encoding = encoding
        self.errors = errors
        self.lines_read = 0

    @classmethod
    def from_stream(
        cls,
        stream: SupportsRead,
        chunk_size: int = CHUNK_SIZE,
        **kwargs,
    ) -> "LineScanner":
        return cls(read_chunks(stream, chunk_size), **kwargs)

    def __iter__(self) -> Iterator[str]:
        pending = None
        for chunk in self._read():
            if pending is None:
                pending = chunk[:0]
                newline = b"\n" if isinstance(chunk, (bytes, bytearray)) else "\n"
            pending += chunk
            start = 0
            while True:
                end = pending.find(newline, start)
                if end < 0:
                    break
                yield self._finish(pending[start:end])
                start = end + 1
            pending = pending[start:]
            if self._length(pending) > self.max_line_length:
                self._too_long()
        if pending:
            yield self._finish(pending)

    def _read(self) -> Iterator[Chunk]:
        while True:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return
            except Exception as exc:  # noqa: BLE001
                LOGGER.debug("Stream read failed after %d lines: %s", self.lines_read, exc)
                raise StreamReadError(self.lines_read, str(exc) or type(exc).__name__) from exc
            if chunk:
                yield chunk

    def _finish(self, raw: AnyStr) -> str:
        if self._length(raw) > self.max_line_length:
            self._too_long()
        if raw[-1:] in (b"\r", "\r"):
            raw = raw[:-1]
        if isinstance(raw, (bytes, bytearray)):
            line = self._decode(bytes(raw))
        else:
            line = raw
        self.lines_read += 1
        return line

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.encoding, self.errors)
        except UnicodeDecodeError as exc:
            raise StreamReadError(self.lines_read, f"undecodable line: {exc}") from exc

    def _length(self, raw: AnyStr) -> int:
        # a trailing carriage return belongs to the terminator, not the line
        if raw[-1:] in (b"\r", "\r"):
            return len(raw) - 1
        return len(raw)

    def _too_long(self) -> None:
        raise LineTooLong(self.lines_read + 1, self.max_line_length)
