from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, NamedTuple, Protocol

from jobtail.config import MAX_LINES_CAP, JobTailConfig
from jobtail.errors import InvalidCapacity
from jobtail.ring import RingBuffer
from jobtail.scanner import Chunk, LineScanner, read_chunks


LOGGER = logging.getLogger(__name__)


class HasBody(Protocol):
    """A carrier whose body can be streamed in chunks, e.g. ``httpx.Response``."""

    def iter_bytes(self, chunk_size: int | None = None) -> Iterator[bytes]: ...


class TailResult(NamedTuple):
    text: str
    total_lines: int
    source: Any


def clamp_line_count(requested: int, maximum: int = MAX_LINES_CAP) -> int:
    if isinstance(requested, bool) or not isinstance(requested, int) or requested <= 0:
        raise InvalidCapacity(requested)
    maximum = min(maximum, MAX_LINES_CAP)
    if requested > maximum:
        LOGGER.warning("Requested %d lines; capping at %d", requested, maximum)
        return maximum
    return requested


def tail_lines(
    lines: Iterable[str], max_lines: int, maximum: int = MAX_LINES_CAP
) -> tuple[str, int]:
    """Keep the last ``max_lines`` of ``lines`` and join them with ``"\\n"``.

    Returns the joined text and the number of lines consumed in total.
    """
    ring = RingBuffer(clamp_line_count(max_lines, maximum))
    ring.extend(lines)
    return "\n".join(ring.linearize()), ring.total_seen


def tail_stream(stream: Any, max_lines: int, config: JobTailConfig | None = None) -> TailResult:
    """Tail a readable stream (``read(size)``) or an iterable of chunks.

    The stream is consumed exactly once and returned as-is in the result.
    Response carriers are handed to ``tail_response``.
    """
    if hasattr(stream, "iter_bytes") or hasattr(stream, "iter_content"):
        return tail_response(stream, max_lines, config)
    config = config or JobTailConfig()
    capacity = clamp_line_count(max_lines, config.tail.max_lines_cap)
    if hasattr(stream, "read"):
        chunks: Iterable[Chunk] = read_chunks(stream, config.scanner.chunk_size)
    else:
        chunks = stream
    text, total = _drain(chunks, capacity, config)
    return TailResult(text, total, stream)


def tail_response(response: HasBody, max_lines: int, config: JobTailConfig | None = None) -> TailResult:
    """Tail the body of a response object without taking ownership of it.

    Works with anything exposing ``iter_bytes(chunk_size)`` (httpx) or
    ``iter_content(chunk_size)`` (requests). Only the body is consumed;
    status, headers and the object itself are handed back untouched.
    """
    config = config or JobTailConfig()
    capacity = clamp_line_count(max_lines, config.tail.max_lines_cap)
    chunk_size = config.scanner.chunk_size
    if hasattr(response, "iter_bytes"):
        chunks = response.iter_bytes(chunk_size)
    elif hasattr(response, "iter_content"):
        chunks = response.iter_content(chunk_size)
    else:
        raise TypeError(f"{type(response).__name__} does not expose a readable body")
    text, total = _drain(chunks, capacity, config)
    return TailResult(text, total, response)


def _drain(chunks: Iterable[Chunk], capacity: int, config: JobTailConfig) -> tuple[str, int]:
    scanner = LineScanner(
        chunks,
        max_line_length=config.scanner.max_line_length,
        encoding=config.scanner.encoding,
        errors=config.scanner.errors,
    )
    LOGGER.debug("Tailing stream with capacity %d", capacity)
    ring = RingBuffer(capacity)
    ring.extend(scanner)
    LOGGER.debug("Read %d lines, kept %d", ring.total_seen, len(ring))
    return "\n".join(ring.linearize()), ring.total_seen
