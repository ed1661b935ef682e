from __future__ import annotations


class TailError(RuntimeError):
    pass


class InvalidCapacity(TailError, ValueError):
    def __init__(self, value: object) -> None:
        super().__init__(f"line count must be a positive integer, got {value!r}")
        self.value = value


class LineTooLong(TailError):
    def __init__(self, line_number: int, limit: int) -> None:
        super().__init__(f"line {line_number} exceeds the maximum line length of {limit}")
        self.line_number = line_number
        self.limit = limit


class StreamReadError(TailError):
    def __init__(self, lines_read: int, reason: str) -> None:
        super().__init__(f"stream read failed after {lines_read} lines: {reason}")
        self.lines_read = lines_read
