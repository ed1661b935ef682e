import pytest

from jobtail.errors import InvalidCapacity
from jobtail.ring import RingBuffer


def test_ring_buffer_keeps_tail() -> None:
    ring = RingBuffer(3)
    ring.extend(["a", "b", "c", "d"])
    assert ring.linearize() == ["b", "c", "d"]
    assert ring.tail(2) == ["c", "d"]
    assert ring.total_seen == 4
    assert len(ring) == 3


def test_ring_buffer_before_wrap_keeps_write_order() -> None:
    ring = RingBuffer(5)
    ring.extend(["a", "", "c"])
    assert ring.linearize() == ["a", "", "c"]
    assert ring.write_cursor == 3
    assert ring.filled == 3
    assert not ring.wrapped


def test_ring_buffer_exactly_full() -> None:
    ring = RingBuffer(3)
    ring.extend(["a", "b", "c"])
    assert ring.write_cursor == 0
    assert not ring.wrapped
    assert ring.linearize() == ["a", "b", "c"]


def test_ring_buffer_survives_many_wraparounds() -> None:
    ring = RingBuffer(3)
    ring.extend(f"line{i}" for i in range(1, 11))
    assert ring.wrapped
    assert ring.write_cursor == 1
    assert ring.filled == 3
    assert ring.total_seen == 10
    assert ring.linearize() == ["line8", "line9", "line10"]


def test_ring_buffer_capacity_one() -> None:
    ring = RingBuffer(1)
    for line in ["x", "y", "z"]:
        ring.push(line)
    assert ring.linearize() == ["z"]
    assert ring.total_seen == 3


def test_ring_buffer_storage_is_bounded_by_capacity() -> None:
    ring = RingBuffer(4)
    ring.extend(str(i) for i in range(10_000))
    assert len(ring._slots) == 4
    assert ring.linearize() == ["9996", "9997", "9998", "9999"]


def test_tail_of_non_positive_count_is_empty() -> None:
    ring = RingBuffer(2)
    ring.extend(["a", "b"])
    assert ring.tail(0) == []
    assert ring.tail(-3) == []
    assert ring.tail(10) == ["a", "b"]


@pytest.mark.parametrize("capacity", [0, -1, 2.5, True, "3"])
def test_ring_buffer_rejects_invalid_capacity(capacity) -> None:
    with pytest.raises(InvalidCapacity) as excinfo:
        RingBuffer(capacity)
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.value == capacity
