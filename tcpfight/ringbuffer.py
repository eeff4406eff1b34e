"""A fixed-size circular byte queue used for socket send and receive data."""

from __future__ import annotations


class RingBuffer:
    """Circular byte queue; one slot stays empty to tell full from empty."""

    DEFAULT_SIZE = 5000

    def __init__(self, size: int = DEFAULT_SIZE) -> None:
        if size < 2:
            raise ValueError(f"ring buffer size must be at least 2, got {size}")
        self._data = bytearray(size)
        self._front = 0
        self._rear = 0

    @property
    def buffer_size(self) -> int:
        return len(self._data)

    @property
    def use_size(self) -> int:
        return (self._rear - self._front) % self.buffer_size

    @property
    def free_size(self) -> int:
        return self.buffer_size - self.use_size - 1

    @property
    def direct_enqueue_size(self) -> int:
        """Bytes that can be written at the rear without wrapping."""
        if self._rear < self._front:
            return self._front - self._rear - 1
        if self._front == 0:
            return self.buffer_size - self._rear - 1
        return self.buffer_size - self._rear

    @property
    def direct_dequeue_size(self) -> int:
        """Bytes that can be read at the front without wrapping."""
        if self._front <= self._rear:
            return self._rear - self._front
        return self.buffer_size - self._front

    def __len__(self) -> int:
        return self.use_size

    def enqueue(self, data) -> int:
        """Append as much of ``data`` as fits; return the number of bytes stored."""
        if isinstance(data, int):
            raise TypeError("enqueue expects bytes-like data")
        block = bytes(data)
        count = min(len(block), self.free_size)
        first = min(count, self.buffer_size - self._rear)
        self._data[self._rear:self._rear + first] = block[:first]
        self._data[:count - first] = block[first:count]
        self._rear = (self._rear + count) % self.buffer_size
        return count

    def _read(self, size: int) -> bytes:
        if size < 0:
            raise ValueError(f"negative size {size}")
        count = min(size, self.use_size)
        first = min(count, self.buffer_size - self._front)
        return bytes(self._data[self._front:self._front + first]) + bytes(
            self._data[:count - first]
        )

    def dequeue(self, size: int) -> bytes:
        """Remove and return up to ``size`` bytes from the front."""
        chunk = self._read(size)
        self._front = (self._front + len(chunk)) % self.buffer_size
        return chunk

    def peek(self, size: int) -> bytes:
        """Return up to ``size`` bytes from the front without removing them."""
        return self._read(size)

    def move_front(self, size: int) -> None:
        """Discard ``size`` bytes from the front."""
        if size < 0 or size > self.use_size:
            raise ValueError(f"cannot discard {size} of {self.use_size} bytes")
        self._front = (self._front + size) % self.buffer_size

    def move_rear(self, size: int) -> None:
        """Mark ``size`` bytes at the rear as filled."""
        if size < 0 or size > self.free_size:
            raise ValueError(f"cannot commit {size} bytes; {self.free_size} free")
        self._rear = (self._rear + size) % self.buffer_size

    def clear(self) -> None:
        self._front = 0
        self._rear = 0