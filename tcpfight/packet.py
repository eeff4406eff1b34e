"""A fixed-capacity serialization buffer with typed little-endian reads and writes."""

from __future__ import annotations

import struct


class PacketError(ValueError):
    """Raised on buffer overflow, underflow or an unencodable value."""


_U8 = struct.Struct("<B")
_I8 = struct.Struct("<b")
_I16 = struct.Struct("<h")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")
_I64 = struct.Struct("<q")
_F64 = struct.Struct("<d")


class Packet:
    """Message body buffer: values are written at the end and read from the front."""

    DEFAULT_SIZE = 1400

    def __init__(self, buffer_size: int = DEFAULT_SIZE, data=b"") -> None:
        if buffer_size <= 0:
            raise PacketError(f"buffer size must be positive, got {buffer_size}")
        self._buffer = bytearray(buffer_size)
        self._read = 0
        self._write = 0
        if data:
            self.put_data(data)

    @property
    def buffer_size(self) -> int:
        return len(self._buffer)

    @property
    def data_size(self) -> int:
        return self._write - self._read

    def __len__(self) -> int:
        return self.data_size

    def __bytes__(self) -> bytes:
        return bytes(self._buffer[self._read:self._write])

    def __repr__(self) -> str:
        return f"Packet(buffer_size={self.buffer_size}, data={bytes(self)!r})"

    def clear(self) -> None:
        self._read = 0
        self._write = 0

    def move_write_pos(self, size: int) -> int:
        """Advance the write position over bytes filled in directly."""
        if size < 0 or self._write + size >= self.buffer_size:
            raise PacketError(f"cannot move write position by {size}")
        self._write += size
        return size

    def move_read_pos(self, size: int) -> int:
        """Skip over unread bytes."""
        if size < 0 or self._read + size > self._write:
            raise PacketError(f"cannot move read position by {size}")
        self._read += size
        return size

    def get_data(self, size: int) -> bytes:
        """Take up to ``size`` unread bytes."""
        if size < 0:
            raise PacketError(f"negative read size {size}")
        count = min(size, self.data_size)
        chunk = bytes(self._buffer[self._read:self._read + count])
        self._read += count
        return chunk

    def put_data(self, data) -> int:
        """Append raw bytes; the whole block must fit."""
        block = bytes(data)
        if self._write + len(block) > self.buffer_size:
            raise PacketError(
                f"{len(block)} bytes do not fit; {self.buffer_size - self._write} free"
            )
        self._buffer[self._write:self._write + len(block)] = block
        self._write += len(block)
        return len(block)

    def copy(self) -> "Packet":
        clone = Packet(self.buffer_size)
        clone._buffer[:] = self._buffer
        clone._read = self._read
        clone._write = self._write
        return clone

    def _put(self, layout: struct.Struct, value) -> "Packet":
        if self._write + layout.size > self.buffer_size:
            raise PacketError(f"no room for {layout.size} more bytes")
        try:
            layout.pack_into(self._buffer, self._write, value)
        except struct.error as exc:
            raise PacketError(f"cannot encode {value!r}: {exc}") from exc
        self._write += layout.size
        return self

    def _take(self, layout: struct.Struct):
        if self.data_size < layout.size:
            raise PacketError(
                f"need {layout.size} bytes to read, {self.data_size} available"
            )
        (value,) = layout.unpack_from(self._buffer, self._read)
        self._read += layout.size
        return value

    def write_u8(self, value: int) -> "Packet":
        return self._put(_U8, value)

    def write_i8(self, value: int) -> "Packet":
        return self._put(_I8, value)

    def write_i16(self, value: int) -> "Packet":
        return self._put(_I16, value)

    def write_u16(self, value: int) -> "Packet":
        return self._put(_U16, value)

    def write_i32(self, value: int) -> "Packet":
        return self._put(_I32, value)

    def write_u32(self, value: int) -> "Packet":
        return self._put(_U32, value)

    def write_f32(self, value: float) -> "Packet":
        return self._put(_F32, value)

    def write_i64(self, value: int) -> "Packet":
        return self._put(_I64, value)

    def write_f64(self, value: float) -> "Packet":
        return self._put(_F64, value)

    def read_u8(self) -> int:
        return self._take(_U8)

    def read_i8(self) -> int:
        return self._take(_I8)

    def read_i16(self) -> int:
        return self._take(_I16)

    def read_u16(self) -> int:
        return self._take(_U16)

    def read_i32(self) -> int:
        return self._take(_I32)

    def read_u32(self) -> int:
        return self._take(_U32)

    def read_f32(self) -> float:
        return self._take(_F32)

    def read_i64(self) -> int:
        return self._take(_I64)

    def read_f64(self) -> float:
        return self._take(_F64)