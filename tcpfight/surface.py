"""An off-screen pixel buffer that frames are drawn into before display."""

from __future__ import annotations


class Surface:
    """A top-down pixel buffer whose rows are padded to a four-byte pitch.

    Pixels are stored little-endian, so a 32-bit pixel is laid out as
    blue, green, red, alpha.
    """

    def __init__(self, width: int, height: int, color_bits: int = 32) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        if color_bits <= 0 or color_bits % 8:
            raise ValueError(f"colour depth must be a whole number of bytes, got {color_bits}")
        self.width = width
        self.height = height
        self.color_bits = color_bits
        self.pitch = (width * (color_bits // 8) + 3) & ~3
        self.buffer = bytearray(b"\xff") * (self.pitch * height)

    @property
    def bytes_per_pixel(self) -> int:
        return self.color_bits // 8

    @property
    def buffer_size(self) -> int:
        return len(self.buffer)

    def __bytes__(self) -> bytes:
        return bytes(self.buffer)

    def __repr__(self) -> str:
        return f"Surface({self.width}, {self.height}, {self.color_bits})"

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside a {self.width}x{self.height} surface")
        return y * self.pitch + x * self.bytes_per_pixel

    def _encode(self, value: int) -> bytes:
        try:
            return value.to_bytes(self.bytes_per_pixel, "little")
        except OverflowError as exc:
            raise ValueError(
                f"pixel value {value:#x} does not fit in {self.color_bits} bits"
            ) from exc

    def get_pixel(self, x: int, y: int) -> int:
        offset = self._offset(x, y)
        return int.from_bytes(self.buffer[offset:offset + self.bytes_per_pixel], "little")

    def set_pixel(self, x: int, y: int, value: int) -> None:
        encoded = self._encode(value)
        offset = self._offset(x, y)
        self.buffer[offset:offset + self.bytes_per_pixel] = encoded

    def fill(self, value: int) -> None:
        """Set every pixel to ``value``; row padding is left alone."""
        row = self._encode(value) * self.width
        for start in range(0, len(self.buffer), self.pitch):
            self.buffer[start:start + len(row)] = row