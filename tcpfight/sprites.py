"""Sprite storage, 32-bit BMP loading and colour-keyed drawing with clipping."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional

from tcpfight.surface import Surface

BMP_MAGIC = 0x4D42

_FILE_HEADER = struct.Struct("<HIHHI")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")
_PIXEL_OFFSET = _FILE_HEADER.size + _INFO_HEADER.size


class SpriteError(ValueError):
    """Raised when a sprite cannot be loaded or a slot does not exist."""


@dataclass(frozen=True)
class Sprite:
    """A top-down 32-bit image with the point it is drawn around."""

    image: bytes
    width: int
    height: int
    pitch: int
    center_x: int
    center_y: int


class _Region(NamedTuple):
    dest_x: int
    dest_y: int
    src_x: int
    src_y: int
    width: int
    height: int


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def _clip(sprite: Sprite, x: int, y: int, surface: Surface, draw_len: int) -> Optional[_Region]:
    """Clip a sprite placed with its top-left at (x, y) against the surface."""
    width = _trunc_div(sprite.width * draw_len, 100)
    height = sprite.height
    src_x = src_y = 0

    if y < 0:
        height -= -y
        src_y = -y
        y = 0
    if surface.height <= y + sprite.height:
        height -= y + sprite.height - surface.height

    if x < 0:
        width -= -x
        src_x = -x
        x = 0
    if surface.width <= x + sprite.width:
        width -= x + sprite.width - surface.width

    if width <= 0 or height <= 0:
        return None
    return _Region(x, y, src_x, src_y, width, height)


def _check_surface(surface: Surface) -> None:
    if surface.color_bits != 32:
        raise SpriteError(f"sprites draw onto 32-bit surfaces, not {surface.color_bits}-bit")


class SpriteSheet:
    """A fixed number of sprite slots sharing one transparent colour key."""

    def __init__(self, max_sprites: int, color_key: int) -> None:
        if max_sprites <= 0:
            raise SpriteError(f"sprite count must be positive, got {max_sprites}")
        self.max_sprites = max_sprites
        self.color_key = color_key
        self._sprites: list[Optional[Sprite]] = [None] * max_sprites

    def __getitem__(self, index: int) -> Optional[Sprite]:
        if not 0 <= index < self.max_sprites:
            return None
        return self._sprites[index]

    @property
    def _key_bytes(self) -> Optional[bytes]:
        # Only the colour bits are compared; a key with alpha bits set never matches.
        if not 0 <= self.color_key <= 0xFFFFFF:
            return None
        return self.color_key.to_bytes(3, "little")

    def load(self, index: int, path, center_x: int, center_y: int) -> Sprite:
        """Load a 32-bit BMP file into a slot."""
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise SpriteError(f"cannot read sprite file {path}: {exc}") from exc
        return self.load_bytes(index, data, center_x, center_y)

    def load_bytes(self, index: int, data, center_x: int, center_y: int) -> Sprite:
        """Decode a 32-bit BMP image into a slot, flipping it to top-down rows."""
        if not 0 <= index < self.max_sprites:
            raise SpriteError(f"sprite index {index} outside 0..{self.max_sprites - 1}")
        self.release(index)

        blob = bytes(data)
        if len(blob) < _FILE_HEADER.size:
            raise SpriteError("data too short for a bitmap file header")
        magic = _FILE_HEADER.unpack_from(blob)[0]
        if magic != BMP_MAGIC:
            raise SpriteError(f"not a bitmap: magic {magic:#06x}")
        if len(blob) < _PIXEL_OFFSET:
            raise SpriteError("data too short for a bitmap info header")
        _, width, height, _, bit_count, *_ = _INFO_HEADER.unpack_from(blob, _FILE_HEADER.size)
        if bit_count != 32:
            raise SpriteError(f"only 32-bit bitmaps are supported, got {bit_count}-bit")
        if width <= 0 or height <= 0:
            raise SpriteError(f"unsupported bitmap size {width}x{height}")

        pitch = (width * 4 + 3) & ~3
        pixels = blob[_PIXEL_OFFSET:_PIXEL_OFFSET + pitch * height]
        if len(pixels) < pitch * height:
            raise SpriteError("bitmap pixel data is truncated")
        rows = [pixels[start:start + pitch] for start in range(0, len(pixels), pitch)]
        sprite = Sprite(
            image=b"".join(reversed(rows)),
            width=width,
            height=height,
            pitch=pitch,
            center_x=center_x,
            center_y=center_y,
        )
        self._sprites[index] = sprite
        return sprite

    def release(self, index: int) -> None:
        """Empty a slot; indices outside the sheet are ignored."""
        if 0 <= index < self.max_sprites:
            self._sprites[index] = None

    def draw(self, index: int, x: int, y: int, surface: Surface, draw_len: int = 100) -> None:
        """Draw a sprite around its centre point, skipping colour-keyed pixels.

        ``draw_len`` is the percentage of the sprite's width to draw.
        """
        sprite = self[index]
        if sprite is None:
            return
        _check_surface(surface)
        region = _clip(sprite, x - sprite.center_x, y - sprite.center_y, surface, draw_len)
        if region is None:
            return

        key = self._key_bytes
        src = sprite.image
        dest = surface.buffer
        for row in range(region.height):
            src_start = (region.src_y + row) * sprite.pitch + region.src_x * 4
            dest_start = (region.dest_y + row) * surface.pitch + region.dest_x * 4
            for s, d in zip(
                range(src_start, src_start + region.width * 4, 4),
                range(dest_start, dest_start + region.width * 4, 4),
            ):
                if src[s:s + 3] != key:
                    dest[d:d + 4] = src[s:s + 4]

    def draw_image(self, index: int, x: int, y: int, surface: Surface, draw_len: int = 100) -> None:
        """Copy a sprite with its top-left corner at (x, y), ignoring transparency."""
        sprite = self[index]
        if sprite is None:
            return
        _check_surface(surface)
        region = _clip(sprite, x, y, surface, draw_len)
        if region is None:
            return

        span = region.width * 4
        for row in range(region.height):
            src_start = (region.src_y + row) * sprite.pitch + region.src_x * 4
            dest_start = (region.dest_y + row) * surface.pitch + region.dest_x * 4
            surface.buffer[dest_start:dest_start + span] = sprite.image[src_start:src_start + span]