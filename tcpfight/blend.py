"""Tinted and half-transparent sprite drawing on top of a sprite sheet."""

from __future__ import annotations

from typing import Callable, Optional

from tcpfight.sprites import SpriteSheet, _check_surface, _clip
from tcpfight.surface import Surface

_Combine = Callable[[bytes, bytes], bytes]


def _key_bytes(sheet: SpriteSheet) -> Optional[bytes]:
    # Only the colour bits of a pixel are compared with the key.
    if not 0 <= sheet.color_key <= 0xFFFFFF:
        return None
    return sheet.color_key.to_bytes(3, "little")


def _blit(sheet: SpriteSheet, index: int, x: int, y: int, surface: Surface, combine: _Combine) -> None:
    sprite = sheet[index]
    if sprite is None:
        return
    _check_surface(surface)
    region = _clip(sprite, x - sprite.center_x, y - sprite.center_y, surface, 100)
    if region is None:
        return

    key = _key_bytes(sheet)
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
                dest[d:d + 4] = combine(src[s:s + 4], bytes(dest[d:d + 4]))


def _red(src: bytes, _dest: bytes) -> bytes:
    blue, green, red, alpha = src
    return bytes((blue // 2, green // 2, red, alpha))


def _half(src: bytes, dest: bytes) -> bytes:
    return bytes(s // 2 + d // 2 for s, d in zip(src, dest))


def draw_red(sheet: SpriteSheet, index: int, x: int, y: int, surface: Surface) -> None:
    """Draw a sprite around its centre with blue and green halved, tinting it red."""
    _blit(sheet, index, x, y, surface, _red)


def draw_blend(sheet: SpriteSheet, index: int, x: int, y: int, surface: Surface) -> None:
    """Draw a sprite around its centre mixed half and half with what lies below."""
    _blit(sheet, index, x, y, surface, _half)