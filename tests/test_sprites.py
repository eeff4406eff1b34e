import struct

import pytest

from tcpfight.sprites import BMP_MAGIC, Sprite, SpriteError, SpriteSheet
from tcpfight.surface import Surface

KEY = 0x00FFFFFF
RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF


def make_bmp(rows, bits=32, magic=BMP_MAGIC):
    """Build a bitmap from top-down rows of 32-bit pixel values."""
    height = len(rows)
    width = len(rows[0])
    body = b"".join(
        b"".join(value.to_bytes(4, "little") for value in row) for row in reversed(rows)
    )
    info = struct.pack("<IiiHHIIiiII", 40, width, height, 1, bits, 0, len(body), 0, 0, 0, 0)
    header = struct.pack("<HIHHI", magic, 54 + len(body), 0, 0, 54)
    return header + info + body


def blank(width=8, height=8):
    surface = Surface(width, height)
    surface.fill(0)
    return surface


def test_load_bytes_flips_rows_to_top_down():
    sheet = SpriteSheet(4, KEY)
    sprite = sheet.load_bytes(0, make_bmp([[RED, GREEN], [BLUE, BLUE]]), 0, 0)
    assert sheet[0] == sprite
    assert (sprite.width, sprite.height, sprite.pitch) == (2, 2, 8)
    assert sprite.image[:4] == RED.to_bytes(4, "little")
    assert sprite.image[8:12] == BLUE.to_bytes(4, "little")


def test_draw_places_sprite_around_center():
    sheet = SpriteSheet(4, KEY)
    sheet.load_bytes(1, make_bmp([[RED, GREEN], [BLUE, RED]]), 1, 1)
    surface = blank()
    sheet.draw(1, 4, 4, surface)
    assert surface.get_pixel(3, 3) == RED
    assert surface.get_pixel(4, 3) == GREEN
    assert surface.get_pixel(3, 4) == BLUE
    assert surface.get_pixel(4, 4) == RED
    assert surface.get_pixel(5, 5) == 0


def test_color_key_pixels_are_transparent():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[0xFFFFFFFF, RED]]), 0, 0)
    surface = blank()
    sheet.draw(0, 0, 0, surface)
    assert surface.get_pixel(0, 0) == 0
    assert surface.get_pixel(1, 0) == RED


def test_draw_image_ignores_color_key_and_center():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[0xFFFFFFFF, RED]]), 5, 5)
    surface = blank()
    sheet.draw_image(0, 0, 0, surface)
    assert surface.get_pixel(0, 0) == 0xFFFFFFFF
    assert surface.get_pixel(1, 0) == RED


def test_left_and_top_clipping():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED, GREEN], [BLUE, RED]]), 0, 0)
    surface = blank()
    sheet.draw(0, -1, 0, surface)
    assert surface.get_pixel(0, 0) == GREEN
    assert surface.get_pixel(0, 1) == RED
    assert surface.get_pixel(1, 0) == 0


def test_right_clipping_stays_inside_surface():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED, GREEN, BLUE]]), 0, 0)
    surface = blank(4, 2)
    size = surface.buffer_size
    sheet.draw(0, 2, 0, surface)
    assert surface.buffer_size == size
    assert surface.get_pixel(2, 0) == RED
    assert surface.get_pixel(3, 0) == GREEN
    assert surface.get_pixel(0, 1) == 0


def test_draw_len_limits_width():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED, RED, RED, RED]]), 0, 0)
    surface = blank()
    sheet.draw(0, 0, 0, surface, 50)
    assert [surface.get_pixel(x, 0) for x in range(4)] == [RED, RED, 0, 0]


def test_fully_offscreen_draw_changes_nothing():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED]]), 0, 0)
    surface = blank()
    before = bytes(surface.buffer)
    sheet.draw(0, 20, 20, surface)
    sheet.draw(0, -5, -5, surface)
    assert bytes(surface.buffer) == before


def test_missing_and_released_sprites_are_ignored():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED]]), 0, 0)
    sheet.release(0)
    sheet.release(10)
    surface = blank()
    before = bytes(surface.buffer)
    sheet.draw(0, 1, 1, surface)
    sheet.draw(7, 1, 1, surface)
    assert sheet[0] is None
    assert bytes(surface.buffer) == before


def test_load_from_file(tmp_path):
    path = tmp_path / "sprite.bmp"
    path.write_bytes(make_bmp([[GREEN]]))
    sheet = SpriteSheet(2, KEY)
    sprite = sheet.load(1, path, 3, 4)
    assert sprite == Sprite(GREEN.to_bytes(4, "little"), 1, 1, 4, 3, 4)


def test_missing_file_raises_and_keeps_slot(tmp_path):
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED]]), 0, 0)
    with pytest.raises(SpriteError):
        sheet.load(0, tmp_path / "absent.bmp", 0, 0)
    assert sheet[0] is not None and sheet[0].width == 1


def test_bad_magic_raises_and_releases_slot():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED]]), 0, 0)
    with pytest.raises(SpriteError):
        sheet.load_bytes(0, make_bmp([[RED]], magic=0x1234), 0, 0)
    assert sheet[0] is None


@pytest.mark.parametrize("data", [make_bmp([[RED]], bits=24), make_bmp([[RED, RED]])[:-4], b"BM"])
def test_invalid_bitmaps_raise(data):
    with pytest.raises(SpriteError):
        SpriteSheet(2, KEY).load_bytes(0, data, 0, 0)


def test_load_into_missing_slot_raises():
    with pytest.raises(SpriteError):
        SpriteSheet(2, KEY).load_bytes(2, make_bmp([[RED]]), 0, 0)


def test_non_32_bit_surface_rejected():
    sheet = SpriteSheet(2, KEY)
    sheet.load_bytes(0, make_bmp([[RED]]), 0, 0)
    with pytest.raises(SpriteError):
        sheet.draw(0, 0, 0, Surface(4, 4, 24))