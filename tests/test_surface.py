import pytest

from tcpfight.surface import Surface


def test_new_surface_is_filled_with_ones():
    surface = Surface(4, 3)
    assert set(surface.buffer) == {0xFF}
    assert surface.get_pixel(0, 0) == 0xFFFFFFFF


def test_pitch_is_aligned_and_covers_row():
    for width in range(1, 9):
        for bits in (8, 16, 24, 32):
            surface = Surface(width, 2, bits)
            assert surface.pitch % 4 == 0
            row = width * bits // 8
            assert row <= surface.pitch < row + 4
            assert surface.buffer_size == surface.pitch * 2


def test_set_and_get_round_trip():
    surface = Surface(5, 5)
    surface.set_pixel(2, 3, 0x11223344)
    assert surface.get_pixel(2, 3) == 0x11223344
    assert surface.get_pixel(3, 2) == 0xFFFFFFFF


def test_pixels_are_little_endian():
    surface = Surface(2, 1)
    surface.set_pixel(1, 0, 0x0A0B0C0D)
    assert surface.buffer[4:8] == bytes([0x0D, 0x0C, 0x0B, 0x0A])


def test_fill_sets_every_pixel_and_keeps_padding():
    surface = Surface(3, 2, 24)
    surface.fill(0x010203)
    assert all(
        surface.get_pixel(x, y) == 0x010203 for x in range(3) for y in range(2)
    )
    assert surface.buffer[9:surface.pitch] == b"\xff" * (surface.pitch - 9)


def test_out_of_bounds_pixel_raises():
    surface = Surface(2, 2)
    with pytest.raises(IndexError):
        surface.get_pixel(2, 0)
    with pytest.raises(IndexError):
        surface.set_pixel(0, -1, 0)


def test_value_too_large_raises():
    surface = Surface(2, 2, 16)
    with pytest.raises(ValueError):
        surface.set_pixel(0, 0, 0x10000)


@pytest.mark.parametrize("args", [(0, 4), (4, 0), (4, 4, 12), (4, 4, 0)])
def test_invalid_dimensions_raise(args):
    with pytest.raises(ValueError):
        Surface(*args)