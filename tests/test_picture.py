import pytest

from pixelbox.errors import InvalidDimension, OutOfBounds
from pixelbox.picture import Picture, PixelUpdate, format_color, parse_color


WHITE = (255, 255, 255)
RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_empty_fills_every_pixel():
    picture = Picture.empty(4, 3, WHITE)
    assert picture.size == (4, 3)
    assert len(picture.pixels) == 12
    assert all(color == WHITE for color in picture.pixels)


@pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 2)])
def test_empty_rejects_non_positive_sizes(width, height):
    with pytest.raises(InvalidDimension):
        Picture.empty(width, height, WHITE)


def test_constructor_rejects_wrong_pixel_count():
    with pytest.raises(InvalidDimension):
        Picture(2, 2, (WHITE,) * 3)


def test_pixel_is_row_major():
    picture = Picture(2, 2, (WHITE, RED, BLUE, WHITE))
    assert picture.pixel(1, 0) == RED
    assert picture.pixel(0, 1) == BLUE


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (4, 0), (0, 3)])
def test_pixel_out_of_bounds(x, y):
    picture = Picture.empty(4, 3, WHITE)
    with pytest.raises(OutOfBounds):
        picture.pixel(x, y)


def test_draw_returns_new_picture_and_leaves_original_alone():
    picture = Picture.empty(3, 3, WHITE)
    drawn = picture.draw([PixelUpdate(1, 1, RED)])
    assert drawn is not picture
    assert drawn.pixel(1, 1) == RED
    assert picture.pixel(1, 1) == WHITE
    assert len(drawn.pixels) == 9


def test_draw_later_updates_win():
    picture = Picture.empty(2, 2, WHITE)
    drawn = picture.draw([PixelUpdate(0, 0, RED), PixelUpdate(0, 0, BLUE)])
    assert drawn.pixel(0, 0) == BLUE


def test_draw_rejects_out_of_bounds_update():
    picture = Picture.empty(2, 2, WHITE)
    with pytest.raises(OutOfBounds):
        picture.draw([PixelUpdate(0, 0, RED), PixelUpdate(2, 0, RED)])
    assert picture.pixel(0, 0) == WHITE


def test_color_helpers():
    assert parse_color("#f0f0f0") == (240, 240, 240)
    assert parse_color([1, 2, 3]) == (1, 2, 3)
    assert format_color((255, 0, 16)) == "#ff0010"
    with pytest.raises(ValueError):
        parse_color("#fff")
    with pytest.raises(ValueError):
        parse_color([0, 0, 300])


def test_constructor_copies_caller_owned_pixels():
    pixels = [WHITE, WHITE]
    picture = Picture(2, 1, pixels)
    pixels[0] = RED
    assert picture.pixel(0, 0) == WHITE
    assert isinstance(picture.pixels, tuple)
