from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from pixelbox.errors import InvalidDimension, OutOfBounds


Color = Tuple[int, int, int]


def parse_color(value: Union[str, Sequence[int]]) -> Color:
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"expected #rrggbb, got {value!r}")
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    channels = tuple(int(channel) for channel in value)
    if len(channels) != 3 or any(channel < 0 or channel > 255 for channel in channels):
        raise ValueError(f"expected three channels in 0..255, got {value!r}")
    return channels  # type: ignore[return-value]


def format_color(color: Color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


@dataclass(frozen=True)
class PixelUpdate:
    x: int
    y: int
    color: Color


@dataclass(frozen=True)
class Picture:
    """An immutable grid of colors stored row-major (index = x + y * width).

    Every edit goes through :meth:`draw`, which hands back a new picture and
    leaves the receiver untouched, so older pictures can sit on the undo
    stack safely.
    """

    width: int
    height: int
    pixels: Tuple[Color, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, tuple):
            object.__setattr__(self, "pixels", tuple(self.pixels))
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimension(f"picture size must be positive, got {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise InvalidDimension(
                f"expected {self.width * self.height} pixels, got {len(self.pixels)}"
            )

    @classmethod
    def empty(cls, width: int, height: int, color: Color) -> "Picture":
        if width <= 0 or height <= 0:
            raise InvalidDimension(f"picture size must be positive, got {width}x{height}")
        return cls(width, height, (color,) * (width * height))

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _index(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise OutOfBounds(x, y, self.width, self.height)
        return x + y * self.width

    def pixel(self, x: int, y: int) -> Color:
        return self.pixels[self._index(x, y)]

    def draw(self, updates: Iterable[PixelUpdate]) -> "Picture":
        copy = list(self.pixels)
        for update in updates:
            copy[self._index(update.x, update.y)] = update.color
        return Picture(self.width, self.height, tuple(copy))
