from __future__ import annotations


class PixelBoxError(Exception):
    pass


class InvalidDimension(PixelBoxError, ValueError):
    pass


class OutOfBounds(PixelBoxError, IndexError):
    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"({x}, {y}) is outside a {width}x{height} picture")
        self.x = x
        self.y = y


class UnknownTool(PixelBoxError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown tool: {self.name!r}"


class ImageLoadError(PixelBoxError, OSError):
    pass
