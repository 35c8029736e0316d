from __future__ import annotations

from typing import Optional, Tuple

import pygame

from pixelbox.picture import Picture


Point = Tuple[int, int]


def picture_surface_size(picture: Picture, scale: int) -> Tuple[int, int]:
    return (picture.width * scale, picture.height * scale)


def draw_picture(picture: Picture, surface: pygame.Surface, scale: int) -> None:
    for y in range(picture.height):
        for x in range(picture.width):
            rect = pygame.Rect(x * scale, y * scale, scale, scale)
            surface.fill(picture.pixel(x, y), rect)


def clamp_to_picture(
    screen_pos: Point,
    canvas_rect: pygame.Rect,
    scale: int,
    picture: Picture,
) -> Point:
    # Drags keep reporting the nearest edge pixel once the pointer leaves the canvas.
    x = (screen_pos[0] - canvas_rect.left) // scale
    y = (screen_pos[1] - canvas_rect.top) // scale
    return (
        max(0, min(picture.width - 1, x)),
        max(0, min(picture.height - 1, y)),
    )


def pointer_position(
    screen_pos: Point,
    canvas_rect: pygame.Rect,
    scale: int,
    picture: Picture,
) -> Optional[Point]:
    if not canvas_rect.collidepoint(screen_pos):
        return None
    return clamp_to_picture(screen_pos, canvas_rect, scale, picture)


class PictureCanvas:
    def __init__(self, picture: Picture, scale: int) -> None:
        self.scale = scale
        self.picture: Optional[Picture] = None
        self.surface = pygame.Surface(picture_surface_size(picture, scale))
        self.redraws = 0
        self.sync(picture)

    def sync(self, picture: Picture) -> bool:
        if picture is self.picture:
            return False
        size = picture_surface_size(picture, self.scale)
        if self.surface.get_size() != size:
            self.surface = pygame.Surface(size)
        self.picture = picture
        draw_picture(picture, self.surface, self.scale)
        self.redraws += 1
        return True
