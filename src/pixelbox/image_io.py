from __future__ import annotations

import logging
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from pixelbox.errors import ImageLoadError
from pixelbox.picture import Picture


logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100


def picture_to_image(picture: Picture) -> Image.Image:
    data = bytes(channel for color in picture.pixels for channel in color)
    return Image.frombytes("RGB", picture.size, data)


def _fit_size(width: int, height: int, max_size: int) -> tuple[int, int]:
    if width <= max_size and height <= max_size:
        return width, height
    scale = min(max_size / width, max_size / height)
    return max(1, int(width * scale)), max(1, int(height * scale))


def picture_from_image(image: Image.Image, max_size: int = DEFAULT_MAX_SIZE) -> Picture:
    rgb = image.convert("RGB")
    target = _fit_size(rgb.width, rgb.height, max_size)
    if target != rgb.size:
        rgb = rgb.resize(target, Image.Resampling.NEAREST)
    data = rgb.tobytes()
    pixels = tuple(
        (data[offset], data[offset + 1], data[offset + 2])
        for offset in range(0, len(data), 3)
    )
    return Picture(rgb.width, rgb.height, pixels)  # type: ignore[arg-type]


def save_picture(picture: Picture, path: Path) -> Path:
    # Keep a .png suffix so Pillow picks the PNG encoder for the temp file.
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    picture_to_image(picture).save(tmp_path, format="PNG")
    os.replace(tmp_path, path)
    logger.info("Saved %dx%d picture to %s", picture.width, picture.height, path)
    return path


def load_picture(path: Path, max_size: int = DEFAULT_MAX_SIZE) -> Picture:
    try:
        with Image.open(path) as image:
            return picture_from_image(image, max_size)
    except (UnidentifiedImageError, OSError) as exc:
        logger.warning("Could not load %s: %s", path, exc)
        raise ImageLoadError(f"could not load picture from {path}") from exc
