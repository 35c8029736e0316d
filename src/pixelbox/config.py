from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from pixelbox.picture import Color, parse_color
from pixelbox.tools import ToolKind


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.local/share/pixelbox",
    "editor": {
        "width": 60,
        "height": 30,
        "background": "#f0f0f0",
        "color": "#000000",
        "tool": "draw",
        "scale": 10,
        "coalesce_ms": 1000,
        "undo_depth": None,
        "max_load_size": 100,
        "palette": [
            [0, 0, 0],
            [255, 255, 255],
            [240, 240, 240],
            [220, 20, 60],
            [255, 127, 0],
            [255, 215, 0],
            [34, 139, 34],
            [0, 128, 128],
            [30, 144, 255],
            [138, 43, 226],
            [255, 105, 180],
            [105, 105, 105],
        ],
    },
    "logging": {
        "level": "WARNING",
    },
}


@dataclass
class EditorSettings:
    width: int
    height: int
    background: Color
    color: Color
    tool: str
    scale: int
    coalesce_ms: float
    undo_depth: Optional[int]
    max_load_size: int
    palette: List[Color]


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("PIXELBOX_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("/opt/pixelbox/config.yaml"),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            logger.debug("Loaded config from %s", path)
            break
    return config


def _coerce_positive(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _coerce_depth(value: object) -> Optional[int]:
    if value is None:
        return None
    try:
        depth = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return max(0, depth)


def _coerce_color(value: object, default: str) -> Color:
    try:
        return parse_color(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring bad color %r, using %s", value, default)
        return parse_color(default)


def _coerce_tool(value: object, default: str) -> str:
    if value is None:
        return default
    name = str(value)
    if name not in {kind.value for kind in ToolKind}:
        logger.warning("Ignoring unknown tool %r, using %s", value, default)
        return default
    return name


def editor_settings(config: Dict[str, Any]) -> EditorSettings:
    defaults = DEFAULT_CONFIG["editor"]
    editor = config.get("editor", {}) or {}
    palette = []
    for entry in editor.get("palette", defaults["palette"]) or []:
        try:
            palette.append(parse_color(entry))
        except (TypeError, ValueError):
            logger.warning("Skipping bad palette entry %r", entry)
    return EditorSettings(
        width=_coerce_positive(editor.get("width"), defaults["width"]),
        height=_coerce_positive(editor.get("height"), defaults["height"]),
        background=_coerce_color(editor.get("background", defaults["background"]), defaults["background"]),
        color=_coerce_color(editor.get("color", defaults["color"]), defaults["color"]),
        tool=_coerce_tool(editor.get("tool"), defaults["tool"]),
        scale=_coerce_positive(editor.get("scale"), defaults["scale"]),
        coalesce_ms=float(_coerce_positive(editor.get("coalesce_ms"), defaults["coalesce_ms"])),
        undo_depth=_coerce_depth(editor.get("undo_depth", defaults["undo_depth"])),
        max_load_size=_coerce_positive(editor.get("max_load_size"), defaults["max_load_size"]),
        palette=palette,
    )


def configure_logging(config: Dict[str, Any]) -> None:
    level_name = str((config.get("logging") or {}).get("level", "WARNING")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
