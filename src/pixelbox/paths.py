from __future__ import annotations

from pathlib import Path
from typing import Dict, Any


def get_data_root(config: Dict[str, Any]) -> Path:
    root = config.get("data_root", "~/.local/share/pixelbox")
    return Path(root).expanduser().resolve()


def ensure_directories(data_root: Path) -> Dict[str, Path]:
    pictures_dir = data_root / "pictures"
    pictures_dir.mkdir(parents=True, exist_ok=True)
    return {
        "pictures": pictures_dir,
    }
