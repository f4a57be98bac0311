"""Centralized configuration for the Snake game and its static file server."""

from __future__ import annotations

import os
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


def _default_data_dir() -> Path:
    """Return a platform-appropriate user data directory for the best score."""

    if sys.platform.startswith("win"):
        base = Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")
    return base / "snake-game"


DATA_DIR = Path(os.getenv("SNAKE_DATA_DIR") or _default_data_dir())
HIGHSCORE_FILE = Path(os.getenv("SNAKE_HIGHSCORE_FILE") or DATA_DIR / "highscore.txt")

CANVAS_SIZE: int = 400
TILE_SIZE: int = 20
GRID_SIZE: int = CANVAS_SIZE // TILE_SIZE  # 20 x 20 cells

FOOD_POINTS: int = 10
# Food placement draw budget, as a multiple of the grid area
FOOD_SAMPLING_FACTOR: int = 4

# Milliseconds per tick
DIFFICULTY_LEVELS: dict[str, int] = {
    "easy": 200,
    "medium": 150,
    "hard": 100,
}
DEFAULT_DIFFICULTY: str = "medium"
DIFFICULTY_NAMES: dict[str, str] = {
    "easy": "Easy",
    "medium": "Medium",
    "hard": "Hard",
}

SWIPE_MIN_DISTANCE: int = 30

# --- Static file server ------------------------------------------------

DEFAULT_PUBLIC_DIR = BASE_DIR / "public"
DEFAULT_PORT: int = 8082
INDEX_DOCUMENT: str = "index.html"
DEFAULT_CONTENT_TYPE: str = "text/html"
CONTENT_TYPES: dict[str, str] = {
    ".js": "text/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpg",
    ".jpeg": "image/jpg",
}


def public_dir() -> Path:
    """Directory served over HTTP, honoring ``SNAKE_PUBLIC_DIR``."""
    return Path(os.getenv("SNAKE_PUBLIC_DIR") or DEFAULT_PUBLIC_DIR)


def server_port() -> int:
    """Port for the static server, honoring the ``PORT`` environment variable."""
    value = os.getenv("PORT")
    if not value:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError:
        return DEFAULT_PORT

# --- Window ------------------------------------------------------------

PANEL_HEIGHT: int = 136
WINDOW_WIDTH: int = CANVAS_SIZE
WINDOW_HEIGHT: int = CANVAS_SIZE + PANEL_HEIGHT
FPS: int = 60
FONT_NAME: str = "arial"
FONT_SIZE: int = 20
SMALL_FONT_SIZE: int = 15

PALETTE: dict[str, tuple[int, int, int]] = {
    "board": (45, 55, 72),
    "panel": (26, 32, 44),
    "text": (237, 242, 247),
    "muted": (160, 174, 192),
    "head_top": (74, 222, 128),
    "head_bottom": (34, 197, 94),
    "body_top": (34, 197, 94),
    "body_bottom": (22, 163, 74),
    "food_core": (255, 107, 107),
    "food_mid": (245, 101, 101),
    "food_edge": (229, 62, 62),
    "button": (74, 85, 104),
    "button_active": (72, 187, 120),
    "button_disabled": (55, 62, 76),
    "overlay": (0, 0, 0),
}
