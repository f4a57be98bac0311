"""Persistence for the single best-score value."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import HIGHSCORE_FILE

logger = logging.getLogger(__name__)


class MemoryHighScoreStore:
    """Best score kept for the lifetime of the process only."""

    def __init__(self, best: int = 0) -> None:
        self.best: int = best

    def record(self, score: int) -> bool:
        """Remember ``score`` if it beats the best. Return True on a new record."""
        if score <= self.best:
            return False
        self.best = score
        self.save()
        return True

    def save(self) -> None:
        pass


class HighScoreStore(MemoryHighScoreStore):
    """Best score stored as plain text in a file."""

    def __init__(self, path: Path | str = HIGHSCORE_FILE) -> None:
        super().__init__()
        self.path = Path(path)
        self.load()

    def load(self) -> int:
        """Read the stored best score; a missing or garbled file counts as 0."""
        try:
            text = self.path.read_text(encoding="utf-8")
            self.best = max(0, int(text.strip() or "0"))
        except (OSError, ValueError):
            self.best = 0
        return self.best

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(str(self.best), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save high score to %s: %s", self.path, exc)
