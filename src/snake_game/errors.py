"""Exceptions raised by the Snake game and its file server."""

from __future__ import annotations


class SnakeError(Exception):
    """Base class for every error this package raises."""


class UnknownDifficultyError(SnakeError, ValueError):
    """Raised when a difficulty name is not in the difficulty table."""

    def __init__(self, level: str) -> None:
        super().__init__(f"Unknown difficulty: {level!r}")
        self.level = level


class PathTraversalError(SnakeError):
    """Raised when a request path resolves outside the served directory."""

    def __init__(self, url_path: str) -> None:
        super().__init__(f"Path escapes the public directory: {url_path!r}")
        self.url_path = url_path
