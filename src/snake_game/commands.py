"""Control commands queued by input adapters and applied by the engine."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator

from .config import DIFFICULTY_LEVELS

DIRECTION = "direction"
START = "start"
PAUSE = "pause"
TOGGLE = "toggle"
RESET = "reset"
RESTART = "restart"
DIFFICULTY = "difficulty"

COMMAND_KINDS = frozenset({DIRECTION, START, PAUSE, TOGGLE, RESET, RESTART, DIFFICULTY})


@dataclass(frozen=True, slots=True)
class Command:
    """A single player intent. ``value`` carries a direction or difficulty name."""

    kind: str
    value: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in COMMAND_KINDS:
            raise ValueError(f"Unknown command kind: {self.kind!r}")
        if self.kind == DIFFICULTY and self.value not in DIFFICULTY_LEVELS:
            raise ValueError(f"Unknown difficulty: {self.value!r}")


class CommandQueue:
    """FIFO of pending commands, drained once per engine update."""

    def __init__(self) -> None:
        self._items: deque[Command] = deque()

    def push(self, command: Command) -> None:
        self._items.append(command)

    def drain(self) -> Iterator[Command]:
        """Yield queued commands oldest first, removing them as they go."""
        while self._items:
            yield self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
