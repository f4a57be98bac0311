"""Authoritative Snake game state and the per-tick update rule."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Sequence

from .commands import (
    DIFFICULTY,
    DIRECTION,
    PAUSE,
    RESET,
    RESTART,
    START,
    TOGGLE,
    Command,
    CommandQueue,
)
from .config import (
    DEFAULT_DIFFICULTY,
    DIFFICULTY_LEVELS,
    FOOD_POINTS,
    FOOD_SAMPLING_FACTOR,
    GRID_SIZE,
)
from .errors import UnknownDifficultyError
from .highscore import MemoryHighScoreStore
from .timer import TickTimer

logger = logging.getLogger(__name__)

# Engine status
READY = "ready"
RUNNING = "running"
PAUSED = "paused"
GAME_OVER = "game_over"
BOARD_FULL = "board_full"

# Tick outcomes
IDLE = "idle"
MOVED = "moved"
ATE = "ate"

# Collision reasons
WALL = "wall"
SELF = "self"


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))

    @classmethod
    def from_name(cls, name: str) -> Direction:
        """Look up a direction by name, case-insensitively."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name!r}") from None


class Position(NamedTuple):
    """A grid cell as (column, row)."""

    x: int
    y: int

    def moved(self, direction: Direction) -> Position:
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True, slots=True)
class GameState:
    """Read-only snapshot handed to renderers after each tick."""

    snake: tuple[Position, ...]
    direction: Direction | None
    pending_direction: Direction | None
    food: Position | None
    score: int
    running: bool
    tick_interval_ms: int
    difficulty: str
    status: str
    high_score: int
    grid_size: int
    collision: str | None = None

    @property
    def head(self) -> Position:
        return self.snake[0]


@dataclass(frozen=True, slots=True)
class TickResult:
    outcome: str
    state: GameState
    reason: str | None = None

    @property
    def finished(self) -> bool:
        return self.outcome in (GAME_OVER, BOARD_FULL)


def place_food(
    snake: Sequence[tuple[int, int]],
    grid_size: int,
    rng: random.Random,
) -> Position | None:
    """Pick a uniformly random free cell, or None if the snake fills the board.

    Candidates are drawn over the whole grid and re-drawn while they land on
    the snake. Once the draw budget runs out the remaining free cells are
    listed and one is chosen directly.
    """
    occupied = set(snake)
    area = grid_size * grid_size
    if len(occupied) >= area:
        return None

    for _ in range(area * FOOD_SAMPLING_FACTOR):
        candidate = Position(rng.randrange(grid_size), rng.randrange(grid_size))
        if candidate not in occupied:
            return candidate

    free = [
        Position(x, y)
        for y in range(grid_size)
        for x in range(grid_size)
        if (x, y) not in occupied
    ]
    return rng.choice(free)


class GameEngine:
    """Owns the snake, the food, the score and the tick schedule.

    Renderers read :meth:`snapshot`; input adapters either call the control
    methods directly or :meth:`submit` commands that are applied at the start
    of the next :meth:`advance`.
    """

    def __init__(
        self,
        grid_size: int = GRID_SIZE,
        difficulty: str = DEFAULT_DIFFICULTY,
        high_scores: MemoryHighScoreStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if difficulty not in DIFFICULTY_LEVELS:
            raise UnknownDifficultyError(difficulty)
        if grid_size < 1:
            raise ValueError("grid_size must be at least 1")
        self.grid_size = grid_size
        self.difficulty = difficulty
        self.tick_interval_ms = DIFFICULTY_LEVELS[difficulty]
        if high_scores is None:
            high_scores = MemoryHighScoreStore()
        self.high_scores = high_scores
        self.rng = rng or random.Random()
        self.timer = TickTimer()
        self.commands = CommandQueue()

        self.snake: list[Position] = []
        self.direction: Direction | None = None
        self.pending_direction: Direction | None = None
        self.food: Position | None = None
        self.score: int = 0
        self.status: str = READY
        self.collision: str | None = None
        self.reset()

    # --- Read access ---------------------------------------------------

    @property
    def running(self) -> bool:
        return self.status == RUNNING

    @property
    def high_score(self) -> int:
        return self.high_scores.best

    @property
    def head(self) -> Position:
        return self.snake[0]

    def snapshot(self) -> GameState:
        return GameState(
            snake=tuple(self.snake),
            direction=self.direction,
            pending_direction=self.pending_direction,
            food=self.food,
            score=self.score,
            running=self.running,
            tick_interval_ms=self.tick_interval_ms,
            difficulty=self.difficulty,
            status=self.status,
            high_score=self.high_score,
            grid_size=self.grid_size,
            collision=self.collision,
        )

    # --- Controls ------------------------------------------------------

    def start(self) -> None:
        """Begin or resume ticking. Finished games wait for reset/restart."""
        if self.running:
            return
        if self.status in (GAME_OVER, BOARD_FULL):
            logger.debug("Ignoring start while %s; reset first", self.status)
            return
        self.status = RUNNING
        self.timer.arm(self.tick_interval_ms)
        logger.info(
            "Game started (%s, %d ms/tick)", self.difficulty, self.tick_interval_ms
        )

    def pause(self) -> None:
        if not self.running:
            return
        self.status = PAUSED
        self.timer.disarm()
        logger.info("Game paused at score %d", self.score)

    def toggle(self) -> None:
        """Pause when running, otherwise start."""
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Put a single-segment snake back in the grid centre and re-roll food."""
        self.timer.disarm()
        center = self.grid_size // 2
        self.snake = [Position(center, center)]
        self.direction = None
        self.pending_direction = None
        self.score = 0
        self.status = READY
        self.collision = None
        self.food = place_food(self.snake, self.grid_size, self.rng)
        logger.debug("Game reset; food at %s", self.food)

    def restart(self) -> None:
        self.reset()
        self.start()

    def set_difficulty(self, level: str) -> None:
        """Switch tick speed. A running game is re-armed at the new interval."""
        if level not in DIFFICULTY_LEVELS:
            raise UnknownDifficultyError(level)
        if level == self.difficulty:
            return
        self.difficulty = level
        self.tick_interval_ms = DIFFICULTY_LEVELS[level]
        if self.running:
            self.timer.disarm()
            self.timer.arm(self.tick_interval_ms)
        logger.info("Difficulty set to %s (%d ms/tick)", level, self.tick_interval_ms)

    def request_direction(self, direction: Direction | str) -> bool:
        """Queue a turn for the next tick; reversals are dropped.

        Returns True when the request replaced the pending direction.
        """
        if isinstance(direction, str):
            try:
                direction = Direction.from_name(direction)
            except ValueError:
                logger.debug("Ignoring unknown direction %r", direction)
                return False
        if not isinstance(direction, Direction):
            return False
        if self.direction is not None and direction is self.direction.opposite:
            logger.debug(
                "Ignoring reversal %s while moving %s",
                direction.name,
                self.direction.name,
            )
            return False
        self.pending_direction = direction
        return True

    # --- Command queue -------------------------------------------------

    def submit(self, command: Command) -> None:
        self.commands.push(command)

    def apply(self, command: Command) -> None:
        """Apply a single command immediately."""
        if command.kind == DIRECTION:
            self.request_direction(command.value or "")
        elif command.kind == START:
            self.start()
        elif command.kind == PAUSE:
            self.pause()
        elif command.kind == TOGGLE:
            self.toggle()
        elif command.kind == RESET:
            self.reset()
        elif command.kind == RESTART:
            self.restart()
        elif command.kind == DIFFICULTY:
            self.set_difficulty(command.value or "")

    def process_commands(self) -> None:
        for command in self.commands.drain():
            self.apply(command)

    # --- Logic step ----------------------------------------------------

    def advance(self, elapsed_ms: float) -> list[TickResult]:
        """Apply queued commands, then run every tick due in ``elapsed_ms``."""
        self.process_commands()
        results: list[TickResult] = []
        for _ in range(self.timer.advance(elapsed_ms)):
            if not self.running:
                break
            results.append(self.tick())
        return results

    def tick(self) -> TickResult:
        """Advance the snake by exactly one cell.

        Does not check that the game is running; the timer-driven
        :meth:`advance` only calls it while it is. Finished games stay frozen.
        """
        if self.status in (GAME_OVER, BOARD_FULL):
            return TickResult(self.status, self.snapshot(), self.collision)

        self.direction = self.pending_direction
        if self.direction is None:
            return TickResult(IDLE, self.snapshot())

        new_head = self.head.moved(self.direction)
        if not (0 <= new_head.x < self.grid_size and 0 <= new_head.y < self.grid_size):
            return self._game_over(WALL)
        if new_head in self.snake:
            return self._game_over(SELF)

        self.snake.insert(0, new_head)
        if new_head != self.food:
            self.snake.pop()
            return TickResult(MOVED, self.snapshot())

        self.score += FOOD_POINTS
        if self.high_scores.record(self.score):
            logger.debug("New high score: %d", self.score)
        self.food = place_food(self.snake, self.grid_size, self.rng)
        if self.food is None:
            self.status = BOARD_FULL
            self.timer.disarm()
            logger.info("Board full with score %d", self.score)
            return TickResult(BOARD_FULL, self.snapshot())
        return TickResult(ATE, self.snapshot())

    def _game_over(self, reason: str) -> TickResult:
        self.status = GAME_OVER
        self.collision = reason
        self.timer.disarm()
        self.high_scores.record(self.score)
        logger.info("Game over (%s collision) with score %d", reason, self.score)
        return TickResult(GAME_OVER, self.snapshot(), reason)
