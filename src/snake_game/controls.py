"""Translate keyboard, mouse/touch swipes and on-screen buttons into commands."""

from __future__ import annotations

from dataclasses import dataclass

import pygame

from .commands import (
    DIFFICULTY,
    DIRECTION,
    PAUSE,
    RESET,
    RESTART,
    START,
    TOGGLE,
    Command,
)
from .config import CANVAS_SIZE, SWIPE_MIN_DISTANCE

KEY_TO_DIRECTION = {
    pygame.K_UP: "UP",
    pygame.K_w: "UP",
    pygame.K_DOWN: "DOWN",
    pygame.K_s: "DOWN",
    pygame.K_LEFT: "LEFT",
    pygame.K_a: "LEFT",
    pygame.K_RIGHT: "RIGHT",
    pygame.K_d: "RIGHT",
}
KEY_TO_DIFFICULTY = {
    pygame.K_1: "easy",
    pygame.K_2: "medium",
    pygame.K_3: "hard",
}

BUTTON_HEIGHT = 32
BUTTON_GAP = 8
PANEL_PADDING = 10
PAD_BUTTON = 34


@dataclass(slots=True)
class Button:
    """Clickable on-screen control bound to a command."""

    label: str
    rect: pygame.Rect
    command: Command
    group: str = "control"

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


def build_buttons(
    top: int = CANVAS_SIZE + 56, width: int = CANVAS_SIZE
) -> list[Button]:
    """Lay out control, difficulty and arrow-pad buttons below the board."""
    buttons: list[Button] = []

    row_width = (width // 2) - PANEL_PADDING * 2
    btn_width = (row_width - BUTTON_GAP * 2) // 3
    x = PANEL_PADDING
    for label, kind in (("Start", START), ("Pause", PAUSE), ("Reset", RESET)):
        rect = pygame.Rect(x, top, btn_width, BUTTON_HEIGHT)
        buttons.append(Button(label, rect, Command(kind)))
        x += btn_width + BUTTON_GAP

    x = PANEL_PADDING
    row_top = top + BUTTON_HEIGHT + BUTTON_GAP
    for label, level in (("Easy", "easy"), ("Medium", "medium"), ("Hard", "hard")):
        rect = pygame.Rect(x, row_top, btn_width, BUTTON_HEIGHT)
        command = Command(DIFFICULTY, level)
        buttons.append(Button(label, rect, command, group="difficulty"))
        x += btn_width + BUTTON_GAP

    # Arrow pad on the right half of the panel
    cx = width * 3 // 4
    pad_top = top - 4
    pad = {
        "UP": (cx - PAD_BUTTON // 2, pad_top),
        "LEFT": (cx - PAD_BUTTON * 3 // 2 - 4, pad_top + PAD_BUTTON + 4),
        "DOWN": (cx - PAD_BUTTON // 2, pad_top + PAD_BUTTON + 4),
        "RIGHT": (cx + PAD_BUTTON // 2 + 4, pad_top + PAD_BUTTON + 4),
    }
    for name, (px, py) in pad.items():
        rect = pygame.Rect(px, py, PAD_BUTTON, PAD_BUTTON)
        buttons.append(Button(name, rect, Command(DIRECTION, name), group="pad"))
    return buttons


class SwipeTracker:
    """Turn a press/release pair into a direction when it travels far enough."""

    def __init__(self, min_distance: int = SWIPE_MIN_DISTANCE) -> None:
        self.min_distance = min_distance
        self.start: tuple[int, int] | None = None

    def begin(self, pos: tuple[int, int]) -> None:
        self.start = (int(pos[0]), int(pos[1]))

    def end(self, pos: tuple[int, int]) -> str | None:
        if self.start is None:
            return None
        start_x, start_y = self.start
        self.start = None
        delta_x = pos[0] - start_x
        delta_y = pos[1] - start_y

        if abs(delta_x) < self.min_distance and abs(delta_y) < self.min_distance:
            return None
        if abs(delta_x) > abs(delta_y):
            return "RIGHT" if delta_x > 0 else "LEFT"
        return "DOWN" if delta_y > 0 else "UP"


class InputAdapter:
    """Map pygame events to engine commands. No game rules live here.

    Touch input arrives as SDL-emulated mouse events, so a drag on the board
    is a swipe and a tap on the panel presses a button.
    """

    def __init__(
        self, buttons: list[Button] | None = None, board_size: int = CANVAS_SIZE
    ) -> None:
        self.buttons = buttons if buttons is not None else build_buttons()
        self.board = pygame.Rect(0, 0, board_size, board_size)
        self.swipe = SwipeTracker()

    def translate(
        self, event: pygame.event.Event, *, running: bool, finished: bool = False
    ) -> list[Command]:
        """Return the commands ``event`` stands for, given the engine status."""
        if event.type == pygame.KEYDOWN:
            return self._from_key(event.key, running=running, finished=finished)

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.board.collidepoint(event.pos):
                self.swipe.begin(event.pos)
                return []
            for button in self.buttons:
                if button.hit(event.pos):
                    return self._filter([button.command], running=running)
            return []

        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            direction = self.swipe.end(event.pos)
            if direction is None:
                return []
            return self._filter([Command(DIRECTION, direction)], running=running)
        return []

    def _from_key(self, key: int, *, running: bool, finished: bool) -> list[Command]:
        if key == pygame.K_SPACE:
            return [Command(TOGGLE)]
        if key == pygame.K_r:
            return [Command(RESET)]
        if key == pygame.K_RETURN and finished:
            return [Command(RESTART)]
        if key in KEY_TO_DIFFICULTY:
            return [Command(DIFFICULTY, KEY_TO_DIFFICULTY[key])]
        direction = KEY_TO_DIRECTION.get(key)
        if direction:
            return self._filter([Command(DIRECTION, direction)], running=running)
        return []

    @staticmethod
    def _filter(commands: list[Command], *, running: bool) -> list[Command]:
        # Steering only counts while the snake is moving
        return [c for c in commands if running or c.kind != DIRECTION]
