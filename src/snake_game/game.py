"""Pygame front end: draws the engine state and feeds it player input."""

from __future__ import annotations

import logging

import pygame

from .config import (
    CANVAS_SIZE,
    DIFFICULTY_NAMES,
    FONT_NAME,
    FONT_SIZE,
    FPS,
    PALETTE,
    SMALL_FONT_SIZE,
    TILE_SIZE,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .controls import Button, InputAdapter, build_buttons
from .effects import Particle, draw_particles, spawn_particles, update_particles
from .engine import (
    ATE,
    BOARD_FULL,
    GAME_OVER,
    PAUSED,
    GameEngine,
    GameState,
    TickResult,
)
from .highscore import HighScoreStore

logger = logging.getLogger(__name__)


def _lerp(
    start: tuple[int, int, int], end: tuple[int, int, int], t: float
) -> tuple[int, int, int]:
    return (
        int(start[0] + (end[0] - start[0]) * t),
        int(start[1] + (end[1] - start[1]) * t),
        int(start[2] + (end[2] - start[2]) * t),
    )


class SnakeGame:
    """Window, frame loop and rendering around a :class:`GameEngine`."""

    def __init__(self, engine: GameEngine | None = None) -> None:
        pygame.init()
        self.window = pygame.display.set_mode(
            (WINDOW_WIDTH, WINDOW_HEIGHT), pygame.DOUBLEBUF | pygame.SCALED
        )
        pygame.display.set_caption("Snake")
        self.font = pygame.font.SysFont(FONT_NAME, FONT_SIZE)
        self.small_font = pygame.font.SysFont(FONT_NAME, SMALL_FONT_SIZE)

        self.engine = engine or GameEngine(high_scores=HighScoreStore())
        self.buttons = build_buttons()
        self.controls = InputAdapter(self.buttons)
        self.particles: list[Particle] = []

        self.head_tile = self._build_tile(PALETTE["head_top"], PALETTE["head_bottom"])
        self.body_tile = self._build_tile(PALETTE["body_top"], PALETTE["body_bottom"])
        self.food_sprite = self._build_food()

    # --- Sprites -------------------------------------------------------

    def _build_tile(
        self, top: tuple[int, int, int], bottom: tuple[int, int, int]
    ) -> pygame.Surface:
        """Rounded gradient square used for snake segments."""
        size = TILE_SIZE - 2
        tile = pygame.Surface((size, size), pygame.SRCALPHA)
        for y in range(size):
            color = _lerp(top, bottom, y / max(1, size - 1))
            pygame.draw.line(tile, color, (0, y), (size, y))

        mask = pygame.Surface((size, size), pygame.SRCALPHA)
        pygame.draw.rect(
            mask,
            (255, 255, 255, 255),
            mask.get_rect(),
            border_radius=int(TILE_SIZE * 0.2),
        )
        tile.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
        return tile

    def _build_food(self) -> pygame.Surface:
        """Radial-ish red disc with a small specular dot."""
        sprite = pygame.Surface((TILE_SIZE, TILE_SIZE), pygame.SRCALPHA)
        center = TILE_SIZE // 2
        radius = TILE_SIZE // 2 - 2
        for r in range(radius, 0, -1):
            t = r / radius
            if t > 0.7:
                color = _lerp(PALETTE["food_mid"], PALETTE["food_edge"], (t - 0.7) / 0.3)
            else:
                color = _lerp(PALETTE["food_core"], PALETTE["food_mid"], t / 0.7)
            pygame.draw.circle(sprite, color, (center, center), r)
        pygame.draw.circle(
            sprite,
            (255, 255, 255, 102),
            (int(center - radius * 0.3), int(center - radius * 0.3)),
            max(1, int(radius * 0.3)),
        )
        return sprite

    # --- Input -----------------------------------------------------------

    def handle_events(self) -> bool:
        """Turn window events into engine commands. Return False to quit."""
        finished = self.engine.status in (GAME_OVER, BOARD_FULL)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            for command in self.controls.translate(
                event, running=self.engine.running, finished=finished
            ):
                self.engine.submit(command)
        return True

    def _on_tick(self, result: TickResult) -> None:
        if result.outcome == ATE:
            spawn_particles(
                self.particles,
                result.state.head,
                [PALETTE["food_core"], PALETTE["food_edge"], PALETTE["head_top"]],
            )

    # --- Draw ----------------------------------------------------------

    def draw(self, state: GameState) -> None:
        self.window.fill(PALETTE["panel"])
        self.window.fill(PALETTE["board"], pygame.Rect(0, 0, CANVAS_SIZE, CANVAS_SIZE))

        if state.food is not None:
            self.window.blit(
                self.food_sprite, (state.food.x * TILE_SIZE, state.food.y * TILE_SIZE)
            )
        for idx, segment in enumerate(state.snake):
            tile = self.head_tile if idx == 0 else self.body_tile
            self.window.blit(tile, (segment.x * TILE_SIZE + 1, segment.y * TILE_SIZE + 1))
        self._draw_head_highlight(state)
        draw_particles(self.window, self.particles)

        self._draw_hud(state)
        for button in self.buttons:
            self._draw_button(button, state)

        if state.status == PAUSED:
            self._draw_overlay(["Paused", "Press SPACE to resume"])
        elif state.status == GAME_OVER:
            self._draw_overlay(
                [
                    "Game Over",
                    f"Final score: {state.score}",
                    "ENTER to play again / R to reset",
                ]
            )
        elif state.status == BOARD_FULL:
            self._draw_overlay(
                ["Board cleared!", f"Final score: {state.score}", "ENTER to play again"]
            )

    def _draw_head_highlight(self, state: GameState) -> None:
        head = state.head
        radius = int(TILE_SIZE * 0.1)
        shine = pygame.Surface((TILE_SIZE - 4, int(TILE_SIZE * 0.3)), pygame.SRCALPHA)
        pygame.draw.rect(
            shine, (255, 255, 255, 77), shine.get_rect(), border_radius=max(1, radius)
        )
        self.window.blit(shine, (head.x * TILE_SIZE + 2, head.y * TILE_SIZE + 2))

    def _draw_hud(self, state: GameState) -> None:
        top = CANVAS_SIZE + 10
        items = [
            f"Score: {state.score}",
            f"Best: {state.high_score}",
            f"Speed: {DIFFICULTY_NAMES[state.difficulty]}",
        ]
        x = 10
        for text in items:
            surf = self.font.render(text, True, PALETTE["text"])
            self.window.blit(surf, (x, top))
            x += surf.get_width() + 18

    def _draw_button(self, button: Button, state: GameState) -> None:
        color = PALETTE["button"]
        if button.group == "difficulty" and button.command.value == state.difficulty:
            color = PALETTE["button_active"]
        elif button.label == "Start" and state.running:
            color = PALETTE["button_disabled"]
        elif button.label == "Pause" and not state.running:
            color = PALETTE["button_disabled"]
        pygame.draw.rect(self.window, color, button.rect, border_radius=6)

        label = button.label
        if button.group == "pad":
            label = {"UP": "^", "DOWN": "v", "LEFT": "<", "RIGHT": ">"}[button.label]
        surf = self.small_font.render(label, True, PALETTE["text"])
        self.window.blit(surf, surf.get_rect(center=button.rect.center))

    def _draw_overlay(self, lines: list[str]) -> None:
        overlay = pygame.Surface((CANVAS_SIZE, CANVAS_SIZE), pygame.SRCALPHA)
        overlay.fill((*PALETTE["overlay"], 150))
        first = CANVAS_SIZE // 2 - (len(lines) - 1) * (FONT_SIZE + 8) // 2
        for idx, text in enumerate(lines):
            surf = self.font.render(text, True, PALETTE["text"])
            rect = surf.get_rect(center=(CANVAS_SIZE // 2, first + idx * (FONT_SIZE + 8)))
            overlay.blit(surf, rect)
        self.window.blit(overlay, (0, 0))

    # --- Main loop -----------------------------------------------------

    def start(self) -> None:
        """Run the frame loop: input, due ticks, effects, then render."""
        clock = pygame.time.Clock()
        running = True
        logger.info("Best score so far: %d", self.engine.high_score)

        while running:
            dt_ms = clock.tick(FPS)
            running = self.handle_events()

            for result in self.engine.advance(dt_ms):
                self._on_tick(result)
            self.particles = update_particles(self.particles, dt_ms / 1000.0)

            self.draw(self.engine.snapshot())
            pygame.display.update()

        pygame.quit()
