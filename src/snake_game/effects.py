"""Particle burst drawn when the snake eats."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Sequence

import pygame

from .config import TILE_SIZE

PARTICLE_LIFE: float = 0.45
PARTICLE_DIRECTIONS = (
    (1.0, 0.0),
    (-1.0, 0.0),
    (0.0, 1.0),
    (0.0, -1.0),
    (0.7, 0.7),
    (-0.7, 0.7),
    (0.7, -0.7),
    (-0.7, -0.7),
)


@dataclass(slots=True)
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    size: float
    color: tuple[int, int, int]


def spawn_particles(
    particles: list[Particle],
    cell: tuple[int, int],
    colors: Sequence[tuple[int, int, int]],
    count: int = 16,
    rng: random.Random | None = None,
) -> None:
    """Emit a burst of small square particles from the centre of a grid cell."""

    rng = rng or random
    cx = cell[0] * TILE_SIZE + TILE_SIZE / 2
    cy = cell[1] * TILE_SIZE + TILE_SIZE / 2

    for _ in range(count):
        dir_x, dir_y = rng.choice(PARTICLE_DIRECTIONS)
        speed = rng.uniform(60, 160)
        particles.append(
            Particle(
                x=cx,
                y=cy,
                vx=dir_x * speed,
                vy=dir_y * speed,
                life=PARTICLE_LIFE,
                size=rng.uniform(2.0, 5.0),
                color=rng.choice(colors),
            )
        )


def update_particles(particles: list[Particle], dt: float) -> list[Particle]:
    """Advance particle positions and trim dead ones."""

    if dt <= 0:
        return particles

    for particle in particles:
        particle.x += particle.vx * dt
        particle.y += particle.vy * dt
        particle.life = max(0.0, particle.life - dt)
    return [p for p in particles if p.life > 0]


def draw_particles(surface: pygame.Surface, particles: Iterable[Particle]) -> None:
    for particle in particles:
        alpha = int(255 * (particle.life / PARTICLE_LIFE))
        if alpha <= 0:
            continue
        side = max(1, int(particle.size))
        surf = pygame.Surface((side, side), pygame.SRCALPHA)
        surf.fill((*particle.color, alpha))
        surface.blit(surf, (int(particle.x) - side // 2, int(particle.y) - side // 2))
