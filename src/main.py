"""Entry point for the Snake game."""

from __future__ import annotations

import argparse
import logging

from snake_game.config import DEFAULT_DIFFICULTY, DIFFICULTY_LEVELS
from snake_game.engine import GameEngine
from snake_game.game import SnakeGame
from snake_game.highscore import HighScoreStore, MemoryHighScoreStore


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Snake")
    parser.add_argument(
        "--difficulty",
        choices=sorted(DIFFICULTY_LEVELS),
        default=DEFAULT_DIFFICULTY,
        help="Starting speed (default: %(default)s)",
    )
    parser.add_argument(
        "--no-save", action="store_true", help="Keep the best score for this session only"
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    high_scores = MemoryHighScoreStore() if args.no_save else HighScoreStore()
    engine = GameEngine(difficulty=args.difficulty, high_scores=high_scores)
    game = SnakeGame(engine)
    game.start()


if __name__ == "__main__":
    main()
