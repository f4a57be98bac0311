"""
Tests for snake_game.engine - snake movement, collisions, food and scoring.
"""

import dataclasses
import random

import pytest

from snake_game.commands import Command
from snake_game.engine import (
    ATE,
    BOARD_FULL,
    GAME_OVER,
    IDLE,
    MOVED,
    PAUSED,
    READY,
    RUNNING,
    SELF,
    WALL,
    Direction,
    GameEngine,
    Position,
    place_food,
)
from snake_game.errors import UnknownDifficultyError
from snake_game.highscore import HighScoreStore, MemoryHighScoreStore


@pytest.fixture
def engine():
    """Fresh 20x20 engine with a seeded RNG and food parked in a corner."""
    eng = GameEngine(rng=random.Random(1234))
    eng.food = Position(0, 0)
    return eng


def place(engine, *cells, direction=None):
    """Put the snake on the given cells (head first) moving in ``direction``."""
    engine.snake = [Position(*cell) for cell in cells]
    engine.direction = direction
    engine.pending_direction = direction


class TestDirection:
    def test_opposites(self):
        """Every direction knows its exact reverse."""
        assert Direction.UP.opposite is Direction.DOWN
        assert Direction.LEFT.opposite is Direction.RIGHT
        assert Direction.RIGHT.delta == (1, 0)

    def test_from_name_is_case_insensitive(self):
        """Direction names are accepted in any case."""
        assert Direction.from_name("left") is Direction.LEFT
        assert Direction.from_name(" Up ") is Direction.UP

    def test_from_name_unknown(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            Direction.from_name("sideways")

    def test_position_moved(self):
        """Moving a position adds the direction delta."""
        assert Position(3, 4).moved(Direction.UP) == Position(3, 3)
        assert Position(3, 4).moved(Direction.RIGHT) == (4, 4)


class TestInitialState:
    def test_single_segment_in_centre(self):
        """A new game starts with one segment in the middle of the grid."""
        eng = GameEngine(rng=random.Random(0))
        assert eng.snake == [Position(10, 10)]
        assert eng.direction is None
        assert eng.pending_direction is None
        assert eng.score == 0
        assert eng.status == READY
        assert eng.running is False
        assert eng.tick_interval_ms == 150
        assert eng.difficulty == "medium"

    def test_food_not_on_snake(self):
        """Initial food never lands on the snake."""
        for seed in range(50):
            eng = GameEngine(rng=random.Random(seed))
            assert eng.food is not None
            assert eng.food not in eng.snake

    def test_unknown_starting_difficulty(self):
        """Constructing with an unknown difficulty fails loudly."""
        with pytest.raises(UnknownDifficultyError):
            GameEngine(difficulty="insane")


class TestTick:
    def test_idle_before_first_move(self, engine):
        """With no direction yet, tick does nothing."""
        before = engine.snapshot()
        result = engine.tick()
        assert result.outcome == IDLE
        assert engine.snapshot() == before

    def test_move_right(self, engine):
        """A requested direction moves the head one cell without growing."""
        engine.request_direction(Direction.RIGHT)
        result = engine.tick()
        assert result.outcome == MOVED
        assert engine.snake == [Position(11, 10)]
        assert result.state.snake == (Position(11, 10),)
        assert engine.score == 0

    def test_body_follows_head(self, engine):
        """Moving drops the tail so the length stays the same."""
        place(engine, (5, 5), (4, 5), (3, 5), direction=Direction.RIGHT)
        engine.tick()
        assert engine.snake == [Position(6, 5), Position(5, 5), Position(4, 5)]

    def test_eating_grows_and_scores(self, engine):
        """Landing on food adds a segment and 10 points, then re-rolls food."""
        engine.food = Position(11, 10)
        engine.request_direction(Direction.RIGHT)
        result = engine.tick()
        assert result.outcome == ATE
        assert engine.snake == [Position(11, 10), Position(10, 10)]
        assert engine.score == 10
        assert engine.food is not None
        assert engine.food not in engine.snake

    def test_wall_collision(self, engine):
        """Leaving the grid ends the game."""
        place(engine, (19, 10), direction=Direction.RIGHT)
        engine.start()
        result = engine.tick()
        assert result.outcome == GAME_OVER
        assert result.reason == WALL
        assert result.finished is True
        assert engine.running is False
        assert engine.status == GAME_OVER
        assert engine.timer.armed is False
        assert engine.snake == [Position(19, 10)]

    @pytest.mark.parametrize(
        "cell, direction",
        [
            ((0, 5), Direction.LEFT),
            ((5, 0), Direction.UP),
            ((5, 19), Direction.DOWN),
        ],
    )
    def test_every_wall(self, engine, cell, direction):
        """All four borders are walls."""
        place(engine, cell, direction=direction)
        assert engine.tick().reason == WALL

    def test_self_collision(self, engine):
        """Turning into the body ends the game."""
        place(
            engine,
            (5, 5), (5, 6), (6, 6), (6, 5), (6, 4),
            direction=Direction.UP,
        )
        engine.request_direction(Direction.RIGHT)
        result = engine.tick()
        assert result.outcome == GAME_OVER
        assert result.reason == SELF
        assert engine.collision == SELF

    def test_moving_into_tail_cell_collides(self, engine):
        """Collision is checked against the body before the tail moves."""
        place(engine, (5, 5), (5, 6), (6, 6), (6, 5), direction=Direction.UP)
        engine.request_direction(Direction.RIGHT)
        assert engine.tick().reason == SELF

    def test_tick_after_game_over_does_not_move(self, engine):
        """A finished game stays frozen until reset."""
        place(engine, (19, 10), direction=Direction.RIGHT)
        engine.tick()
        result = engine.tick()
        assert result.outcome == GAME_OVER
        assert engine.snake == [Position(19, 10)]

    def test_board_full(self):
        """Filling every cell ends the game as a win with no food left."""
        eng = GameEngine(grid_size=2, rng=random.Random(0))
        place(eng, (0, 0), (1, 0), (1, 1), direction=None)
        eng.food = Position(0, 1)
        eng.start()
        eng.request_direction(Direction.DOWN)
        result = eng.tick()
        assert result.outcome == BOARD_FULL
        assert result.finished is True
        assert eng.status == BOARD_FULL
        assert eng.food is None
        assert eng.score == 10
        assert eng.running is False
        eng.start()
        assert eng.running is False


class TestRequestDirection:
    def test_reversal_dropped(self, engine):
        """The exact reverse of the current direction is ignored."""
        engine.request_direction(Direction.RIGHT)
        engine.tick()
        assert engine.request_direction(Direction.LEFT) is False
        assert engine.pending_direction is Direction.RIGHT

    def test_anything_allowed_before_first_move(self, engine):
        """With no current direction every request is accepted."""
        assert engine.request_direction(Direction.LEFT) is True
        assert engine.request_direction(Direction.RIGHT) is True
        assert engine.pending_direction is Direction.RIGHT

    def test_latest_request_wins(self, engine):
        """Several requests between ticks collapse to the most recent one."""
        engine.request_direction(Direction.RIGHT)
        engine.tick()
        engine.request_direction(Direction.UP)
        engine.request_direction(Direction.DOWN)
        engine.tick()
        assert engine.head == Position(11, 11)

    def test_reversal_checked_against_current_not_pending(self, engine):
        """A reverse request is dropped even after a valid turn was queued."""
        engine.request_direction(Direction.RIGHT)
        engine.tick()
        engine.request_direction(Direction.UP)
        engine.request_direction(Direction.LEFT)
        engine.tick()
        assert engine.head == Position(11, 9)

    def test_request_applies_on_next_tick(self, engine):
        """The pending direction only becomes current when a tick runs."""
        engine.request_direction(Direction.RIGHT)
        engine.tick()
        engine.request_direction(Direction.UP)
        assert engine.direction is Direction.RIGHT
        engine.tick()
        assert engine.direction is Direction.UP

    def test_names_accepted(self, engine):
        """Direction names work as well as enum members."""
        assert engine.request_direction("down") is True
        assert engine.pending_direction is Direction.DOWN

    def test_garbage_ignored(self, engine):
        """Malformed requests never raise."""
        assert engine.request_direction("north-east") is False
        assert engine.request_direction(None) is False
        assert engine.pending_direction is None


class TestControls:
    def test_start_arms_timer(self, engine):
        """start() flips to running and arms the timer at the current speed."""
        engine.start()
        assert engine.status == RUNNING
        assert engine.timer.armed is True
        assert engine.timer.interval_ms == 150

    def test_start_is_idempotent(self, engine):
        """Starting twice keeps the time already accumulated."""
        engine.start()
        engine.advance(100)
        engine.start()
        assert engine.timer.elapsed_ms == 100

    def test_pause(self, engine):
        """pause() stops the timer; pausing again is harmless."""
        engine.start()
        engine.pause()
        assert engine.status == PAUSED
        assert engine.timer.armed is False
        engine.pause()
        assert engine.status == PAUSED

    def test_pause_when_not_running(self, engine):
        """Pausing a game that never started changes nothing."""
        engine.pause()
        assert engine.status == READY

    def test_toggle(self, engine):
        """toggle() alternates between running and paused."""
        engine.toggle()
        assert engine.running is True
        engine.toggle()
        assert engine.status == PAUSED

    def test_start_after_game_over_is_ignored(self, engine):
        """A finished game needs reset or restart."""
        place(engine, (19, 10), direction=Direction.RIGHT)
        engine.start()
        engine.tick()
        engine.start()
        assert engine.status == GAME_OVER
        assert engine.timer.armed is False

    def test_reset(self, engine):
        """reset() restores the opening position and clears the score."""
        engine.food = Position(11, 10)
        engine.request_direction(Direction.RIGHT)
        engine.start()
        engine.tick()
        engine.reset()
        assert engine.snake == [Position(10, 10)]
        assert engine.direction is None
        assert engine.pending_direction is None
        assert engine.score == 0
        assert engine.status == READY
        assert engine.timer.armed is False
        assert engine.food not in engine.snake

    def test_restart(self, engine):
        """restart() resets and immediately starts a new game."""
        place(engine, (19, 10), direction=Direction.RIGHT)
        engine.tick()
        engine.restart()
        assert engine.running is True
        assert engine.snake == [Position(10, 10)]
        assert engine.collision is None


class TestDifficulty:
    def test_table(self, engine):
        """Each level maps to its tick length."""
        for level, interval in (("easy", 200), ("medium", 150), ("hard", 100)):
            engine.set_difficulty(level)
            assert engine.tick_interval_ms == interval

    def test_change_while_running_keeps_game(self, engine):
        """Switching to hard re-arms at 100 ms and leaves the game alone."""
        place(engine, (5, 5), (4, 5), direction=Direction.RIGHT)
        engine.score = 30
        engine.start()
        engine.advance(120)
        engine.set_difficulty("hard")
        assert engine.tick_interval_ms == 100
        assert engine.timer.interval_ms == 100
        assert engine.timer.armed is True
        assert engine.timer.elapsed_ms == 0
        assert engine.running is True
        assert engine.score == 30
        assert engine.snake == [Position(5, 5), Position(4, 5)]

    def test_same_level_is_noop(self, engine):
        """Re-selecting the current level does not restart the interval."""
        engine.start()
        engine.advance(100)
        engine.set_difficulty("medium")
        assert engine.timer.elapsed_ms == 100

    def test_change_while_paused_stays_paused(self, engine):
        """A paused game picks up the new speed on the next start."""
        engine.start()
        engine.pause()
        engine.set_difficulty("easy")
        assert engine.timer.armed is False
        engine.start()
        assert engine.timer.interval_ms == 200

    def test_unknown_level(self, engine):
        """Unknown levels raise and leave the speed untouched."""
        with pytest.raises(UnknownDifficultyError):
            engine.set_difficulty("nightmare")
        with pytest.raises(ValueError):
            engine.set_difficulty("")
        assert engine.tick_interval_ms == 150


class TestAdvance:
    def test_ticks_follow_interval(self, engine):
        """One tick per full interval of elapsed time."""
        engine.start()
        engine.request_direction(Direction.RIGHT)
        assert engine.advance(149) == []
        results = engine.advance(1)
        assert [r.outcome for r in results] == [MOVED]
        assert len(engine.advance(300)) == 2
        assert engine.head == Position(13, 10)

    def test_nothing_happens_while_stopped(self, engine):
        """A game that is not running never ticks."""
        engine.request_direction(Direction.RIGHT)
        assert engine.advance(1000) == []
        assert engine.head == Position(10, 10)

    def test_nothing_happens_while_paused(self, engine):
        """Pausing stops the schedule; time passing does not move the snake."""
        engine.start()
        engine.request_direction(Direction.RIGHT)
        engine.advance(150)
        engine.pause()
        assert engine.advance(1000) == []
        assert engine.head == Position(11, 10)
        assert engine.status == PAUSED

    def test_stops_at_game_over(self, engine):
        """Ticks due after a collision are dropped."""
        place(engine, (18, 10), direction=Direction.RIGHT)
        engine.start()
        results = engine.advance(150 * 5)
        assert [r.outcome for r in results] == [MOVED, GAME_OVER]

    def test_queued_commands_applied_first(self, engine):
        """Commands submitted between frames run before the due ticks."""
        engine.submit(Command("start"))
        engine.submit(Command("direction", "UP"))
        engine.submit(Command("direction", "LEFT"))
        results = engine.advance(150)
        assert len(engine.commands) == 0
        assert [r.outcome for r in results] == [MOVED]
        assert engine.head == Position(9, 10)

    def test_difficulty_command(self, engine):
        """Difficulty changes can travel through the queue."""
        engine.submit(Command("difficulty", "hard"))
        engine.advance(0)
        assert engine.tick_interval_ms == 100


class TestHighScore:
    def test_new_record_is_persisted(self, tmp_path, engine):
        """Beating a stored 50 with 60 writes 60."""
        path = tmp_path / "best.txt"
        path.write_text("50", encoding="utf-8")
        engine.high_scores = HighScoreStore(path)
        assert engine.high_score == 50

        engine.score = 50
        engine.food = Position(11, 10)
        engine.request_direction(Direction.RIGHT)
        engine.tick()

        assert engine.score == 60
        assert engine.high_score == 60
        assert path.read_text(encoding="utf-8") == "60"

    def test_lower_scores_leave_record(self, tmp_path, engine):
        """Scores below the record are not written."""
        path = tmp_path / "best.txt"
        path.write_text("50", encoding="utf-8")
        engine.high_scores = HighScoreStore(path)
        engine.food = Position(11, 10)
        engine.request_direction(Direction.RIGHT)
        engine.tick()
        assert engine.score == 10
        assert path.read_text(encoding="utf-8") == "50"

    def test_snapshot_reports_best(self):
        """Snapshots carry the best score alongside the current one."""
        eng = GameEngine(high_scores=MemoryHighScoreStore(best=70))
        assert eng.snapshot().high_score == 70


class TestSnapshot:
    def test_snapshot_is_frozen(self, engine):
        """Renderers cannot mutate the engine through a snapshot."""
        state = engine.snapshot()
        assert isinstance(state.snake, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.score = 99

    def test_snapshot_detached_from_engine(self, engine):
        """Later ticks do not change an earlier snapshot."""
        state = engine.snapshot()
        engine.request_direction(Direction.RIGHT)
        engine.tick()
        assert state.snake == (Position(10, 10),)
        assert state.head == Position(10, 10)


class TestPlaceFood:
    def test_never_on_snake(self):
        """Food is always placed on a free cell."""
        rng = random.Random(7)
        snake = [Position(x, 0) for x in range(5)] + [Position(4, y) for y in range(1, 5)]
        for _ in range(200):
            food = place_food(snake, 5, rng)
            assert food is not None
            assert food not in snake

    def test_full_board(self):
        """No free cell means no food."""
        snake = [Position(x, y) for y in range(3) for x in range(3)]
        assert place_food(snake, 3, random.Random(0)) is None

    def test_falls_back_to_free_cells(self):
        """When sampling keeps hitting the snake, a free cell is still found."""

        class StuckRandom(random.Random):
            def randrange(self, *args, **kwargs):
                return 0

        snake = [Position(0, 0)]
        food = place_food(snake, 3, StuckRandom(0))
        assert food is not None
        assert food != Position(0, 0)
        assert 0 <= food.x < 3 and 0 <= food.y < 3

    def test_last_free_cell(self):
        """With one free cell left, that cell is chosen."""
        snake = [Position(x, y) for y in range(3) for x in range(3) if (x, y) != (2, 1)]
        assert place_food(snake, 3, random.Random(3)) == Position(2, 1)


class TestInvariantsUnderRandomPlay:
    def test_random_games(self):
        """Length, score, overlap and food rules hold across many random ticks."""
        rng = random.Random(99)
        eng = GameEngine(grid_size=8, rng=random.Random(5))
        eng.start()
        directions = list(Direction)

        for _ in range(2000):
            if not eng.running:
                eng.restart()
            before = eng.snapshot()
            eng.request_direction(rng.choice(directions))
            result = eng.tick()
            after = result.state

            if result.outcome == GAME_OVER:
                assert after.score == before.score
                continue
            if result.outcome == IDLE:
                continue

            grew = result.outcome in (ATE, BOARD_FULL)
            assert len(after.snake) == len(before.snake) + (1 if grew else 0)
            assert after.score == before.score + (10 if grew else 0)
            assert len(set(after.snake)) == len(after.snake)
            if after.food is not None:
                assert after.food not in after.snake
