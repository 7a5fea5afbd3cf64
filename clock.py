# Fixed-timestep clock and the host-agnostic per-frame driver.
from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable

try:
    from .game_logic import ENDED, PAUSED, RUNNING, Cell, Fruit, SnakeGame
except ImportError:
    from game_logic import ENDED, PAUSED, RUNNING, Cell, Fruit, SnakeGame


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


class SimulationClock:
    """
    Accumulates wall time and drains it in fixed-size ticks.

    interval() is re-read before every tick so a speed change made by one tick
    applies to the next tick of the same frame. on_tick() returns False to stop
    draining (game over).
    """

    def __init__(self, interval: Callable[[], float], on_tick: Callable[[], bool]) -> None:
        self.interval = interval
        self.on_tick = on_tick
        self.last_time = 0.0
        self.accumulator = 0.0
        self.ticks = 0

    def reset(self, timestamp: float) -> None:
        """Forget accumulated time; call on start and on resume."""
        self.last_time = timestamp
        self.accumulator = 0.0

    def advance(self, timestamp: float) -> float:
        """Drain whole ticks and return the leftover fraction in [0, 1)."""
        delta = timestamp - self.last_time
        self.last_time = timestamp
        # Non-monotonic timestamps would otherwise rewind the accumulator.
        self.accumulator += max(0.0, delta)

        interval = self.interval()
        while self.accumulator >= interval:
            self.accumulator -= interval
            if not self.on_tick():
                self.accumulator = 0.0
                return 0.0
            self.ticks += 1
            interval = self.interval()

        return self.accumulator / interval


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only view handed to renderers after each frame."""
    snake: tuple[Cell, ...]
    prev_snake: tuple[Cell, ...]
    fruits: tuple[Fruit, ...]
    bombs: tuple[Cell, ...]
    direction: str
    color: str
    fraction: float
    state: str
    score: int
    high_score: int
    cols: int
    rows: int


class GameDriver:
    """Per-frame callback body: pause skips draining, game over ends the chain."""

    def __init__(self, game: SnakeGame, now: Callable[[], float] | None = None) -> None:
        self.game = game
        self.now = now or _now_ms
        self.clock = SimulationClock(game.tick_interval, game.step)
        self.fraction = 0.0

    def new_game(self, cols: int, rows: int) -> None:
        self.game.new_game(cols, rows)
        self.clock.reset(self.now())
        self.fraction = 0.0

    def toggle_pause(self) -> str:
        state = self.game.toggle_pause()
        if state == RUNNING:
            # Resuming must not replay the paused wall time.
            self.clock.reset(self.now())
        return state

    def frame(self, timestamp: float) -> RenderSnapshot | None:
        """Run one host frame. Returns None once the host should stop scheduling."""
        state = self.game.state
        if state == ENDED:
            return None
        if state == PAUSED:
            return self.snapshot(self.fraction)
        if state != RUNNING:
            return None

        self.fraction = self.clock.advance(timestamp)
        return self.snapshot(self.fraction)

    def snapshot(self, fraction: float) -> RenderSnapshot:
        game = self.game
        return RenderSnapshot(
            snake=tuple(game.snake),
            prev_snake=tuple(game.prev_snake),
            fruits=tuple(game.fruits),
            bombs=tuple(game.bombs),
            direction=game.direction,
            color=game.color,
            fraction=fraction,
            state=game.state,
            score=game.score,
            high_score=game.high_score,
            cols=game.cols or 0,
            rows=game.rows or 0,
        )
