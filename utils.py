# Shared helpers: board sizing, input mapping, interpolation, autopilot, and stats.
from __future__ import annotations

from collections import Counter
import math
import random

import numpy as np

try:
    from .game_logic import (
        REVERSE_DIRECTION,
        RUNNING,
        Cell,
        FruitKind,
        SnakeConfig,
        SnakeGame,
        pick_weighted,
        wrap_cell,
    )
    from .highscore import HighScoreStore
except ImportError:
    from game_logic import (
        REVERSE_DIRECTION,
        RUNNING,
        Cell,
        FruitKind,
        SnakeConfig,
        SnakeGame,
        pick_weighted,
        wrap_cell,
    )
    from highscore import HighScoreStore


ACTIONS = ("up", "down", "left", "right")

# Layout constants of the browser board the grid sizing mirrors.
PADDING = 10
BORDER = 2


def grid_dimensions(width: int, height: int, cell_size: int, header_height: int = 0) -> tuple[int, int]:
    """Number of whole cells that fit in the viewport (never below 1x1)."""
    if cell_size <= 0:
        raise ValueError("cell_size must be > 0")
    inset = 2 * PADDING + 2 * BORDER
    cols = (width - inset) // cell_size
    rows = (height - header_height - inset) // cell_size
    return max(1, cols), max(1, rows)


def swipe_direction(dx: float, dy: float) -> str | None:
    """Map a drag delta to a direction along its dominant axis."""
    if dx == 0 and dy == 0:
        return None
    if abs(dx) > abs(dy):
        return "right" if dx > 0 else "left"
    return "down" if dy > 0 else "up"


def _wrapped_delta(current: int, previous: int, size: int) -> int:
    delta = current - previous
    if delta > size / 2:
        delta -= size
    if delta < -size / 2:
        delta += size
    return delta


def interpolate_segments(
    snake: tuple[Cell, ...] | list[Cell],
    prev_snake: tuple[Cell, ...] | list[Cell],
    fraction: float,
    cols: int,
    rows: int,
) -> list[tuple[float, float]]:
    """
    Blend each segment from its previous cell toward its current cell.
    Segments that wrapped across an edge travel the short way, so the result
    can sit slightly outside [0, cols) x [0, rows) mid-animation.
    """
    points: list[tuple[float, float]] = []
    for idx, (x, y) in enumerate(snake):
        if idx < len(prev_snake):
            px, py = prev_snake[idx]
        else:
            px, py = x, y
        dx = _wrapped_delta(x, px, cols)
        dy = _wrapped_delta(y, py, rows)
        points.append((px + dx * fraction, py + dy * fraction))
    return points


def wrapped_distance(a: Cell, b: Cell, cols: int, rows: int) -> int:
    """Manhattan distance on a torus."""
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return min(dx, cols - dx) + min(dy, rows - dy)


def nearest_fruit_position(game: SnakeGame) -> Cell:
    head = game.snake[0]
    if not game.fruits:
        return head
    return min(
        (fruit.cell for fruit in game.fruits),
        key=lambda cell: wrapped_distance(head, cell, game.cols, game.rows),
    )


def _is_deadly(game: SnakeGame, cell: Cell) -> bool:
    return cell in game.bombs or cell in game.snake_set


def autopilot_direction(game: SnakeGame) -> str:
    """
    Greedy policy used for headless runs:
    prefer safe moves that shrink the wrapped distance to the nearest fruit.
    Falls back to the current direction when every move is deadly.
    """
    head = game.snake[0]
    target = nearest_fruit_position(game)
    best = game.direction
    best_dist = math.inf
    for action in ACTIONS:
        if action == REVERSE_DIRECTION[game.direction]:
            continue
        cell = wrap_cell(head, action, game.cols, game.rows)
        if _is_deadly(game, cell):
            continue
        dist = wrapped_distance(cell, target, game.cols, game.rows)
        if dist < best_dist:
            best_dist = dist
            best = action
    return best


def run_headless_game(
    cfg: SnakeConfig,
    cols: int,
    rows: int,
    seed: int | None = None,
    max_ticks: int = 5000,
    store: HighScoreStore | None = None,
) -> tuple[int, int, int]:
    """Play one autopilot game without a clock. Returns (score, length, ticks)."""
    game = SnakeGame(cfg, rng=random.Random(seed), store=store)
    game.new_game(cols, rows)
    for _ in range(max_ticks):
        if game.state != RUNNING:
            break
        game.queue_direction(autopilot_direction(game))
        game.step()
    return game.score, len(game.snake), game.ticks


def fruit_kind_frequencies(
    catalog: tuple[FruitKind, ...],
    draws: int,
    seed: int | None = None,
) -> np.ndarray:
    """Empirical share of each catalog entry over `draws` weighted picks."""
    if draws <= 0:
        raise ValueError("draws must be > 0")
    rng = random.Random(seed)
    index = {kind: idx for idx, kind in enumerate(catalog)}
    counts = Counter(index[pick_weighted(catalog, rng.random())] for _ in range(draws))
    arr = np.array([counts.get(idx, 0) for idx in range(len(catalog))], dtype=np.float64)
    return arr / float(draws)


def chunked_mean(values: list[float], chunk_size: int) -> tuple[np.ndarray, np.ndarray]:
    """Compute mean value per fixed-size chunk."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    arr = np.asarray(values, dtype=np.float32)
    if arr.size == 0:
        empty = np.array([], dtype=np.float32)
        return empty, empty

    x_end: list[float] = []
    means: list[float] = []
    for start in range(0, arr.size, chunk_size):
        chunk = arr[start : start + chunk_size]
        x_end.append(float(start + chunk.size))
        means.append(float(np.mean(chunk)))

    return np.asarray(x_end, dtype=np.float32), np.asarray(means, dtype=np.float32)


def score_summary(scores: list[float]) -> dict[str, float]:
    """Mean/median/max/min/std and quartiles of a batch of game scores."""
    arr = np.asarray(scores, dtype=np.float32)
    if arr.size == 0:
        raise ValueError("scores cannot be empty")
    return {
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "max": float(arr.max()),
        "min": float(arr.min()),
        "std": float(arr.std()),
        "p25": float(np.percentile(arr, 25)),
        "p75": float(np.percentile(arr, 75)),
    }
