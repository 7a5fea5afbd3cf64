# Core Snake simulation state and rules, independent from GUI/clock code.
from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Callable

try:
    from .highscore import HighScoreStore, MemoryHighScoreStore
except ImportError:
    from highscore import HighScoreStore, MemoryHighScoreStore


logger = logging.getLogger(__name__)

# Bounds used by the GUI/CLI when validating user input.
MIN_CELL_SIZE = 12
MAX_CELL_SIZE = 80
MIN_INTERVAL_MS = 20.0
MAX_INTERVAL_MS = 1000.0
MIN_FRUITS = 1
MAX_FRUITS = 50

# Game states.
READY = "ready"
RUNNING = "running"
PAUSED = "paused"
ENDED = "ended"

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
REVERSE_DIRECTION = {"up": "down", "down": "up", "left": "right", "right": "left"}

FRUIT_COLORS = ("#f0f", "#0f0", "#f00", "#ff8800", "#bf00ff", "#00f", "#0ff")

EFFECT_NONE = "none"
EFFECT_SPEED_RESET = "speed-reset"
EFFECT_SHRINK = "shrink"

Cell = tuple[int, int]


@dataclass(frozen=True)
class FruitKind:
    """One entry of a weighted fruit catalog."""
    shape: str
    weight: float
    points: int
    effect: str = EFFECT_NONE


@dataclass(frozen=True)
class Fruit:
    cell: Cell
    shape: str
    points: int
    color: str
    effect: str = EFFECT_NONE


CLASSIC_FRUITS = (
    FruitKind("circle", 0.5, 1),
    FruitKind("triangle", 0.3, 5),
    FruitKind("diamond", 0.15, 10),
    FruitKind("star", 0.05, 25),
)

DEFAULT_FRUITS = (
    FruitKind("circle", 0.45, 1),
    FruitKind("triangle", 0.27, 5),
    FruitKind("diamond", 0.13, 10),
    FruitKind("star", 0.05, 25),
    FruitKind("hourglass", 0.05, 3, EFFECT_SPEED_RESET),
    FruitKind("scissors", 0.05, 3, EFFECT_SHRINK),
)


@dataclass
class SnakeConfig:
    """Runtime settings shared between the simulation, clock and GUI."""
    cell_size: int = 40
    max_fruits: int = 5
    initial_bomb_capacity: int = 3
    base_interval_ms: float = 133.0
    min_interval_ms: float = 60.0
    speed_rate_ms: float = 0.5
    dynamic_bombs: bool = True
    bomb_spawn_chance: float = 0.2
    bomb_min_spawn_chance: float = 0.05
    bomb_despawn_chance: float = 0.2
    tail_collision: bool = True
    spawn_attempts: int = 100
    fruit_catalog: tuple[FruitKind, ...] = DEFAULT_FRUITS
    initial_color: str = "#0ff"

    def validate(self) -> None:
        """Raise ValueError for settings the simulation cannot run with."""
        if not (MIN_CELL_SIZE <= self.cell_size <= MAX_CELL_SIZE):
            raise ValueError(f"cell_size must be between {MIN_CELL_SIZE} and {MAX_CELL_SIZE}.")
        if not (MIN_FRUITS <= self.max_fruits <= MAX_FRUITS):
            raise ValueError(f"max_fruits must be between {MIN_FRUITS} and {MAX_FRUITS}.")
        if self.initial_bomb_capacity < 0:
            raise ValueError("initial_bomb_capacity must be >= 0.")
        if not (MIN_INTERVAL_MS <= self.min_interval_ms <= self.base_interval_ms <= MAX_INTERVAL_MS):
            raise ValueError(
                f"Intervals must satisfy {MIN_INTERVAL_MS} <= min_interval_ms <= base_interval_ms <= {MAX_INTERVAL_MS}."
            )
        if self.speed_rate_ms < 0:
            raise ValueError("speed_rate_ms must be >= 0.")
        for name in ("bomb_spawn_chance", "bomb_min_spawn_chance", "bomb_despawn_chance"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0 and 1.")
        if self.spawn_attempts < 1:
            raise ValueError("spawn_attempts must be >= 1.")
        validate_catalog(self.fruit_catalog)


def validate_catalog(catalog: tuple[FruitKind, ...]) -> None:
    if not catalog:
        raise ValueError("fruit catalog cannot be empty.")
    if any(kind.weight < 0 for kind in catalog):
        raise ValueError("fruit weights must be >= 0.")
    total = sum(kind.weight for kind in catalog)
    if abs(total - 1.0) > 1e-6:
        raise ValueError(f"fruit weights must sum to 1.0 (got {total:.6f}).")
    for kind in catalog:
        if kind.effect not in EFFECTS:
            raise ValueError(f"Unknown fruit effect: {kind.effect}")


def pick_weighted(catalog: tuple[FruitKind, ...], draw: float) -> FruitKind:
    """Walk cumulative weights and return the first kind whose sum exceeds draw."""
    total = 0.0
    for kind in catalog:
        total += kind.weight
        if draw < total:
            return kind
    # Floating-point slack at the top of the range.
    return catalog[-1]


def wrap_cell(cell: Cell, direction: str, cols: int, rows: int) -> Cell:
    """Move one cell in direction on a toroidal board."""
    dx, dy = DIRECTIONS[direction]
    return (cell[0] + dx) % cols, (cell[1] + dy) % rows


def _apply_speed_reset(game: SnakeGame) -> None:
    game.speed_baseline = game.score
    game.bomb_capacity += 1
    game.drop_tail()


def _apply_shrink(game: SnakeGame) -> None:
    game.bomb_capacity += 1
    game.drop_tail()
    game.truncate(max(1, len(game.snake) // 2))


# Effects run after the head is inserted and the fruit is scored.
EFFECTS: dict[str, Callable[[SnakeGame], None] | None] = {
    EFFECT_NONE: None,
    EFFECT_SPEED_RESET: _apply_speed_reset,
    EFFECT_SHRINK: _apply_shrink,
}


class SnakeGame:
    """Pure simulation state + rules (no Tkinter/clock code)."""
    def __init__(
        self,
        config: SnakeConfig | None = None,
        rng: random.Random | None = None,
        store: HighScoreStore | None = None,
    ) -> None:
        self.config = config or SnakeConfig()
        self.config.validate()
        self.rng = rng or random.Random()
        self.store = store or MemoryHighScoreStore()
        self.high_score = self.store.load()

        self.cols: int | None = None
        self.rows: int | None = None
        self.state = READY
        self.snake = []                                     # ordered body, head at index 0
        self.prev_snake: list[Cell] = []
        self.fruits: list[Fruit] = []
        self.bombs: list[Cell] = []
        self.direction = "right"
        self.pending_direction = "right"                    # queued from input; applied next tick
        self.score = 0
        self.speed_baseline = 0
        self.bomb_capacity = self.config.initial_bomb_capacity
        self.color = self.config.initial_color
        self.ticks = 0

    @property
    def snake(self) -> list[Cell]:
        return self._snake

    @snake.setter
    def snake(self, cells: list[Cell]) -> None:
        self._snake = list(cells)
        self.snake_set = set(self._snake)                   # O(1) body collision lookup

    def drop_tail(self) -> Cell:
        tail = self._snake.pop()
        # Moving into the vacated tail leaves that cell occupied by the head.
        if not self._snake or tail != self._snake[0]:
            self.snake_set.discard(tail)
        return tail

    def truncate(self, keep: int) -> None:
        """Keep the first `keep` segments (head end)."""
        removed = self._snake[keep:]
        del self._snake[keep:]
        for cell in removed:
            if cell != self._snake[0]:
                self.snake_set.discard(cell)

    @property
    def effective_score(self) -> int:
        return self.score - self.speed_baseline

    def reset(self, cols: int, rows: int) -> None:
        """Initialize a fresh board with a centered one-cell snake and fruits."""
        if cols < 1 or rows < 1:
            raise ValueError(f"Board must be at least 1x1 (got {cols}x{rows}).")
        self.cols = cols
        self.rows = rows
        self.state = READY
        self.snake = [(cols // 2, rows // 2)]
        self.prev_snake = []
        self.fruits = []
        self.bombs = []
        self.direction = "right"
        self.pending_direction = "right"
        self.score = 0
        self.speed_baseline = 0
        self.bomb_capacity = self.config.initial_bomb_capacity
        self.color = self.config.initial_color
        self.ticks = 0

        for _ in range(self.config.max_fruits):
            self.spawn_fruit()

    def _require_board(self) -> None:
        if self.cols is None or self.rows is None:
            raise RuntimeError("Board dimensions are not set; call reset(cols, rows) first.")

    def start(self) -> None:
        self._require_board()
        if self.state == READY:
            self.state = RUNNING

    def new_game(self, cols: int, rows: int) -> None:
        self.reset(cols, rows)
        self.start()

    def toggle_pause(self) -> str:
        """Flip RUNNING/PAUSED; other states are left alone."""
        if self.state == RUNNING:
            self.state = PAUSED
        elif self.state == PAUSED:
            self.state = RUNNING
        return self.state

    def queue_direction(self, new_direction: str) -> None:
        """Queue an input direction; reject 180-degree turns against the active direction."""
        if self.state != RUNNING:
            return
        if new_direction not in DIRECTIONS:
            return
        if REVERSE_DIRECTION[new_direction] == self.direction:
            return
        self.pending_direction = new_direction

    def tick_interval(self) -> float:
        cfg = self.config
        return max(cfg.min_interval_ms, cfg.base_interval_ms - self.effective_score * cfg.speed_rate_ms)

    def _collides(self, cell: Cell) -> bool:
        if cell in self.bombs:
            return True
        if cell not in self.snake_set:
            return False
        # The tail moves out of the way this tick.
        tail_vacates = not self.config.tail_collision and len(self._snake) > 1
        return not (tail_vacates and cell == self._snake[-1])

    def step(self) -> bool:
        """Advance one tick. Returns False once the game is no longer running."""
        self._require_board()
        if self.state != RUNNING:
            return False

        self.direction = self.pending_direction
        new_head = wrap_cell(self.snake[0], self.direction, self.cols, self.rows)

        if self._collides(new_head):
            self._end_game()
            return False

        self.prev_snake = list(self.snake)
        self.ticks += 1
        self._snake.insert(0, new_head)
        self.snake_set.add(new_head)

        eaten = self._fruit_at(new_head)
        if eaten is None:
            self.drop_tail()
            return True

        self.fruits.remove(eaten)
        self.score += eaten.points
        self.color = eaten.color
        effect = EFFECTS[eaten.effect]
        if effect is not None:
            effect(self)
        self.restock()
        return True

    def _fruit_at(self, cell: Cell) -> Fruit | None:
        for fruit in self.fruits:
            if fruit.cell == cell:
                return fruit
        return None

    def _end_game(self) -> None:
        self.state = ENDED
        logger.info("Game over at tick %d with score %d.", self.ticks, self.score)
        if self.score > self.high_score:
            self.high_score = self.score
            self.store.save(self.high_score)

    # --- Spawn / despawn engine -------------------------------------------

    def pick_fruit_kind(self) -> FruitKind:
        return pick_weighted(self.config.fruit_catalog, self.rng.random())

    def is_free(self, cell: Cell) -> bool:
        if cell in self.snake_set or cell in self.bombs:
            return False
        return all(fruit.cell != cell for fruit in self.fruits)

    def find_free_cell(self) -> Cell | None:
        """Sample random cells until one is free; give up after the attempt budget."""
        self._require_board()
        for _ in range(self.config.spawn_attempts):
            cell = (self.rng.randrange(self.cols), self.rng.randrange(self.rows))
            if self.is_free(cell):
                return cell
        logger.debug("No free cell found after %d attempts.", self.config.spawn_attempts)
        return None

    def spawn_fruit(self) -> Fruit | None:
        if len(self.fruits) >= self.config.max_fruits:
            return None
        cell = self.find_free_cell()
        if cell is None:
            return None
        kind = self.pick_fruit_kind()
        color = self.rng.choice(FRUIT_COLORS)
        fruit = Fruit(cell, kind.shape, kind.points, color, kind.effect)
        self.fruits.append(fruit)
        return fruit

    def spawn_bomb(self) -> Cell | None:
        if len(self.bombs) >= self.bomb_capacity:
            return None
        cell = self.find_free_cell()
        if cell is None:
            return None
        self.bombs.append(cell)
        return cell

    def bomb_density(self) -> float:
        if self.bomb_capacity <= 0:
            return 1.0
        return len(self.bombs) / self.bomb_capacity

    def bomb_spawn_chance(self) -> float:
        cfg = self.config
        if not cfg.dynamic_bombs:
            return cfg.bomb_spawn_chance
        d = self.bomb_density()
        chance = cfg.bomb_spawn_chance - d * (cfg.bomb_spawn_chance - cfg.bomb_min_spawn_chance)
        return min(1.0, max(0.0, chance))

    def bomb_despawn_chance(self) -> float:
        cfg = self.config
        if not cfg.dynamic_bombs:
            return cfg.bomb_despawn_chance
        return min(1.0, max(0.0, self.bomb_density() * cfg.bomb_despawn_chance))

    def restock(self) -> None:
        """Replace the eaten fruit, then roll bomb spawn and despawn independently."""
        self.spawn_fruit()
        # Both chances are sampled before either roll mutates the bombs.
        spawn_chance = self.bomb_spawn_chance()
        despawn_chance = self.bomb_despawn_chance()
        if self.rng.random() < spawn_chance:
            self.spawn_bomb()
        if self.rng.random() < despawn_chance and self.bombs:
            self.bombs.pop(self.rng.randrange(len(self.bombs)))
