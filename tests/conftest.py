import random

import pytest

from game_logic import SnakeConfig, SnakeGame


@pytest.fixture
def make_game():
    """Running game on an empty board with random bomb spawn/despawn turned off."""

    def _make(cols=10, rows=10, seed=0, store=None, **overrides):
        overrides.setdefault("bomb_spawn_chance", 0.0)
        overrides.setdefault("bomb_min_spawn_chance", 0.0)
        overrides.setdefault("bomb_despawn_chance", 0.0)
        cfg = SnakeConfig(**overrides)
        game = SnakeGame(cfg, rng=random.Random(seed), store=store)
        game.new_game(cols, rows)
        game.fruits.clear()
        game.bombs.clear()
        return game

    return _make
