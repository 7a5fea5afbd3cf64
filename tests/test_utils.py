"""Tests for shared helpers and headless runs."""

import numpy as np
import pytest

from game_logic import CLASSIC_FRUITS, DEFAULT_FRUITS, Fruit, SnakeConfig
from utils import (
    autopilot_direction,
    chunked_mean,
    fruit_kind_frequencies,
    grid_dimensions,
    interpolate_segments,
    run_headless_game,
    score_summary,
    swipe_direction,
    wrapped_distance,
)


class TestGridDimensions:
    def test_fits_whole_cells(self):
        assert grid_dimensions(824, 624, 40) == (20, 15)

    def test_header_reduces_rows(self):
        assert grid_dimensions(824, 664, 40, header_height=40) == (20, 15)

    def test_tiny_viewport_clamps_to_one(self):
        assert grid_dimensions(10, 10, 40) == (1, 1)

    def test_bad_cell_size(self):
        with pytest.raises(ValueError):
            grid_dimensions(800, 600, 0)


class TestSwipe:
    @pytest.mark.parametrize(
        "dx, dy, expected",
        [(30, 5, "right"), (-30, 5, "left"), (3, 40, "down"), (3, -40, "up"), (0, 0, None)],
    )
    def test_dominant_axis(self, dx, dy, expected):
        assert swipe_direction(dx, dy) == expected


class TestInterpolation:
    def test_midway(self):
        points = interpolate_segments([(3, 2)], [(2, 2)], 0.5, 10, 10)
        assert points == [(2.5, 2.0)]

    def test_wrap_takes_short_way(self):
        points = interpolate_segments([(0, 5)], [(9, 5)], 0.5, 10, 10)
        assert points == [(9.5, 5.0)]

    def test_vertical_wrap(self):
        points = interpolate_segments([(4, 7)], [(4, 0)], 0.25, 10, 8)
        assert points == [(4.0, -0.25)]

    def test_new_segment_drawn_in_place(self):
        points = interpolate_segments([(3, 2), (2, 2)], [(2, 2)], 0.5, 10, 10)
        assert points[1] == (2.0, 2.0)


class TestAutopilot:
    def test_heads_for_fruit(self, make_game):
        game = make_game()
        game.fruits.append(Fruit((5, 2), "circle", 1, "#f00"))
        assert autopilot_direction(game) == "up"

    def test_avoids_bomb(self, make_game):
        game = make_game()
        game.fruits.append(Fruit((8, 5), "circle", 1, "#f00"))
        game.bombs.append((6, 5))
        assert autopilot_direction(game) in ("up", "down")

    def test_wrapped_distance(self):
        assert wrapped_distance((0, 0), (9, 0), 10, 10) == 1
        assert wrapped_distance((2, 3), (5, 1), 10, 10) == 5


class TestStats:
    def test_weighted_selection_converges(self):
        observed = fruit_kind_frequencies(CLASSIC_FRUITS, 100_000, seed=7)
        expected = np.array([kind.weight for kind in CLASSIC_FRUITS])
        assert np.allclose(observed, expected, atol=0.01)
        assert observed.sum() == pytest.approx(1.0)

    def test_default_catalog_converges(self):
        observed = fruit_kind_frequencies(DEFAULT_FRUITS, 100_000, seed=11)
        expected = np.array([kind.weight for kind in DEFAULT_FRUITS])
        assert np.allclose(observed, expected, atol=0.01)

    def test_chunked_mean(self):
        x, means = chunked_mean([1, 2, 3, 4, 5], chunk_size=2)
        assert x.tolist() == [2.0, 4.0, 5.0]
        assert means.tolist() == [1.5, 3.5, 5.0]

    def test_score_summary(self):
        summary = score_summary([1.0, 2.0, 3.0])
        assert summary["mean"] == pytest.approx(2.0)
        assert summary["max"] == 3.0
        assert summary["min"] == 1.0

    def test_score_summary_empty(self):
        with pytest.raises(ValueError):
            score_summary([])


class TestHeadless:
    def test_same_seed_same_game(self):
        cfg = SnakeConfig()
        first = run_headless_game(cfg, 12, 10, seed=3, max_ticks=500)
        second = run_headless_game(cfg, 12, 10, seed=3, max_ticks=500)
        assert first == second

    def test_autopilot_scores(self):
        score, length, ticks = run_headless_game(SnakeConfig(), 15, 15, seed=1, max_ticks=300)
        assert ticks > 0
        assert score > 0
        assert length >= 1
