"""Tests for the headless batch CLI."""

import pytest

from game_logic import CLASSIC_FRUITS, SnakeConfig
from simulate_offline import check_weights, main, parse_args, simulate_offline


def test_parse_args_maps_flags():
    args = parse_args(["--games", "3", "--fixed-bombs", "--allow-tail-move", "--catalog", "classic"])
    assert args.games == 3
    assert args.fixed_bombs
    assert args.allow_tail_move
    assert args.catalog == "classic"


def test_simulate_offline_prints_summary(capsys):
    scores = simulate_offline(SnakeConfig(), games=4, cols=12, rows=10, seed=5, max_ticks=200)
    out = capsys.readouterr().out
    assert len(scores) == 4
    assert "RESULTS (4 games on 12x10" in out
    assert "median" in out


def test_simulate_offline_rejects_zero_games():
    with pytest.raises(ValueError):
        simulate_offline(SnakeConfig(), games=0, cols=10, rows=10)


def test_check_weights_close_to_catalog(capsys):
    errors = check_weights(SnakeConfig(fruit_catalog=CLASSIC_FRUITS), draws=50_000, seed=2)
    assert errors.max() < 0.02
    assert "star" in capsys.readouterr().out


def test_main_runs(capsys):
    main(["--games", "2", "--cols", "10", "--rows", "8", "--seed", "1", "--max-ticks", "100", "--check-weights", "1000"])
    out = capsys.readouterr().out
    assert "Observed" in out
    assert "RESULTS" in out
