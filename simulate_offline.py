# Headless batch entrypoint: autopilot games, summary table, optional matplotlib graph.
from __future__ import annotations

import argparse
import os
import time

# Keep matplotlib cache local for environments without writable home config.
LOCAL_MPLCONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".mplconfig")
os.makedirs(LOCAL_MPLCONFIG, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", LOCAL_MPLCONFIG)

import matplotlib.pyplot as plt
import numpy as np

try:
    from .game_logic import CLASSIC_FRUITS, DEFAULT_FRUITS, SnakeConfig
    from .highscore import MemoryHighScoreStore
    from .utils import chunked_mean, fruit_kind_frequencies, run_headless_game, score_summary
except ImportError:
    from game_logic import CLASSIC_FRUITS, DEFAULT_FRUITS, SnakeConfig
    from highscore import MemoryHighScoreStore
    from utils import chunked_mean, fruit_kind_frequencies, run_headless_game, score_summary


CATALOGS = {"default": DEFAULT_FRUITS, "classic": CLASSIC_FRUITS}


def _update_plots(ax_trend: plt.Axes, ax_hist: plt.Axes, scores: list[float]) -> None: #type: ignore
    ax_trend.clear()
    ax_trend.set_title("Score Trend (Average per 10 Games)")
    ax_trend.set_xlabel("Game")
    ax_trend.set_ylabel("Score")
    ax_trend.grid(alpha=0.25)

    x10, mean10 = chunked_mean(scores, chunk_size=10)
    if x10.size > 0:
        ax_trend.plot(
            x10,
            mean10,
            color="#1f77b4",
            linewidth=2.2,
            marker="o",
            markersize=3,
            label="Average score (per 10 games)",
        )
        ax_trend.legend(loc="upper left")

    ax_hist.clear()
    ax_hist.set_title("Score Distribution")
    ax_hist.set_xlabel("Score")
    ax_hist.set_ylabel("Count")
    ax_hist.grid(alpha=0.2)

    if scores:
        ax_hist.hist(scores, bins=30, color="#44b5a4", alpha=0.85, edgecolor="#17323a") #type: ignore
        mean_all = float(np.mean(scores))
        median_all = float(np.median(scores))
        ax_hist.axvline(mean_all, color="#1f77b4", linestyle="--", linewidth=1.6, label=f"Mean: {mean_all:.2f}")
        ax_hist.axvline(median_all, color="#ff7f0e", linestyle="-", linewidth=1.6, label=f"Median: {median_all:.2f}")
        ax_hist.legend(loc="upper right")


def _print_progress_bar(game: int, total: int, bar_length: int = 50) -> None:
    """Print a compact progress bar in the terminal."""
    total_safe = max(1, int(total))
    percent = min(1.0, max(0.0, game / total_safe))
    filled = int(bar_length * percent)
    bar = "#" * filled + "-" * (bar_length - filled)
    print(f"\rProgress: |{bar}| {game}/{total_safe} ({percent * 100:.1f}%)", end="", flush=True)


def check_weights(cfg: SnakeConfig, draws: int, seed: int | None = None) -> np.ndarray:
    """Print empirical vs configured fruit shares and return the max absolute error."""
    observed = fruit_kind_frequencies(cfg.fruit_catalog, draws, seed=seed)
    expected = np.array([kind.weight for kind in cfg.fruit_catalog], dtype=np.float64)
    errors = np.abs(observed - expected)

    print(f"{'Fruit':<12} {'Weight':>10} {'Observed':>10} {'AbsErr':>10}")
    print("-" * 45)
    for kind, obs, err in zip(cfg.fruit_catalog, observed, errors):
        print(f"{kind.shape:<12} {kind.weight:>10.4f} {obs:>10.4f} {err:>10.4f}")
    return errors


def simulate_offline(
    cfg: SnakeConfig,
    games: int,
    cols: int,
    rows: int,
    seed: int | None = None,
    max_ticks: int = 5000,
    show_plot: bool = False,
) -> list[float]:
    """Run `games` autopilot games and print a summary table."""
    if games <= 0:
        raise ValueError("games must be > 0")

    store = MemoryHighScoreStore()
    scores: list[float] = []
    lengths: list[float] = []
    ticks: list[float] = []
    start_t = time.perf_counter()

    for game_idx in range(1, games + 1):
        _print_progress_bar(game_idx, games)
        game_seed = None if seed is None else seed + game_idx
        score, length, tick_count = run_headless_game(
            cfg, cols, rows, seed=game_seed, max_ticks=max_ticks, store=store
        )
        scores.append(float(score))
        lengths.append(float(length))
        ticks.append(float(tick_count))
    print()

    elapsed = time.perf_counter() - start_t
    summary = score_summary(scores)
    print("=" * 40)
    print(f"RESULTS ({games} games on {cols}x{rows}, {elapsed:.1f}s)")
    print("=" * 40)
    for name in ("mean", "median", "max", "min", "std", "p25", "p75"):
        print(f"{name:<20} {summary[name]:>15.2f}")
    print(f"{'mean length':<20} {float(np.mean(lengths)):>15.2f}")
    print(f"{'mean ticks':<20} {float(np.mean(ticks)):>15.2f}")
    print(f"{'high score':<20} {store.load():>15d}")
    print("=" * 40)

    if show_plot:
        fig, (ax_trend, ax_hist) = plt.subplots(2, 1, figsize=(10, 8))
        fig.subplots_adjust(hspace=0.35)
        _update_plots(ax_trend, ax_hist, scores)
        plt.show()

    return scores


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = SnakeConfig()
    parser = argparse.ArgumentParser(description="Headless Snake simulation runs")
    parser.add_argument("--games", type=int, default=100, help="Number of autopilot games")
    parser.add_argument("--cols", type=int, default=20)
    parser.add_argument("--rows", type=int, default=15)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-ticks", type=int, default=5000)
    parser.add_argument("--catalog", choices=sorted(CATALOGS), default="default")
    parser.add_argument("--max-fruits", type=int, default=defaults.max_fruits)
    parser.add_argument("--fixed-bombs", action="store_true", help="Use constant bomb spawn/despawn chances")
    parser.add_argument(
        "--allow-tail-move",
        action="store_true",
        help="Let the head move into the cell the tail vacates this tick",
    )
    parser.add_argument("--check-weights", type=int, default=0, metavar="N", help="Also sample N fruit picks")
    parser.add_argument("--plot", action="store_true", help="Show score trend/histogram")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    cfg = SnakeConfig(
        max_fruits=args.max_fruits,
        dynamic_bombs=not args.fixed_bombs,
        tail_collision=not args.allow_tail_move,
        fruit_catalog=CATALOGS[args.catalog],
    )
    cfg.validate()

    if args.check_weights > 0:
        check_weights(cfg, args.check_weights, seed=args.seed)
        print()

    simulate_offline(
        cfg,
        games=args.games,
        cols=args.cols,
        rows=args.rows,
        seed=args.seed,
        max_ticks=args.max_ticks,
        show_plot=args.plot,
    )


if __name__ == "__main__":
    main()
