"""Tests for the fixed-timestep clock and the per-frame driver."""

import pytest

from clock import GameDriver, SimulationClock
from game_logic import ENDED, PAUSED, RUNNING


class FakeTime:
    def __init__(self, value=0.0):
        self.value = value

    def __call__(self):
        return self.value


def counting_clock(interval=100.0, stop_after=None):
    ticks = []

    def on_tick():
        ticks.append(len(ticks))
        return stop_after is None or len(ticks) < stop_after

    clock = SimulationClock(lambda: interval, on_tick)
    clock.reset(0.0)
    return clock, ticks


class TestSimulationClock:
    def test_fast_frame_fires_no_tick(self):
        clock, ticks = counting_clock()
        frac = clock.advance(40.0)
        assert ticks == []
        assert frac == pytest.approx(0.4)

    def test_dropped_frames_fire_multiple_ticks(self):
        clock, ticks = counting_clock()
        frac = clock.advance(350.0)
        assert len(ticks) == 3
        assert frac == pytest.approx(0.5)

    def test_fraction_stays_below_one(self):
        clock, _ = counting_clock()
        for ts in (16.0, 33.0, 99.9, 100.0, 250.0, 399.0, 1000.0):
            frac = clock.advance(ts)
            assert 0.0 <= frac < 1.0

    def test_tick_count_tracks_elapsed_time(self):
        clock, ticks = counting_clock(interval=50.0)
        for frame in range(1, 61):
            clock.advance(frame * 16.0)
        # 960 ms of wall time at 50 ms per tick.
        assert len(ticks) == 19
        assert clock.ticks == 19

    def test_reset_discards_stale_time(self):
        clock, ticks = counting_clock()
        clock.advance(50.0)
        clock.reset(10_000.0)
        frac = clock.advance(10_000.0)
        assert ticks == []
        assert frac == 0.0

    def test_stops_draining_when_tick_signals_end(self):
        clock, ticks = counting_clock(stop_after=2)
        frac = clock.advance(1000.0)
        assert len(ticks) == 2
        assert frac == 0.0
        assert clock.accumulator == 0.0
        # Only ticks that completed are counted.
        assert clock.ticks == 1

    def test_interval_recomputed_between_ticks(self):
        intervals = [100.0, 50.0, 50.0, 50.0]
        fired = []

        def on_tick():
            fired.append(1)
            return True

        clock = SimulationClock(lambda: intervals[min(len(fired), 3)], on_tick)
        clock.reset(0.0)
        clock.advance(200.0)
        # 100 for the first tick, then 50 each.
        assert len(fired) == 3

    def test_backwards_timestamp_is_ignored(self):
        clock, ticks = counting_clock()
        clock.advance(80.0)
        clock.advance(20.0)
        assert clock.accumulator == pytest.approx(80.0)
        assert ticks == []


class TestGameDriver:
    def _driver(self, make_game, **overrides):
        now = FakeTime(0.0)
        game = make_game(**overrides)
        driver = GameDriver(game, now=now)
        driver.new_game(10, 10)
        game.fruits.clear()
        game.bombs.clear()
        return driver, now

    def test_frame_ticks_at_interval(self, make_game):
        driver, _ = self._driver(make_game, speed_rate_ms=0.0)
        snap = driver.frame(133.0)
        assert snap.snake == ((6, 5),)
        assert snap.prev_snake == ((5, 5),)
        assert snap.state == RUNNING
        assert snap.fraction == 0.0

    def test_pause_gap_does_not_fire_ticks(self, make_game):
        driver, now = self._driver(make_game)
        driver.frame(100.0)
        assert driver.toggle_pause() == PAUSED

        snap = driver.frame(60_000.0)
        assert snap is not None
        assert snap.state == PAUSED
        assert driver.game.ticks == 0

        now.value = 60_000.0
        assert driver.toggle_pause() == RUNNING
        snap = driver.frame(60_000.0)
        assert driver.game.ticks == 0
        assert snap.snake == ((5, 5),)

        driver.frame(60_133.0)
        assert driver.game.ticks == 1

    def test_chain_stops_after_game_over(self, make_game):
        driver, _ = self._driver(make_game)
        driver.game.bombs.append((6, 5))
        snap = driver.frame(500.0)
        assert snap.state == ENDED
        assert driver.clock.ticks == driver.game.ticks == 0
        assert driver.frame(600.0) is None

    def test_no_frames_before_start(self, make_game):
        game = make_game()
        game.reset(10, 10)
        driver = GameDriver(game, now=FakeTime())
        assert driver.frame(1000.0) is None

    def test_snapshot_reports_render_state(self, make_game):
        driver, _ = self._driver(make_game)
        driver.game.bombs.append((0, 0))
        snap = driver.frame(50.0)
        assert snap.bombs == ((0, 0),)
        assert snap.direction == "right"
        assert snap.color == "#0ff"
        assert (snap.cols, snap.rows) == (10, 10)
        assert 0.0 <= snap.fraction < 1.0
