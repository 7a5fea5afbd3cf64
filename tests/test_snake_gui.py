"""Tests for the Tkinter front end; skipped where no display is available."""

import pytest

tk = pytest.importorskip("tkinter")

import snake_gui
from game_logic import PAUSED, RUNNING
from highscore import MemoryHighScoreStore


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(snake_gui, "JsonHighScoreStore", lambda: MemoryHighScoreStore())
    try:
        root = tk.Tk()
    except tk.TclError:
        pytest.skip("no display available")
    root.withdraw()
    app = snake_gui.SnakeApp(root)
    try:
        yield app
    finally:
        app._cancel_loop()
        root.destroy()


class TestPauseButton:
    def test_toggle_updates_label(self, app):
        app.start_game()
        app.toggle_pause()
        assert app.game.state == PAUSED
        assert app.pause_btn.cget("text") == "Resume"
        app.toggle_pause()
        assert app.pause_btn.cget("text") == "Pause"

    def test_new_game_resets_label(self, app):
        app.start_game()
        app.toggle_pause()
        assert app.pause_btn.cget("text") == "Resume"

        app.start_game()
        assert app.game.state == RUNNING
        assert app.pause_btn.cget("text") == "Pause"
