# Snake player GUI: Tkinter render consumer + input producer for GameDriver.
from __future__ import annotations

import logging
import math
import time
import tkinter as tk
from tkinter import messagebox

# Support both package imports and running this file directly.
try:
    from .clock import GameDriver, RenderSnapshot
    from .game_logic import (
        ENDED,
        MAX_CELL_SIZE,
        MIN_CELL_SIZE,
        PAUSED,
        READY,
        RUNNING,
        SnakeConfig,
        SnakeGame,
    )
    from .highscore import JsonHighScoreStore
    from .utils import grid_dimensions, interpolate_segments, swipe_direction
except ImportError:
    from clock import GameDriver, RenderSnapshot
    from game_logic import (
        ENDED,
        MAX_CELL_SIZE,
        MIN_CELL_SIZE,
        PAUSED,
        READY,
        RUNNING,
        SnakeConfig,
        SnakeGame,
    )
    from highscore import JsonHighScoreStore
    from utils import grid_dimensions, interpolate_segments, swipe_direction


STATE_LABELS = {READY: "Ready", RUNNING: "Running", PAUSED: "Paused", ENDED: "Game Over"}


class SnakeApp:
    """Tkinter presentation layer for SnakeGame."""
    FRAME_MS = 16
    BG = "#000000"
    BOARD_BG = "#05070a"
    SIDEBAR_BG = "#0f1720"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#0ff"
    BORDER_COLOR = "#0ff"
    SIDEBAR_WIDTH = 260

    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("Neon Snake")
        self.root.configure(bg=self.BG)
        self.root.geometry("1100x760")

        self.config = SnakeConfig()
        self.game = SnakeGame(self.config, store=JsonHighScoreStore())
        self.driver = GameDriver(self.game)
        self.after_id: str | None = None  # Tkinter timer id for the frame loop
        self.drag_start: tuple[int, int] | None = None

        self._build_layout()
        self._bind_keys()
        self._refresh_labels()

    def _build_layout(self) -> None:
        """Create game canvas + right sidebar panel."""
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        container = tk.Frame(self.root, bg=self.BG)
        container.grid(row=0, column=0, sticky="nsew")
        container.columnconfigure(0, weight=1)
        container.rowconfigure(0, weight=1)

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.grid(row=0, column=0, sticky="nsew")

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG, width=self.SIDEBAR_WIDTH)
        self.sidebar.grid(row=0, column=1, sticky="ns")
        self.sidebar.grid_propagate(False)

        tk.Label(
            self.sidebar,
            text="Snake",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 18, "bold"),
        ).pack(anchor="w", padx=16, pady=(16, 10))

        self.score_var = tk.StringVar()
        self.high_var = tk.StringVar()
        self.state_var = tk.StringVar()
        for var in (self.score_var, self.high_var, self.state_var):
            tk.Label(
                self.sidebar,
                textvariable=var,
                fg=self.TEXT_PRIMARY,
                bg=self.SIDEBAR_BG,
                font=("Helvetica", 12),
                anchor="w",
            ).pack(fill="x", padx=16, pady=4)

        row = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        row.pack(fill="x", padx=16, pady=(14, 4))
        tk.Label(row, text="Cell Size", fg=self.TEXT_PRIMARY, bg=self.SIDEBAR_BG).pack(side="left")
        self.cell_size_var = tk.StringVar(value=str(self.config.cell_size))
        tk.Spinbox(
            row,
            from_=MIN_CELL_SIZE,
            to=MAX_CELL_SIZE,
            textvariable=self.cell_size_var,
            width=6,
            justify="center",
        ).pack(side="right")

        self.start_btn = self._button("New Game", self.start_game)
        self.start_btn.pack(fill="x", padx=16, pady=(14, 4))
        self.pause_btn = self._button("Pause", self.toggle_pause)
        self.pause_btn.pack(fill="x", padx=16, pady=4)

        tk.Label(
            self.sidebar,
            text="Move: Arrow keys / WASD / drag\nPause: P or Space",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            justify="left",
            font=("Helvetica", 10),
        ).pack(anchor="w", padx=16, pady=(10, 10))

    def _button(self, text: str, command) -> tk.Button:
        return tk.Button(
            self.sidebar,
            text=text,
            command=command,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            bd=0,
            relief="flat",
            font=("Helvetica", 11, "bold"),
            pady=8,
            cursor="hand2",
        )

    def _bind_keys(self) -> None:
        """Bind movement controls, swipe-by-drag and pause."""
        for key, direction in (
            ("<Up>", "up"), ("<Down>", "down"), ("<Left>", "left"), ("<Right>", "right"),
            ("w", "up"), ("s", "down"), ("a", "left"), ("d", "right"),
        ):
            self.root.bind(key, lambda _e, d=direction: self.game.queue_direction(d))
        self.root.bind("<space>", lambda _e: self.toggle_pause())
        self.root.bind("p", lambda _e: self.toggle_pause())
        self.root.bind("P", lambda _e: self.toggle_pause())
        self.canvas.bind("<ButtonPress-1>", self._on_drag_start)
        self.canvas.bind("<ButtonRelease-1>", self._on_drag_end)

    def _on_drag_start(self, event: tk.Event) -> None:
        self.drag_start = (event.x, event.y)

    def _on_drag_end(self, event: tk.Event) -> None:
        if self.drag_start is None:
            return
        direction = swipe_direction(event.x - self.drag_start[0], event.y - self.drag_start[1])
        self.drag_start = None
        if direction is not None:
            self.game.queue_direction(direction)

    def _parse_cell_size(self) -> int:
        try:
            value = int(self.cell_size_var.get())
        except ValueError:
            raise ValueError("Cell size must be an integer.")
        if not (MIN_CELL_SIZE <= value <= MAX_CELL_SIZE):
            raise ValueError(f"Cell size must be between {MIN_CELL_SIZE} and {MAX_CELL_SIZE}.")
        return value

    def _cancel_loop(self) -> None:
        """Cancel scheduled frame callback if one exists."""
        if self.after_id is not None:
            self.root.after_cancel(self.after_id)
            self.after_id = None

    def start_game(self) -> None:
        """Size the board from the canvas, then start a fresh game."""
        try:
            self.config.cell_size = self._parse_cell_size()
        except ValueError as exc:
            messagebox.showerror("Invalid Setting", str(exc))
            return

        self._cancel_loop()
        self.root.update_idletasks()
        cols, rows = grid_dimensions(
            self.canvas.winfo_width(), self.canvas.winfo_height(), self.config.cell_size
        )
        self.driver.new_game(cols, rows)
        self.pause_btn.configure(text="Pause")
        self._schedule()

    def toggle_pause(self) -> None:
        state = self.driver.toggle_pause()
        self.pause_btn.configure(text="Resume" if state == PAUSED else "Pause")
        self._refresh_labels()

    def _schedule(self) -> None:
        self.after_id = self.root.after(self.FRAME_MS, self.frame)

    def frame(self) -> None:
        """One host frame; reschedules itself until the game ends."""
        self.after_id = None
        snapshot = self.driver.frame(time.perf_counter() * 1000.0)
        if snapshot is None:
            return
        self.draw(snapshot)
        self._refresh_labels()
        if snapshot.state != ENDED:
            self._schedule()

    def _refresh_labels(self) -> None:
        self.score_var.set(f"Score: {self.game.score}")
        self.high_var.set(f"High Score: {self.game.high_score}")
        self.state_var.set(f"State: {STATE_LABELS[self.game.state]}")

    def _origin(self, snapshot: RenderSnapshot) -> tuple[int, int]:
        cell = self.config.cell_size
        width = self.canvas.winfo_width()
        height = self.canvas.winfo_height()
        return (width - snapshot.cols * cell) // 2, (height - snapshot.rows * cell) // 2

    def draw(self, snapshot: RenderSnapshot) -> None:
        """Render fruits, bombs, the interpolated snake and any overlay."""
        self.canvas.delete("all")
        cell = self.config.cell_size
        ox, oy = self._origin(snapshot)
        side_w = snapshot.cols * cell
        side_h = snapshot.rows * cell

        self.canvas.create_rectangle(ox - 2, oy - 2, ox + side_w + 2, oy + side_h + 2, outline=self.BORDER_COLOR, width=2)

        for fruit in snapshot.fruits:
            cx = ox + fruit.cell[0] * cell + cell / 2
            cy = oy + fruit.cell[1] * cell + cell / 2
            self._draw_fruit(fruit.shape, cx, cy, cell / 2, fruit.color)

        for bx, by in snapshot.bombs:
            cx = ox + bx * cell + cell / 2
            cy = oy + by * cell + cell / 2
            r = cell * 0.4
            self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r, fill="#fff", outline="")
            self.canvas.create_line(cx - r, cy - r, cx + r, cy + r, fill="#000", width=3)
            self.canvas.create_line(cx + r, cy - r, cx - r, cy + r, fill="#000", width=3)

        points = interpolate_segments(
            snapshot.snake, snapshot.prev_snake, snapshot.fraction, snapshot.cols, snapshot.rows
        )
        # Draw tail first so the head stays on top.
        for idx in range(len(points) - 1, -1, -1):
            x = ox + points[idx][0] * cell
            y = oy + points[idx][1] * cell
            if idx == 0:
                self._draw_head(x, y, cell, snapshot.direction, snapshot.color)
            else:
                self.canvas.create_rectangle(x, y, x + cell, y + cell, fill=snapshot.color, outline="")

        if snapshot.state in (PAUSED, ENDED):
            text = "Paused" if snapshot.state == PAUSED else f"Game Over - Score {snapshot.score}"
            self.canvas.create_rectangle(ox, oy, ox + side_w, oy + side_h, fill="#000000", stipple="gray50", outline="")
            self.canvas.create_text(
                ox + side_w // 2,
                oy + side_h // 2,
                text=text,
                fill=self.TEXT_PRIMARY,
                font=("Helvetica", 22, "bold"),
            )

    def _draw_fruit(self, shape: str, cx: float, cy: float, r: float, color: str) -> None:
        if shape == "circle":
            self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r, fill=color, outline="")
        elif shape == "triangle":
            self.canvas.create_polygon(cx, cy - r, cx - r, cy + r, cx + r, cy + r, fill=color, outline="")
        elif shape == "diamond":
            self.canvas.create_polygon(cx, cy - r, cx + r, cy, cx, cy + r, cx - r, cy, fill=color, outline="")
        elif shape == "hourglass":
            self.canvas.create_polygon(
                cx - r, cy - r, cx + r, cy - r, cx - r, cy + r, cx + r, cy + r, fill=color, outline=""
            )
        elif shape == "scissors":
            self.canvas.create_line(cx - r, cy - r, cx + r, cy + r, fill=color, width=4)
            self.canvas.create_line(cx + r, cy - r, cx - r, cy + r, fill=color, width=4)
            self.canvas.create_oval(cx - r, cy + r / 2, cx - r / 2, cy + r, outline=color, width=2)
            self.canvas.create_oval(cx + r / 2, cy + r / 2, cx + r, cy + r, outline=color, width=2)
        else:
            # Five-point star.
            coords: list[float] = []
            rot = math.pi / 2 * 3
            for _ in range(5):
                coords += [cx + math.cos(rot) * r, cy + math.sin(rot) * r]
                rot += math.pi / 5
                coords += [cx + math.cos(rot) * r / 2, cy + math.sin(rot) * r / 2]
                rot += math.pi / 5
            self.canvas.create_polygon(*coords, fill=color, outline="")

    def _draw_head(self, x: float, y: float, cell: int, direction: str, color: str) -> None:
        """Square back, rounded front corners, two eyes facing the travel direction."""
        r = cell * 0.2
        if direction in ("left", "right"):
            back = (x + r, y, x + cell, y + cell) if direction == "left" else (x, y, x + cell - r, y + cell)
            front = (x, y + r, x + cell, y + cell - r)
        else:
            back = (x, y + r, x + cell, y + cell) if direction == "up" else (x, y, x + cell, y + cell - r)
            front = (x + r, y, x + cell - r, y + cell)
        self.canvas.create_rectangle(*back, fill=color, outline="")
        self.canvas.create_rectangle(*front, fill=color, outline="")
        for ex, ey in self._corner_centers(x, y, cell, r, direction):
            self.canvas.create_oval(ex - r, ey - r, ex + r, ey + r, fill=color, outline="")

        cx, cy = x + cell / 2, y + cell / 2
        off, er = cell * 0.2, cell * 0.1
        if direction in ("up", "down"):
            eyes = ((cx - off, cy - off / 2), (cx + off, cy - off / 2))
        else:
            eyes = ((cx - off / 2, cy - off), (cx - off / 2, cy + off))
        for ex, ey in eyes:
            self.canvas.create_oval(ex - er, ey - er, ex + er, ey + er, fill="#fff", outline="")
            self.canvas.create_oval(ex - er / 2, ey - er / 2, ex + er / 2, ey + er / 2, fill="#000", outline="")

    @staticmethod
    def _corner_centers(x: float, y: float, cell: int, r: float, direction: str) -> list[tuple[float, float]]:
        near, far = r, cell - r
        if direction == "right":
            return [(x + far, y + near), (x + far, y + far)]
        if direction == "left":
            return [(x + near, y + near), (x + near, y + far)]
        if direction == "down":
            return [(x + near, y + far), (x + far, y + far)]
        return [(x + near, y + near), (x + far, y + near)]


def run_player_gui() -> None:
    """Launch the Snake player interface."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    root = tk.Tk()
    SnakeApp(root)
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
