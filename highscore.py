# High score persistence: one integer that survives restarts, never fatal.
from __future__ import annotations

import json
import logging
import os
from typing import Protocol


logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_SCORE_PATH = os.path.join(BASE_DIR, "snake_highscore.json")


class HighScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, value: int) -> None: ...


class MemoryHighScoreStore:
    """Keeps the value for the lifetime of the process only."""

    def __init__(self, value: int = 0) -> None:
        self.value = value

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = int(value)


class JsonHighScoreStore:
    """
    Stores {"high_score": n} in a JSON file.
    Unreadable/unwritable files are logged and treated as "no high score yet".
    """

    def __init__(self, path: str = DEFAULT_SCORE_PATH) -> None:
        self.path = path

    def load(self) -> int:
        if not os.path.exists(self.path):
            return 0
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                payload = json.load(fh)
            value = int(payload.get("high_score", 0))
        except (OSError, ValueError, TypeError, AttributeError, OverflowError) as exc:
            logger.warning("Could not read high score from %s: %s", self.path, exc)
            return 0
        return max(0, value)

    def save(self, value: int) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump({"high_score": int(value)}, fh)
        except OSError as exc:
            logger.warning("Could not save high score to %s: %s", self.path, exc)
