from __future__ import annotations
import json
import logging
import os
import tempfile
from typing import Any, Protocol

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "dice-best-score"


class BestScoreStore(Protocol):
    def load(self) -> int: ...
    def save(self, score: int) -> None: ...


def _coerce_score(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        score = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, score)


class InMemoryBestScoreStore:
    def __init__(self, initial: int = 0):
        self.value = initial
        self.saves = 0

    def load(self) -> int:
        return _coerce_score(self.value)

    def save(self, score: int) -> None:
        self.value = score
        self.saves += 1


class JsonFileBestScoreStore:
    """
    Keeps the best score as a single key in a small JSON file.

    A missing, unreadable or corrupt file reads as 0 and write failures are
    logged and dropped: losing the cached best is only a cosmetic loss.
    """
    def __init__(self, path: str, key: str = BEST_SCORE_KEY):
        self.path = path
        self.key = key

    def load(self) -> int:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning("Best score unreadable at %s: %s", self.path, e)
            return 0
        if not isinstance(data, dict):
            return 0
        return _coerce_score(data.get(self.key, 0))

    def save(self, score: int) -> None:
        try:
            folder = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(folder, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=folder, prefix=".best-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump({self.key: int(score)}, fh)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise
        except OSError as e:
            logger.warning("Could not persist best score to %s: %s", self.path, e)
