from __future__ import annotations
import random
from typing import Dict, Optional

from models import DICE_PER_ROUND, DIE_FACES, RollResult, RoundOutcome

# Points per round by number of dice matching the chosen face
SCORE_TABLE: Dict[int, int] = {
    0: 0,
    1: 100,
    2: 300,
    3: 1000,
}


class RandomSource:
    """
    Uniform six-sided dice. Pass a seed for reproducible sequences.
    """
    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def roll_dice(self, n: int = DICE_PER_ROUND) -> RollResult:
        return tuple(self._rng.randint(1, 6) for _ in range(n))


def validate_face(face: int) -> int:
    if isinstance(face, bool) or face not in DIE_FACES:
        raise ValueError(f"Invalid die face: {face!r} (expected 1-6)")
    return face


def count_hits(chosen: Optional[int], roll: RollResult) -> int:
    if chosen is None:
        return 0
    return sum(1 for d in roll if d == chosen)


def award(hits: int) -> int:
    if hits not in SCORE_TABLE:
        raise ValueError(f"Hit count out of range: {hits!r}")
    return SCORE_TABLE[hits]


def resolve_round(face: int, roll: RollResult) -> RoundOutcome:
    hits = count_hits(face, roll)
    return RoundOutcome(face=face, roll=tuple(roll), hits=hits, award=award(hits))
