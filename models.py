from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

# Fixed design parameters, not runtime-configurable
DIE_FACES = (1, 2, 3, 4, 5, 6)
ROUND_CAP = 10
DICE_PER_ROUND = 3

RollResult = Tuple[int, ...]


class Phase(str, Enum):
    IDLE = "idle"
    READY = "ready"
    RESOLVING = "resolving"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RoundOutcome:
    face: int          # face captured when the roll was requested
    roll: RollResult
    hits: int
    award: int


@dataclass
class SessionState:
    best_score: int = 0
    chosen_face: Optional[int] = None
    rounds: List[RoundOutcome] = field(default_factory=list)
    is_resolving: bool = False

    @property
    def last_round(self) -> Optional[RoundOutcome]:
        return self.rounds[-1] if self.rounds else None

    @property
    def last_roll(self) -> Optional[RollResult]:
        last = self.last_round
        return last.roll if last else None

    @property
    def hit_count(self) -> int:
        last = self.last_round
        return last.hits if last else 0

    @property
    def last_round_award(self) -> int:
        last = self.last_round
        return last.award if last else 0

    @property
    def cumulative_score(self) -> int:
        return sum(r.award for r in self.rounds)

    @property
    def rounds_played(self) -> int:
        return len(self.rounds)

    @property
    def rounds_left(self) -> int:
        return max(0, ROUND_CAP - self.rounds_played)

    @property
    def phase(self) -> Phase:
        if self.is_resolving:
            return Phase.RESOLVING
        if self.rounds_played >= ROUND_CAP:
            return Phase.EXHAUSTED
        if self.chosen_face is None:
            return Phase.IDLE
        return Phase.READY


@dataclass
class SubmissionRecord:
    last_submitted_score: int = 0


@dataclass
class SubmissionResult:
    success: bool
    transaction_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "SubmissionResult":
        return cls(success=False, error=error)


@dataclass
class LeaderboardEntry:
    rank: int
    player: str = "Unknown"
    wallet: str = "Unknown"
    score: int = 0
