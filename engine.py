from __future__ import annotations
import asyncio
import logging
from typing import Optional, Protocol

from config import Config
from dice import RandomSource, resolve_round, validate_face
from models import DICE_PER_ROUND, ROUND_CAP, SessionState, SubmissionResult
from store import BestScoreStore
from submission import SubmissionGate

logger = logging.getLogger(__name__)


class ScoreSubmitter(Protocol):
    def submit_score(self, player_id: str, score: int) -> SubmissionResult: ...


class DiceGameEngine:
    """
    Orchestrates a single-player dice session of up to 10 rounds.
    - choose_face(): pick the face to bet on (ignored while a roll is in flight).
    - request_roll(): start a roll; it resolves after `roll_delay` seconds on the running loop.
    - new_session() / close(): drop any pending roll without applying it.
    - save_score(): submit the current score at most once per improvement.
    """
    def __init__(
        self,
        store: BestScoreStore,
        rng: Optional[RandomSource] = None,
        submitter: Optional[ScoreSubmitter] = None,
        roll_delay: float = Config.ROLL_DELAY_SEC,
    ):
        self.store = store
        self.rng = rng or RandomSource()
        self.submitter = submitter
        self.roll_delay = roll_delay
        self.gate = SubmissionGate()
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._closed = False
        self.state = SessionState(best_score=self.store.load())

    # ---------- Session lifecycle ----------
    def new_session(self) -> SessionState:
        self._cancel_pending()
        self.state = SessionState(best_score=self.store.load())
        self.gate.reset()
        return self.state

    def close(self) -> None:
        self._closed = True
        self._cancel_pending()

    @property
    def closed(self) -> bool:
        return self._closed

    def _cancel_pending(self) -> None:
        # Bumping the generation turns any resolution already queued into a no-op
        self._generation += 1
        task, self._pending = self._pending, None
        if task is not None and not task.done():
            task.cancel()
        self.state.is_resolving = False

    # ---------- Round handling ----------
    def choose_face(self, face: int) -> bool:
        validate_face(face)
        if self.state.is_resolving:
            logger.debug("Ignoring face choice %s while rolling", face)
            return False
        self.state.chosen_face = face
        return True

    def request_roll(self) -> bool:
        st = self.state
        if self._closed or st.is_resolving:
            logger.debug("Ignoring roll request (closed=%s, rolling=%s)", self._closed, st.is_resolving)
            return False
        if st.chosen_face is None or st.rounds_played >= ROUND_CAP:
            logger.debug("Ignoring roll request (face=%s, rounds=%s)", st.chosen_face, st.rounds_played)
            return False

        loop = asyncio.get_running_loop()
        st.is_resolving = True
        self._pending = loop.create_task(self._resolve_later(self._generation, st.chosen_face))
        return True

    async def wait_for_roll(self) -> SessionState:
        task = self._pending
        if task is not None:
            try:
                # shield: a caller giving up on the wait must not cancel the roll
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return self.state

    async def roll(self) -> bool:
        accepted = self.request_roll()
        await self.wait_for_roll()
        return accepted

    async def _resolve_later(self, generation: int, face: int) -> None:
        await asyncio.sleep(self.roll_delay)
        self._resolve(generation, face)

    def _resolve(self, generation: int, face: int) -> None:
        if self._closed or generation != self._generation:
            return

        st = self.state
        outcome = resolve_round(face, self.rng.roll_dice(DICE_PER_ROUND))
        st.rounds.append(outcome)
        if st.cumulative_score > st.best_score:
            st.best_score = st.cumulative_score
            self.store.save(st.best_score)
        st.is_resolving = False
        self._pending = None

        logger.info(
            "Round %d/%d: face=%d roll=%s hits=%d award=%d total=%d",
            st.rounds_played, ROUND_CAP, face, list(outcome.roll),
            outcome.hits, outcome.award, st.cumulative_score,
        )

    # ---------- Score submission ----------
    def can_save(self, player_id: Optional[str]) -> bool:
        return (
            bool(player_id)
            and self.submitter is not None
            and not self.gate.in_flight
            and self.gate.can_submit(self.state.cumulative_score)
        )

    async def save_score(self, player_id: Optional[str]) -> SubmissionResult:
        score = self.state.cumulative_score
        if not player_id:
            return SubmissionResult.failed("Please login to save your score")
        if self.submitter is None:
            return SubmissionResult.failed("Score submission is not configured")
        if self.gate.in_flight:
            return SubmissionResult.failed("A score submission is already in progress")
        if score == 0:
            return SubmissionResult.failed("Play and earn some points before saving")
        if not self.gate.can_submit(score):
            return SubmissionResult.failed("This score has already been saved; try to beat it")

        generation = self._generation
        gate = self.gate
        gate.in_flight = True
        try:
            result = await asyncio.to_thread(self.submitter.submit_score, player_id, score)
        finally:
            gate.in_flight = False

        if generation != self._generation:
            # new_session() ran while the request was out; that session starts clean
            return result
        if result.success:
            gate.record_submission(score)
            logger.info("Saved score %d for %s (tx %s)", score, player_id, result.transaction_id)
        else:
            logger.warning("Saving score %d failed: %s", score, result.error)
        return result
