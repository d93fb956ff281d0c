from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from config import Config, setup_logging
from dice import SCORE_TABLE
from engine import DiceGameEngine
from leaderboard_client import LeaderboardClient, LeaderboardUnavailable
from models import DICE_PER_ROUND, ROUND_CAP, LeaderboardEntry
from store import BestScoreStore, InMemoryBestScoreStore, JsonFileBestScoreStore

# ---------- Pydantic IO models ----------
class ChooseIn(BaseModel):
    face: int = Field(..., ge=1, le=6, examples=[4])

class SaveScoreIn(BaseModel):
    player_id: str = Field(..., min_length=1, examples=["0x52908400098527886E0F7030069857D2E4169EE7"])

class RoundOut(BaseModel):
    face: int
    roll: list[int]
    hits: int
    award: int

class SessionStateOut(BaseModel):
    phase: str
    chosen_face: Optional[int] = None
    last_roll: Optional[list[int]] = None
    hit_count: int
    last_round_award: int
    cumulative_score: int
    best_score: int
    rounds_played: int
    rounds_left: int
    is_resolving: bool
    last_submitted_score: int
    rounds: list[RoundOut]

class ActionOut(BaseModel):
    accepted: bool
    state: SessionStateOut

class SaveScoreOut(BaseModel):
    success: bool
    transaction_id: Optional[str] = None
    error: Optional[str] = None
    state: SessionStateOut

class LeaderboardEntryOut(BaseModel):
    rank: int
    player: str
    wallet: str
    score: int

class GameConfigOut(BaseModel):
    round_cap: int
    dice_per_round: int
    roll_delay_sec: float
    score_table: Dict[int, int]
    game_address: Optional[str] = None
    submission_enabled: bool

# ---------- App ----------
@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging(Config.LOG_LEVEL)
    yield
    _engine.close()

app = FastAPI(title="Monad Dice API", version="1.0.0", lifespan=lifespan)

_client = LeaderboardClient()
def _make_store(no_persist: bool = Config.NO_PERSIST) -> BestScoreStore:
    if no_persist:
        return InMemoryBestScoreStore()
    return JsonFileBestScoreStore(Config.BEST_SCORE_PATH)

_store = _make_store()
_engine = DiceGameEngine(store=_store, submitter=_client, roll_delay=Config.ROLL_DELAY_SEC)

def _to_state_out(engine: DiceGameEngine) -> SessionStateOut:
    st = engine.state
    return SessionStateOut(
        phase=st.phase.value,
        chosen_face=st.chosen_face,
        last_roll=list(st.last_roll) if st.last_roll else None,
        hit_count=st.hit_count,
        last_round_award=st.last_round_award,
        cumulative_score=st.cumulative_score,
        best_score=st.best_score,
        rounds_played=st.rounds_played,
        rounds_left=st.rounds_left,
        is_resolving=st.is_resolving,
        last_submitted_score=engine.gate.last_submitted_score,
        rounds=[RoundOut(face=r.face, roll=list(r.roll), hits=r.hits, award=r.award) for r in st.rounds],
    )

def _to_entry_out(e: LeaderboardEntry) -> LeaderboardEntryOut:
    return LeaderboardEntryOut(rank=e.rank, player=e.player, wallet=e.wallet, score=e.score)

@app.get("/v1/dice/session", response_model=SessionStateOut)
async def get_state():
    return _to_state_out(_engine)

@app.post("/v1/dice/session", response_model=SessionStateOut)
async def new_session():
    _engine.new_session()
    return _to_state_out(_engine)

@app.post("/v1/dice/session/choose", response_model=ActionOut)
async def choose_face(payload: ChooseIn):
    try:
        accepted = _engine.choose_face(payload.face)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ActionOut(accepted=accepted, state=_to_state_out(_engine))

@app.post("/v1/dice/session/roll", response_model=ActionOut)
async def roll():
    # Answers once the roll has resolved (or was dropped by a new session)
    accepted = await _engine.roll()
    return ActionOut(accepted=accepted, state=_to_state_out(_engine))

@app.post("/v1/dice/session/save", response_model=SaveScoreOut)
async def save_score(payload: SaveScoreIn):
    result = await _engine.save_score(payload.player_id)
    return SaveScoreOut(
        success=result.success,
        transaction_id=result.transaction_id,
        error=result.error,
        state=_to_state_out(_engine),
    )

@app.get("/v1/dice/leaderboard", response_model=List[LeaderboardEntryOut])
def leaderboard():
    try:
        return [_to_entry_out(e) for e in _client.fetch_leaderboard()]
    except LeaderboardUnavailable as e:
        # Upstream failure (bad gateway); the caller decides whether to retry
        raise HTTPException(status_code=502, detail=str(e))

@app.get("/v1/dice/config", response_model=GameConfigOut)
async def game_config():
    return GameConfigOut(
        round_cap=ROUND_CAP,
        dice_per_round=DICE_PER_ROUND,
        roll_delay_sec=_engine.roll_delay,
        score_table=dict(SCORE_TABLE),
        game_address=Config.GAME_ADDRESS,
        submission_enabled=bool(_client.submit_url),
    )
