from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Optional

import requests

from config import Config
from models import LeaderboardEntry, SubmissionResult

logger = logging.getLogger(__name__)


class LeaderboardUnavailable(RuntimeError):
    """The leaderboard service could not be reached or answered with an error."""


class LeaderboardClient:
    """
    Minimal client for the games leaderboard service.
    - fetch_leaderboard(): top entries, malformed payloads read as empty.
    - submit_score(): hands a score to the recording service; never raises.
    """
    def __init__(
        self,
        leaderboard_url: Optional[str] = None,
        submit_url: Optional[str] = None,
        game_id: Optional[str] = None,
        limit: Optional[int] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.leaderboard_url = leaderboard_url or Config.LEADERBOARD_URL
        self.submit_url = submit_url or Config.SCORE_SUBMIT_URL
        self.game_id = game_id or Config.LEADERBOARD_GAME_ID
        self.limit = limit or Config.LEADERBOARD_LIMIT
        self.user_agent = user_agent or Config.USER_AGENT
        self.timeout = timeout if timeout is not None else Config.HTTP_TIMEOUT_SEC
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
        }

    def fetch_leaderboard(self) -> List[LeaderboardEntry]:
        params = {
            "page": 1,
            "limit": self.limit,
            "gameId": self.game_id,
            "sortBy": "scores",
            "sortOrder": "desc",
        }
        try:
            resp = self.session.get(self.leaderboard_url, params=params, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Leaderboard request failed: %s", e)
            raise LeaderboardUnavailable(f"Failed to fetch leaderboard: {e}") from e

        if resp.status_code >= 400:
            logger.warning("Leaderboard HTTP %s: %s", resp.status_code, resp.text[:200])
            raise LeaderboardUnavailable(f"Failed to fetch leaderboard: HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            logger.warning("Leaderboard returned non-JSON body")
            return []
        return parse_leaderboard(payload)

    def submit_score(self, player_id: str, score: int) -> SubmissionResult:
        if not self.submit_url:
            return SubmissionResult.failed("Score submission is not configured")

        payload = {"playerAddress": player_id, "scoreAmount": int(score)}
        try:
            resp = self.session.post(self.submit_url, json=payload, headers=self._headers(), timeout=self.timeout)
            data = resp.json()
        except requests.RequestException as e:
            logger.warning("Score submission failed: %s", e)
            return SubmissionResult.failed(str(e))
        except ValueError:
            logger.warning("Score submission returned non-JSON body (HTTP %s)", resp.status_code)
            return SubmissionResult.failed(f"Invalid response (HTTP {resp.status_code})")

        return parse_submission(data, resp.status_code)


def parse_submission(data: Any, status_code: int = 200) -> SubmissionResult:
    if not isinstance(data, dict):
        return SubmissionResult.failed("Invalid response from score service")
    if status_code >= 400 or data.get("success") is not True:
        error = data.get("error") or f"Failed to save score (HTTP {status_code})"
        return SubmissionResult.failed(str(error))
    tx = data.get("transactionHash") or data.get("transactionIdentifier")
    if not isinstance(tx, str) or not tx:
        return SubmissionResult.failed("Score service did not return a transaction")
    return SubmissionResult(success=True, transaction_id=tx)


def _as_score(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(num):
        return 0
    return max(0, int(num))


def _as_rank(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        rank = int(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return rank if rank >= 1 else fallback


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) and value else "Unknown"


def parse_leaderboard(payload: Any) -> List[LeaderboardEntry]:
    # Upstream wraps rows as {"data": [...]}; a bare list is accepted too
    rows = payload.get("data") if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        return []

    entries: List[LeaderboardEntry] = []
    for pos, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            continue
        entries.append(LeaderboardEntry(
            rank=_as_rank(row.get("rank"), pos),
            player=_as_text(row.get("username")),
            wallet=_as_text(row.get("walletAddress")),
            score=_as_score(row.get("score")),
        ))
    return entries
