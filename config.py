from __future__ import annotations
import logging
import os
import sys

from dotenv import load_dotenv
load_dotenv()


class Config:
    # Roll animation time (seconds); carries no game logic
    ROLL_DELAY_SEC = float(os.environ.get('DICE_ROLL_DELAY_SEC', '2.5'))
    BEST_SCORE_PATH = os.environ.get('DICE_BEST_SCORE_PATH') or os.path.join(
        os.path.expanduser('~'), '.monad_dice', 'best_score.json'
    )
    # Upstream leaderboard and score recording services
    LEADERBOARD_URL = os.environ.get('LEADERBOARD_URL', 'https://monad-games-id-site.vercel.app/api/leaderboard')
    LEADERBOARD_GAME_ID = os.environ.get('LEADERBOARD_GAME_ID', '224')
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '10'))
    SCORE_SUBMIT_URL = os.environ.get('SCORE_SUBMIT_URL') or None
    GAME_ADDRESS = os.environ.get('GAME_ADDRESS') or None
    HTTP_TIMEOUT_SEC = float(os.environ.get('HTTP_TIMEOUT_SEC', '10'))
    USER_AGENT = os.environ.get('DICE_USER_AGENT', 'Monad-Dice-Game/1.0')
    # CLI client target
    BASE_URL = os.environ.get('DICE_BASE_URL', 'http://127.0.0.1:8000')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Keep the best score in memory only (nothing written to disk)
    NO_PERSIST = os.environ.get('DICE_NO_PERSIST', '').lower() in ('1', 'true', 'yes')


def setup_logging(level: str = Config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
