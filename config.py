# config.py
import hmac
import logging
import os
from typing import Optional

# --- IMPORTANT: EDIT THESE FOR YOUR STUDY JAM ---
APP_TITLE = "Study Jam Leaderboard"
APP_CAPTION = "Google Cloud Skills Boost progress · Ranks lock once everything is completed"
ADMIN_CODE = None  # Prefer to set via environment/Secrets. Fallback can be set here (string).

# Used when neither Streamlit secrets nor the environment provide DB_URL.
DEFAULT_DB_URL = "sqlite:///leaderboard.db"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Column headers of the Skills Boost progress export
COL_NAME = "User Name"
COL_EMAIL = "User Email"
COL_PROFILE_URL = "Google Cloud Skills Boost Profile URL"
COL_PROFILE_STATUS = "Profile URL Status"
COL_REDEMPTION = "Access Code Redemption Status"
COL_COMPLETED_ALL = "All Skill Badges & Games Completed"
COL_BADGES = "# of Skill Badges Completed"
COL_BADGE_NAMES = "Names of Completed Skill Badges"
COL_GAMES = "# of Arcade Games Completed"
COL_GAME_NAMES = "Names of Completed Arcade Games"
COL_RANK = "rank"

EXPECTED_COLUMNS = [
    COL_NAME,
    COL_EMAIL,
    COL_PROFILE_URL,
    COL_PROFILE_STATUS,
    COL_REDEMPTION,
    COL_COMPLETED_ALL,
    COL_BADGES,
    COL_BADGE_NAMES,
    COL_GAMES,
    COL_GAME_NAMES,
]

# Value of COL_COMPLETED_ALL meaning "finished everything" (compared trimmed, case-insensitively)
COMPLETED_FLAG = "Yes"


def get_admin_code():
    """Admin code from the environment, falling back to ADMIN_CODE above."""
    return os.getenv("ADMIN_CODE") or ADMIN_CODE


def admin_code_matches(code: str) -> bool:
    """Compare an entered code with the configured one.

    Raises LookupError when no admin code is configured at all.
    """
    expected = get_admin_code()
    if not expected:
        raise LookupError("Admin code not configured. Set ENV var ADMIN_CODE or config.ADMIN_CODE.")
    return hmac.compare_digest((code or "").encode("utf-8"), expected.encode("utf-8"))


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
