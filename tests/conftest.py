import pytest

import config
from studyjam import db


def make_row(email, completed="No", badges=0, games=0, name=None, **extra):
    """A CSV row as the export produces it: every value a string."""
    row = {
        config.COL_NAME: name or email.split("@")[0].title(),
        config.COL_EMAIL: email,
        config.COL_PROFILE_URL: f"https://www.cloudskillsboost.google/public_profiles/{email.split('@')[0]}",
        config.COL_PROFILE_STATUS: "All Good",
        config.COL_REDEMPTION: "Yes",
        config.COL_COMPLETED_ALL: completed,
        config.COL_BADGES: str(badges),
        config.COL_BADGE_NAMES: "",
        config.COL_GAMES: str(games),
        config.COL_GAME_NAMES: "",
    }
    row.update(extra)
    return row


def make_csv(rows):
    headers = list(rows[0].keys())
    lines = [",".join(f'"{h}"' for h in headers)]
    for r in rows:
        lines.append(",".join(f'"{r.get(h, "")}"' for h in headers))
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def store(tmp_path):
    db.configure_engine(f"sqlite:///{tmp_path / 'leaderboard.db'}")
    db.init_db()
    yield db
    db.configure_engine(None)
