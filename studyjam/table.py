# studyjam/table.py
from typing import List

import pandas as pd

import config
from studyjam.models import FreezeLedger, ParticipantRecord
from studyjam.ranking import is_frozen

LOCK = "🔒"

DISPLAY_COLUMNS = [
    "Rank",
    "Locked",
    "Name",
    "Email",
    "Profile",
    "Skill Badges",
    "Arcade Games",
    "Completed All",
    "Redemption",
]


def leaderboard_frame(entries: List[ParticipantRecord], ledger: FreezeLedger) -> pd.DataFrame:
    """Display table for the standings page (one row per entry, in the given order)."""
    if not entries:
        return pd.DataFrame(columns=DISPLAY_COLUMNS)
    return pd.DataFrame([
        {
            "Rank": e.rank,
            "Locked": LOCK if is_frozen(e.email, ledger) else "",
            "Name": e.name or "Unknown",
            "Email": e.email,
            "Profile": e.profile_url,
            "Skill Badges": e.skill_badges,
            "Arcade Games": e.arcade_games,
            "Completed All": e.completed_all or "No",
            "Redemption": e.redemption_status,
        }
        for e in entries
    ], columns=DISPLAY_COLUMNS)


def ledger_frame(ledger: FreezeLedger) -> pd.DataFrame:
    """Freeze ledger as a table ordered by locked rank."""
    cols = ["Rank", "Name", "Email", "Skill Badges", "Arcade Games"]
    rows = [
        {
            "Rank": rec.rank,
            "Name": rec.data.name,
            "Email": email,
            "Skill Badges": rec.data.skill_badges,
            "Arcade Games": rec.data.arcade_games,
        }
        for email, rec in ledger.items()
    ]
    return pd.DataFrame(rows, columns=cols).sort_values("Rank").reset_index(drop=True)


def export_csv(entries: List[ParticipantRecord]) -> bytes:
    """Entries back in the export's own column layout, rank first."""
    cols = [config.COL_RANK] + config.EXPECTED_COLUMNS
    df = pd.DataFrame([e.to_row() for e in entries])
    df = df.reindex(columns=cols + [c for c in df.columns if c not in cols])
    return df.to_csv(index=False).encode("utf-8")
