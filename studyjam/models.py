# studyjam/models.py
"""
Typed records for the leaderboard document.

Rows arrive (and are stored) keyed by the CSV export's header names; inside the
app every participant is a ParticipantRecord with fixed fields. Columns we
don't know about are kept in `extra` so they survive a round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import config

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_KNOWN_COLUMNS = set(config.EXPECTED_COLUMNS) | {config.COL_RANK}


def parse_count(value: Any) -> int:
    """Parse a non-negative integer leniently; anything unusable becomes 0.

    Accepts ints, floats and strings with a leading integer ("12", " 7 ", "3 badges").
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if value == value else 0
    m = _LEADING_INT.match(str(value))
    if not m:
        return 0
    return max(int(m.group(1)), 0)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass
class ParticipantRecord:
    name: str = ""
    email: str = ""
    profile_url: str = ""
    profile_status: str = ""
    redemption_status: str = ""
    completed_all: str = ""
    skill_badges: int = 0
    skill_badge_names: str = ""
    arcade_games: int = 0
    arcade_game_names: str = ""
    rank: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.skill_badges + self.arcade_games

    @property
    def is_completed(self) -> bool:
        return self.completed_all.strip().lower() == config.COMPLETED_FLAG.lower()

    def with_rank(self, rank: int) -> "ParticipantRecord":
        return replace(self, rank=rank, extra=dict(self.extra))

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ParticipantRecord":
        """Build a record from a header-keyed mapping (CSV row or stored JSON)."""
        extra = {k: v for k, v in row.items() if k not in _KNOWN_COLUMNS}
        return cls(
            name=_text(row.get(config.COL_NAME)),
            email=_text(row.get(config.COL_EMAIL)).lower(),
            profile_url=_text(row.get(config.COL_PROFILE_URL)),
            profile_status=_text(row.get(config.COL_PROFILE_STATUS)),
            redemption_status=_text(row.get(config.COL_REDEMPTION)),
            completed_all=_text(row.get(config.COL_COMPLETED_ALL)),
            skill_badges=parse_count(row.get(config.COL_BADGES)),
            skill_badge_names=_text(row.get(config.COL_BADGE_NAMES)),
            arcade_games=parse_count(row.get(config.COL_GAMES)),
            arcade_game_names=_text(row.get(config.COL_GAME_NAMES)),
            rank=parse_count(row.get(config.COL_RANK)),
            extra=extra,
        )

    def to_row(self, include_rank: bool = True) -> Dict[str, Any]:
        row: Dict[str, Any] = {}
        if include_rank:
            row[config.COL_RANK] = self.rank
        row.update({
            config.COL_NAME: self.name,
            config.COL_EMAIL: self.email,
            config.COL_PROFILE_URL: self.profile_url,
            config.COL_PROFILE_STATUS: self.profile_status,
            config.COL_REDEMPTION: self.redemption_status,
            config.COL_COMPLETED_ALL: self.completed_all,
            config.COL_BADGES: self.skill_badges,
            config.COL_BADGE_NAMES: self.skill_badge_names,
            config.COL_GAMES: self.arcade_games,
            config.COL_GAME_NAMES: self.arcade_game_names,
        })
        for k, v in self.extra.items():
            row.setdefault(k, v)
        return row


@dataclass(frozen=True)
class FreezeRecord:
    """Rank locked the first time a participant was seen with everything completed."""
    rank: int
    data: ParticipantRecord

    def to_dict(self) -> Dict[str, Any]:
        return {"rank": self.rank, "data": self.data.to_row(include_rank=False)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FreezeRecord":
        data = ParticipantRecord.from_row(d.get("data") or {})
        rank = parse_count(d.get("rank"))
        return cls(rank=rank, data=data.with_rank(rank))


# email -> FreezeRecord
FreezeLedger = Dict[str, FreezeRecord]


def ledger_to_dict(ledger: FreezeLedger) -> Dict[str, Dict[str, Any]]:
    return {email: rec.to_dict() for email, rec in ledger.items()}


def ledger_from_dict(d: Optional[Mapping[str, Any]]) -> FreezeLedger:
    ledger: FreezeLedger = {}
    for email, raw in (d or {}).items():
        key = _text(email).lower()
        if key:
            ledger[key] = FreezeRecord.from_dict(raw or {})
    return ledger


def entries_to_rows(entries: List[ParticipantRecord]) -> List[Dict[str, Any]]:
    return [e.to_row() for e in entries]


def entries_from_rows(rows: Optional[List[Mapping[str, Any]]]) -> List[ParticipantRecord]:
    return [ParticipantRecord.from_row(r) for r in (rows or []) if isinstance(r, Mapping)]


@dataclass
class LeaderboardSnapshot:
    entries: List[ParticipantRecord] = field(default_factory=list)
    ledger: FreezeLedger = field(default_factory=dict)
    version: int = 0
    updated_at: Optional[datetime] = None
