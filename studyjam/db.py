"""
Leaderboard document store.

- Uses SQLAlchemy; PostgreSQL (Supabase) in production, SQLite locally and in tests.
- Holds exactly one row: the current entries and the freeze ledger as JSON, plus a version.
- Reads connection string from Streamlit secrets, then the DB_URL env var, then config.DEFAULT_DB_URL.
- Writes are whole-document replacements guarded by the version read beforehand.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

import streamlit as st
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

import config
from studyjam.errors import ConcurrentUpdateError, StorageError
from studyjam.models import (
    FreezeLedger,
    LeaderboardSnapshot,
    ParticipantRecord,
    entries_from_rows,
    entries_to_rows,
    ledger_from_dict,
    ledger_to_dict,
)

logger = logging.getLogger(__name__)

DOC_ID = 1


# ----------------------------
# Engine / Connection helpers
# ----------------------------

_engine: Optional[Engine] = None


def _db_url() -> str:
    try:
        url = st.secrets.get("DB_URL")
    except FileNotFoundError:
        # no secrets.toml outside of Streamlit Cloud
        url = None
    return url or os.getenv("DB_URL") or config.DEFAULT_DB_URL


def _make_engine(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        return create_engine(db_url, future=True)
    return create_engine(
        db_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        future=True,
    )


def get_engine() -> Engine:
    """Create (or reuse) a global SQLAlchemy engine."""
    global _engine
    if _engine is None:
        _engine = _make_engine(_db_url())
    return _engine


def configure_engine(target: Union[str, Engine, None]) -> None:
    """Point the store at another database (a URL or a ready Engine). None resets."""
    global _engine
    if _engine is not None and target is not _engine:
        _engine.dispose()
    if target is None or isinstance(target, Engine):
        _engine = target
    else:
        _engine = _make_engine(target)


# ----------------------------
# Schema init
# ----------------------------

def init_db() -> None:
    """Create the leaderboard table if it doesn't exist."""
    ddl = """
    CREATE TABLE IF NOT EXISTS leaderboard (
        id INTEGER PRIMARY KEY,
        entries TEXT NOT NULL,       -- JSON array of entries keyed by CSV headers
        frozen_users TEXT NOT NULL,  -- JSON object email -> {rank, data}
        version INTEGER NOT NULL,
        updated_at TEXT
    );
    """
    try:
        with get_engine().begin() as conn:
            conn.execute(text(ddl))
    except SQLAlchemyError as e:
        raise StorageError(f"Could not initialise database: {e}") from e


# ----------------------------
# Document access
# ----------------------------

def _parse_json(value: Optional[str], default: Any) -> Any:
    if not value:
        return default
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("Stored leaderboard JSON is corrupt, treating as empty")
        return default


def get_snapshot() -> Optional[LeaderboardSnapshot]:
    """Return the stored leaderboard, or None if nothing was uploaded yet."""
    try:
        with get_engine().connect() as conn:
            row = conn.execute(
                text("SELECT entries, frozen_users, version, updated_at FROM leaderboard WHERE id = :id;"),
                {"id": DOC_ID},
            ).mappings().first()
    except SQLAlchemyError as e:
        raise StorageError(f"Could not read leaderboard: {e}") from e

    if not row:
        return None
    updated_at = datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None
    return LeaderboardSnapshot(
        entries=entries_from_rows(_parse_json(row["entries"], [])),
        ledger=ledger_from_dict(_parse_json(row["frozen_users"], {})),
        version=int(row["version"]),
        updated_at=updated_at,
    )


def replace_snapshot(entries: List[ParticipantRecord], ledger: FreezeLedger,
                     expected_version: Optional[int]) -> int:
    """
    Replace the whole document and return its new version.

    expected_version is the version read before computing (None when no document existed).
    Raises ConcurrentUpdateError if the stored version moved in between.
    """
    params: Dict[str, Any] = {
        "id": DOC_ID,
        "entries": json.dumps(entries_to_rows(entries)),
        "frozen_users": json.dumps(ledger_to_dict(ledger)),
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        with get_engine().begin() as conn:
            if expected_version is None:
                params["version"] = 1
                result = conn.execute(
                    text("""
                    INSERT INTO leaderboard (id, entries, frozen_users, version, updated_at)
                    VALUES (:id, :entries, :frozen_users, :version, :updated_at)
                    ON CONFLICT (id) DO NOTHING;
                    """),
                    params,
                )
            else:
                params["version"] = expected_version + 1
                params["expected"] = expected_version
                result = conn.execute(
                    text("""
                    UPDATE leaderboard
                    SET entries = :entries,
                        frozen_users = :frozen_users,
                        version = :version,
                        updated_at = :updated_at
                    WHERE id = :id AND version = :expected;
                    """),
                    params,
                )
    except SQLAlchemyError as e:
        raise StorageError(f"Could not save leaderboard: {e}") from e

    if result.rowcount != 1:
        raise ConcurrentUpdateError(expected_version)
    logger.info("Saved leaderboard version %d (%d entries, %d frozen)",
                params["version"], len(entries), len(ledger))
    return params["version"]
