# studyjam/service.py
import logging
from dataclasses import dataclass
from typing import List, Tuple

from studyjam import db
from studyjam.errors import UploadError
from studyjam.models import FreezeLedger, ParticipantRecord
from studyjam.normalize import normalize_rows, read_csv
from studyjam.ranking import compute, query

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    entries: int
    newly_frozen: List[str]
    frozen_total: int
    version: int

    @property
    def message(self) -> str:
        msg = f"Leaderboard updated with {self.entries} participants."
        if self.newly_frozen:
            msg += f" {len(self.newly_frozen)} newly locked."
        return msg


def process_upload(data: bytes, filename: str = "upload.csv") -> UploadResult:
    """
    Run one upload end to end: parse, rank against the stored ledger, save.

    The save is rejected (ConcurrentUpdateError) if another upload landed
    after we read the document; nothing is written in that case.
    """
    if not filename.lower().endswith(".csv"):
        raise UploadError("Please upload a valid CSV file")

    rows = read_csv(data)
    records = normalize_rows(rows)
    logger.info("Upload %s: %d rows parsed, %d usable", filename, len(rows), len(records))
    if not records:
        raise UploadError("No rows with a User Email found in CSV")

    snapshot = db.get_snapshot()
    ledger: FreezeLedger = snapshot.ledger if snapshot else {}
    expected_version = snapshot.version if snapshot else None
    logger.info("Current frozen users: %d", len(ledger))

    entries, new_ledger = compute(records, ledger)
    newly_frozen = [email for email in new_ledger if email not in ledger]

    version = db.replace_snapshot(entries, new_ledger, expected_version)
    return UploadResult(
        entries=len(entries),
        newly_frozen=newly_frozen,
        frozen_total=len(new_ledger),
        version=version,
    )


def load_leaderboard() -> Tuple[List[ParticipantRecord], FreezeLedger]:
    """Stored leaderboard projected for display (empty if nothing uploaded yet)."""
    snapshot = db.get_snapshot()
    if snapshot is None:
        return [], {}
    return query(snapshot.entries, snapshot.ledger)
