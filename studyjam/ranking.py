# studyjam/ranking.py
"""
Rank assignment with frozen ranks.

A participant who completes everything gets a FreezeRecord and keeps that rank
for good. Everyone else is ranked on each upload by (completed all, badges +
games), descending, using the lowest ranks no frozen participant holds.

`compute` is the write path (runs on every upload, may extend the ledger);
`query` is the read path (never touches the ledger).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Set, Tuple

from studyjam.models import FreezeLedger, FreezeRecord, ParticipantRecord


def sort_key(rec: ParticipantRecord) -> Tuple[int, int]:
    """Descending comparator as an ascending key: completed first, then total."""
    return (-int(rec.is_completed), -rec.total)


def rank_sorted(records: Iterable[ParticipantRecord]) -> List[ParticipantRecord]:
    # sorted() is stable, so ties keep upload order
    return sorted(records, key=sort_key)


def is_frozen(email: str, ledger: FreezeLedger) -> bool:
    return bool(email) and email in ledger


def occupied_ranks(ledger: FreezeLedger) -> Set[int]:
    return {rec.rank for rec in ledger.values()}


def _free_ranks(occupied: Set[int]):
    rank = 1
    while True:
        if rank not in occupied:
            yield rank
        rank += 1


def assign_ranks(records: Iterable[ParticipantRecord], ledger: FreezeLedger) -> List[ParticipantRecord]:
    """Frozen records get their ledger rank; the rest, in comparator order,
    get the lowest ranks no ledger entry holds.

    Returns frozen records (input order) followed by the ranked active ones.
    """
    frozen: List[ParticipantRecord] = []
    active: List[ParticipantRecord] = []
    for rec in records:
        (frozen if is_frozen(rec.email, ledger) else active).append(rec)

    pinned = [rec.with_rank(ledger[rec.email].rank) for rec in frozen]
    free = _free_ranks(occupied_ranks(ledger))
    ranked = [rec.with_rank(next(free)) for rec in rank_sorted(active)]
    return pinned + ranked


def extend_ledger(records: Iterable[ParticipantRecord], ledger: FreezeLedger) -> Tuple[FreezeLedger, List[str]]:
    """Freeze every completed participant not yet in the ledger at their current rank.

    Returns a new ledger (the input is left alone) and the newly frozen emails.
    Existing entries are never replaced.
    """
    updated: FreezeLedger = dict(ledger)
    added: List[str] = []
    for rec in records:
        if rec.is_completed and rec.email not in updated:
            updated[rec.email] = FreezeRecord(rank=rec.rank, data=rec.with_rank(rec.rank))
            added.append(rec.email)
    return updated, added


def compute(records: Iterable[ParticipantRecord], ledger: FreezeLedger) -> Tuple[List[ParticipantRecord], FreezeLedger]:
    """Rank one upload.

    Returns (entries in display order, extended ledger). Entries of frozen
    participants always carry their ledger rank, whatever their current data.
    """
    combined = assign_ranks(records, ledger)
    new_ledger, _ = extend_ledger(combined, ledger)

    entries = []
    for rec in rank_sorted(combined):
        frozen = new_ledger.get(rec.email)
        entries.append(rec if frozen is None or frozen.rank == rec.rank else rec.with_rank(frozen.rank))
    return entries, new_ledger


def query(entries: Iterable[ParticipantRecord], ledger: FreezeLedger) -> Tuple[List[ParticipantRecord], FreezeLedger]:
    """Project stored entries for display.

    Entries without an email are dropped. Ranks are re-derived with the same
    rule as the write path (ledger rank wins, others fill the free ranks in
    comparator order) and the result is ordered by rank. Nothing stored is
    modified.
    """
    usable = [e for e in entries if e.email]
    ranked = assign_ranks(rank_sorted(usable), ledger)
    ranked.sort(key=lambda r: r.rank)
    return ranked, ledger


def search(entries: Iterable[ParticipantRecord], text: str) -> List[ParticipantRecord]:
    """Case-insensitive substring match on name or email."""
    needle = (text or "").strip().lower()
    if not needle:
        return list(entries)
    return [e for e in entries if needle in e.name.lower() or needle in e.email.lower()]


def summary(entries: List[ParticipantRecord], ledger: FreezeLedger) -> Dict[str, int]:
    return {
        "participants": len(entries),
        "completed": sum(1 for e in entries if e.is_completed),
        "frozen": len(ledger),
        "skill_badges": sum(e.skill_badges for e in entries),
        "arcade_games": sum(e.arcade_games for e in entries),
    }
