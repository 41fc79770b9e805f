from studyjam.models import FreezeRecord, ParticipantRecord
from studyjam.normalize import normalize_rows
from studyjam.ranking import compute, query, search, summary

from conftest import make_row


def records(*rows):
    return normalize_rows(list(rows))


def ranks(entries):
    return {e.email: e.rank for e in entries}


def frozen(email, rank, completed="Yes", badges=0, games=0):
    data = ParticipantRecord(email=email, completed_all=completed, skill_badges=badges, arcade_games=games, rank=rank)
    return FreezeRecord(rank=rank, data=data)


def test_first_upload_ranks_and_freezes_completed():
    entries, ledger = compute(records(
        make_row("a@x.com", "No", 2, 1),
        make_row("b@x.com", "Yes", 5, 5),
    ), {})
    assert [(e.email, e.rank) for e in entries] == [("b@x.com", 1), ("a@x.com", 2)]
    assert list(ledger) == ["b@x.com"]
    assert ledger["b@x.com"].rank == 1
    assert ledger["b@x.com"].data.skill_badges == 5


def test_frozen_rank_is_kept_and_skipped():
    ledger = {"c@x.com": frozen("c@x.com", 1)}
    entries, new_ledger = compute(records(
        make_row("c@x.com", "Yes", 9, 9),
        make_row("d@x.com", "Yes", 1, 1),
    ), ledger)
    assert ranks(entries) == {"c@x.com": 1, "d@x.com": 2}
    assert new_ledger["c@x.com"] is ledger["c@x.com"]
    assert new_ledger["d@x.com"].rank == 2


def test_frozen_participant_is_not_demoted_by_worse_data():
    ledger = {"a@x.com": frozen("a@x.com", 1, badges=10, games=10)}
    rows = records(
        make_row("b@x.com", "Yes", 20, 20),
        make_row("c@x.com", "No", 15, 15),
        make_row("a@x.com", "No", 0, 0),
    )
    entries, new_ledger = compute(rows, ledger)
    assert ranks(entries) == {"a@x.com": 1, "b@x.com": 2, "c@x.com": 3}
    assert new_ledger["a@x.com"].rank == 1


def test_empty_ledger_is_plain_stable_sort():
    rows = records(
        make_row("a@x.com", "No", 1, 1),
        make_row("b@x.com", "No", 3, 0),
        make_row("c@x.com", "No", 2, 0),
        make_row("d@x.com", "No", 0, 2),
    )
    entries, ledger = compute(rows, {})
    assert [e.email for e in entries] == ["b@x.com", "a@x.com", "c@x.com", "d@x.com"]
    assert [e.rank for e in entries] == [1, 2, 3, 4]
    assert ledger == {}


def test_ties_keep_upload_order_across_calls():
    rows = records(*[make_row(f"u{i}@x.com", "No", 2, 2) for i in range(6)])
    first, _ = compute(rows, {})
    second, _ = compute(rows, {})
    assert [e.email for e in first] == [f"u{i}@x.com" for i in range(6)]
    assert [(e.email, e.rank) for e in first] == [(e.email, e.rank) for e in second]


def test_only_frozen_participants():
    ledger = {"a@x.com": frozen("a@x.com", 3), "b@x.com": frozen("b@x.com", 1)}
    entries, new_ledger = compute(records(make_row("a@x.com", "Yes"), make_row("b@x.com", "Yes")), ledger)
    assert ranks(entries) == {"a@x.com": 3, "b@x.com": 1}
    assert new_ledger == ledger


def test_active_ranks_never_reuse_frozen_ranks():
    ledger = {"a@x.com": frozen("a@x.com", 3)}
    rows = [make_row("a@x.com", "Yes")] + [make_row(f"u{i}@x.com", "No", 10 - i, 0) for i in range(6)]
    entries, _ = compute(records(*rows), ledger)
    active = [e for e in entries if e.email != "a@x.com"]
    assert [e.rank for e in active] == [1, 2, 4, 5, 6, 7]


def test_frozen_rank_stays_reserved_while_owner_missing():
    ledger = {"a@x.com": frozen("a@x.com", 2)}
    entries, _ = compute(records(make_row("b@x.com", "No", 5), make_row("c@x.com", "No", 4)), ledger)
    assert ranks(entries) == {"b@x.com": 1, "c@x.com": 3}


def test_ranks_are_unique():
    ledger = {"a@x.com": frozen("a@x.com", 2), "b@x.com": frozen("b@x.com", 5)}
    rows = [make_row("b@x.com", "Yes"), make_row("a@x.com", "No")]
    rows += [make_row(f"u{i}@x.com", "Yes" if i % 3 == 0 else "No", i, i % 4) for i in range(10)]
    entries, new_ledger = compute(records(*rows), ledger)
    assert len({e.rank for e in entries}) == len(entries)
    assert len({r.rank for r in new_ledger.values()}) == len(new_ledger)


def test_ledger_only_grows():
    ledger = {"a@x.com": frozen("a@x.com", 1)}
    snapshot = dict(ledger)
    _, new_ledger = compute(records(make_row("b@x.com", "Yes", 1), make_row("c@x.com", "No")), ledger)
    assert ledger == snapshot
    assert set(new_ledger) >= set(ledger)
    assert all(new_ledger[k].rank == v.rank for k, v in ledger.items())


def test_refreeze_is_noop():
    rows = records(make_row("a@x.com", "No", 8, 0), make_row("b@x.com", "Yes", 5, 5))
    _, ledger1 = compute(rows, {})
    _, ledger2 = compute(rows, ledger1)
    assert ledger2 == ledger1
    assert ledger2["b@x.com"] is ledger1["b@x.com"]


def test_same_upload_freeze_keeps_assigned_rank():
    ledger = {"a@x.com": frozen("a@x.com", 1)}
    rows = records(make_row("b@x.com", "No", 20), make_row("c@x.com", " yes ", 1))
    entries, new_ledger = compute(rows, ledger)
    # c is completed so it outranks b among the active set and takes the first free rank
    assert new_ledger["c@x.com"].rank == 2
    assert ranks(entries)["c@x.com"] == 2
    assert ranks(entries)["b@x.com"] == 3


def test_entries_are_in_display_order():
    ledger = {"a@x.com": frozen("a@x.com", 1)}
    rows = records(make_row("a@x.com", "No", 0), make_row("b@x.com", "Yes", 5), make_row("c@x.com", "No", 9))
    entries, _ = compute(rows, ledger)
    assert [e.email for e in entries] == ["b@x.com", "c@x.com", "a@x.com"]
    assert [e.rank for e in entries] == [2, 3, 1]


def test_compute_does_not_mutate_input_records():
    rows = records(make_row("a@x.com", "No", 1), make_row("b@x.com", "Yes", 1))
    compute(rows, {})
    assert [r.rank for r in rows] == [0, 0]


def test_query_orders_by_rank_and_uses_ledger_rank():
    ledger = {"a@x.com": frozen("a@x.com", 1)}
    stored, stored_ledger = compute(records(
        make_row("a@x.com", "No", 0),
        make_row("b@x.com", "Yes", 5),
        make_row("c@x.com", "No", 9),
    ), ledger)
    shown, shown_ledger = query(stored, stored_ledger)
    assert [(e.email, e.rank) for e in shown] == [("a@x.com", 1), ("b@x.com", 2), ("c@x.com", 3)]
    assert shown_ledger is stored_ledger


def test_query_drops_entries_without_email_and_renumbers():
    stored = [
        ParticipantRecord(email="a@x.com", completed_all="No", skill_badges=1, rank=7),
        ParticipantRecord(email="", completed_all="Yes", skill_badges=99, rank=1),
        ParticipantRecord(email="b@x.com", completed_all="No", skill_badges=4, rank=9),
    ]
    shown, _ = query(stored, {})
    assert [(e.email, e.rank) for e in shown] == [("b@x.com", 1), ("a@x.com", 2)]
    assert [e.rank for e in stored] == [7, 1, 9]


def test_query_empty():
    assert query([], {}) == ([], {})


def test_search_matches_name_or_email():
    entries = records(make_row("alice@x.com", name="Alice Roy"), make_row("bob@y.com", name="Bob Sen"))
    assert [e.email for e in search(entries, "ROY")] == ["alice@x.com"]
    assert [e.email for e in search(entries, "y.com")] == ["bob@y.com"]
    assert len(search(entries, "  ")) == 2


def test_summary_counts():
    entries = records(make_row("a@x.com", "Yes", 5, 5), make_row("b@x.com", "No", 2, 1))
    ledger = {"a@x.com": frozen("a@x.com", 1)}
    assert summary(entries, ledger) == {
        "participants": 2,
        "completed": 1,
        "frozen": 1,
        "skill_badges": 7,
        "arcade_games": 6,
    }
