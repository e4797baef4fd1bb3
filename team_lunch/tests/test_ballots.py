from __future__ import annotations

import pytest

from team_lunch.records.store import RecordStore
from team_lunch.voting.ballots import (
    BallotError,
    ranks_from_order,
    submit_ballot,
    validate_ballot,
)
from team_lunch.voting.models import BallotEntry

WEEK = "2025-03-10"


@pytest.fixture
def store():
    s = RecordStore()
    for name in ("Taqueria", "Noodle Bar", "Salad Stop"):
        s.add_suggestion("u1", "Alice", name, WEEK)
    return s


def _ids(store):
    return [s.id for s in store.list_suggestions(WEEK)]


def test_ranks_from_order_gives_highest_rank_to_first():
    entries = ranks_from_order(["x", "y", "z"])
    assert [(e.suggestion_id, e.rank) for e in entries] == [("x", 3), ("y", 2), ("z", 1)]


def test_partial_ballot_is_valid(store):
    first, second, _ = _ids(store)
    validate_ballot(ranks_from_order([second, first]), store.list_suggestions(WEEK))


def test_rejects_unknown_suggestion(store):
    with pytest.raises(BallotError, match="Unknown suggestion"):
        validate_ballot([BallotEntry(suggestion_id="nope", rank=1)], store.list_suggestions(WEEK))


def test_rejects_duplicate_suggestion(store):
    sid = _ids(store)[0]
    entries = [BallotEntry(suggestion_id=sid, rank=1), BallotEntry(suggestion_id=sid, rank=2)]
    with pytest.raises(BallotError, match="twice"):
        validate_ballot(entries, store.list_suggestions(WEEK))


def test_rejects_ranks_that_are_not_a_permutation(store):
    a, b, _ = _ids(store)
    entries = [BallotEntry(suggestion_id=a, rank=1), BallotEntry(suggestion_id=b, rank=3)]
    with pytest.raises(BallotError, match="Ranks must be"):
        validate_ballot(entries, store.list_suggestions(WEEK))


def test_submit_upserts_on_user_and_suggestion(store):
    a, b, c = _ids(store)
    first = submit_ballot(store, "u2", WEEK, ranks_from_order([a, b, c]))
    second = submit_ballot(store, "u2", WEEK, ranks_from_order([c, b, a]))

    assert len(second) == 3
    ranks = {v.suggestion_id: v.rank for v in second}
    assert ranks == {c: 3, b: 2, a: 1}
    # ids survive the update
    assert {v.id for v in first} == {v.id for v in second}


def _stored_ranks(store, user_id):
    return sorted(v.rank for v in store.list_user_votes(user_id, WEEK))


def test_partial_resubmission_replaces_earlier_ballot(store):
    a, b, c = _ids(store)
    full = submit_ballot(store, "u2", WEEK, ranks_from_order([a, b, c]))
    votes = submit_ballot(store, "u2", WEEK, ranks_from_order([a]))

    assert [(v.suggestion_id, v.rank) for v in votes] == [(a, 1)]
    assert _stored_ranks(store, "u2") == [1]
    # the surviving vote keeps its record id
    assert votes[0].id == next(v.id for v in full if v.suggestion_id == a)


def test_stored_ranks_stay_a_permutation_across_resubmissions(store):
    a, b, c = _ids(store)
    for order in ([a, b, c], [a], [c, a], [b, c, a], [b], []):
        submit_ballot(store, "u2", WEEK, ranks_from_order(order))
        assert _stored_ranks(store, "u2") == list(range(1, len(order) + 1))


def test_resubmission_leaves_other_users_alone(store):
    a, b, c = _ids(store)
    submit_ballot(store, "u1", WEEK, ranks_from_order([a, b, c]))
    submit_ballot(store, "u2", WEEK, ranks_from_order([c, b, a]))
    submit_ballot(store, "u2", WEEK, ranks_from_order([b]))
    assert _stored_ranks(store, "u1") == [1, 2, 3]


def test_delete_user_votes_is_scoped_to_week():
    s = RecordStore()
    this_week = s.add_suggestion("u1", "Alice", "Taqueria", WEEK)
    other_week = s.add_suggestion("u1", "Alice", "Diner", "2025-03-17")
    s.upsert_vote("u2", this_week.id, 1)
    s.upsert_vote("u2", other_week.id, 1)

    assert s.delete_user_votes("u2", WEEK) == 1
    assert s.list_user_votes("u2", WEEK) == []
    assert len(s.list_user_votes("u2", "2025-03-17")) == 1


def test_invalid_ballot_writes_nothing(store):
    a = _ids(store)[0]
    with pytest.raises(BallotError):
        submit_ballot(store, "u2", WEEK, [BallotEntry(suggestion_id=a, rank=2)])
    assert store.list_user_votes("u2", WEEK) == []
