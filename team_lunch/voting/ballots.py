from __future__ import annotations

import logging

from ..records.models import Suggestion, Vote
from ..records.store import RecordStore
from .models import BallotEntry

logger = logging.getLogger(__name__)


class BallotError(ValueError):
    """Raised when a submitted ballot is not a valid ranking."""


def ranks_from_order(suggestion_ids: list[str]) -> list[BallotEntry]:
    """Convert a most-preferred-first ordering into stored ranks.

    The first id gets rank ``N`` and the last gets rank 1.
    """
    n = len(suggestion_ids)
    return [
        BallotEntry(suggestion_id=sid, rank=n - index)
        for index, sid in enumerate(suggestion_ids)
    ]


def validate_ballot(entries: list[BallotEntry], suggestions: list[Suggestion]) -> None:
    """Check that ``entries`` rank suggestions of the week as a permutation of 1..N."""
    week_ids = {s.id for s in suggestions}
    seen: set[str] = set()
    for entry in entries:
        if entry.suggestion_id not in week_ids:
            raise BallotError(f"Unknown suggestion for this week: {entry.suggestion_id}")
        if entry.suggestion_id in seen:
            raise BallotError(f"Suggestion ranked twice: {entry.suggestion_id}")
        seen.add(entry.suggestion_id)

    ranks = sorted(e.rank for e in entries)
    if ranks != list(range(1, len(entries) + 1)):
        raise BallotError(f"Ranks must be 1..{len(entries)} with no repeats, got {ranks}")


def submit_ballot(
    store: RecordStore,
    user_id: str,
    week_of: str,
    entries: list[BallotEntry],
) -> list[Vote]:
    """Validate and store a user's ranking, returning their votes for the week.

    The ballot replaces the user's whole vote set for the week: votes on
    suggestions it leaves out are removed, the rest are upserted on the
    (user, suggestion) key so their record ids survive.
    """
    validate_ballot(entries, store.list_suggestions(week_of))
    removed = store.delete_user_votes(user_id, week_of, keep={e.suggestion_id for e in entries})
    for entry in entries:
        store.upsert_vote(user_id, entry.suggestion_id, entry.rank)
    logger.info(
        "Stored %d votes for user %s in week %s (%d dropped)",
        len(entries), user_id, week_of, removed,
    )
    return store.list_user_votes(user_id, week_of)
