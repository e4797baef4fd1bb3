"""
Vote aggregation
================

Turns a week's suggestions, votes and attendance into a ranked result set
and a single winner.

Scoring
-------
Only votes cast by users marked as attending count.  A user's most
preferred suggestion carries the *highest* rank value in their ballot, so
a suggestion's ``total_score`` is simply the sum of the eligible ranks it
received::

    total_score   = sum(vote.rank for eligible votes on the suggestion)
    vote_count    = number of eligible votes on the suggestion
    average_score = total_score / vote_count   (0 when vote_count == 0)

Winner and ties
---------------
The winner is the suggestion with the highest total score.  Ties go to the
suggestion that comes first in the input order (the store lists suggestions
by creation time), so the outcome never depends on the order votes were
folded in.  The full ranking sorts by score with the same tie rule, which
keeps ``results[0]`` and the winner in agreement.

With suggestions but no eligible votes, the first suggestion is still
named as winner with a score of 0.  ``has_winner`` is ``False`` in that
case and callers must present it as "no winner yet".
"""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Literal

from ..records.models import Attendance, Suggestion, Vote
from .models import SuggestionResult, VotingResults


def attending_user_ids(attendance: list[Attendance]) -> set[str]:
    return {a.user_id for a in attendance if a.is_attending}


def eligible_votes(votes: list[Vote], attendance: list[Attendance]) -> list[Vote]:
    """Return the votes cast by attending users, in their original order."""
    attending = attending_user_ids(attendance)
    return [v for v in votes if v.user_id in attending]


def compute_results(
    suggestions: list[Suggestion],
    votes: list[Vote],
    attendance: list[Attendance],
) -> VotingResults:
    attending = attending_user_ids(attendance)
    known_ids = {s.id for s in suggestions}
    counted = [v for v in eligible_votes(votes, attendance) if v.suggestion_id in known_ids]

    by_suggestion: dict[str, list[Vote]] = defaultdict(list)
    for vote in counted:
        by_suggestion[vote.suggestion_id].append(vote)

    results: list[SuggestionResult] = []
    for suggestion in suggestions:
        received = by_suggestion.get(suggestion.id, [])
        total = sum(v.rank for v in received)
        count = len(received)
        results.append(SuggestionResult(
            suggestion=suggestion,
            total_score=total,
            vote_count=count,
            average_score=total / count if count else 0.0,
            rank_breakdown=dict(sorted(Counter(v.rank for v in received).items())),
        ))

    winner: SuggestionResult | None = None
    for result in results:
        # strictly greater: an equal later score never displaces the leader
        if winner is None or result.total_score > winner.total_score:
            winner = result

    # sorted() is stable, so ties keep input order
    ranked = sorted(results, key=lambda r: r.total_score, reverse=True)
    for position, result in enumerate(ranked, start=1):
        result.rank = position

    return VotingResults(
        results=ranked,
        winner_id=winner.suggestion.id if winner else None,
        winner_score=winner.total_score if winner else 0,
        has_winner=bool(winner and winner.total_score > 0),
        attending_count=len(attending),
        eligible_vote_count=len(counted),
    )


def pick_winner(
    suggestions: list[Suggestion],
    votes: list[Vote],
    attendance: list[Attendance],
) -> SuggestionResult | None:
    """Return the winning result, or ``None`` when there are no suggestions."""
    outcome = compute_results(suggestions, votes, attendance)
    for result in outcome.results:
        if result.suggestion.id == outcome.winner_id:
            return result
    return None


SortOption = Literal["name", "date", "author", "votes", "score", "popularity"]
SortDirection = Literal["asc", "desc"]

_SORT_KEYS = {
    "name": lambda r: r.suggestion.restaurant.casefold(),
    "date": lambda r: r.suggestion.created_at,
    "author": lambda r: r.suggestion.user_name.casefold(),
    "votes": lambda r: r.vote_count,
    "score": lambda r: r.total_score,
    "popularity": lambda r: r.average_score,
}


def sort_results(
    results: list[SuggestionResult],
    sort_by: SortOption = "score",
    direction: SortDirection | None = None,
) -> list[SuggestionResult]:
    """Reorder results for display. ``rank`` keeps its score-based value.

    Text columns default to ascending, numeric and date columns to
    descending.  Equal keys keep their incoming order.
    """
    if direction is None:
        direction = "asc" if sort_by in ("name", "author") else "desc"
    return sorted(results, key=_SORT_KEYS[sort_by], reverse=direction == "desc")
