from __future__ import annotations

import logging

from ..records.models import WeekPlan
from ..records.store import RecordStore
from ..voting.aggregation import compute_results

logger = logging.getLogger(__name__)


class PlanError(ValueError):
    """Raised when a week plan cannot be confirmed or undone."""


class UnknownSuggestionError(PlanError):
    pass


def confirm_selection(
    store: RecordStore,
    week_of: str,
    suggestion_id: str | None = None,
    destination: str | None = None,
) -> WeekPlan:
    """Confirm the lunch destination for ``week_of``.

    Without arguments the computed winner is confirmed.  Passing a
    ``suggestion_id`` or a free-text ``destination`` is an admin override:
    the vote outcome is ignored and left untouched.
    """
    suggestions = store.list_suggestions(week_of)

    if suggestion_id:
        chosen = next((s for s in suggestions if s.id == suggestion_id), None)
        if chosen is None:
            raise UnknownSuggestionError(f"Unknown suggestion for week {week_of}: {suggestion_id}")
        plan = store.save_week_plan(
            week_of,
            selected_suggestion_id=chosen.id,
            admin_override=True,
            final_destination=chosen.restaurant,
        )
    elif destination and destination.strip():
        plan = store.save_week_plan(
            week_of,
            selected_suggestion_id=None,
            admin_override=True,
            final_destination=destination.strip(),
        )
    else:
        outcome = compute_results(
            suggestions,
            store.list_votes(week_of),
            store.list_attendance(week_of),
        )
        if not outcome.has_winner:
            raise PlanError(f"No eligible votes to confirm for week {week_of}")
        winner = next(r.suggestion for r in outcome.results if r.suggestion.id == outcome.winner_id)
        plan = store.save_week_plan(
            week_of,
            selected_suggestion_id=winner.id,
            admin_override=False,
            final_destination=winner.restaurant,
        )

    logger.info(
        "Confirmed %s for week %s (override=%s)",
        plan.final_destination, week_of, plan.admin_override,
    )
    return plan


def undo_selection(store: RecordStore, week_of: str) -> None:
    """Delete the confirmed plan so voting for ``week_of`` re-opens."""
    if not store.delete_week_plan(week_of):
        raise PlanError(f"No confirmed plan for week {week_of}")
    logger.info("Re-opened voting for week %s", week_of)
