from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from .models import (
    Attendance,
    OfficeLocation,
    PlaceInfo,
    Suggestion,
    Vote,
    WeekPlan,
)


def _new_id() -> str:
    return str(uuid4())


class RecordStore:
    """In-memory record store keyed by week.

    Every write returns the record as stored, so callers render from
    authoritative state rather than patching their own copies.
    """

    def __init__(self) -> None:
        self._suggestions: dict[str, Suggestion] = {}
        self._votes: dict[tuple[str, str], Vote] = {}
        self._attendance: dict[tuple[str, str], Attendance] = {}
        self._week_plans: dict[str, WeekPlan] = {}
        self._office: OfficeLocation | None = None

    # ── Suggestions ──────────────────────────────────────────────────────

    def list_suggestions(self, week_of: str) -> list[Suggestion]:
        rows = [s for s in self._suggestions.values() if s.week_of == week_of]
        # dict order is insertion order, so equal timestamps stay stable
        return sorted(rows, key=lambda s: s.created_at)

    def get_suggestion(self, suggestion_id: str) -> Suggestion | None:
        return self._suggestions.get(suggestion_id)

    def add_suggestion(
        self,
        user_id: str,
        user_name: str,
        restaurant: str,
        week_of: str,
        description: str = "",
        place: PlaceInfo | None = None,
    ) -> Suggestion:
        suggestion = Suggestion(
            id=_new_id(),
            user_id=user_id,
            user_name=user_name,
            restaurant=restaurant,
            description=description,
            week_of=week_of,
            created_at=datetime.now(timezone.utc),
            **(place.model_dump() if place else {}),
        )
        self._suggestions[suggestion.id] = suggestion
        return suggestion

    # ── Votes ────────────────────────────────────────────────────────────

    def list_votes(self, week_of: str) -> list[Vote]:
        week_ids = {s.id for s in self.list_suggestions(week_of)}
        return [v for v in self._votes.values() if v.suggestion_id in week_ids]

    def list_user_votes(self, user_id: str, week_of: str) -> list[Vote]:
        return [v for v in self.list_votes(week_of) if v.user_id == user_id]

    def upsert_vote(self, user_id: str, suggestion_id: str, rank: int) -> Vote:
        key = (user_id, suggestion_id)
        existing = self._votes.get(key)
        vote = Vote(
            id=existing.id if existing else _new_id(),
            user_id=user_id,
            suggestion_id=suggestion_id,
            rank=rank,
        )
        self._votes[key] = vote
        return vote

    def delete_user_votes(self, user_id: str, week_of: str, keep: set[str] | None = None) -> int:
        """Remove the user's votes for ``week_of`` except those on ``keep`` suggestions."""
        keep = keep or set()
        stale = [
            (v.user_id, v.suggestion_id)
            for v in self.list_user_votes(user_id, week_of)
            if v.suggestion_id not in keep
        ]
        for key in stale:
            del self._votes[key]
        return len(stale)

    # ── Attendance ───────────────────────────────────────────────────────

    def list_attendance(self, week_of: str) -> list[Attendance]:
        return [a for a in self._attendance.values() if a.week_of == week_of]

    def upsert_attendance(self, user_id: str, week_of: str, is_attending: bool) -> Attendance:
        key = (user_id, week_of)
        existing = self._attendance.get(key)
        record = Attendance(
            id=existing.id if existing else _new_id(),
            user_id=user_id,
            week_of=week_of,
            is_attending=is_attending,
        )
        self._attendance[key] = record
        return record

    # ── Week plans ───────────────────────────────────────────────────────

    def get_week_plan(self, week_of: str) -> WeekPlan | None:
        return self._week_plans.get(week_of)

    def save_week_plan(
        self,
        week_of: str,
        selected_suggestion_id: str | None,
        admin_override: bool,
        final_destination: str | None,
        is_confirmed: bool = True,
    ) -> WeekPlan:
        """Create the plan for ``week_of``, or update it if one exists."""
        existing = self._week_plans.get(week_of)
        plan = WeekPlan(
            id=existing.id if existing else _new_id(),
            week_of=week_of,
            selected_suggestion_id=selected_suggestion_id,
            admin_override=admin_override,
            final_destination=final_destination,
            is_confirmed=is_confirmed,
        )
        self._week_plans[week_of] = plan
        return plan

    def delete_week_plan(self, week_of: str) -> bool:
        return self._week_plans.pop(week_of, None) is not None

    # ── Office ───────────────────────────────────────────────────────────

    def get_office_location(self) -> OfficeLocation | None:
        return self._office

    def set_office_location(self, location: OfficeLocation) -> OfficeLocation:
        self._office = location
        return location

    def clear(self) -> None:
        self._suggestions.clear()
        self._votes.clear()
        self._attendance.clear()
        self._week_plans.clear()
        self._office = None


_store: RecordStore | None = None


def get_store() -> RecordStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = RecordStore()
    return _store
