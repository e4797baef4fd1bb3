from __future__ import annotations

import os

from fastapi import Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_event
from .auth.dependencies import require_admin, require_user
from .auth.users import authenticate, create_user
from .places.cache import lookup_cache
from .places.proxy import proxy_app
from .planning.week_plans import (
    PlanError,
    UnknownSuggestionError,
    confirm_selection,
    undo_selection,
)
from .planning.weeks import current_week, next_week, normalize_week_of
from .records.models import (
    Attendance,
    OfficeLocation,
    PlaceInfo,
    Suggestion,
    Vote,
    WeekPlan,
)
from .records.store import get_store
from .schemas import (
    AttendanceUpdate,
    ConfirmRequest,
    LoginRequest,
    SignupRequest,
    SuggestionCreate,
    WeeksResponse,
)
from .voting.aggregation import SortDirection, SortOption, compute_results, sort_results
from .voting.ballots import BallotError, submit_ballot
from .voting.models import BallotRequest, BallotResponse, VotingResults

app = FastAPI(title="Team Lunch API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "team-lunch-secret-change-in-production"),
)


def _week(week_of: str) -> str:
    try:
        return normalize_week_of(week_of)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _open_week(week_of: str) -> str:
    """Like ``_week`` but 409 once the week's plan has been confirmed."""
    week = _week(week_of)
    if get_store().get_week_plan(week) is not None:
        raise HTTPException(status_code=409, detail=f"Week {week} is already confirmed")
    return week


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/weeks", response_model=WeeksResponse)
def weeks() -> WeeksResponse:
    return WeeksResponse(current=current_week(), next=next_week())


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/signup")
def signup(body: SignupRequest, request: Request) -> dict:
    user = create_user(body.email, body.password, body.name)
    if not user:
        raise HTTPException(status_code=409, detail="Email already registered")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Week endpoints ───────────────────────────────────────────────────────


@app.get("/weeks/{week_of}/suggestions", response_model=list[Suggestion])
def list_suggestions(week_of: str, user: dict = Depends(require_user)) -> list[Suggestion]:
    return get_store().list_suggestions(_week(week_of))


@app.post("/weeks/{week_of}/suggestions", response_model=Suggestion, status_code=201)
def add_suggestion(
    week_of: str,
    body: SuggestionCreate,
    user: dict = Depends(require_user),
) -> Suggestion:
    place = PlaceInfo.model_validate(body.model_dump())
    return get_store().add_suggestion(
        user_id=user["id"],
        user_name=user["name"],
        restaurant=body.restaurant.strip(),
        week_of=_open_week(week_of),
        description=body.description,
        place=place,
    )


@app.get("/weeks/{week_of}/votes", response_model=list[Vote])
def list_votes(week_of: str, user: dict = Depends(require_user)) -> list[Vote]:
    return get_store().list_votes(_week(week_of))


@app.put("/weeks/{week_of}/votes", response_model=BallotResponse)
def put_ballot(
    week_of: str,
    body: BallotRequest,
    user: dict = Depends(require_user),
) -> BallotResponse:
    week = _open_week(week_of)
    try:
        votes = submit_ballot(get_store(), user["id"], week, body.votes)
    except BallotError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    record_event("ballot", {"week_of": week, "user_id": user["id"], "entries": len(body.votes)})
    return BallotResponse(votes=votes)


@app.get("/weeks/{week_of}/attendance", response_model=list[Attendance])
def list_attendance(week_of: str, user: dict = Depends(require_user)) -> list[Attendance]:
    return get_store().list_attendance(_week(week_of))


@app.put("/weeks/{week_of}/attendance", response_model=Attendance)
def put_attendance(
    week_of: str,
    body: AttendanceUpdate,
    user: dict = Depends(require_user),
) -> Attendance:
    return get_store().upsert_attendance(user["id"], _week(week_of), body.is_attending)


@app.get("/weeks/{week_of}/results", response_model=VotingResults)
def results(
    week_of: str,
    sort_by: SortOption = "score",
    direction: SortDirection | None = None,
    user: dict = Depends(require_user),
) -> VotingResults:
    week = _week(week_of)
    store = get_store()
    outcome = compute_results(
        store.list_suggestions(week),
        store.list_votes(week),
        store.list_attendance(week),
    )
    return outcome.model_copy(update={"results": sort_results(outcome.results, sort_by, direction)})


@app.get("/weeks/{week_of}/plan", response_model=WeekPlan | None)
def get_plan(week_of: str, user: dict = Depends(require_user)) -> WeekPlan | None:
    return get_store().get_week_plan(_week(week_of))


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.post("/weeks/{week_of}/plan", response_model=WeekPlan)
def confirm_plan(
    week_of: str,
    body: ConfirmRequest | None = None,
    user: dict = Depends(require_admin),
) -> WeekPlan:
    body = body or ConfirmRequest()
    try:
        return confirm_selection(
            get_store(),
            _week(week_of),
            suggestion_id=body.suggestion_id,
            destination=body.final_destination,
        )
    except UnknownSuggestionError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PlanError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@app.delete("/weeks/{week_of}/plan")
def undo_plan(week_of: str, user: dict = Depends(require_admin)) -> dict:
    week = _week(week_of)
    try:
        undo_selection(get_store(), week)
    except PlanError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "reopened", "week_of": week}


@app.get("/office", response_model=OfficeLocation | None)
def get_office(user: dict = Depends(require_user)) -> OfficeLocation | None:
    return get_store().get_office_location()


@app.put("/office", response_model=OfficeLocation)
def put_office(body: OfficeLocation, user: dict = Depends(require_admin)) -> OfficeLocation:
    return get_store().set_office_location(body)


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return lookup_cache.stats()


# ── Places proxy ─────────────────────────────────────────────────────────

app.mount("/functions/v1", proxy_app)
