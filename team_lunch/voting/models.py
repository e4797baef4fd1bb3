from __future__ import annotations

from pydantic import BaseModel, Field

from ..records.models import Suggestion, Vote


class SuggestionResult(BaseModel):
    suggestion: Suggestion
    total_score: int = 0
    vote_count: int = 0
    average_score: float = 0.0
    rank: int = 0
    rank_breakdown: dict[int, int] = Field(default_factory=dict)


class VotingResults(BaseModel):
    results: list[SuggestionResult]
    winner_id: str | None = None
    winner_score: int = 0
    has_winner: bool = False
    attending_count: int = 0
    eligible_vote_count: int = 0


class BallotEntry(BaseModel):
    suggestion_id: str = Field(..., min_length=1)
    rank: int = Field(..., ge=1)


class BallotRequest(BaseModel):
    votes: list[BallotEntry] = Field(default_factory=list)


class BallotResponse(BaseModel):
    votes: list[Vote]
