from __future__ import annotations

from pydantic import BaseModel, Field

from .records.models import PlaceInfo


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    name: str = Field(default="", max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SuggestionCreate(PlaceInfo):
    restaurant: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)


class AttendanceUpdate(BaseModel):
    is_attending: bool


class ConfirmRequest(BaseModel):
    suggestion_id: str | None = Field(
        default=None, description="Override: confirm this suggestion instead of the winner",
    )
    final_destination: str | None = Field(
        default=None, max_length=200,
        description="Override: confirm a place that was never suggested",
    )


class WeeksResponse(BaseModel):
    current: str
    next: str
