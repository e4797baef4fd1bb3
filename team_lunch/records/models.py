from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PlaceInfo(BaseModel):
    address: str | None = None
    phone: str | None = None
    website: str | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price_level: int | None = Field(default=None, ge=0, le=4)
    place_id: str | None = None


class Suggestion(PlaceInfo):
    id: str
    user_id: str
    user_name: str
    restaurant: str
    description: str = ""
    week_of: str
    created_at: datetime


class Vote(BaseModel):
    id: str
    user_id: str
    suggestion_id: str
    rank: int = Field(..., ge=1)


class Attendance(BaseModel):
    id: str
    user_id: str
    week_of: str
    is_attending: bool


class WeekPlan(BaseModel):
    id: str
    week_of: str
    selected_suggestion_id: str | None = None
    admin_override: bool = False
    final_destination: str | None = None
    is_confirmed: bool = True


class OfficeLocation(BaseModel):
    name: str = ""
    address: str = ""
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
