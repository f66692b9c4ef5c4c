from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import ConfirmedPlan, RecurringPattern


class UnavailableDatesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    unavailable_dates: List[str] = Field(alias="unavailableDates")


class SelectedDatesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_dates: List[str] = Field(alias="selectedDates")


class PlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    activity: Optional[str] = Field(default=None)
    date: Optional[str] = Field(default=None)
    time: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")


class PatternRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = Field(default=None)
    day: Any = Field(default=None)
    day_name: Optional[str] = Field(default=None, alias="dayName")


class ActivityRequest(BaseModel):
    name: Optional[str] = Field(default=None)


class CalendarConnectionRequest(BaseModel):
    connected: bool


class PlanPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    activity: str
    date: str
    time: str
    location: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    confirmed: bool = Field(default=True)
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_domain(cls, plan: ConfirmedPlan) -> "PlanPayload":
        return cls.model_validate(plan.to_record())


class PatternPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    day: int
    day_name: str = Field(alias="dayName")
    description: str
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_domain(cls, pattern: RecurringPattern) -> "PatternPayload":
        return cls.model_validate(pattern.to_record())
