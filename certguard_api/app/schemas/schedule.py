"""
Pydantic models for schedules.

A schedule is a named weekly time window (which weekdays, between
which times) valid from ``start_date`` until an optional
``end_date``, optionally bound to a user group.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from .base import CamelModel, as_utc, check_time_of_day


class WeekDays(CamelModel):
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False


class ScheduleBase(CamelModel):
    name: str = Field(..., min_length=3, examples=["Expediente Financeiro"])
    description: Optional[str] = None
    is_active: bool = True
    start_date: datetime = Field(..., examples=["2025-01-01T00:00:00Z"])
    end_date: Optional[datetime] = None
    week_days: WeekDays = Field(default_factory=WeekDays)
    start_time: str = Field(..., examples=["08:00"])
    end_time: str = Field(..., examples=["18:00"])
    user_group_id: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        return check_time_of_day(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _dates_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @model_validator(mode="after")
    def _end_after_start(self) -> "ScheduleBase":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be earlier than startDate")
        return self


class ScheduleCreate(ScheduleBase):
    """Schema for creating a schedule."""
    pass


class ScheduleUpdate(CamelModel):
    """Schema for updating a schedule.

    Field-level checks run here; the date ordering is checked again by
    the service against the merged record.
    """

    name: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    week_days: Optional[WeekDays] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    user_group_id: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _valid_time(cls, v: Optional[str]) -> Optional[str]:
        return check_time_of_day(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _dates_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class ScheduleRead(ScheduleBase):
    id: int
