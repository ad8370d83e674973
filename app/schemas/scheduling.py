# app/schemas/scheduling.py
"""
Typed records the availability resolver works on.

Store rows are converted into these at the load boundary. Times of day are
integer minutes since midnight; only columns that are nullable in the store
are Optional here.
"""
from __future__ import annotations
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date
from enum import Enum

from app.utils.time_utils import intervals_overlap


class EmployeeType(str, Enum):
    FIXED = "fixed"
    AUTONOMOUS = "autonomous"

    @classmethod
    def from_store(cls, value: Optional[str]) -> "EmployeeType":
        """Map stored codes, including the legacy Portuguese ones"""
        normalized = (value or "").strip().lower()
        if normalized in ("fixed", "fixo"):
            return cls.FIXED
        if normalized in ("autonomous", "autonomo", "autônomo"):
            return cls.AUTONOMOUS
        raise ValueError(f"Unknown employee_type {value!r}")


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


# Only these statuses occupy an employee's time
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class TimeRange(BaseModel):
    """Half-open [start, end) in minutes since midnight"""
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="after")
    def end_after_start(self) -> "TimeRange":
        if self.end <= self.start:
            raise ValueError("End time must be after start time")
        return self

    def overlaps(self, start: int, end: int) -> bool:
        return intervals_overlap(start, end, self.start, self.end)


class BusinessDay(BaseModel):
    """Opening hours of a company on one weekday"""
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    is_open: bool
    open_time: int
    close_time: int
    # Carried for completeness; the generator only uses the first period
    second_open_time: Optional[int] = None
    second_close_time: Optional[int] = None


class ScheduleSettings(BaseModel):
    slot_duration: int = Field(..., gt=0)
    min_booking_advance_hours: int = Field(..., ge=0)


class ServiceInfo(BaseModel):
    id: str
    name: str
    duration_minutes: int = Field(..., gt=0)
    price: float = 0.0


class EmployeeInfo(BaseModel):
    id: str
    name: str
    employee_type: EmployeeType


class WorkWindow(BaseModel):
    """Raw working hours of one employee on one date"""
    start: int
    end: int
    break_range: Optional[TimeRange] = None


class EmployeeConstraints(BaseModel):
    """Everything the slot generator needs to know about one employee"""
    employee: EmployeeInfo
    is_absent: bool = False
    work_window: Optional[WorkWindow] = None
    full_day_blocked: bool = False
    blocks: List[TimeRange] = Field(default_factory=list)
    bookings: List[TimeRange] = Field(default_factory=list)


class CompanyBlocks(BaseModel):
    full_day: bool = False
    partial: List[TimeRange] = Field(default_factory=list)


class DayContext(BaseModel):
    """Company-level facts for one resolution, loaded before per-employee work"""
    day: date
    day_of_week: int
    business_day: BusinessDay
    settings: ScheduleSettings
    service: ServiceInfo
    company_blocks: CompanyBlocks
    employees: List[EmployeeInfo] = Field(default_factory=list)
