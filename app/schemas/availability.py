# app/schemas/availability.py
import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


def _blank_as_none(v: Optional[str]) -> Optional[str]:
    # The booking UI sends employee_id= when no professional is selected
    if v is None or not v.strip():
        return None
    return v.strip()


class AvailabilityQuery(BaseModel):
    """Availability request (query string for GET, JSON body for POST)"""
    company_id: str = Field(..., min_length=1, description="Company identifier")
    service_id: str = Field(..., min_length=1, description="Service identifier")
    employee_id: Optional[str] = Field(None, description="Restrict to one employee")
    date: datetime.date = Field(..., description="Requested date (YYYY-MM-DD)")

    @field_validator("employee_id")
    @classmethod
    def blank_employee_means_any(cls, v: Optional[str]) -> Optional[str]:
        return _blank_as_none(v)


class TimeSlot(BaseModel):
    """A bookable start time with a specific employee"""
    time: str = Field(..., description="Start time (HH:MM)")
    employee_id: str
    employee_name: str


class EmployeeSlots(BaseModel):
    """Start times grouped by employee"""
    employee_id: str
    employee_name: str
    slots: List[str] = Field(default_factory=list)


class AvailabilityResponse(BaseModel):
    slots: List[TimeSlot] = Field(default_factory=list)
    availability: List[EmployeeSlots] = Field(default_factory=list)
    message: Optional[str] = Field(None, description="Why nothing is available (closed, blocked, no staff)")


class AvailableDatesQuery(BaseModel):
    company_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    employee_id: Optional[str] = None
    start_date: Optional[datetime.date] = Field(None, description="Defaults to today in the business timezone")
    days: int = Field(30, ge=1, description="Number of consecutive dates to check")

    @field_validator("employee_id")
    @classmethod
    def blank_employee_means_any(cls, v: Optional[str]) -> Optional[str]:
        return _blank_as_none(v)


class AvailableDatesResponse(BaseModel):
    dates: List[datetime.date] = Field(default_factory=list)
