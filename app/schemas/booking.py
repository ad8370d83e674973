# app/schemas/booking.py
import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.utils.time_utils import time_to_minutes, minutes_to_time


class BookingRequest(BaseModel):
    """Booking request for one employee at one start time"""
    company_id: str = Field(..., min_length=1)
    service_id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)
    booking_date: datetime.date = Field(..., description="YYYY-MM-DD")
    booking_time: str = Field(..., description="Start time (HH:MM)")
    client_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)
    auto_confirm: bool = Field(False, description="Create as confirmed (staff bookings)")

    @field_validator("booking_time")
    @classmethod
    def validate_booking_time(cls, v: str) -> str:
        # Normalizes "09:00:00" to "09:00"; raises ValueError on bad input
        return minutes_to_time(time_to_minutes(v))


class BookingOut(BaseModel):
    id: str
    company_id: str
    client_id: Optional[str] = None
    service_id: str
    employee_id: Optional[str] = None
    booking_date: datetime.date
    booking_time: str
    duration_minutes: int
    price: Optional[float] = None
    notes: Optional[str] = None
    booking_status: str
    payment_status: str


class BookingResponse(BaseModel):
    booking: BookingOut
    message: str
