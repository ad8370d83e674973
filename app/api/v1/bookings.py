# app/api/v1/bookings.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_clock
from app.config.database import get_db
from app.schemas.booking import BookingOut, BookingRequest, BookingResponse
from app.services.booking.booking_service import BookingService
from app.utils.clock import BusinessClock

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
        request: BookingRequest,
        db: Session = Depends(get_db),
        clock: BusinessClock = Depends(get_clock)
):
    """Book a slot previously returned by /availability"""
    booking = await BookingService.create_booking(db, request, clock.now())

    return BookingResponse(
        booking=BookingOut(**booking.to_dict()),
        message="Booking confirmed" if booking.booking_status == "confirmed" else "Booking created, awaiting confirmation"
    )
