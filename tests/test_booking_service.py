"""Tests for BookingService.create_booking driven directly with asyncio"""
import asyncio

from app.config.database import SessionLocal
from app.core.exceptions import SlotUnavailableError
from app.models import Booking
from app.schemas.booking import BookingRequest
from app.services.booking.booking_service import BookingService

from conftest import DEFAULT_NOW, MONDAY


def request_for(company, service, employee, booking_time="10:00"):
    return BookingRequest(
        company_id=company.id,
        service_id=service.id,
        employee_id=employee.id,
        booking_date=MONDAY,
        booking_time=booking_time,
    )


def test_concurrent_requests_for_one_slot_book_once(db, salon):
    company, service, ana = salon
    request = request_for(company, service, ana)
    first, second = SessionLocal(), SessionLocal()

    async def book_twice():
        return await asyncio.gather(
            BookingService.create_booking(first, request, DEFAULT_NOW),
            BookingService.create_booking(second, request, DEFAULT_NOW),
            return_exceptions=True,
        )

    try:
        results = asyncio.run(book_twice())
    finally:
        first.close()
        second.close()

    assert sum(isinstance(r, Booking) for r in results) == 1
    assert sum(isinstance(r, SlotUnavailableError) for r in results) == 1
    assert db.query(Booking).filter(Booking.employee_id == ana.id).count() == 1


def test_concurrent_overlapping_times_book_once(db, salon):
    company, service, ana = salon
    # 60-minute service: 10:00 and 10:30 overlap
    first, second = SessionLocal(), SessionLocal()

    async def book_both():
        return await asyncio.gather(
            BookingService.create_booking(first, request_for(company, service, ana, "10:00"), DEFAULT_NOW),
            BookingService.create_booking(second, request_for(company, service, ana, "10:30"), DEFAULT_NOW),
            return_exceptions=True,
        )

    try:
        results = asyncio.run(book_both())
    finally:
        first.close()
        second.close()

    assert sum(isinstance(r, Booking) for r in results) == 1
    assert db.query(Booking).count() == 1


def test_rejection_leaves_session_usable(db, salon):
    company, service, ana = salon

    try:
        asyncio.run(BookingService.create_booking(db, request_for(company, service, ana, "09:15"), DEFAULT_NOW))
    except SlotUnavailableError:
        pass
    else:
        raise AssertionError("09:15 is off the slot grid and must be rejected")

    booking = asyncio.run(BookingService.create_booking(db, request_for(company, service, ana), DEFAULT_NOW))
    assert booking.booking_status == "pending"
