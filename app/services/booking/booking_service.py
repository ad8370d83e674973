# ============================================================================
# app/services/booking/booking_service.py
# ============================================================================
"""Service for creating bookings against resolved availability"""
from uuid import uuid4
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import asyncio
import logging
import weakref

from app.core.exceptions import SchedulingError, SlotUnavailableError, UpstreamStoreError
from app.models.booking import Booking
from app.models.employee import Employee
from app.schemas.availability import AvailabilityQuery
from app.schemas.booking import BookingRequest
from app.schemas.scheduling import BookingStatus
from app.services.availability.availability_service import AvailabilityService
from app.services.availability.constraint_loader import ConstraintLoader

logger = logging.getLogger(__name__)

# One lock per employee with a booking in flight; entries vanish once no request holds them
_employee_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _employee_lock(employee_id: str) -> asyncio.Lock:
    lock = _employee_locks.get(employee_id)
    if lock is None:
        lock = asyncio.Lock()
        _employee_locks[employee_id] = lock
    return lock


class BookingService:
    """Handles booking operations"""

    @staticmethod
    async def create_booking(
            db: Session,
            request: BookingRequest,
            now: datetime
    ) -> Booking:
        """
        Create a booking if the requested start time is still offered.

        Availability is resolved again for the requested employee, so a slot
        taken since the client last looked is rejected with 409.

        Check and insert are serialized per employee: in-process by an
        asyncio lock, across workers by a FOR UPDATE lock on the employee row
        held until the insert commits.
        """
        async with _employee_lock(request.employee_id):
            try:
                return await BookingService._reserve(db, request, now)
            except SchedulingError:
                # Releases the row lock
                db.rollback()
                raise

    @staticmethod
    async def _reserve(db: Session, request: BookingRequest, now: datetime) -> Booking:
        try:
            db.query(Employee).filter(
                Employee.id == request.employee_id
            ).with_for_update().first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to lock employee {request.employee_id}: {e}")
            raise UpstreamStoreError("Failed to create booking") from e

        availability = await AvailabilityService.get_available_slots(
            db,
            AvailabilityQuery(
                company_id=request.company_id,
                service_id=request.service_id,
                employee_id=request.employee_id,
                date=request.booking_date,
            ),
            now
        )

        offered = any(
            slot.time == request.booking_time and slot.employee_id == request.employee_id
            for slot in availability.slots
        )
        if not offered:
            reason = availability.message or "Time slot is not available"
            logger.warning(
                f"Rejected booking for employee {request.employee_id} on "
                f"{request.booking_date} {request.booking_time}: {reason}"
            )
            raise SlotUnavailableError(reason)

        service = ConstraintLoader(db).load_service(request.company_id, request.service_id)
        status = BookingStatus.CONFIRMED if request.auto_confirm else BookingStatus.PENDING

        booking = Booking(
            id=str(uuid4()),
            company_id=request.company_id,
            client_id=request.client_id,
            service_id=service.id,
            employee_id=request.employee_id,
            booking_date=request.booking_date,
            booking_time=request.booking_time,
            duration_minutes=service.duration_minutes,
            price=service.price,
            notes=request.notes,
            booking_status=status.value,
            payment_status="pending",
        )

        try:
            db.add(booking)
            db.commit()
            db.refresh(booking)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save booking: {e}")
            raise UpstreamStoreError("Failed to create booking") from e

        logger.info(
            f"Booking {booking.id} created ({booking.booking_status}) for employee "
            f"{booking.employee_id} on {booking.booking_date} {booking.booking_time}"
        )
        return booking
