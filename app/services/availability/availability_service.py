# ===== app/services/availability/availability_service.py =====
from typing import List, Optional, Tuple
from datetime import date, datetime, timedelta
from sqlalchemy.orm import Session
import asyncio
import logging

from app.config.settings import settings
from app.core.exceptions import AvailabilityTimeoutError, InvalidRequestError
from app.schemas.availability import (
    AvailabilityQuery,
    AvailabilityResponse,
    AvailableDatesQuery,
    EmployeeSlots,
    TimeSlot,
)
from app.schemas.scheduling import DayContext, EmployeeConstraints
from app.services.availability.constraint_loader import ConstraintLoader
from app.services.availability.slot_generator import generate_employee_slots

logger = logging.getLogger(__name__)

CLOSED_MESSAGE = "Business is closed on this day"
BLOCKED_MESSAGE = "Date is blocked"
NO_STAFF_MESSAGE = "No professionals available for this service"


def day_of_week(day: date) -> int:
    """0=Sunday .. 6=Saturday, the convention of business_hours and employee_schedules"""
    return day.isoweekday() % 7


class AvailabilityService:
    """Resolves bookable (time, employee) slots for a company service on a date"""

    @staticmethod
    async def get_available_slots(
            db: Session,
            query: AvailabilityQuery,
            now: datetime
    ) -> AvailabilityResponse:
        """
        Resolve availability for one date.

        `now` must be in the business timezone; it decides whether the
        requested date is today and, if so, the advance-notice cutoff.
        The whole resolution is bounded by AVAILABILITY_TIMEOUT_SECONDS.
        """
        timeout = settings.AVAILABILITY_TIMEOUT_SECONDS
        try:
            return await asyncio.wait_for(
                AvailabilityService._resolve(db, query, now),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Availability timed out after {timeout}s "
                f"(company={query.company_id}, service={query.service_id}, date={query.date})"
            )
            # Worker threads cannot be interrupted; one may still be reading through `db`
            logger.warning(
                f"Abandoning in-flight store reads for {query.date}; "
                f"the request session is closed once the response is sent"
            )
            raise AvailabilityTimeoutError(f"Availability lookup timed out after {timeout:g}s")

    @staticmethod
    async def _resolve(db: Session, query: AvailabilityQuery, now: datetime) -> AvailabilityResponse:
        loader = ConstraintLoader(db)

        # Store access stays sequential on one session in one thread; only generation fans out.
        # to_thread carries the request context (correlation id) into the worker.
        context, constraints, message = await asyncio.to_thread(
            AvailabilityService._load, loader, query
        )
        if message:
            logger.info(f"No availability for company {query.company_id} on {query.date}: {message}")
            return AvailabilityResponse(message=message)

        earliest_start = AvailabilityService._earliest_start(context, now)

        per_employee = await asyncio.gather(*[
            asyncio.to_thread(
                generate_employee_slots,
                employee_constraints,
                context.business_day,
                context.company_blocks.partial,
                context.service.duration_minutes,
                context.settings.slot_duration,
                earliest_start
            )
            for employee_constraints in constraints
        ])

        response = AvailabilityService._merge(constraints, per_employee)
        logger.info(
            f"Resolved {len(response.slots)} slots for service {query.service_id} "
            f"on {query.date} across {len(constraints)} employees"
        )
        return response

    @staticmethod
    def _load(
            loader: ConstraintLoader,
            query: AvailabilityQuery
    ) -> Tuple[Optional[DayContext], List[EmployeeConstraints], Optional[str]]:
        context, message = AvailabilityService._load_day_context(loader, query)
        if message:
            return None, [], message

        constraints = loader.load_employee_constraints(
            context.employees, context.day, context.day_of_week
        )
        return context, constraints, None

    @staticmethod
    def _load_day_context(
            loader: ConstraintLoader,
            query: AvailabilityQuery
    ) -> Tuple[Optional[DayContext], Optional[str]]:
        """
        Load the company-level facts in order, stopping at the first one
        that rules the whole day out.

        Returns (context, None) or (None, reason).
        """
        weekday = day_of_week(query.date)

        business_day = loader.load_business_day(query.company_id, weekday)
        if business_day is None or not business_day.is_open:
            return None, CLOSED_MESSAGE

        company_blocks = loader.load_company_blocks(query.company_id, query.date)
        if company_blocks.full_day:
            return None, BLOCKED_MESSAGE

        schedule_settings = loader.load_schedule_settings(query.company_id)
        service = loader.load_service(query.company_id, query.service_id)

        employees = loader.load_eligible_employees(
            query.company_id, query.service_id, query.employee_id
        )
        if not employees:
            return None, NO_STAFF_MESSAGE

        context = DayContext(
            day=query.date,
            day_of_week=weekday,
            business_day=business_day,
            settings=schedule_settings,
            service=service,
            company_blocks=company_blocks,
            employees=employees,
        )
        return context, None

    @staticmethod
    def _earliest_start(context: DayContext, now: datetime) -> Optional[int]:
        """Advance-notice cutoff in minutes; only applies when the date is today"""
        if context.day != now.date():
            return None
        now_minutes = now.hour * 60 + now.minute
        return now_minutes + context.settings.min_booking_advance_hours * 60

    @staticmethod
    def _merge(
            constraints: List[EmployeeConstraints],
            per_employee: List[List[TimeSlot]]
    ) -> AvailabilityResponse:
        """
        Flatten per-employee results into one list ordered by time.

        Ties on time are broken by employee name, then id.
        `availability` keeps the eligible-employee order.
        """
        slots = [slot for employee_slots in per_employee for slot in employee_slots]
        slots.sort(key=lambda slot: (slot.time, slot.employee_name, slot.employee_id))

        availability = [
            EmployeeSlots(
                employee_id=employee_constraints.employee.id,
                employee_name=employee_constraints.employee.name,
                slots=[slot.time for slot in employee_slots],
            )
            for employee_constraints, employee_slots in zip(constraints, per_employee)
            if employee_slots
        ]

        return AvailabilityResponse(slots=slots, availability=availability)

    @staticmethod
    async def get_available_dates(
            db: Session,
            query: AvailableDatesQuery,
            now: datetime
    ) -> List[date]:
        """Dates in [start_date, start_date + days) that have at least one slot"""
        if query.days > settings.MAX_AVAILABILITY_RANGE_DAYS:
            raise InvalidRequestError(
                f"days must be at most {settings.MAX_AVAILABILITY_RANGE_DAYS}"
            )

        start_date = query.start_date or now.date()
        timeout = settings.AVAILABLE_DATES_TIMEOUT_SECONDS
        try:
            dates = await asyncio.wait_for(
                AvailabilityService._scan_dates(db, query, start_date, now),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Available dates scan timed out after {timeout}s "
                f"(company={query.company_id}, service={query.service_id}, from={start_date}, days={query.days})"
            )
            raise AvailabilityTimeoutError(f"Available dates lookup timed out after {timeout:g}s")

        logger.info(
            f"{len(dates)} of {query.days} dates available for service {query.service_id} "
            f"from {start_date}"
        )
        return dates

    @staticmethod
    async def _scan_dates(
            db: Session,
            query: AvailableDatesQuery,
            start_date: date,
            now: datetime
    ) -> List[date]:
        dates = []
        for offset in range(query.days):
            day = start_date + timedelta(days=offset)
            result = await AvailabilityService.get_available_slots(
                db,
                AvailabilityQuery(
                    company_id=query.company_id,
                    service_id=query.service_id,
                    employee_id=query.employee_id,
                    date=day,
                ),
                now
            )
            if result.slots:
                dates.append(day)
        return dates
