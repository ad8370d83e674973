# ============================================================================
# app/services/availability/constraint_loader.py
# Store reads for one availability resolution - no FastAPI dependencies
# ============================================================================
"""
Loads every fact the slot generator needs and converts store rows into
typed records (app.schemas.scheduling).

Store failures surface as UpstreamStoreError, rows that break the table
contract as MalformedRecordError. Nothing is retried or cached.
"""
from collections import defaultdict
from contextlib import contextmanager
from datetime import date
from typing import Dict, List, Optional, Tuple
import logging

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import MalformedRecordError, ServiceNotFoundError, UpstreamStoreError
from app.models.availability import BlockedSlot, EmployeeAbsence, EmployeeAvailability, EmployeeSchedule
from app.models.booking import Booking
from app.models.company import BusinessHours, CompanyScheduleSettings
from app.models.employee import Employee, EmployeeService
from app.models.service import Service
from app.schemas.scheduling import (
    ACTIVE_BOOKING_STATUSES,
    BusinessDay,
    CompanyBlocks,
    EmployeeConstraints,
    EmployeeInfo,
    EmployeeType,
    ScheduleSettings,
    ServiceInfo,
    TimeRange,
    WorkWindow,
)
from app.utils.time_utils import time_to_minutes

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(what: str):
    """Translate store failures into UpstreamStoreError"""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Store query failed while loading {what}: {e}")
        raise UpstreamStoreError(f"Failed to load {what}") from e


def _minutes(value: str, what: str) -> int:
    try:
        return time_to_minutes(value)
    except ValueError as e:
        raise MalformedRecordError(f"Malformed {what}: {e}") from e


def _record(model, what: str, **fields):
    """Build a typed record, rejecting rows that violate its invariants"""
    try:
        return model(**fields)
    except ValidationError as e:
        raise MalformedRecordError(f"Malformed {what}: {e.errors()[0]['msg']}") from e


def _optional_range(start: Optional[str], end: Optional[str], what: str) -> Optional[TimeRange]:
    if not start or not end:
        return None
    return _record(TimeRange, what, start=_minutes(start, what), end=_minutes(end, what))


def _split_blocks(rows: List[BlockedSlot], what: str) -> Tuple[bool, List[TimeRange]]:
    """
    Returns (full_day, partial_ranges).
    A null start_time blocks the whole day; a start without an end is ignored.
    """
    full_day = False
    partial = []
    for row in rows:
        if not row.start_time:
            full_day = True
        elif not row.end_time:
            logger.warning(f"Ignoring {what} {row.id}: start_time without end_time")
        else:
            partial.append(
                _record(
                    TimeRange, what,
                    start=_minutes(row.start_time, what),
                    end=_minutes(row.end_time, what),
                )
            )
    return full_day, partial


class ConstraintLoader:
    """Reads the constraints of one (company, service, date) request"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Company-level facts
    # ------------------------------------------------------------------

    def load_business_day(self, company_id: str, day_of_week: int) -> Optional[BusinessDay]:
        """Opening hours for the weekday, or None when no row exists"""
        with _store_errors("business hours"):
            row = self.db.query(BusinessHours).filter(
                BusinessHours.company_id == company_id,
                BusinessHours.day_of_week == day_of_week
            ).first()

        if row is None:
            return None

        what = "business hours"
        second = _optional_range(row.second_open_time, row.second_close_time, what)
        return _record(
            BusinessDay, what,
            day_of_week=row.day_of_week,
            is_open=bool(row.is_open),
            open_time=_minutes(row.open_time or settings.DEFAULT_OPEN_TIME, what),
            close_time=_minutes(row.close_time or settings.DEFAULT_CLOSE_TIME, what),
            second_open_time=second.start if second else None,
            second_close_time=second.end if second else None,
        )

    def load_schedule_settings(self, company_id: str) -> ScheduleSettings:
        """Company booking rules, falling back to configured defaults"""
        with _store_errors("schedule settings"):
            row = self.db.query(CompanyScheduleSettings).filter(
                CompanyScheduleSettings.company_id == company_id
            ).first()

        slot_duration = settings.DEFAULT_SLOT_DURATION
        advance_hours = settings.DEFAULT_MIN_BOOKING_ADVANCE_HOURS

        if row is not None:
            if row.slot_duration and row.slot_duration > 0:
                slot_duration = row.slot_duration
            if row.min_booking_advance_hours is not None and row.min_booking_advance_hours >= 0:
                advance_hours = row.min_booking_advance_hours

        return ScheduleSettings(slot_duration=slot_duration, min_booking_advance_hours=advance_hours)

    def load_company_blocks(self, company_id: str, day: date) -> CompanyBlocks:
        with _store_errors("company blocked slots"):
            rows = self.db.query(BlockedSlot).filter(
                BlockedSlot.company_id == company_id,
                BlockedSlot.blocked_date == day,
                BlockedSlot.is_company_wide == True
            ).order_by(BlockedSlot.id).all()

        full_day, partial = _split_blocks(rows, "company blocked slot")
        return CompanyBlocks(full_day=full_day, partial=partial)

    def load_service(self, company_id: str, service_id: str) -> ServiceInfo:
        with _store_errors("service"):
            row = self.db.query(Service).filter(
                Service.id == service_id,
                Service.company_id == company_id
            ).first()

        if row is None:
            raise ServiceNotFoundError("Service not found")

        return _record(
            ServiceInfo, "service",
            id=row.id,
            name=row.name,
            duration_minutes=row.duration_minutes,
            price=float(row.price or 0),
        )

    def load_eligible_employees(
            self,
            company_id: str,
            service_id: str,
            employee_id: Optional[str] = None
    ) -> List[EmployeeInfo]:
        """Active employees of the company who perform the service"""
        with _store_errors("employees"):
            query = self.db.query(Employee).join(
                EmployeeService, EmployeeService.employee_id == Employee.id
            ).filter(
                Employee.company_id == company_id,
                Employee.is_active == True,
                EmployeeService.service_id == service_id
            )
            if employee_id:
                query = query.filter(Employee.id == employee_id)

            rows = query.order_by(Employee.name, Employee.id).all()

        employees = []
        for row in rows:
            try:
                employee_type = EmployeeType.from_store(row.employee_type)
            except ValueError as e:
                raise MalformedRecordError(f"Malformed employee {row.id}: {e}") from e
            employees.append(EmployeeInfo(id=row.id, name=row.name, employee_type=employee_type))

        return employees

    # ------------------------------------------------------------------
    # Per-employee facts
    # ------------------------------------------------------------------

    def load_employee_constraints(
            self,
            employees: List[EmployeeInfo],
            day: date,
            day_of_week: int
    ) -> List[EmployeeConstraints]:
        """
        Absences, working window, blocks and active bookings of every
        employee for the date.

        One IN query per table covers all employees at once; results keep
        the order of `employees`.
        """
        if not employees:
            return []

        ids = [e.id for e in employees]
        fixed_ids = [e.id for e in employees if e.employee_type == EmployeeType.FIXED]
        autonomous_ids = [e.id for e in employees if e.employee_type == EmployeeType.AUTONOMOUS]

        with _store_errors("employee absences"):
            absent_ids = {
                row.employee_id for row in self.db.query(EmployeeAbsence.employee_id).filter(
                    EmployeeAbsence.employee_id.in_(ids),
                    EmployeeAbsence.start_date <= day,
                    EmployeeAbsence.end_date >= day
                ).all()
            }

        schedules: Dict[str, EmployeeSchedule] = {}
        if fixed_ids:
            with _store_errors("employee schedules"):
                for row in self.db.query(EmployeeSchedule).filter(
                        EmployeeSchedule.employee_id.in_(fixed_ids),
                        EmployeeSchedule.day_of_week == day_of_week
                ).order_by(EmployeeSchedule.id).all():
                    schedules.setdefault(row.employee_id, row)

        availabilities: Dict[str, EmployeeAvailability] = {}
        if autonomous_ids:
            with _store_errors("employee availability"):
                for row in self.db.query(EmployeeAvailability).filter(
                        EmployeeAvailability.employee_id.in_(autonomous_ids),
                        EmployeeAvailability.available_date == day
                ).order_by(EmployeeAvailability.id).all():
                    availabilities.setdefault(row.employee_id, row)

        blocks_by_employee: Dict[str, List[BlockedSlot]] = defaultdict(list)
        with _store_errors("employee blocked slots"):
            for row in self.db.query(BlockedSlot).filter(
                    BlockedSlot.employee_id.in_(ids),
                    BlockedSlot.blocked_date == day
            ).order_by(BlockedSlot.id).all():
                blocks_by_employee[row.employee_id].append(row)

        bookings_by_employee: Dict[str, List[Booking]] = defaultdict(list)
        with _store_errors("bookings"):
            for row in self.db.query(Booking).filter(
                    Booking.employee_id.in_(ids),
                    Booking.booking_date == day,
                    Booking.booking_status.in_(ACTIVE_BOOKING_STATUSES)
            ).order_by(Booking.booking_time).all():
                bookings_by_employee[row.employee_id].append(row)

        result = []
        for employee in employees:
            if employee.employee_type == EmployeeType.FIXED:
                window = self._fixed_window(schedules.get(employee.id))
            else:
                window = self._autonomous_window(availabilities.get(employee.id))

            full_day, partial = _split_blocks(blocks_by_employee[employee.id], "employee blocked slot")

            bookings = []
            for booking in bookings_by_employee[employee.id]:
                start = _minutes(booking.booking_time, "booking")
                bookings.append(
                    _record(TimeRange, "booking", start=start, end=start + booking.duration_minutes)
                )

            result.append(EmployeeConstraints(
                employee=employee,
                is_absent=employee.id in absent_ids,
                work_window=window,
                full_day_blocked=full_day,
                blocks=partial,
                bookings=bookings,
            ))

        return result

    @staticmethod
    def _fixed_window(row: Optional[EmployeeSchedule]) -> Optional[WorkWindow]:
        if row is None or not row.is_working:
            return None
        if not row.start_time or not row.end_time:
            logger.info(f"Schedule {row.id} is working but has no start/end time")
            return None

        what = "employee schedule"
        return WorkWindow(
            start=_minutes(row.start_time, what),
            end=_minutes(row.end_time, what),
            break_range=_optional_range(row.break_start, row.break_end, what),
        )

    @staticmethod
    def _autonomous_window(row: Optional[EmployeeAvailability]) -> Optional[WorkWindow]:
        if row is None:
            return None

        what = "employee availability"
        return WorkWindow(
            start=_minutes(row.start_time, what),
            end=_minutes(row.end_time, what),
            break_range=_optional_range(row.break_start, row.break_end, what),
        )
