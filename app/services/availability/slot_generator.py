# ============================================================================
# app/services/availability/slot_generator.py
# ============================================================================
"""Per-employee slot generation. Pure functions, no store access."""
from typing import List, Optional, Tuple
import logging

from app.schemas.availability import TimeSlot
from app.schemas.scheduling import BusinessDay, EmployeeConstraints, TimeRange, WorkWindow
from app.utils.time_utils import minutes_to_time

logger = logging.getLogger(__name__)


def effective_window(work_window: WorkWindow, business_day: BusinessDay) -> Tuple[int, int]:
    """Employee hours clipped to the company's opening hours"""
    return (
        max(work_window.start, business_day.open_time),
        min(work_window.end, business_day.close_time),
    )


def generate_employee_slots(
        constraints: EmployeeConstraints,
        business_day: BusinessDay,
        company_blocks: List[TimeRange],
        service_duration: int,
        slot_duration: int,
        earliest_start: Optional[int] = None
) -> List[TimeSlot]:
    """
    Generate the bookable start times of one employee on one date.

    Candidates start at the effective window start and advance by
    slot_duration while the whole service still fits. A candidate is dropped
    when it starts before earliest_start (advance notice, today only) or when
    [start, start + service_duration) overlaps the employee's break, a
    company block, an employee block or an active booking.
    """
    employee = constraints.employee

    if constraints.is_absent:
        logger.debug(f"Employee {employee.id} is absent")
        return []

    if constraints.work_window is None:
        logger.debug(f"Employee {employee.id} is not working on this date")
        return []

    if constraints.full_day_blocked:
        logger.debug(f"Employee {employee.id} is blocked for the whole day")
        return []

    window_start, window_end = effective_window(constraints.work_window, business_day)
    break_range = constraints.work_window.break_range

    slots = []
    for start in range(window_start, window_end - service_duration + 1, slot_duration):
        end = start + service_duration

        if earliest_start is not None and start < earliest_start:
            continue

        if break_range and break_range.overlaps(start, end):
            continue

        if any(block.overlaps(start, end) for block in company_blocks):
            continue

        if any(block.overlaps(start, end) for block in constraints.blocks):
            continue

        if any(booking.overlaps(start, end) for booking in constraints.bookings):
            continue

        slots.append(TimeSlot(
            time=minutes_to_time(start),
            employee_id=employee.id,
            employee_name=employee.name,
        ))

    return slots
