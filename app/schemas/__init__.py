# app/schemas/__init__.py
from .scheduling import (
    EmployeeType,
    BookingStatus,
    ACTIVE_BOOKING_STATUSES,
    TimeRange,
    BusinessDay,
    ScheduleSettings,
    ServiceInfo,
    EmployeeInfo,
    WorkWindow,
    EmployeeConstraints,
    CompanyBlocks,
    DayContext
)

from .availability import (
    AvailabilityQuery,
    TimeSlot,
    EmployeeSlots,
    AvailabilityResponse,
    AvailableDatesQuery,
    AvailableDatesResponse
)

from .booking import (
    BookingRequest,
    BookingOut,
    BookingResponse
)
