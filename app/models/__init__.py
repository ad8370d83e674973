# app/models/__init__.py
from .base import Base
from .company import Company, BusinessHours, CompanyScheduleSettings
from .service import Service
from .employee import Employee, EmployeeService
from .availability import EmployeeSchedule, EmployeeAvailability, EmployeeAbsence, BlockedSlot
from .booking import Booking

__all__ = [
    "Base",
    "Company",
    "BusinessHours",
    "CompanyScheduleSettings",
    "Service",
    "Employee",
    "EmployeeService",
    "EmployeeSchedule",
    "EmployeeAvailability",
    "EmployeeAbsence",
    "BlockedSlot",
    "Booking",
]
