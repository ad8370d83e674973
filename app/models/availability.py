# ===== app/models/availability.py =====
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


class EmployeeSchedule(Base):
    """Weekly working pattern of a fixed employee"""
    __tablename__ = "employee_schedules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_working = Column(Boolean, default=True)
    start_time = Column(String(8), nullable=True)
    end_time = Column(String(8), nullable=True)
    break_start = Column(String(8), nullable=True)
    break_end = Column(String(8), nullable=True)
    allows_overtime = Column(Boolean, default=False)


class EmployeeAvailability(Base):
    """Per-date availability declared by an autonomous employee"""
    __tablename__ = "employee_availability"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)

    available_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    break_start = Column(String(8), nullable=True)
    break_end = Column(String(8), nullable=True)


class EmployeeAbsence(Base):
    """Vacation, sick leave, day off... start_date and end_date are inclusive"""
    __tablename__ = "employee_absences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)

    absence_type = Column(String(20), default="other")  # vacation, day_off, sick_leave, suspension, other
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)


class BlockedSlot(Base):
    """
    Date exceptions. Null start_time blocks the whole day for its scope:
    the company (is_company_wide) or a single employee (employee_id).
    """
    __tablename__ = "blocked_slots"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=True, index=True)
    is_company_wide = Column(Boolean, default=False)

    blocked_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(8), nullable=True)
    end_time = Column(String(8), nullable=True)
    reason = Column(String, nullable=True)  # "Holiday", "Maintenance", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())
