# app/models/company.py
"""
Company Model - tenant root plus its weekly opening hours and booking rules
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    slug = Column(String(100), nullable=False, unique=True)
    status = Column(String(20), default="active")
    plan = Column(String(50), default="basic")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<Company(id={self.id}, slug={self.slug})>"


class BusinessHours(Base):
    __tablename__ = "business_hours"
    __table_args__ = (UniqueConstraint("company_id", "day_of_week", name="uq_business_hours_day"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    is_open = Column(Boolean, default=True)
    open_time = Column(String(8), nullable=True)  # HH:MM format
    close_time = Column(String(8), nullable=True)  # HH:MM format

    # Split hours; mapped but not intersected by the slot generator
    second_open_time = Column(String(8), nullable=True)
    second_close_time = Column(String(8), nullable=True)

    def __repr__(self):
        return f"<BusinessHours(company_id={self.company_id}, day={self.day_of_week})>"


class CompanyScheduleSettings(Base):
    """Per-company booking rules (optional row; defaults apply when absent)"""
    __tablename__ = "company_schedule_settings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, unique=True)

    slot_duration = Column(Integer, nullable=True)  # minutes between candidate starts
    min_booking_advance_hours = Column(Integer, nullable=True)
    max_booking_advance_days = Column(Integer, nullable=True)

    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
