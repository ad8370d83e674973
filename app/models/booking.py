# ===== app/models/booking.py =====
from sqlalchemy import Column, String, Integer, Numeric, Text, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # References
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    client_id = Column(String(36), nullable=True)
    service_id = Column(String(36), ForeignKey("services.id"), nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id"), nullable=True, index=True)

    # Booking details
    booking_date = Column(Date, nullable=False, index=True)
    booking_time = Column(String(8), nullable=False)  # HH:MM format
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    # Status tracking
    booking_status = Column(String(20), default="pending")  # pending, confirmed, cancelled, completed, no_show
    payment_status = Column(String(20), default="pending")  # pending, confirmed, cancelled, free
    payment_method = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Booking(id={self.id}, employee_id={self.employee_id}, {self.booking_date} {self.booking_time})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "company_id": self.company_id,
            "client_id": self.client_id,
            "service_id": self.service_id,
            "employee_id": self.employee_id,
            "booking_date": self.booking_date.isoformat(),
            "booking_time": self.booking_time,
            "duration_minutes": self.duration_minutes,
            "price": float(self.price) if self.price is not None else None,
            "notes": self.notes,
            "booking_status": self.booking_status,
            "payment_status": self.payment_status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
