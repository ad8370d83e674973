# app/models/employee.py
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    # fixed / autonomous (legacy rows: fixo / autonomo)
    employee_type = Column(String(20), nullable=False, default="fixed")
    role = Column(String(20), default="employee")  # owner, manager, supervisor, receptionist, employee

    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Employee(id={self.id}, name={self.name}, type={self.employee_type})>"


class EmployeeService(Base):
    """Which services an employee performs"""
    __tablename__ = "employee_services"
    __table_args__ = (UniqueConstraint("employee_id", "service_id", name="uq_employee_service"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
