"""
Shared fixtures: an in-memory SQLite store, row factories and a fixed clock.

Environment overrides must happen before the app package is imported,
since settings and the engine are built at import time.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_PER_SECOND"] = "0"

import datetime
import uuid
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_clock
from app.config.database import SessionLocal, engine
from app.main import app
from app.models import (
    Base,
    BlockedSlot,
    Booking,
    BusinessHours,
    Company,
    CompanyScheduleSettings,
    Employee,
    EmployeeAbsence,
    EmployeeAvailability,
    EmployeeSchedule,
    EmployeeService,
    Service,
)

SAO_PAULO = ZoneInfo("America/Sao_Paulo")

# 2025-06-02 is a Monday (day_of_week 1)
MONDAY = datetime.date(2025, 6, 2)
MONDAY_DOW = 1


class FixedClock:
    """Stands in for BusinessClock"""

    def __init__(self, moment: datetime.datetime):
        self.moment = moment

    def now(self) -> datetime.datetime:
        return self.moment


def at(day: datetime.date, hour: int, minute: int = 0) -> datetime.datetime:
    return datetime.datetime(day.year, day.month, day.day, hour, minute, tzinfo=SAO_PAULO)


# A week before MONDAY, so the advance-notice rule never applies by default
DEFAULT_NOW = at(MONDAY - datetime.timedelta(days=7), 10)


class Factory:
    """Inserts store rows with sensible defaults and commits each one"""

    def __init__(self, db):
        self.db = db

    def _save(self, row):
        self.db.add(row)
        self.db.commit()
        return row

    def company(self, name="Studio Bela"):
        return self._save(Company(name=name, slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}"))

    def business_hours(self, company, day_of_week=MONDAY_DOW, open_time="08:00", close_time="18:00", is_open=True):
        return self._save(BusinessHours(
            company_id=company.id,
            day_of_week=day_of_week,
            is_open=is_open,
            open_time=open_time,
            close_time=close_time,
        ))

    def schedule_settings(self, company, slot_duration=30, min_booking_advance_hours=1):
        return self._save(CompanyScheduleSettings(
            company_id=company.id,
            slot_duration=slot_duration,
            min_booking_advance_hours=min_booking_advance_hours,
        ))

    def service(self, company, name="Haircut", duration_minutes=60, price=50):
        return self._save(Service(
            company_id=company.id,
            name=name,
            duration_minutes=duration_minutes,
            price=price,
        ))

    def employee(self, company, name="Ana", services=(), employee_type="fixed", is_active=True):
        employee = self._save(Employee(
            company_id=company.id,
            name=name,
            employee_type=employee_type,
            is_active=is_active,
        ))
        for service in services:
            self.link(employee, service)
        return employee

    def link(self, employee, service):
        return self._save(EmployeeService(employee_id=employee.id, service_id=service.id))

    def schedule(self, employee, day_of_week=MONDAY_DOW, start_time="09:00", end_time="17:00",
                 break_start=None, break_end=None, is_working=True):
        return self._save(EmployeeSchedule(
            employee_id=employee.id,
            day_of_week=day_of_week,
            is_working=is_working,
            start_time=start_time,
            end_time=end_time,
            break_start=break_start,
            break_end=break_end,
        ))

    def availability(self, employee, day=MONDAY, start_time="09:00", end_time="17:00",
                     break_start=None, break_end=None):
        return self._save(EmployeeAvailability(
            employee_id=employee.id,
            available_date=day,
            start_time=start_time,
            end_time=end_time,
            break_start=break_start,
            break_end=break_end,
        ))

    def absence(self, employee, start_date=MONDAY, end_date=MONDAY, absence_type="vacation"):
        return self._save(EmployeeAbsence(
            employee_id=employee.id,
            absence_type=absence_type,
            start_date=start_date,
            end_date=end_date,
        ))

    def block(self, company, day=MONDAY, start_time=None, end_time=None, employee=None):
        return self._save(BlockedSlot(
            company_id=company.id,
            employee_id=employee.id if employee else None,
            is_company_wide=employee is None,
            blocked_date=day,
            start_time=start_time,
            end_time=end_time,
        ))

    def booking(self, company, service, employee, day=MONDAY, booking_time="09:00",
                duration_minutes=60, status="confirmed"):
        return self._save(Booking(
            company_id=company.id,
            service_id=service.id,
            employee_id=employee.id,
            booking_date=day,
            booking_time=booking_time,
            duration_minutes=duration_minutes,
            price=50,
            booking_status=status,
        ))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def salon(factory):
    """
    One company open Monday 08:00-18:00 with a 60-minute service and one
    fixed employee working 09:00-17:00.
    """
    company = factory.company()
    factory.business_hours(company)
    factory.schedule_settings(company)
    service = factory.service(company)
    employee = factory.employee(company, name="Ana", services=[service])
    factory.schedule(employee)
    return company, service, employee


@pytest.fixture
def clock():
    return FixedClock(DEFAULT_NOW)


@pytest.fixture
def client(db, clock):
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
