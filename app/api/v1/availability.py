# app/api/v1/availability.py
import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.dependencies import get_clock
from app.config.database import get_db
from app.schemas.availability import (
    AvailabilityQuery,
    AvailabilityResponse,
    AvailableDatesQuery,
    AvailableDatesResponse,
)
from app.services.availability.availability_service import AvailabilityService
from app.utils.clock import BusinessClock

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=AvailabilityResponse, response_model_exclude_none=True)
async def get_availability(
        company_id: str = Query(..., min_length=1),
        service_id: str = Query(..., min_length=1),
        employee_id: Optional[str] = Query(None, description="Empty or omitted means any employee"),
        date: datetime.date = Query(..., description="YYYY-MM-DD"),
        db: Session = Depends(get_db),
        clock: BusinessClock = Depends(get_clock)
):
    """Bookable (time, employee) slots for a service on one date"""
    query = AvailabilityQuery(
        company_id=company_id,
        service_id=service_id,
        employee_id=employee_id,
        date=date,
    )
    return await AvailabilityService.get_available_slots(db, query, clock.now())


@router.post("", response_model=AvailabilityResponse, response_model_exclude_none=True)
async def post_availability(
        query: AvailabilityQuery,
        db: Session = Depends(get_db),
        clock: BusinessClock = Depends(get_clock)
):
    """Same as GET, with the parameters in a JSON body"""
    return await AvailabilityService.get_available_slots(db, query, clock.now())


@router.get("/dates", response_model=AvailableDatesResponse)
async def get_available_dates(
        company_id: str = Query(..., min_length=1),
        service_id: str = Query(..., min_length=1),
        employee_id: Optional[str] = Query(None),
        start_date: Optional[datetime.date] = Query(None, description="Defaults to today"),
        days: int = Query(30, ge=1),
        db: Session = Depends(get_db),
        clock: BusinessClock = Depends(get_clock)
):
    """Dates with at least one open slot, for the booking calendar"""
    query = AvailableDatesQuery(
        company_id=company_id,
        service_id=service_id,
        employee_id=employee_id,
        start_date=start_date,
        days=days,
    )
    dates = await AvailabilityService.get_available_dates(db, query, clock.now())
    return AvailableDatesResponse(dates=dates)
