"""
API v1 router setup
Public booking routes: availability lookup and booking creation
"""
from fastapi import APIRouter

from app.api.v1 import availability, bookings

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(availability.router)
api_v1_router.include_router(bookings.router)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and available endpoints."""
    return {
        "version": "1.0",
        "endpoints": {
            "availability": "/api/v1/availability",
            "available_dates": "/api/v1/availability/dates",
            "bookings": "/api/v1/bookings"
        }
    }
