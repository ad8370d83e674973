# ============================================================================
# FILE: app/api/dependencies.py
# Shared FastAPI dependencies
# ============================================================================
from functools import lru_cache

from app.config.settings import settings
from app.utils.clock import BusinessClock


@lru_cache()
def _business_clock() -> BusinessClock:
    return BusinessClock(settings.BUSINESS_TIMEZONE)


def get_clock() -> BusinessClock:
    """
    Clock used for "today" / "now" checks.
    Tests replace it through app.dependency_overrides.
    """
    return _business_clock()
