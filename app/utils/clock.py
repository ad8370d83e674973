# app/utils/clock.py
"""Wall clock in the business timezone"""
from datetime import datetime
from zoneinfo import ZoneInfo


class BusinessClock:
    """
    Source of "now" for the advance-notice rule.

    Bookings are taken in the business's local time, so both the current
    date and the current minute-of-day come from this timezone, not UTC.
    """

    def __init__(self, timezone_name: str):
        self.timezone = ZoneInfo(timezone_name)

    def now(self) -> datetime:
        return datetime.now(self.timezone)
