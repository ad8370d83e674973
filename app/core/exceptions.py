# app/core/exceptions.py
"""
Errors raised by the scheduling services.

Each one carries the HTTP status the API answers with; the handler
registered in app.main renders them as {"error": message}.
"""


class SchedulingError(Exception):
    """Base class for request-level failures"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(SchedulingError):
    """Malformed or missing request parameters"""

    status_code = 400


class ServiceNotFoundError(SchedulingError):
    status_code = 404


class SlotUnavailableError(SchedulingError):
    """The requested start time is not (or no longer) bookable"""

    status_code = 409


class UpstreamStoreError(SchedulingError):
    """The store query failed"""

    status_code = 502


class MalformedRecordError(SchedulingError):
    """A store row violates the table contract (bad time string, unknown type...)"""

    status_code = 502


class AvailabilityTimeoutError(SchedulingError):
    status_code = 504
