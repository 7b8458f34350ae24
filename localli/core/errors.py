# localli/core/errors.py
"""
Booking error taxonomy.

None of these are transient: callers react to them, nothing in the core retries.
"""


class BookingError(Exception):
    """Base class for all booking-core errors."""

    status_code = 400
    default_detail = "Booking error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BookingError):
    """Missing or malformed request fields."""

    status_code = 400
    default_detail = "Invalid request"


class ForbiddenError(BookingError):
    """The caller is not allowed to act on this resource."""

    status_code = 403
    default_detail = "Forbidden"


class NotFoundError(BookingError):
    """Referenced business or appointment does not exist."""

    status_code = 404
    default_detail = "Not found"


class ConflictError(BookingError):
    """The (business, date, slot) triple is taken, or the appointment is in a terminal state."""

    status_code = 409
    default_detail = "Slot already booked"


class ConfigurationError(BookingError):
    """Business hours are missing or invalid; needs a data fix, not a retry."""

    status_code = 422
    default_detail = "Business hours are not configured"
