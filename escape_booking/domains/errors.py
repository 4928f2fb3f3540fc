"""
Error types raised by the booking core.

Every error carries a ``kind`` string that the reservation service copies
into a rejected ``BookingResult`` so callers can map it to a response.
"""


class BookingError(Exception):
    """Base class for all booking errors."""

    kind = "booking_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class FormatError(BookingError, ValueError):
    """A date or time string does not match its pattern."""

    kind = "format_error"


class ResourceNotFound(BookingError):
    """The referenced room does not exist."""

    kind = "resource_not_found"


class InvalidInput(BookingError, ValueError):
    """Well-formed input with semantically invalid values."""

    kind = "invalid_input"


class SlotConflict(BookingError):
    """The proposed interval overlaps an active booking."""

    kind = "slot_conflict"


class PriceNotFound(BookingError):
    """No price row matches the requested party size."""

    kind = "price_not_found"


class BookingNotFound(BookingError):
    """The referenced booking does not exist."""

    kind = "booking_not_found"


class BookingTimeout(BookingError):
    """The room lock could not be acquired in time."""

    kind = "timeout"
