"""
Escape Booking - scheduling and reservation engine for escape rooms.

This package resolves room availability from weekly templates, days off
and date overrides, generates offerable session start times, prices
parties and validates bookings against overlapping reservations on a
room and the rooms linked to it.
"""

# Client interface (main entry point)
from escape_booking.client.escape_booking import EscapeBooking

# Factory for wiring the system
from escape_booking.factories.booking_factory import EscapeBookingFactory

# Pure scheduling functions
from escape_booking.domains.clock import overlaps
from escape_booking.services.availability import (
    enumerate_day_slots,
    generate_start_times,
    resolve_day,
)
from escape_booking.services.pricing import lookup_price, price_for

# Package metadata
__all__ = [
    # Main client interface
    "EscapeBooking",
    # Factories
    "EscapeBookingFactory",
    # Scheduling
    "resolve_day",
    "generate_start_times",
    "enumerate_day_slots",
    "overlaps",
    # Pricing
    "price_for",
    "lookup_price",
]
