"""
Domain models for the escape room booking system.

This package contains the core domain models that represent the
business objects and value types in the system.
"""

from escape_booking.domains.errors import *
from escape_booking.domains.scheduling import *
from escape_booking.domains.rooms import *
from escape_booking.domains.bookings import *
from escape_booking.domains.customers import *
