"""
Abstract interfaces for the escape room booking system.

These interfaces define the contracts that concrete implementations
must adhere to, following the Dependency Inversion Principle.

This package contains:
- Repository interfaces for data access
- Provider interfaces for external storage adapters
- Service interfaces for business logic components
"""

from escape_booking.interfaces.providers.data_storage import DataStorageProvider
from escape_booking.interfaces.repositories import (
    BookingRepository,
    CustomerRepository,
    RoomLockRepository,
    RoomRepository,
)
