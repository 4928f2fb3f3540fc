"""
Service interfaces for business logic components.

These interfaces define the contracts for business logic services,
ensuring proper separation of concerns and testability.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from escape_booking.domains import Booking, BookingResult, Customer, Room


class RoomService(ABC):
    """Interface for room management."""

    @abstractmethod
    async def create_room(self, room_data: Dict[str, Any]) -> str:
        """Create a room and return its ID."""
        pass

    @abstractmethod
    async def get_room(self, room_id: str) -> Optional[Room]:
        """Get a room by ID."""
        pass

    @abstractmethod
    async def update_room(self, room_id: str, updates: Dict[str, Any]) -> bool:
        """Apply a partial update to a room."""
        pass

    @abstractmethod
    async def delete_room(self, room_id: str) -> bool:
        """Delete a room."""
        pass

    @abstractmethod
    async def list_rooms(self, active_only: bool = True) -> List[Room]:
        """List rooms."""
        pass


class CustomerService(ABC):
    """Interface for customer resolution."""

    @abstractmethod
    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        """Get a customer by ID."""
        pass

    @abstractmethod
    async def find_or_create(
        self, email: str, name: Optional[str] = None, phone: Optional[str] = None
    ) -> str:
        """Resolve a customer ID by email, creating the customer if needed."""
        pass

    @abstractmethod
    async def upsert(
        self, email: str, name: Optional[str] = None, phone: Optional[str] = None
    ) -> str:
        """Resolve a customer ID by email, overwriting contact details."""
        pass


class ReservationService(ABC):
    """Interface for the booking lifecycle."""

    @abstractmethod
    async def create_booking(
        self, room_id: str, date: str, start_time: str, players: int, **kwargs
    ) -> BookingResult:
        """Validate and create a booking."""
        pass

    @abstractmethod
    async def edit_booking(
        self, booking_id: str, date: str, start_time: str, players: int, **kwargs
    ) -> BookingResult:
        """Re-validate and update a booking."""
        pass

    @abstractmethod
    async def cancel_booking(
        self, booking_id: str, reason: Optional[str] = None
    ) -> Tuple[bool, Optional[str]]:
        """Cancel a booking."""
        pass

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID."""
        pass

    @abstractmethod
    async def list_bookings(
        self, from_date: str, to_date: str, room_id: Optional[str] = None
    ) -> List[Booking]:
        """List bookings in a date range."""
        pass
