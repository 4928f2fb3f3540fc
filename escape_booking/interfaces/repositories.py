"""
Repository interfaces for data access.

These interfaces define the contracts for data access components,
allowing for different storage implementations (MongoDB, memory, etc.)
without changing the business logic.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from escape_booking.domains import Booking, Customer, Room


class RoomRepository(ABC):
    """Interface for room data access."""

    @abstractmethod
    def create_room(self, room: Room) -> str:
        """Store a new room and return its ID."""
        pass

    @abstractmethod
    def get_room(self, room_id: str) -> Optional[Room]:
        """Get a room by ID."""
        pass

    @abstractmethod
    def update_room(self, room_id: str, updates: Dict[str, Any]) -> bool:
        """Apply a partial update to a room."""
        pass

    @abstractmethod
    def delete_room(self, room_id: str) -> bool:
        """Delete a room."""
        pass

    @abstractmethod
    def list_rooms(self, active_only: bool = True) -> List[Room]:
        """List rooms sorted by name."""
        pass

    @abstractmethod
    def find_rooms_linking_to(self, room_id: str) -> List[Room]:
        """Find rooms whose links include the given room."""
        pass


class BookingRepository(ABC):
    """Interface for booking data access."""

    @abstractmethod
    def create_booking(self, booking: Booking) -> str:
        """Store a new booking and return its ID."""
        pass

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID."""
        pass

    @abstractmethod
    def update_booking(self, booking_id: str, updates: Dict[str, Any]) -> bool:
        """Apply a partial update to a booking."""
        pass

    @abstractmethod
    def delete_booking(self, booking_id: str) -> bool:
        """Delete a booking."""
        pass

    @abstractmethod
    def find_overlapping(
        self,
        room_ids: Iterable[str],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """Find active bookings on any of the rooms overlapping [start, end)."""
        pass

    @abstractmethod
    def find_in_range(
        self,
        start: datetime,
        end: datetime,
        room_ids: Optional[Iterable[str]] = None,
    ) -> List[Booking]:
        """Find bookings that start and end within a range."""
        pass

    @abstractmethod
    def find_by_customer(self, customer_id: str) -> List[Booking]:
        """Find a customer's bookings, newest first."""
        pass


class CustomerRepository(ABC):
    """Interface for customer data access."""

    @abstractmethod
    def get_customer(self, customer_id: str) -> Optional[Customer]:
        """Get a customer by ID."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Get a customer by email."""
        pass

    @abstractmethod
    def create_customer(self, customer: Customer) -> str:
        """Store a new customer and return its ID."""
        pass

    @abstractmethod
    def update_customer(self, customer_id: str, updates: Dict[str, Any]) -> bool:
        """Apply a partial update to a customer."""
        pass


class RoomLockRepository(ABC):
    """Interface for per-room write locks."""

    @abstractmethod
    def try_acquire(self, room_id: str, owner: str, ttl_seconds: float) -> bool:
        """Take the lock for a room, returning False if it is held."""
        pass

    @abstractmethod
    def release(self, room_id: str, owner: str) -> bool:
        """Release a lock held by owner."""
        pass
