"""
Simplified client interface for the booking system.

This module provides a clean API for HTTP handlers, scripts and the CLI
without dealing with internal wiring.
"""

import importlib.util
import json
from typing import Any, Dict, List, Optional, Tuple

from escape_booking.domains import Booking, BookingResult, Room
from escape_booking.factories.booking_factory import EscapeBookingFactory


class EscapeBooking:
    """Simplified client interface for the booking system."""

    def __init__(self, config_path: str = None, config: Dict[str, Any] = None):
        """Initialize the booking system from config file or dictionary.

        Args:
            config_path: Path to configuration file (JSON or Python)
            config: Configuration dictionary
        """
        if not config and not config_path:
            raise ValueError("Either config or config_path must be provided")

        if config_path:
            with open(config_path, "r") as f:
                if config_path.endswith(".json"):
                    config = json.load(f)
                else:
                    # Assume it's a Python file
                    spec = importlib.util.spec_from_file_location("config", config_path)
                    config_module = importlib.util.module_from_spec(spec)
                    spec.loader.exec_module(config_module)
                    config = config_module.config

        self.system = EscapeBookingFactory.create_from_config(config)

    def close(self) -> None:
        """Close the storage connection."""
        self.system.close()

    async def create_room(self, room_data: Dict[str, Any]) -> str:
        return await self.system.room_service.create_room(room_data)

    async def update_room(self, room_id: str, updates: Dict[str, Any]) -> bool:
        return await self.system.room_service.update_room(room_id, updates)

    async def list_rooms(self, active_only: bool = True) -> List[Room]:
        return await self.system.room_service.list_rooms(active_only)

    async def get_start_times(self, room_id: str, date: str) -> List[str]:
        """Start times a room offers on a date."""
        return await self.system.availability_service.get_start_times(room_id, date)

    async def get_availability(self, room_id: str, date: str) -> List[str]:
        """Start times a room offers on a date that are still free."""
        return await self.system.availability_service.get_day_availability(room_id, date)

    async def create_booking(
        self, room_id: str, date: str, start_time: str, players: int, **kwargs
    ) -> BookingResult:
        """Create a booking.

        See ReservationService.create_booking for the accepted keyword
        arguments.
        """
        return await self.system.reservation_service.create_booking(
            room_id, date, start_time, players, **kwargs)

    async def edit_booking(
        self, booking_id: str, date: str, start_time: str, players: int, **kwargs
    ) -> BookingResult:
        return await self.system.reservation_service.edit_booking(
            booking_id, date, start_time, players, **kwargs)

    async def cancel_booking(
        self, booking_id: str, reason: Optional[str] = None
    ) -> Tuple[bool, Optional[str]]:
        return await self.system.reservation_service.cancel_booking(booking_id, reason)

    async def confirm_booking(self, booking_id: str) -> Tuple[bool, Optional[str]]:
        return await self.system.reservation_service.confirm_booking(booking_id)

    async def list_bookings(
        self, from_date: str, to_date: str, room_id: Optional[str] = None
    ) -> List[Booking]:
        return await self.system.reservation_service.list_bookings(
            from_date, to_date, room_id)
