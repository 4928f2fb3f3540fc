"""
Factory for creating and wiring components of the booking system.

This module handles the creation and dependency injection for all
services and components used in the system.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

# Adapter imports
from escape_booking.adapters.mongodb_adapter import MongoDBAdapter

# Domain imports
from escape_booking.domains import BookingPolicy

# Repository imports
from escape_booking.repositories import (
    MongoBookingRepository,
    MongoCustomerRepository,
    MongoRoomLockRepository,
    MongoRoomRepository,
)

# Service imports
from escape_booking.services.availability import AvailabilityService
from escape_booking.services.conflicts import ConflictDetector
from escape_booking.services.customer import CustomerService
from escape_booking.services.reservation import ReservationService
from escape_booking.services.room import RoomService

logger = logging.getLogger(__name__)


class BookingSystem:
    """Wired services sharing one storage adapter."""

    def __init__(
        self,
        db_adapter,
        room_service: RoomService,
        customer_service: CustomerService,
        availability_service: AvailabilityService,
        reservation_service: ReservationService,
    ):
        self.db_adapter = db_adapter
        self.room_service = room_service
        self.customer_service = customer_service
        self.availability_service = availability_service
        self.reservation_service = reservation_service

    def close(self) -> None:
        """Close the storage connection."""
        self.db_adapter.close()


class EscapeBookingFactory:
    """Factory for creating and wiring components of the booking system."""

    @staticmethod
    def create_policy(config: Dict[str, Any]) -> BookingPolicy:
        """Build the booking policy from the optional 'booking' section."""
        try:
            return BookingPolicy.model_validate(config.get("booking") or {})
        except ValidationError as e:
            raise ValueError(f"Invalid booking configuration: {e}")

    @staticmethod
    def create_adapter(config: Dict[str, Any]) -> MongoDBAdapter:
        """Create the MongoDB adapter from the 'mongo' section.

        Raises:
            ValueError: If the connection string or database is missing
        """
        if "mongo" not in config:
            raise ValueError("MongoDB configuration is required.")
        if "connection_string" not in config["mongo"]:
            raise ValueError("MongoDB connection string is required.")
        if "database" not in config["mongo"]:
            raise ValueError("MongoDB database name is required.")

        return MongoDBAdapter(
            connection_string=config["mongo"]["connection_string"],
            database_name=config["mongo"]["database"],
            timeout_ms=config["mongo"].get("timeout_ms"),
        )

    @staticmethod
    def create_from_adapter(db_adapter, policy: BookingPolicy) -> BookingSystem:
        """Wire repositories and services around an existing adapter."""
        room_repository = MongoRoomRepository(db_adapter)
        booking_repository = MongoBookingRepository(db_adapter)
        customer_repository = MongoCustomerRepository(db_adapter)
        lock_repository = MongoRoomLockRepository(db_adapter)

        conflict_detector = ConflictDetector(
            booking_repository,
            room_repository,
            symmetric_links=policy.symmetric_links,
        )
        customer_service = CustomerService(customer_repository)

        return BookingSystem(
            db_adapter=db_adapter,
            room_service=RoomService(room_repository),
            customer_service=customer_service,
            availability_service=AvailabilityService(
                room_repository, conflict_detector),
            reservation_service=ReservationService(
                room_repository,
                booking_repository,
                conflict_detector,
                lock_repository=lock_repository,
                customer_service=customer_service,
                policy=policy,
            ),
        )

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> BookingSystem:
        """Create the booking system from configuration.

        Args:
            config: Configuration dictionary

        Returns:
            Wired BookingSystem
        """
        policy = EscapeBookingFactory.create_policy(config)
        db_adapter = EscapeBookingFactory.create_adapter(config)
        logger.info(
            f"Using MongoDB database {config['mongo']['database']} "
            f"(strict_pricing={policy.strict_pricing}, "
            f"symmetric_links={policy.symmetric_links})"
        )
        return EscapeBookingFactory.create_from_adapter(db_adapter, policy)
