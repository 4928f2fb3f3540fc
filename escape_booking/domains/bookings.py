"""
Booking domain models.

These models define reservations, the policy the reservation service
applies and the structured result it returns to callers.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BookingStatus(str, Enum):
    """Status of a booking."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Language(str, Enum):
    """Language the session is run in."""
    ES = "es"
    EN = "en"
    RU = "ru"


class Booking(BaseModel):
    """Reservation of a room for an interval."""
    id: str = Field(..., description="Unique identifier")
    room_id: str = Field(..., description="Room ID")
    room_name: str = Field("", description="Room name at booking time")
    start: datetime = Field(..., description="Start instant (local)")
    end: datetime = Field(..., description="End instant (local)")
    players: int = Field(..., description="Party size", ge=1)
    price: float = Field(0, description="Resolved price", ge=0)
    status: BookingStatus = Field(
        BookingStatus.PENDING, description="Booking status")
    customer_id: Optional[str] = Field(None, description="Customer ID")
    language: Language = Field(Language.ES, description="Session language")
    notes: str = Field("", description="Customer-facing notes")
    internal_notes: str = Field("", description="Staff-only notes")
    created_at: datetime = Field(..., description="When the booking was created")
    updated_at: Optional[datetime] = Field(
        None, description="When the booking was last updated")
    cancelled_at: Optional[datetime] = Field(
        None, description="When the booking was cancelled")
    cancellation_reason: Optional[str] = Field(
        None, description="Why the booking was cancelled")

    @model_validator(mode="after")
    def start_before_end(self) -> "Booking":
        if self.start >= self.end:
            raise ValueError("Booking start must be before its end")
        return self

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED


class BookingPolicy(BaseModel):
    """Rules the reservation service applies to every request."""
    default_status: BookingStatus = Field(
        BookingStatus.PENDING, description="Status given to new bookings")
    strict_pricing: bool = Field(
        True, description="Reject party sizes without a price row")
    symmetric_links: bool = Field(
        True, description="Treat room links as bidirectional")
    enforce_schedule: bool = Field(
        False, description="Only accept offered start times")
    lock_timeout_seconds: float = Field(
        5.0, description="How long to wait for a room lock", gt=0)
    lock_ttl_seconds: float = Field(
        30.0, description="When an abandoned room lock may be reclaimed", gt=0)


class BookingResult(BaseModel):
    """Outcome of a create or edit request."""
    ok: bool = Field(..., description="Whether the request was accepted")
    booking_id: Optional[str] = Field(None, description="Booking ID if accepted")
    error: Optional[str] = Field(None, description="Error kind if rejected")
    message: Optional[str] = Field(None, description="Human readable reason")

    @classmethod
    def accepted(cls, booking_id: str) -> "BookingResult":
        return cls(ok=True, booking_id=booking_id)

    @classmethod
    def rejected(cls, error: str, message: str) -> "BookingResult":
        return cls(ok=False, error=error, message=message)
