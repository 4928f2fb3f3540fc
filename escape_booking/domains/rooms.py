"""
Room domain models.

These models define bookable rooms, their price tables and
the result of a price lookup.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from escape_booking.domains.scheduling import Schedule


class PriceRow(BaseModel):
    """Price for an exact party size."""
    players: int = Field(..., description="Party size", ge=1)
    price: float = Field(..., description="Price for the party", ge=0)


class PriceLookup(BaseModel):
    """Result of looking up a party size in a price table."""
    found: bool = Field(..., description="Whether a matching row exists")
    price: Optional[float] = Field(None, description="Matched price")

    @property
    def price_or_zero(self) -> float:
        return self.price if self.found else 0


class Room(BaseModel):
    """Bookable escape room."""
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Room name")
    active: bool = Field(True, description="Whether the room takes bookings")
    duration_minutes: int = Field(60, description="Session length", gt=0)
    capacity_min: int = Field(1, description="Minimum party size", ge=1)
    capacity_max: int = Field(1, description="Maximum party size", ge=1)
    price_table: List[PriceRow] = Field(
        default_factory=list, description="Price per party size")
    schedule: Schedule = Field(
        default_factory=Schedule, description="Availability schedule")
    linked_room_ids: List[str] = Field(
        default_factory=list, description="Rooms sharing capacity with this one")
    image_url: str = Field("", description="Room image URL or path")

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v.strip():
            raise ValueError("Room name cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def capacity_in_order(self) -> "Room":
        if self.capacity_min > self.capacity_max:
            raise ValueError("capacity_min cannot be greater than capacity_max")
        return self

    def accepts_party(self, players: int) -> bool:
        """Check whether a party size fits the room's capacity."""
        return self.capacity_min <= players <= self.capacity_max
