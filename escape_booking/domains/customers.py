"""
Customer domain model.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Customer(BaseModel):
    """Person or group that holds bookings."""
    id: str = Field(..., description="Unique identifier")
    name: str = Field("", description="Customer name")
    email: Optional[str] = Field(None, description="Contact email")
    phone: str = Field("", description="Contact phone")
    created_at: Optional[datetime] = Field(None, description="When created")
    updated_at: Optional[datetime] = Field(None, description="When last updated")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip().lower() or None
