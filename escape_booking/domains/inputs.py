"""
Room input models.

These models validate room data when it is written. They reject any
malformed entry, unlike the read models in ``scheduling`` and ``rooms``
which tolerate stored data and drop what they cannot use.
"""
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)
from typing_extensions import Annotated

from escape_booking.domains.clock import HHMM, YMD, is_valid_window, parse_date

MIN_DURATION = 30
MAX_DURATION = 180
MAX_NAME_LENGTH = 60
MAX_REASON_LENGTH = 120

RoomName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_NAME_LENGTH)
]


class SlotInput(BaseModel):
    """Availability window as submitted."""
    start: str = Field(..., description="Window start (HH:MM)", pattern=HHMM.pattern)
    end: str = Field(..., description="Window end (HH:MM)", pattern=HHMM.pattern)

    @model_validator(mode="after")
    def start_before_end(self) -> "SlotInput":
        if not is_valid_window(self.start, self.end):
            raise ValueError(f"Invalid slot {self.start}-{self.end}, expected start < end")
        return self


class WeekTemplateInput(BaseModel):
    monday: List[SlotInput] = Field(default_factory=list)
    tuesday: List[SlotInput] = Field(default_factory=list)
    wednesday: List[SlotInput] = Field(default_factory=list)
    thursday: List[SlotInput] = Field(default_factory=list)
    friday: List[SlotInput] = Field(default_factory=list)
    saturday: List[SlotInput] = Field(default_factory=list)
    sunday: List[SlotInput] = Field(default_factory=list)


class DayOffInput(BaseModel):
    date: str = Field(..., description="Closed date (YYYY-MM-DD)", pattern=YMD.pattern)
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)

    @field_validator("date")
    @classmethod
    def real_date(cls, v: str) -> str:
        parse_date(v)
        return v


class DateOverrideInput(BaseModel):
    date: str = Field(..., description="Overridden date (YYYY-MM-DD)", pattern=YMD.pattern)
    slots: List[SlotInput] = Field(..., min_length=1)

    @field_validator("date")
    @classmethod
    def real_date(cls, v: str) -> str:
        parse_date(v)
        return v


class ScheduleInput(BaseModel):
    """Schedule as submitted, in ``{template, daysOff, overrides}`` shape."""

    model_config = ConfigDict(populate_by_name=True)

    template: WeekTemplateInput = Field(default_factory=WeekTemplateInput)
    days_off: List[DayOffInput] = Field(default_factory=list, alias="daysOff")
    overrides: List[DateOverrideInput] = Field(default_factory=list)


class PriceRowInput(BaseModel):
    players: int = Field(..., description="Party size", ge=1, strict=True)
    price: float = Field(
        ..., description="Price for the party", ge=0, strict=True, allow_inf_nan=False)


class RoomInput(BaseModel):
    """Fields accepted when creating a room."""
    name: RoomName
    active: bool = True
    duration_minutes: int = Field(60, ge=MIN_DURATION, le=MAX_DURATION, strict=True)
    capacity_min: int = Field(1, ge=1, strict=True)
    capacity_max: int = Field(1, ge=1, strict=True)
    image_url: str = ""
    price_table: List[PriceRowInput] = Field(..., min_length=1)
    schedule: Optional[ScheduleInput] = None
    linked_room_ids: List[str] = Field(default_factory=list)


class RoomUpdateInput(BaseModel):
    """Fields accepted in a partial room update.

    Only the fields that were sent are applied; unlike creation, an empty
    price table is allowed.
    """
    name: Optional[RoomName] = None
    active: Optional[bool] = None
    duration_minutes: Optional[int] = Field(
        None, ge=MIN_DURATION, le=MAX_DURATION, strict=True)
    capacity_min: Optional[int] = Field(None, ge=1, strict=True)
    capacity_max: Optional[int] = Field(None, ge=1, strict=True)
    image_url: Optional[str] = None
    price_table: Optional[List[PriceRowInput]] = None
    schedule: Optional[ScheduleInput] = None
    linked_room_ids: Optional[List[str]] = None
