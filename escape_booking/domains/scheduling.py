"""
Schedule domain models.

A room's schedule is a weekly template of availability windows plus
day-level exceptions: days off close a date entirely and overrides
replace the template for a single date.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from escape_booking.domains.clock import WEEKDAY_KEYS, YMD, is_valid_slot, is_valid_window


class TimeSlot(BaseModel):
    """Availability window on a single day."""
    start: str = Field(..., description="Window start (HH:MM)")
    end: str = Field(..., description="Window end (HH:MM)")

    @property
    def is_valid(self) -> bool:
        return is_valid_window(self.start, self.end)


class WeekTemplate(BaseModel):
    """Default recurring weekly availability."""
    monday: List[TimeSlot] = Field(default_factory=list)
    tuesday: List[TimeSlot] = Field(default_factory=list)
    wednesday: List[TimeSlot] = Field(default_factory=list)
    thursday: List[TimeSlot] = Field(default_factory=list)
    friday: List[TimeSlot] = Field(default_factory=list)
    saturday: List[TimeSlot] = Field(default_factory=list)
    sunday: List[TimeSlot] = Field(default_factory=list)

    def for_day(self, key: str) -> List[TimeSlot]:
        return getattr(self, key)


class DayOff(BaseModel):
    """Calendar date on which the room is closed."""
    date: str = Field(..., description="Closed date (YYYY-MM-DD)")
    reason: str = Field("", description="Optional reason")


class DateOverride(BaseModel):
    """Calendar date whose availability replaces the template."""
    date: str = Field(..., description="Overridden date (YYYY-MM-DD)")
    slots: List[TimeSlot] = Field(default_factory=list)


class Schedule(BaseModel):
    """Weekly template plus days off and date overrides."""

    model_config = ConfigDict(populate_by_name=True)

    template: WeekTemplate = Field(default_factory=WeekTemplate)
    days_off: List[DayOff] = Field(default_factory=list, alias="daysOff")
    overrides: List[DateOverride] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> "Schedule":
        """Build a schedule from a stored document, dropping bad entries."""
        return cls.model_validate(normalize_schedule(doc))


def normalize_slots(raw: Any) -> List[Dict[str, str]]:
    """Keep only structurally valid ``{start, end}`` entries."""
    if not isinstance(raw, list):
        return []
    slots = []
    for entry in raw:
        if isinstance(entry, TimeSlot):
            entry = entry.model_dump()
        if is_valid_slot(entry):
            slots.append({"start": entry["start"], "end": entry["end"]})
    return slots


def _is_date(value: Any) -> bool:
    return isinstance(value, str) and bool(YMD.match(value))


def normalize_schedule(raw: Any) -> Dict[str, Any]:
    """Normalize a raw schedule document.

    Invalid slots are dropped and so are days off and overrides without a
    valid date. An override whose slots were all invalid is kept with an
    empty slot list, so its date stays closed instead of falling back to
    the template.

    Args:
        raw: Schedule document or model, possibly None or malformed

    Returns:
        Schedule document in ``{template, daysOff, overrides}`` shape
    """
    if isinstance(raw, Schedule):
        raw = raw.to_document()
    if not isinstance(raw, dict):
        raw = {}

    template = raw.get("template")
    if not isinstance(template, dict):
        template = {}

    days_off = raw.get("daysOff", raw.get("days_off"))
    overrides = raw.get("overrides")

    normalized_days_off = []
    for entry in days_off if isinstance(days_off, list) else []:
        if isinstance(entry, dict) and _is_date(entry.get("date")):
            normalized_days_off.append(
                {"date": entry["date"], "reason": str(entry.get("reason") or "")}
            )

    normalized_overrides = []
    for entry in overrides if isinstance(overrides, list) else []:
        if not isinstance(entry, dict) or not _is_date(entry.get("date")):
            continue
        normalized_overrides.append(
            {"date": entry["date"], "slots": normalize_slots(entry.get("slots"))}
        )

    return {
        "template": {key: normalize_slots(template.get(key)) for key in WEEKDAY_KEYS},
        "daysOff": normalized_days_off,
        "overrides": normalized_overrides,
    }
