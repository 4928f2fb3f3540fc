"""
Availability resolution and slot generation.

The module-level functions are pure and work on either a ``Schedule``
model or a raw schedule document. They are lenient: malformed windows are
dropped rather than reported, since they back display and preview paths.
``AvailabilityService`` applies them to stored rooms.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Tuple, Union

from escape_booking.domains import InvalidInput, ResourceNotFound, Schedule, TimeSlot
from escape_booking.domains.clock import (
    add_minutes,
    combine_local,
    date_key,
    overlaps,
    to_hhmm,
    to_minutes,
    weekday_key,
)
from escape_booking.interfaces import RoomRepository
from escape_booking.services.conflicts import ConflictDetector

logger = logging.getLogger(__name__)

ScheduleLike = Union[Schedule, Dict[str, Any], None]


def _as_schedule(schedule: ScheduleLike) -> Schedule:
    # from_document drops invalid entries, so a raw document is safe here
    if isinstance(schedule, Schedule):
        return schedule
    return Schedule.from_document(schedule)


def resolve_day(schedule: ScheduleLike, day: Union[str, date]) -> List[TimeSlot]:
    """Resolve the open windows of a schedule on a date.

    Days off win over overrides, and overrides replace the weekly
    template. A weekday with no template windows and a day off both
    resolve to an empty list.

    Args:
        schedule: Schedule model or raw schedule document
        day: Date as ``YYYY-MM-DD`` or a date

    Returns:
        Valid windows for the date, in stored order
    """
    key = date_key(day)
    schedule = _as_schedule(schedule)

    if any(off.date == key for off in schedule.days_off):
        return []

    override = next((o for o in schedule.overrides if o.date == key), None)
    if override is not None:
        return [slot for slot in override.slots if slot.is_valid]

    return [
        slot for slot in schedule.template.for_day(weekday_key(key)) if slot.is_valid
    ]


def _start_minutes(
    schedule: ScheduleLike, day: Union[str, date], duration_minutes: int
) -> List[int]:
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidInput(f"Session duration must be positive: {duration_minutes}")

    seen = set()
    starts = []
    for slot in resolve_day(schedule, day):
        window_end = to_minutes(slot.end)
        t = to_minutes(slot.start)
        while t + duration_minutes <= window_end:
            if t not in seen:
                seen.add(t)
                starts.append(t)
            t += duration_minutes
    return starts


def generate_start_times(
    schedule: ScheduleLike, day: Union[str, date], duration_minutes: int
) -> List[str]:
    """Generate the start times a session of fixed length can take on a date.

    Each window yields ``start, start + d, ...`` for as long as the whole
    session fits before the window closes. Windows are walked in order
    and a start time produced by two overlapping windows is kept once.

    Raises:
        InvalidInput: If duration_minutes is not positive
    """
    return [to_hhmm(t) for t in _start_minutes(schedule, day, duration_minutes)]


def enumerate_day_slots(
    schedule: ScheduleLike, day: Union[str, date], duration_minutes: int
) -> List[Tuple[datetime, datetime]]:
    """Session intervals for a date as ``(start, end)`` local datetimes."""
    intervals = []
    for t in _start_minutes(schedule, day, duration_minutes):
        start = combine_local(day, to_hhmm(t))
        intervals.append((start, add_minutes(start, duration_minutes)))
    return intervals


class AvailabilityService:
    """Service answering availability questions for stored rooms."""

    def __init__(
        self,
        room_repository: RoomRepository,
        conflict_detector: ConflictDetector,
    ):
        """Initialize the availability service.

        Args:
            room_repository: Repository for room lookups
            conflict_detector: Detector used to drop occupied slots
        """
        self.rooms = room_repository
        self.conflicts = conflict_detector

    def _get_room(self, room_id: str):
        room = self.rooms.get_room(room_id)
        if not room:
            raise ResourceNotFound(f"Room not found: {room_id}")
        return room

    async def get_day_slots(self, room_id: str, day: str) -> List[TimeSlot]:
        """Open windows of a room on a date."""
        return resolve_day(self._get_room(room_id).schedule, day)

    async def get_start_times(self, room_id: str, day: str) -> List[str]:
        """Offerable start times of a room on a date, ignoring bookings."""
        room = self._get_room(room_id)
        return generate_start_times(room.schedule, day, room.duration_minutes)

    async def get_day_availability(self, room_id: str, day: str) -> List[str]:
        """Start times of a room on a date that no active booking blocks.

        Bookings on linked rooms block the same interval.

        Args:
            room_id: Room ID
            day: Date as ``YYYY-MM-DD``

        Returns:
            Free start times in order
        """
        room = self._get_room(room_id)
        intervals = enumerate_day_slots(room.schedule, day, room.duration_minutes)
        if not intervals:
            return []

        booked = self.conflicts.find_conflicts(
            min(start for start, _ in intervals),
            max(end for _, end in intervals),
            room.id,
            self.conflicts.linked_group(room),
        )
        free = [
            start.strftime("%H:%M")
            for start, end in intervals
            if not any(overlaps(b.start, b.end, start, end) for b in booked)
        ]
        logger.debug(
            f"Room {room_id} on {day}: {len(free)}/{len(intervals)} slots free")
        return free
