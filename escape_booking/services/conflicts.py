"""
Booking conflict detection.

A proposed interval conflicts with any non-cancelled booking of the same
room, or of a room it is linked to, whose interval overlaps it. Intervals
are half-open, so a booking ending at 10:00 does not block one starting
at 10:00.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from escape_booking.domains import Booking, InvalidInput, Room
from escape_booking.interfaces import BookingRepository, RoomRepository

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Detects overlaps between a proposed interval and stored bookings."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        room_repository: Optional[RoomRepository] = None,
        symmetric_links: bool = True,
    ):
        """Initialize the detector.

        Args:
            booking_repository: Repository queried for existing bookings
            room_repository: Repository used to find rooms linking back
                to a room; required when symmetric_links is set
            symmetric_links: Whether a link from B to A also makes a
                booking on B block A
        """
        if symmetric_links and room_repository is None:
            raise ValueError("A room repository is required for symmetric links")
        self.bookings = booking_repository
        self.rooms = room_repository
        self.symmetric_links = symmetric_links

    def linked_group(self, room: Room) -> List[str]:
        """Rooms other than ``room`` whose bookings block it.

        Args:
            room: Room being booked

        Returns:
            Sorted room IDs from the room's own links, plus rooms linking
            to it when links are symmetric
        """
        linked = set(room.linked_room_ids)
        if self.symmetric_links:
            linked.update(r.id for r in self.rooms.find_rooms_linking_to(room.id))
        linked.discard(room.id)
        return sorted(linked)

    def find_conflicts(
        self,
        start: datetime,
        end: datetime,
        room_id: str,
        linked_room_ids: Iterable[str] = (),
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """Find active bookings overlapping [start, end) on the room group.

        Raises:
            InvalidInput: If start is not before end
        """
        if start >= end:
            raise InvalidInput("Booking start must be before its end")

        room_ids = [room_id, *(r for r in linked_room_ids if r != room_id)]
        return self.bookings.find_overlapping(
            room_ids, start, end, exclude_booking_id=exclude_booking_id)

    def has_conflict(
        self,
        start: datetime,
        end: datetime,
        room_id: str,
        linked_room_ids: Iterable[str] = (),
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Check whether [start, end) is blocked on the room or its links.

        Args:
            start: Proposed start
            end: Proposed end
            room_id: Room being booked
            linked_room_ids: Rooms sharing capacity with it
            exclude_booking_id: Booking being edited, ignored in the check

        Returns:
            True if at least one active booking overlaps
        """
        conflicts = self.find_conflicts(
            start, end, room_id, linked_room_ids, exclude_booking_id)
        if conflicts:
            logger.info(
                f"Interval {start.isoformat()}-{end.isoformat()} on room {room_id} "
                f"conflicts with booking {conflicts[0].id}"
            )
        return bool(conflicts)
