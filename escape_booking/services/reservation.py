"""
Reservation service implementation.

This service validates booking requests against a room's schedule,
capacity, price table and existing bookings, and persists the result.
Checking for conflicts and writing the booking happen while holding the
store-backed locks of every room in the booked room's link group, so two
concurrent requests for overlapping intervals cannot both be accepted.
"""
import asyncio
import datetime
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from escape_booking.domains import (
    Booking,
    BookingError,
    BookingNotFound,
    BookingPolicy,
    BookingResult,
    BookingStatus,
    BookingTimeout,
    InvalidInput,
    Language,
    PriceNotFound,
    ResourceNotFound,
    Room,
    SlotConflict,
)
from escape_booking.domains.clock import (
    add_minutes,
    combine_local,
    parse_date,
    to_minutes,
)
from escape_booking.interfaces import (
    BookingRepository,
    RoomLockRepository,
    RoomRepository,
)
from escape_booking.interfaces.services import (
    CustomerService,
    ReservationService as ReservationServiceInterface,
)
from escape_booking.services.availability import generate_start_times
from escape_booking.services.conflicts import ConflictDetector
from escape_booking.services.pricing import lookup_price

logger = logging.getLogger(__name__)

# Administrative status changes; creation and edits set status directly
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


class ReservationService(ReservationServiceInterface):
    """Service for creating, editing and managing bookings."""

    def __init__(
        self,
        room_repository: RoomRepository,
        booking_repository: BookingRepository,
        conflict_detector: ConflictDetector,
        lock_repository: Optional[RoomLockRepository] = None,
        customer_service: Optional[CustomerService] = None,
        policy: Optional[BookingPolicy] = None,
        lock_poll_interval: float = 0.05,
    ):
        """Initialize the reservation service.

        Args:
            room_repository: Repository for room lookups
            booking_repository: Repository for booking storage
            conflict_detector: Detector for overlapping bookings
            lock_repository: Per-room locks; without it no serialization
                is done around check and insert
            customer_service: Service resolving customer references
            policy: Booking rules, defaults to BookingPolicy()
            lock_poll_interval: Seconds between lock attempts
        """
        self.rooms = room_repository
        self.bookings = booking_repository
        self.conflicts = conflict_detector
        self.locks = lock_repository
        self.customers = customer_service
        self.policy = policy or BookingPolicy()
        self.lock_poll_interval = lock_poll_interval

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _get_room(self, room_id: str) -> Room:
        room = self.rooms.get_room(room_id)
        if not room:
            raise ResourceNotFound(f"Room not found: {room_id}")
        return room

    def _resolve_interval(
        self,
        room: Room,
        day: str,
        start_time: str,
        end_time: Optional[str],
    ) -> Tuple[datetime.datetime, datetime.datetime]:
        parse_date(day)
        to_minutes(start_time)
        if end_time is not None:
            to_minutes(end_time)

        start = combine_local(day, start_time)
        if end_time is not None:
            end = combine_local(day, end_time)
        else:
            end = add_minutes(start, room.duration_minutes)
        if end <= start:
            raise InvalidInput("Booking end must be after its start")
        return start, end

    def _validate_request(
        self, room: Room, day: str, start_time: str, players: Any
    ) -> int:
        if not room.active:
            raise InvalidInput(f"Room {room.name} is not taking bookings")
        if isinstance(players, bool) or not isinstance(players, int) or players < 1:
            raise InvalidInput(f"Party size must be a positive integer: {players!r}")
        if not room.accepts_party(players):
            raise InvalidInput(
                f"Party of {players} is outside {room.name}'s capacity "
                f"({room.capacity_min}-{room.capacity_max})"
            )
        if self.policy.enforce_schedule:
            offered = generate_start_times(room.schedule, day, room.duration_minutes)
            if start_time not in offered:
                raise InvalidInput(
                    f"{start_time} is not an offered start time on {day}")
        return players

    def _resolve_price(self, room: Room, players: int) -> float:
        lookup = lookup_price(room.price_table, players)
        if lookup.found:
            return lookup.price
        if self.policy.strict_pricing:
            raise PriceNotFound(f"No price for {players} players in {room.name}")
        logger.warning(
            f"No price for {players} players in room {room.id}; using 0")
        return 0

    @staticmethod
    def _parse_status(status: Optional[str], default: BookingStatus) -> BookingStatus:
        if status is None:
            return default
        try:
            return BookingStatus(status)
        except ValueError:
            raise InvalidInput(f"Unknown booking status: {status}")

    @staticmethod
    def _parse_language(language: Optional[str], default: Language) -> Language:
        if language is None:
            return default
        try:
            return Language(language)
        except ValueError:
            raise InvalidInput(f"Unsupported language: {language}")

    def _ensure_free(
        self,
        room: Room,
        start: datetime.datetime,
        end: datetime.datetime,
        linked: List[str],
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        if self.conflicts.has_conflict(
            start, end, room.id, linked, exclude_booking_id=exclude_booking_id
        ):
            raise SlotConflict("There is already a booking in that time slot")

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    async def _acquire_all(self, room_ids: List[str], owner: str, held: List[str]):
        for room_id in room_ids:
            while not self.locks.try_acquire(
                room_id, owner, self.policy.lock_ttl_seconds
            ):
                await asyncio.sleep(self.lock_poll_interval)
            held.append(room_id)

    @asynccontextmanager
    async def _room_locks(self, room_ids: Iterable[str], timeout: Optional[float]):
        """Hold the locks of every room in the group.

        Locks are taken in sorted order so two writers over overlapping
        groups cannot deadlock, and are always released on exit.
        """
        if self.locks is None:
            yield
            return

        owner = str(uuid.uuid4())
        held: List[str] = []
        if timeout is None:
            timeout = self.policy.lock_timeout_seconds
        try:
            try:
                await asyncio.wait_for(
                    self._acquire_all(sorted(set(room_ids)), owner, held),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                raise BookingTimeout(
                    f"Timed out after {timeout}s waiting for room lock")
            yield
        finally:
            for room_id in held:
                self.locks.release(room_id, owner)

    # ------------------------------------------------------------------
    # Booking lifecycle
    # ------------------------------------------------------------------

    async def create_booking(
        self,
        room_id: str,
        date: str,
        start_time: str,
        players: int,
        end_time: Optional[str] = None,
        customer_id: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        customer_phone: Optional[str] = None,
        language: Optional[str] = None,
        notes: str = "",
        internal_notes: str = "",
        status: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> BookingResult:
        """Validate and create a booking.

        Args:
            room_id: Room to book
            date: Session date (YYYY-MM-DD)
            start_time: Session start (HH:MM)
            players: Party size
            end_time: Explicit end (HH:MM); defaults to the room's duration
            customer_id: Existing customer ID
            customer_name: Name used when creating a customer by email
            customer_email: Email used to find or create a customer
            customer_phone: Phone used when creating a customer
            language: Session language
            notes: Customer-facing notes
            internal_notes: Staff-only notes
            status: Initial status, defaults to the policy's
            timeout: Seconds to wait for room locks

        Returns:
            Accepted result with the booking ID, or a rejection
        """
        try:
            room = self._get_room(room_id)
            start, end = self._resolve_interval(room, date, start_time, end_time)
            players = self._validate_request(room, date, start_time, players)
            initial_status = self._parse_status(status, self.policy.default_status)
            session_language = self._parse_language(language, Language.ES)
            linked = self.conflicts.linked_group(room)

            async with self._room_locks([room.id, *linked], timeout):
                self._ensure_free(room, start, end, linked)
                price = self._resolve_price(room, players)

                if self.customers and not customer_id and customer_email:
                    customer_id = await self.customers.find_or_create(
                        customer_email, name=customer_name, phone=customer_phone)

                booking = Booking(
                    id=str(uuid.uuid4()),
                    room_id=room.id,
                    room_name=room.name,
                    start=start,
                    end=end,
                    players=players,
                    price=price,
                    status=initial_status,
                    customer_id=customer_id,
                    language=session_language,
                    notes=notes or "",
                    internal_notes=internal_notes or "",
                    created_at=datetime.datetime.now(),
                )
                booking_id = self.bookings.create_booking(booking)
        except ValidationError as e:
            return self._reject(InvalidInput(str(e)))
        except BookingError as e:
            return self._reject(e)
        except PyMongoError as e:
            logger.error(f"Storage error while booking room {room_id}: {e}")
            raise

        logger.info(
            f"Created booking {booking_id} for room {room.id} "
            f"at {start.isoformat()} ({players} players)"
        )
        return BookingResult.accepted(booking_id)

    async def edit_booking(
        self,
        booking_id: str,
        date: str,
        start_time: str,
        players: int,
        room_id: Optional[str] = None,
        end_time: Optional[str] = None,
        customer_id: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        customer_phone: Optional[str] = None,
        language: Optional[str] = None,
        notes: Optional[str] = None,
        internal_notes: Optional[str] = None,
        status: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> BookingResult:
        """Re-validate a booking against new values and update it.

        The booking's own interval never conflicts with itself. All
        changes are written in a single update.

        Args:
            booking_id: Booking to edit
            date: New session date (YYYY-MM-DD)
            start_time: New session start (HH:MM)
            players: New party size
            room_id: New room, defaults to the booking's current room

        Returns:
            Accepted result with the booking ID, or a rejection
        """
        try:
            existing = self.bookings.get_booking(booking_id)
            if not existing:
                raise BookingNotFound(f"Booking not found: {booking_id}")

            room = self._get_room(room_id or existing.room_id)
            start, end = self._resolve_interval(room, date, start_time, end_time)
            players = self._validate_request(room, date, start_time, players)
            new_status = self._parse_status(status, existing.status)
            session_language = self._parse_language(language, existing.language)
            linked = self.conflicts.linked_group(room)

            async with self._room_locks([room.id, *linked], timeout):
                self._ensure_free(room, start, end, linked, exclude_booking_id=booking_id)
                price = self._resolve_price(room, players)

                updates: Dict[str, Any] = {
                    "room_id": room.id,
                    "room_name": room.name,
                    "start": start,
                    "end": end,
                    "players": players,
                    "price": price,
                    "status": new_status,
                    "language": session_language,
                }
                if notes is not None:
                    updates["notes"] = notes
                if internal_notes is not None:
                    updates["internal_notes"] = internal_notes

                if self.customers and customer_email:
                    updates["customer_id"] = await self.customers.upsert(
                        customer_email, name=customer_name, phone=customer_phone)
                elif customer_id:
                    updates["customer_id"] = customer_id

                if not self.bookings.update_booking(booking_id, updates):
                    raise BookingNotFound(f"Booking not found: {booking_id}")
        except ValidationError as e:
            return self._reject(InvalidInput(str(e)))
        except BookingError as e:
            return self._reject(e)
        except PyMongoError as e:
            logger.error(f"Storage error while editing booking {booking_id}: {e}")
            raise

        logger.info(f"Edited booking {booking_id}")
        return BookingResult.accepted(booking_id)

    @staticmethod
    def _reject(error: BookingError) -> BookingResult:
        logger.info(f"Booking rejected ({error.kind}): {error.message}")
        return BookingResult.rejected(error.kind, error.message)

    async def change_status(
        self, booking_id: str, status: str, reason: Optional[str] = None
    ) -> Tuple[bool, Optional[str]]:
        """Move a booking to a new status.

        Args:
            booking_id: Booking ID
            status: Target status
            reason: Optional reason, stored when cancelling

        Returns:
            Tuple of (success, error_message)
        """
        booking = self.bookings.get_booking(booking_id)
        if not booking:
            return False, "Booking not found"

        try:
            target = BookingStatus(status)
        except ValueError:
            return False, f"Unknown booking status: {status}"

        if target not in ALLOWED_TRANSITIONS[booking.status]:
            return False, f"Cannot move booking from {booking.status.value} to {target.value}"

        updates: Dict[str, Any] = {"status": target}
        if target == BookingStatus.CANCELLED:
            updates["cancelled_at"] = datetime.datetime.now()
            if reason:
                updates["cancellation_reason"] = reason

        if not self.bookings.update_booking(booking_id, updates):
            return False, "Failed to update booking"

        logger.info(f"Booking {booking_id} is now {target.value}")
        return True, None

    async def cancel_booking(
        self, booking_id: str, reason: Optional[str] = None
    ) -> Tuple[bool, Optional[str]]:
        """Cancel a booking; it is kept but no longer blocks its slot."""
        return await self.change_status(booking_id, BookingStatus.CANCELLED.value, reason)

    async def confirm_booking(self, booking_id: str) -> Tuple[bool, Optional[str]]:
        """Confirm a pending booking."""
        return await self.change_status(booking_id, BookingStatus.CONFIRMED.value)

    async def complete_booking(self, booking_id: str) -> Tuple[bool, Optional[str]]:
        """Mark a confirmed booking as completed."""
        return await self.change_status(booking_id, BookingStatus.COMPLETED.value)

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID."""
        return self.bookings.get_booking(booking_id)

    async def delete_booking(self, booking_id: str) -> bool:
        """Delete a booking permanently."""
        deleted = self.bookings.delete_booking(booking_id)
        if deleted:
            logger.info(f"Deleted booking {booking_id}")
        return deleted

    async def list_bookings(
        self, from_date: str, to_date: str, room_id: Optional[str] = None
    ) -> List[Booking]:
        """List bookings between two dates.

        Args:
            from_date: First date included (YYYY-MM-DD)
            to_date: Date at whose midnight the range ends (YYYY-MM-DD)
            room_id: Limit to a room and the rooms linked with it

        Returns:
            Bookings sorted by start
        """
        start = combine_local(from_date, "00:00")
        end = combine_local(to_date, "00:00")

        room_ids = None
        if room_id:
            room = self._get_room(room_id)
            room_ids = [room.id, *self.conflicts.linked_group(room)]

        return self.bookings.find_in_range(start, end, room_ids)

    async def get_customer_bookings(self, customer_id: str) -> List[Booking]:
        """List a customer's bookings, newest first."""
        return self.bookings.find_by_customer(customer_id)
