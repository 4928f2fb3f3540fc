"""
Room service implementation.

Room input is validated strictly against the input models when it is
written, then normalized (price rows deduplicated and sorted, schedule
entries cleaned) before it is stored.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from escape_booking.domains import InvalidInput, Room
from escape_booking.domains.inputs import RoomInput, RoomUpdateInput, ScheduleInput
from escape_booking.domains.scheduling import normalize_schedule
from escape_booking.interfaces import RoomRepository
from escape_booking.interfaces.services import RoomService as RoomServiceInterface
from escape_booking.services.pricing import normalize_price_table

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

UPDATABLE_FIELDS = set(RoomUpdateInput.model_fields)


def parse_input(model: Type[ModelT], data: Any) -> ModelT:
    """Validate data against a model.

    Raises:
        InvalidInput: Carrying pydantic's description of every bad field
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(str(e))


def validate_schedule(raw: Any) -> ScheduleInput:
    """Reject a schedule document with any malformed entry."""
    return parse_input(ScheduleInput, raw)


class RoomService(RoomServiceInterface):
    """Service for managing rooms."""

    def __init__(self, room_repository: RoomRepository):
        """Initialize the room service.

        Args:
            room_repository: Repository for room operations
        """
        self.repository = room_repository

    @staticmethod
    def _clean_links(room_id: str, linked: Any) -> List[str]:
        if not isinstance(linked, list):
            return []
        return sorted({str(r) for r in linked if r and str(r) != room_id})

    def _build(self, room_id: str, data: Dict[str, Any]) -> Room:
        doc = dict(data)
        doc["id"] = room_id
        doc["schedule"] = normalize_schedule(doc.get("schedule"))
        doc["price_table"] = [
            row.model_dump() for row in normalize_price_table(doc.get("price_table"))
        ]
        doc["linked_room_ids"] = self._clean_links(room_id, doc.get("linked_room_ids"))
        return parse_input(Room, doc)

    async def create_room(self, room_data: Dict[str, Any]) -> str:
        """Create a room from dictionary data.

        Args:
            room_data: Room properties

        Returns:
            Room ID

        Raises:
            InvalidInput: If any field is malformed
        """
        data = parse_input(RoomInput, room_data).model_dump(by_alias=True)
        room = self._build(str(uuid.uuid4()), data)
        room_id = self.repository.create_room(room)
        logger.info(f"Created room {room.name} ({room_id})")
        return room_id

    async def get_room(self, room_id: str) -> Optional[Room]:
        """Get a room by ID."""
        return self.repository.get_room(room_id)

    async def update_room(self, room_id: str, updates: Dict[str, Any]) -> bool:
        """Apply a partial update to a room.

        Only known fields are applied. The merged room is validated as a
        whole, so e.g. lowering capacity_max below capacity_min fails.

        Args:
            room_id: Room ID
            updates: Fields to change

        Returns:
            True if the room exists and was updated
        """
        room = self.repository.get_room(room_id)
        if not room:
            return False

        updates = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
        if not updates:
            return True
        updates = parse_input(RoomUpdateInput, updates).model_dump(
            by_alias=True, exclude_unset=True)

        merged = room.model_dump(by_alias=True)
        merged.update(updates)
        updated = self._build(room_id, merged)

        stored = updated.model_dump(by_alias=True)
        return self.repository.update_room(
            room_id, {key: stored[key] for key in updates})

    async def delete_room(self, room_id: str) -> bool:
        """Delete a room."""
        return self.repository.delete_room(room_id)

    async def list_rooms(self, active_only: bool = True) -> List[Room]:
        """List rooms sorted by name."""
        return self.repository.list_rooms(active_only)
