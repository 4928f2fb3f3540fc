"""
MongoDB implementation of the room repository.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from escape_booking.domains import Room
from escape_booking.domains.scheduling import normalize_schedule
from escape_booking.interfaces import RoomRepository
from escape_booking.services.pricing import normalize_price_table

logger = logging.getLogger(__name__)


class MongoRoomRepository(RoomRepository):
    """MongoDB implementation of the RoomRepository interface."""

    def __init__(self, db_adapter):
        """Initialize the repository with a database adapter."""
        self.db = db_adapter
        self.collection = "rooms"

        self.db.create_collection(self.collection)
        self.db.create_index(self.collection, [("id", 1)], unique=True)
        self.db.create_index(self.collection, [("active", 1)])
        self.db.create_index(self.collection, [("linked_room_ids", 1)])

    def _to_room(self, doc: Dict[str, Any]) -> Room:
        # Stored rooms may predate validation; read them leniently
        doc = dict(doc)
        doc["schedule"] = normalize_schedule(doc.get("schedule"))
        doc["price_table"] = [
            row.model_dump() for row in normalize_price_table(doc.get("price_table"))
        ]
        return Room.model_validate(doc)

    def create_room(self, room: Room) -> str:
        """Create a new room and return its ID."""
        doc = room.model_dump(by_alias=True)
        doc["_id"] = room.id
        now = datetime.now().isoformat()
        doc["created_at"] = now
        doc["updated_at"] = now
        return self.db.insert_one(self.collection, doc)

    def get_room(self, room_id: str) -> Optional[Room]:
        """Get a room by ID."""
        doc = self.db.find_one(self.collection, {"id": room_id})
        if not doc:
            return None
        return self._to_room(doc)

    def update_room(self, room_id: str, updates: Dict[str, Any]) -> bool:
        """Update a room."""
        return self.db.update_one(
            self.collection,
            {"id": room_id},
            {"$set": {**updates, "updated_at": datetime.now().isoformat()}}
        )

    def delete_room(self, room_id: str) -> bool:
        """Delete a room."""
        return self.db.delete_one(self.collection, {"id": room_id})

    def list_rooms(self, active_only: bool = True) -> List[Room]:
        """List rooms sorted by name.

        Args:
            active_only: Skip rooms explicitly marked inactive

        Returns:
            List of rooms
        """
        query = {"active": {"$ne": False}} if active_only else {}
        docs = self.db.find(self.collection, query, sort=[("name", 1)])
        return [self._to_room(doc) for doc in docs]

    def find_rooms_linking_to(self, room_id: str) -> List[Room]:
        """Find rooms whose linked_room_ids contain room_id."""
        docs = self.db.find(self.collection, {"linked_room_ids": room_id})
        return [self._to_room(doc) for doc in docs]
