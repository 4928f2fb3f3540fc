"""
MongoDB implementation of per-room write locks.

A lock is a document whose ``_id`` is the room id, so the store's primary
key uniqueness lets only one writer hold it at a time.
"""
import logging
from datetime import datetime, timedelta

from escape_booking.interfaces import RoomLockRepository

logger = logging.getLogger(__name__)


class MongoRoomLockRepository(RoomLockRepository):
    """MongoDB implementation of the RoomLockRepository interface."""

    def __init__(self, db_adapter):
        self.db = db_adapter
        self.collection = "booking_locks"
        self.db.create_collection(self.collection)

    def try_acquire(self, room_id: str, owner: str, ttl_seconds: float) -> bool:
        """Try to take the lock for a room.

        A lock whose holder never released it is reclaimed once it expires.

        Args:
            room_id: Room to lock
            owner: Token identifying the caller
            ttl_seconds: Lifetime of the lock

        Returns:
            True if the lock was taken
        """
        now = datetime.now()
        if self.db.delete_one(
            self.collection,
            {"_id": room_id, "expires_at": {"$lt": now.isoformat()}},
        ):
            logger.warning(f"Reclaimed expired booking lock for room {room_id}")

        return self.db.insert_unique(
            self.collection,
            {
                "_id": room_id,
                "owner": owner,
                "expires_at": (now + timedelta(seconds=ttl_seconds)).isoformat(),
            },
        )

    def release(self, room_id: str, owner: str) -> bool:
        """Release a lock if owner still holds it."""
        return self.db.delete_one(self.collection, {"_id": room_id, "owner": owner})
