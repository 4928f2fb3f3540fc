"""
MongoDB implementation of the booking repository.

Instants are stored as naive ISO-8601 strings, which sort and compare
lexicographically in time order.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from escape_booking.domains import Booking, BookingStatus
from escape_booking.interfaces import BookingRepository

DATETIME_FIELDS = ("start", "end", "created_at", "updated_at", "cancelled_at")


class MongoBookingRepository(BookingRepository):
    """MongoDB implementation of the BookingRepository interface."""

    def __init__(self, db_adapter):
        """Initialize the repository with a database adapter."""
        self.db = db_adapter
        self.collection = "bookings"

        self.db.create_collection(self.collection)
        self.db.create_index(self.collection, [("id", 1)], unique=True)
        self.db.create_index(self.collection, [("room_id", 1), ("start", 1)])
        self.db.create_index(self.collection, [("customer_id", 1)])
        self.db.create_index(self.collection, [("end", 1)])

    @staticmethod
    def _serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
        # Convert datetime to string for MongoDB
        for key, value in doc.items():
            if isinstance(value, datetime):
                doc[key] = value.isoformat()
            elif isinstance(value, Enum):
                doc[key] = value.value
        return doc

    @staticmethod
    def _to_booking(doc: Dict[str, Any]) -> Booking:
        # Convert string dates back to datetime
        for key in DATETIME_FIELDS:
            if isinstance(doc.get(key), str):
                doc[key] = datetime.fromisoformat(doc[key])
        return Booking.model_validate(doc)

    def create_booking(self, booking: Booking) -> str:
        """Create a new booking and return its ID."""
        doc = self._serialize(booking.model_dump())
        doc["_id"] = booking.id
        return self.db.insert_one(self.collection, doc)

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID."""
        doc = self.db.find_one(self.collection, {"id": booking_id})
        if not doc:
            return None
        return self._to_booking(doc)

    def update_booking(self, booking_id: str, updates: Dict[str, Any]) -> bool:
        """Update a booking in a single write."""
        updates_with_timestamp = self._serialize({
            **updates,
            "updated_at": datetime.now(),
        })
        return self.db.update_one(
            self.collection,
            {"id": booking_id},
            {"$set": updates_with_timestamp}
        )

    def delete_booking(self, booking_id: str) -> bool:
        """Delete a booking."""
        return self.db.delete_one(self.collection, {"id": booking_id})

    def find_overlapping(
        self,
        room_ids: Iterable[str],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """Find active bookings overlapping the half-open interval [start, end).

        Args:
            room_ids: Rooms whose bookings block the interval
            start: Proposed start
            end: Proposed end
            exclude_booking_id: Booking to ignore, used when editing

        Returns:
            Matching non-cancelled bookings sorted by start
        """
        query: Dict[str, Any] = {
            "room_id": {"$in": list(room_ids)},
            "status": {"$ne": BookingStatus.CANCELLED.value},
            "start": {"$lt": end.isoformat()},
            "end": {"$gt": start.isoformat()},
        }
        if exclude_booking_id:
            query["id"] = {"$ne": exclude_booking_id}

        docs = self.db.find(self.collection, query, sort=[("start", 1)])
        return [self._to_booking(doc) for doc in docs]

    def find_in_range(
        self,
        start: datetime,
        end: datetime,
        room_ids: Optional[Iterable[str]] = None,
    ) -> List[Booking]:
        """Find bookings with start >= range start and end < range end."""
        query: Dict[str, Any] = {
            "start": {"$gte": start.isoformat()},
            "end": {"$lt": end.isoformat()},
        }
        if room_ids is not None:
            query["room_id"] = {"$in": list(room_ids)}

        docs = self.db.find(self.collection, query, sort=[("start", 1)])
        return [self._to_booking(doc) for doc in docs]

    def find_by_customer(self, customer_id: str) -> List[Booking]:
        """Find all bookings for a customer, newest first."""
        docs = self.db.find(
            self.collection, {"customer_id": customer_id}, sort=[("start", -1)])
        return [self._to_booking(doc) for doc in docs]
