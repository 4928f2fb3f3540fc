import os
import uuid
from unittest.mock import patch

import mongomock
import pytest
from pymongo import MongoClient, ASCENDING, DESCENDING

from escape_booking.adapters.mongodb_adapter import MongoDBAdapter


@pytest.fixture
def mongo_client():
    """Fixture for MongoDB client (mock or real based on env var)."""
    if os.environ.get("MONGODB_REAL") == "1":
        # Use real MongoDB for integration tests
        client = MongoClient("mongodb://localhost:27017/")
        db = client["test_db"]
        yield client, db
        # Cleanup after tests
        client.drop_database("test_db")
    else:
        # Use mongomock for unit tests
        client = mongomock.MongoClient()
        db = client["test_db"]
        yield client, db


@pytest.fixture
def mongodb_adapter(mongo_client):
    """Fixture for MongoDB adapter."""
    client, _ = mongo_client
    adapter = MongoDBAdapter(connection_string=client.HOST, database_name="test_db")
    # Replace the real client with our fixture
    adapter.client = client
    adapter.db = client["test_db"]
    return adapter


@pytest.fixture
def sample_sessions():
    """Fixture for sample session documents."""
    return [
        {"room_id": "fobia", "start": "2025-01-06T09:00:00", "players": 4},
        {"room_id": "fobia", "start": "2025-01-06T11:00:00", "players": 2},
        {"room_id": "gates", "start": "2025-01-06T10:00:00", "players": 6},
        {"room_id": "gates", "start": "2025-01-07T18:00:00", "players": 3},
        {"room_id": "terror", "start": "2025-01-06T12:00:00", "players": 5},
    ]


class TestMongoDBAdapter:
    """Test suite for MongoDB adapter."""

    def test_init(self, mongo_client):
        """Test initializing the adapter."""
        client, _ = mongo_client
        adapter = MongoDBAdapter(connection_string=client.HOST, database_name="test_db")
        assert adapter.db.name == "test_db"

    def test_init_passes_timeout(self):
        """Test the operation timeout is handed to the client."""
        with patch("escape_booking.adapters.mongodb_adapter.MongoClient") as client_cls:
            MongoDBAdapter("mongodb://db:27017", "bookings", timeout_ms=2000)
        client_cls.assert_called_once_with("mongodb://db:27017", timeoutMS=2000)

    def test_create_collection(self, mongodb_adapter):
        """Test creating a collection."""
        mongodb_adapter.create_collection("bookings")
        mongodb_adapter.create_collection("bookings")
        assert "bookings" in mongodb_adapter.db.list_collection_names()

    def test_collection_exists(self, mongodb_adapter):
        """Test checking if a collection exists."""
        mongodb_adapter.create_collection("rooms")
        assert mongodb_adapter.collection_exists("rooms") is True
        assert mongodb_adapter.collection_exists("missing") is False

    def test_insert_one_with_id(self, mongodb_adapter):
        """Test inserting a document with existing ID."""
        result_id = mongodb_adapter.insert_one("rooms", {"_id": "fobia", "name": "Fobia"})
        assert result_id == "fobia"
        stored = mongodb_adapter.db["rooms"].find_one({"_id": "fobia"})
        assert stored["name"] == "Fobia"

    def test_insert_one_without_id(self, mongodb_adapter):
        """Test inserting a document without ID (should generate UUID)."""
        result_id = mongodb_adapter.insert_one("rooms", {"name": "Fobia"})
        uuid.UUID(result_id)  # Will raise ValueError if not a valid UUID
        assert mongodb_adapter.db["rooms"].find_one({"_id": result_id})["name"] == "Fobia"

    def test_insert_unique(self, mongodb_adapter):
        """Test a second insert with the same ID is refused."""
        assert mongodb_adapter.insert_unique("booking_locks", {"_id": "fobia", "owner": "a"})
        assert not mongodb_adapter.insert_unique("booking_locks", {"_id": "fobia", "owner": "b"})
        assert mongodb_adapter.find_one("booking_locks", {"_id": "fobia"})["owner"] == "a"

    def test_find_one_not_existing(self, mongodb_adapter):
        """Test finding a non-existent document."""
        assert mongodb_adapter.find_one("bookings", {"room_id": "missing"}) is None

    def test_find_with_filter(self, mongodb_adapter, sample_sessions):
        """Test finding documents with a range filter on ISO strings."""
        for doc in sample_sessions:
            mongodb_adapter.insert_one("bookings", doc)

        results = mongodb_adapter.find(
            "bookings",
            {"room_id": {"$in": ["fobia", "gates"]}, "start": {"$lt": "2025-01-07T00:00:00"}},
        )
        assert len(results) == 3

    def test_find_with_sort(self, mongodb_adapter, sample_sessions):
        """Test finding documents with sorting."""
        for doc in sample_sessions:
            mongodb_adapter.insert_one("bookings", doc)

        results = mongodb_adapter.find("bookings", {}, sort=[("start", ASCENDING)])
        assert results[0]["start"] == "2025-01-06T09:00:00"
        assert results[-1]["start"] == "2025-01-07T18:00:00"

        results = mongodb_adapter.find("bookings", {}, sort=[("players", DESCENDING)])
        assert results[0]["players"] == 6

    def test_find_with_limit_and_skip(self, mongodb_adapter, sample_sessions):
        """Test finding documents with both limit and skip."""
        for doc in sample_sessions:
            mongodb_adapter.insert_one("bookings", doc)

        assert len(mongodb_adapter.find("bookings", {}, limit=3)) == 3
        assert len(mongodb_adapter.find("bookings", {}, skip=2)) == 3
        assert len(mongodb_adapter.find("bookings", {}, limit=2, skip=4)) == 1

    def test_update_one_existing(self, mongodb_adapter):
        """Test updating an existing document."""
        mongodb_adapter.insert_one("bookings", {"_id": "b1", "status": "pending"})

        assert mongodb_adapter.update_one(
            "bookings", {"_id": "b1"}, {"$set": {"status": "confirmed"}}) is True
        assert mongodb_adapter.find_one("bookings", {"_id": "b1"})["status"] == "confirmed"

    def test_update_one_unchanged_still_matches(self, mongodb_adapter):
        """Test an update writing identical values reports success."""
        mongodb_adapter.insert_one("bookings", {"_id": "b1", "status": "pending"})

        assert mongodb_adapter.update_one(
            "bookings", {"_id": "b1"}, {"$set": {"status": "pending"}}) is True

    def test_update_one_non_existing(self, mongodb_adapter):
        """Test updating a non-existent document."""
        assert mongodb_adapter.update_one(
            "bookings", {"_id": "missing"}, {"$set": {"status": "confirmed"}}) is False

    def test_update_one_with_upsert(self, mongodb_adapter):
        """Test upserting a document."""
        assert mongodb_adapter.update_one(
            "customers", {"email": "ana@example.com"}, {"$set": {"name": "Ana"}}, upsert=True
        ) is True
        assert mongodb_adapter.find_one("customers", {"email": "ana@example.com"})["name"] == "Ana"

    def test_delete_one(self, mongodb_adapter):
        """Test deleting an existing and a non-existent document."""
        mongodb_adapter.insert_one("bookings", {"_id": "b1"})

        assert mongodb_adapter.delete_one("bookings", {"_id": "b1"}) is True
        assert mongodb_adapter.delete_one("bookings", {"_id": "b1"}) is False

    def test_count_documents(self, mongodb_adapter, sample_sessions):
        """Test counting documents."""
        for doc in sample_sessions:
            mongodb_adapter.insert_one("bookings", doc)

        assert mongodb_adapter.count_documents("bookings", {}) == 5
        assert mongodb_adapter.count_documents("bookings", {"room_id": "gates"}) == 2

    def test_create_index(self, mongodb_adapter):
        """Test creating an index."""
        mongodb_adapter.create_index("rooms", [("id", ASCENDING)], unique=True)

        indexes = mongodb_adapter.db["rooms"].index_information()
        id_index = next(
            info for name, info in indexes.items()
            if name != "_id_" and "id" in dict(info["key"])
        )
        assert id_index["unique"] is True

    def test_close(self):
        """Test closing the adapter closes its client."""
        with patch("escape_booking.adapters.mongodb_adapter.MongoClient") as client_cls:
            adapter = MongoDBAdapter("mongodb://db:27017", "bookings")
        adapter.close()
        client_cls.return_value.close.assert_called_once()
