"""
Shared fixtures for the booking system tests.
"""
from unittest.mock import patch

import mongomock
import pytest

from escape_booking.adapters.mongodb_adapter import MongoDBAdapter


@pytest.fixture
def mongo_adapter():
    """MongoDB adapter backed by mongomock."""
    client = mongomock.MongoClient()
    with patch(
        "escape_booking.adapters.mongodb_adapter.MongoClient", return_value=client
    ):
        adapter = MongoDBAdapter("mongodb://localhost:27017", "test_db")
    return adapter


@pytest.fixture
def weekly_schedule():
    """Schedule open Monday 09:00-12:00 and Tuesday 17:00-21:00."""
    return {
        "template": {
            "monday": [{"start": "09:00", "end": "12:00"}],
            "tuesday": [{"start": "17:00", "end": "21:00"}],
        },
        "daysOff": [],
        "overrides": [],
    }
