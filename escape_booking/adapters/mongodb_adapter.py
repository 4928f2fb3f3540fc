"""
MongoDB adapter for the escape room booking system.

This adapter implements the DataStorageProvider interface for MongoDB.
"""
import uuid
from typing import Dict, List, Tuple, Optional

from pymongo import MongoClient
from pymongo.errors import DuplicateKeyError

from escape_booking.interfaces.providers.data_storage import DataStorageProvider


class MongoDBAdapter(DataStorageProvider):
    """MongoDB implementation of DataStorageProvider."""

    def __init__(
        self,
        connection_string: str,
        database_name: str,
        timeout_ms: Optional[int] = None,
    ):
        options = {"timeoutMS": timeout_ms} if timeout_ms else {}
        self.client = MongoClient(connection_string, **options)
        self.db = self.client[database_name]

    def create_collection(self, name: str) -> None:
        if name not in self.db.list_collection_names():
            self.db.create_collection(name)

    def collection_exists(self, name: str) -> bool:
        return name in self.db.list_collection_names()

    def insert_one(self, collection: str, document: Dict) -> str:
        if "_id" not in document:
            document["_id"] = str(uuid.uuid4())
        self.db[collection].insert_one(document)
        return document["_id"]

    def insert_unique(self, collection: str, document: Dict) -> bool:
        try:
            self.insert_one(collection, document)
        except DuplicateKeyError:
            return False
        return True

    def find_one(self, collection: str, query: Dict) -> Optional[Dict]:
        return self.db[collection].find_one(query)

    def find(
        self,
        collection: str,
        query: Dict,
        sort: Optional[List[Tuple]] = None,
        limit: int = 0,
        skip: int = 0
    ) -> List[Dict]:
        cursor = self.db[collection].find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip > 0:
            cursor = cursor.skip(skip)
        if limit > 0:
            cursor = cursor.limit(limit)
        return list(cursor)

    def update_one(self, collection: str, query: Dict, update: Dict, upsert: bool = False) -> bool:
        result = self.db[collection].update_one(query, update, upsert=upsert)
        return result.matched_count > 0 or (upsert and result.upserted_id is not None)

    def delete_one(self, collection: str, query: Dict) -> bool:
        result = self.db[collection].delete_one(query)
        return result.deleted_count == 1

    def count_documents(self, collection: str, query: Dict) -> int:
        return self.db[collection].count_documents(query)

    def create_index(self, collection: str, keys: List[Tuple], **kwargs) -> None:
        self.db[collection].create_index(keys, **kwargs)

    def close(self) -> None:
        self.client.close()
