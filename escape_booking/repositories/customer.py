"""
MongoDB implementation of the customer repository.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from escape_booking.domains import Customer
from escape_booking.interfaces import CustomerRepository


class MongoCustomerRepository(CustomerRepository):
    """MongoDB implementation of the CustomerRepository interface."""

    def __init__(self, db_adapter):
        self.db = db_adapter
        self.collection = "customers"

        self.db.create_collection(self.collection)
        self.db.create_index(self.collection, [("id", 1)], unique=True)
        self.db.create_index(
            self.collection, [("email", 1)], unique=True, sparse=True)

    @staticmethod
    def _to_customer(doc: Dict[str, Any]) -> Customer:
        for key in ("created_at", "updated_at"):
            if isinstance(doc.get(key), str):
                doc[key] = datetime.fromisoformat(doc[key])
        return Customer.model_validate(doc)

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        doc = self.db.find_one(self.collection, {"id": customer_id})
        return self._to_customer(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[Customer]:
        doc = self.db.find_one(self.collection, {"email": email.strip().lower()})
        return self._to_customer(doc) if doc else None

    def create_customer(self, customer: Customer) -> str:
        now = datetime.now().isoformat()
        doc = customer.model_dump(exclude_none=True)
        doc.update({"_id": customer.id, "created_at": now, "updated_at": now})
        return self.db.insert_one(self.collection, doc)

    def update_customer(self, customer_id: str, updates: Dict[str, Any]) -> bool:
        return self.db.update_one(
            self.collection,
            {"id": customer_id},
            {"$set": {**updates, "updated_at": datetime.now().isoformat()}},
        )
