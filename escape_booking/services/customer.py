"""
Customer service implementation.

Bookings refer to customers by ID; this service resolves those IDs from
contact details, creating customers on first use.
"""
import logging
import uuid
from typing import Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from escape_booking.domains import Customer, InvalidInput
from escape_booking.interfaces import CustomerRepository
from escape_booking.interfaces.services import CustomerService as CustomerServiceInterface

logger = logging.getLogger(__name__)


EMAIL = TypeAdapter(EmailStr)


def _clean_email(email: str) -> str:
    email = (email or "").strip().lower()
    try:
        return EMAIL.validate_python(email)
    except ValidationError:
        raise InvalidInput(f"Invalid email: {email!r}")


class CustomerService(CustomerServiceInterface):
    """Service for finding and creating customers."""

    def __init__(self, customer_repository: CustomerRepository):
        self.repository = customer_repository

    async def get_customer(self, customer_id: str) -> Optional[Customer]:
        return self.repository.get_customer(customer_id)

    async def find_or_create(
        self, email: str, name: Optional[str] = None, phone: Optional[str] = None
    ) -> str:
        """Return the ID of the customer with this email, creating one if needed.

        Args:
            email: Contact email, matched case-insensitively
            name: Name for a new customer, defaults to the email
            phone: Phone for a new customer

        Returns:
            Customer ID
        """
        email = _clean_email(email)
        existing = self.repository.get_by_email(email)
        if existing:
            return existing.id

        customer = Customer(
            id=str(uuid.uuid4()),
            name=(name or email).strip(),
            email=email,
            phone=(phone or "").strip(),
        )
        self.repository.create_customer(customer)
        logger.info(f"Created customer {customer.id}")
        return customer.id

    async def upsert(
        self, email: str, name: Optional[str] = None, phone: Optional[str] = None
    ) -> str:
        """Find a customer by email and overwrite their contact details."""
        email = _clean_email(email)
        existing = self.repository.get_by_email(email)
        if not existing:
            return await self.find_or_create(email, name=name, phone=phone)

        self.repository.update_customer(
            existing.id,
            {"name": (name or email).strip(), "phone": (phone or "").strip()},
        )
        return existing.id
