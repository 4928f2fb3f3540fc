"""
Tests for the CustomerService implementation.
"""
from unittest.mock import Mock

import pytest

from escape_booking.domains import Customer, InvalidInput
from escape_booking.services.customer import CustomerService


@pytest.fixture
def mock_repository():
    repo = Mock()
    repo.get_by_email = Mock(return_value=None)
    repo.create_customer = Mock(side_effect=lambda customer: customer.id)
    repo.update_customer = Mock(return_value=True)
    repo.get_customer = Mock(return_value=None)
    return repo


@pytest.fixture
def customer_service(mock_repository):
    return CustomerService(mock_repository)


@pytest.fixture
def existing_customer():
    return Customer(id="c1", name="Ana", email="ana@example.com", phone="600")


@pytest.mark.asyncio
async def test_find_or_create_creates_new(customer_service, mock_repository):
    customer_id = await customer_service.find_or_create(" Ana@Example.com ", phone=" 600 ")

    mock_repository.get_by_email.assert_called_once_with("ana@example.com")
    created = mock_repository.create_customer.call_args[0][0]
    assert created.id == customer_id
    assert created.email == "ana@example.com"
    # name falls back to the email
    assert created.name == "ana@example.com"
    assert created.phone == "600"


@pytest.mark.asyncio
async def test_find_or_create_returns_existing(
    customer_service, mock_repository, existing_customer
):
    mock_repository.get_by_email.return_value = existing_customer

    assert await customer_service.find_or_create("ana@example.com", name="Other") == "c1"
    mock_repository.create_customer.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("email", [
    "", "   ", "not-an-email", None, "ana@", "@example.com", "ana@example", "ana @example.com",
])
async def test_invalid_email_rejected(customer_service, email):
    with pytest.raises(InvalidInput):
        await customer_service.find_or_create(email)


@pytest.mark.asyncio
async def test_upsert_updates_existing(customer_service, mock_repository, existing_customer):
    mock_repository.get_by_email.return_value = existing_customer

    assert await customer_service.upsert("ana@example.com", name="Ana Ruiz") == "c1"
    mock_repository.update_customer.assert_called_once_with(
        "c1", {"name": "Ana Ruiz", "phone": ""})


@pytest.mark.asyncio
async def test_upsert_creates_missing(customer_service, mock_repository):
    customer_id = await customer_service.upsert("new@example.com", name="New")

    assert mock_repository.create_customer.call_args[0][0].id == customer_id
    mock_repository.update_customer.assert_not_called()


@pytest.mark.asyncio
async def test_get_customer(customer_service, mock_repository, existing_customer):
    mock_repository.get_customer.return_value = existing_customer

    assert await customer_service.get_customer("c1") == existing_customer
    mock_repository.get_customer.assert_called_once_with("c1")
