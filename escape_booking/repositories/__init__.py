"""
Repository implementations for data access.
"""
from escape_booking.repositories.booking import MongoBookingRepository
from escape_booking.repositories.customer import MongoCustomerRepository
from escape_booking.repositories.lock import MongoRoomLockRepository
from escape_booking.repositories.room import MongoRoomRepository
