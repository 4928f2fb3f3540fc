"""
Services for the escape room booking system.

Availability, pricing and conflict detection are pure and shared by every
caller; the service classes apply them to stored rooms and bookings.
"""
