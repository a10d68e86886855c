"""
Bookings

A booking holds ``quantity`` units of one tour, lodge or transport for a user.
The units are taken from the resource's inventory when the booking is created
and given back exactly once when it is cancelled, or deleted while PENDING.

Key Components:
- service.py: BookingService, the booking state machine
- router.py: FastAPI endpoints for customers and admins
- schemas.py: Pydantic request and response models
"""
