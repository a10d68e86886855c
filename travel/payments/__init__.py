"""
Payments

A payment settles one booking. Processing a payment charges it through a
PaymentGateway and confirms the booking in the same transaction; refunding
it cancels the booking, which gives the reserved units back.

Key Components:
- service.py: PaymentService, the payment state machine
- gateway.py: PaymentGateway port and the simulated gateway
- router.py: FastAPI endpoints
- schemas.py: Pydantic request and response models
"""
