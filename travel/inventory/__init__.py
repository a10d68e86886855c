"""
Inventory Module

Tracks the finite seats and rooms of every bookable resource (tours, lodges,
transports) and is the only code allowed to move their availability counters
on behalf of bookings.

Key Components:
- resources.py: resource kinds and their per-kind policy (model, unit price, expiry)
- ledger.py: reserve / release / availability checks, serialized per resource row
"""

from .resources import ResourceType, ResourcePolicy, policy_for
from .ledger import InventoryLedger

__all__ = [
    "ResourceType",
    "ResourcePolicy",
    "policy_for",
    "InventoryLedger",
]
