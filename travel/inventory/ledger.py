import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Union

from sqlalchemy.orm import Session

from travel.database import unit_of_work
from travel.exceptions import CapacityExceeded, Expired, InsufficientCapacity, InvalidInput, NotFound
from travel.enums import BookingStatus, ResourceType
from travel.inventory.resources import policy_for
from travel.models import Booking
from travel.validation import require, require_positive

logger = logging.getLogger(__name__)

Kind = Union[ResourceType, str]

class InventoryLedger:
    """Reserves and releases units of a bookable resource.

    Writes load the resource row with ``SELECT ... FOR UPDATE`` and refresh it
    from the database, so concurrent reservations on one resource are
    serialized. Each resource also carries a version column; a write based on
    a stale row fails with ``Conflict`` when the unit of work commits.

    Every operation joins the caller's unit of work when there is one, so a
    counter change commits or rolls back together with the booking that
    caused it.
    """

    def __init__(self, db: Session, today: Callable[[], date] = date.today):
        self.db = db
        self.today = today

    def get_resource(self, kind: Kind, resource_id: int, lock: bool = False):
        """Load a resource or raise NotFound"""
        policy = policy_for(kind)
        require(resource_id, "resource_id")
        query = self.db.query(policy.model).filter(policy.model.id == resource_id)
        if lock:
            query = query.with_for_update().populate_existing()
        resource = query.first()
        if resource is None:
            raise NotFound(policy.label, resource_id)
        return resource

    def reserve(self, kind: Kind, resource_id: int, quantity: int):
        """Deduct ``quantity`` units from the resource's availability"""
        require_positive(quantity, "quantity")
        policy = policy_for(kind)

        with unit_of_work(self.db):
            resource = self.get_resource(kind, resource_id, lock=True)

            if resource.available < quantity:
                logger.warning(
                    f"Rejected reservation of {quantity} {policy.unit} on {policy.label} {resource_id}: "
                    f"{resource.available} available"
                )
                raise InsufficientCapacity(f"Only {resource.available} {policy.unit} available")

            if policy.is_expired(resource, self.today()):
                raise Expired(f"{policy.label} has already started")

            resource.available -= quantity
            self.db.flush()

        logger.info(
            f"Reserved {quantity} {policy.unit} on {policy.label} {resource_id} "
            f"({resource.available}/{resource.capacity} left)"
        )
        return resource

    def release(self, kind: Kind, resource_id: int, quantity: int):
        """Return ``quantity`` units to the resource's availability"""
        require_positive(quantity, "quantity")
        policy = policy_for(kind)

        with unit_of_work(self.db):
            resource = self.get_resource(kind, resource_id, lock=True)

            if resource.available + quantity > resource.capacity:
                logger.error(
                    f"Release of {quantity} {policy.unit} on {policy.label} {resource_id} "
                    f"would exceed capacity {resource.capacity}"
                )
                raise CapacityExceeded(f"Cannot exceed total {policy.unit} of {resource.capacity}")

            resource.available += quantity
            self.db.flush()

        logger.info(
            f"Released {quantity} {policy.unit} on {policy.label} {resource_id} "
            f"({resource.available}/{resource.capacity} left)"
        )
        return resource

    def is_available(self, kind: Kind, resource_id: int, quantity: int) -> bool:
        """Whether ``quantity`` units could be reserved right now"""
        require_positive(quantity, "quantity")
        policy = policy_for(kind)
        resource = self.get_resource(kind, resource_id)
        return resource.available >= quantity and not policy.is_expired(resource, self.today())

    def unit_price(self, kind: Kind, resource_id: int) -> Decimal:
        policy = policy_for(kind)
        return policy.unit_price(self.get_resource(kind, resource_id))

    def has_active_reservations(self, kind: Kind, resource_id: int) -> bool:
        """Whether any PENDING or CONFIRMED booking still holds units of the resource"""
        return self.db.query(Booking.id).filter(
            Booking.resource_type == ResourceType(kind).value,
            Booking.resource_id == resource_id,
            Booking.status.in_([BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value])
        ).first() is not None

    def resize(self, kind: Kind, resource_id: int, capacity: int):
        """Change total capacity while keeping the units already reserved"""
        require_positive(capacity, "capacity")
        policy = policy_for(kind)

        with unit_of_work(self.db):
            resource = self.get_resource(kind, resource_id, lock=True)
            reserved = resource.capacity - resource.available

            if capacity < reserved:
                raise InvalidInput(
                    f"capacity cannot be lower than the {reserved} {policy.unit} already reserved",
                    field="capacity"
                )

            resource.capacity = capacity
            resource.available = capacity - reserved
            self.db.flush()

        logger.info(f"Resized {policy.label} {resource_id} to {capacity} {policy.unit}")
        return resource
