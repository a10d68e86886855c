from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Type, Union

from travel.enums import ResourceType
from travel.exceptions import InvalidInput
from travel.models import Lodge, Tour, Transport

@dataclass(frozen=True)
class ResourcePolicy:
    """How the ledger treats one kind of resource"""
    model: Type
    label: str
    unit: str
    price_field: str
    expires: bool = False

    def unit_price(self, resource) -> Decimal:
        return Decimal(getattr(resource, self.price_field))

    def is_expired(self, resource, today: date) -> bool:
        # Only tours have a start date that closes them for booking
        return self.expires and resource.start_date < today

POLICIES: Dict[ResourceType, ResourcePolicy] = {
    ResourceType.TOUR: ResourcePolicy(Tour, "Tour", "seats", "price", expires=True),
    ResourceType.LODGE: ResourcePolicy(Lodge, "Lodge", "rooms", "price_per_night"),
    ResourceType.TRANSPORT: ResourcePolicy(Transport, "Transport", "seats", "price_per_ticket"),
}

def policy_for(kind: Union[ResourceType, str]) -> ResourcePolicy:
    """Resolve a resource kind, accepting its string value"""
    try:
        return POLICIES[ResourceType(kind)]
    except ValueError:
        valid = ", ".join(t.value for t in ResourceType)
        raise InvalidInput(f"resource_type must be one of: {valid}", field="resource_type")
