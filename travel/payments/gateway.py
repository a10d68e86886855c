from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol


@dataclass
class ChargeResult:
    approved: bool
    reference: Optional[str] = None
    reason: Optional[str] = None


class PaymentGateway(Protocol):
    """Port to whatever actually moves the money"""

    def charge(self, transaction_id: str, amount: Decimal, method: str) -> ChargeResult: ...


class SimulatedGateway:
    """Gateway used until a real provider is integrated.

    Approves every charge unless ``decline_reason`` is set.
    """

    def __init__(self, decline_reason: Optional[str] = None):
        self.decline_reason = decline_reason

    def charge(self, transaction_id: str, amount: Decimal, method: str) -> ChargeResult:
        if self.decline_reason:
            return ChargeResult(approved=False, reason=self.decline_reason)
        return ChargeResult(approved=True, reference=transaction_id)
