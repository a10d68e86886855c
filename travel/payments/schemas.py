from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from travel.enums import PaymentStatus

class PaymentCreate(BaseModel):
    """Request to pay for a booking; amount defaults to the booking total"""
    booking_id: int
    amount: Optional[Decimal] = None
    method: str

class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = None
    method: Optional[str] = None

class PaymentFailure(BaseModel):
    reason: str

class Payment(BaseModel):
    """Payment details"""
    id: int
    booking_id: int
    amount: Decimal
    status: PaymentStatus
    method: str
    transaction_id: str
    payment_date: datetime
    failure_reason: Optional[str] = None

    class Config:
        from_attributes = True

class PaymentSummary(BaseModel):
    """Payment totals for reporting"""
    total_revenue: Decimal
    pending_amount: Decimal
    pending_payments: int
    completed_payments: int
    currency: str

class PaymentList(BaseModel):
    payments: List[Payment]
    total: int
