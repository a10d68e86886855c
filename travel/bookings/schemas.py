from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from travel.enums import BookingStatus, ResourceType

# Booking Request Models
class BookingCreate(BaseModel):
    """Request to book units of a tour, lodge or transport"""
    resource_type: ResourceType
    resource_id: int
    quantity: int = Field(..., description="People for tours and transports, rooms for lodges")
    special_requests: Optional[str] = None

class BookingUpdate(BaseModel):
    """Request to modify a pending booking"""
    quantity: Optional[int] = None
    special_requests: Optional[str] = None

# Booking Response Models
class Booking(BaseModel):
    """Booking details"""
    id: int
    user_id: int
    resource_type: ResourceType
    resource_id: int
    quantity: int
    status: BookingStatus
    booking_date: datetime
    total_amount: Decimal
    special_requests: Optional[str] = None

    class Config:
        from_attributes = True

class AvailabilityResponse(BaseModel):
    resource_type: ResourceType
    resource_id: int
    quantity: int
    available: bool

class BookingSummary(BaseModel):
    """Booking totals for reporting"""
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    total_revenue: Decimal

class BookingList(BaseModel):
    bookings: List[Booking]
    total: int
