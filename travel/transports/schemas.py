from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

class TransportBase(BaseModel):
    name: str
    type: str
    provider: Optional[str] = None
    vehicle_number: Optional[str] = None
    from_location_id: Optional[int] = None
    to_location_id: Optional[int] = None
    price_per_ticket: Decimal
    description: Optional[str] = None

class TransportCreate(TransportBase):
    capacity: int
    available: Optional[int] = None

class TransportUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    provider: Optional[str] = None
    vehicle_number: Optional[str] = None
    from_location_id: Optional[int] = None
    to_location_id: Optional[int] = None
    price_per_ticket: Optional[Decimal] = None
    description: Optional[str] = None
    capacity: Optional[int] = None

class Transport(TransportBase):
    id: int
    capacity: int
    available: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class TransportSearchResult(BaseModel):
    transports: List[Transport]
    total: int
    page: int
    per_page: int
