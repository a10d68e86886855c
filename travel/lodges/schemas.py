from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

class LodgeBase(BaseModel):
    name: str
    type: str
    address: str
    contact_number: Optional[str] = None
    location_id: Optional[int] = None
    price_per_night: Decimal
    amenities: Optional[str] = None
    rating: Optional[Decimal] = None

class LodgeCreate(LodgeBase):
    capacity: int  # total rooms
    available: Optional[int] = None

class LodgeUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    address: Optional[str] = None
    contact_number: Optional[str] = None
    location_id: Optional[int] = None
    price_per_night: Optional[Decimal] = None
    amenities: Optional[str] = None
    rating: Optional[Decimal] = None
    capacity: Optional[int] = None

class Lodge(LodgeBase):
    id: int
    capacity: int
    available: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class LodgeSearchResult(BaseModel):
    lodges: List[Lodge]
    total: int
    page: int
    per_page: int

class AveragePrice(BaseModel):
    location_id: int
    average_price_per_night: Decimal
