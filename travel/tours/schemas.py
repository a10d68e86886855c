from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

class TourBase(BaseModel):
    name: str
    description: Optional[str] = None
    location_id: Optional[int] = None
    price: Decimal
    duration_days: int
    start_date: date
    end_date: date
    guide: Optional[str] = None

class TourCreate(TourBase):
    capacity: int
    available: Optional[int] = None  # defaults to capacity

class TourUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location_id: Optional[int] = None
    price: Optional[Decimal] = None
    duration_days: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    guide: Optional[str] = None
    capacity: Optional[int] = None

class Tour(TourBase):
    id: int
    capacity: int
    available: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class TourSearchResult(BaseModel):
    tours: List[Tour]
    total: int
    page: int
    per_page: int
