from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class LocationBase(BaseModel):
    name: str
    city: Optional[str] = None
    country: Optional[str] = None
    description: Optional[str] = None

class LocationCreate(LocationBase):
    pass

class LocationUpdate(BaseModel):
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    description: Optional[str] = None

class Location(LocationBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class LocationSearch(BaseModel):
    query: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

class LocationSearchResult(BaseModel):
    locations: List[Location]
    total: int
    page: int
    per_page: int
