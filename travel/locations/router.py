from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from travel.database import get_db
from travel.auth.dependencies import require_admin
from travel.locations.schemas import Location, LocationCreate, LocationUpdate, LocationSearch, LocationSearchResult
from travel.locations.service import LocationService

router = APIRouter()

@router.get("/", response_model=LocationSearchResult)
def get_locations(
    skip: int = Query(0, ge=0, description="Number of locations to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of locations to return"),
    query: Optional[str] = Query(None, description="Search by location name"),
    city: Optional[str] = Query(None, description="Filter by city"),
    country: Optional[str] = Query(None, description="Filter by country"),
    db: Session = Depends(get_db)
):
    """Get locations with optional search and filters"""
    search = LocationSearch(query=query, city=city, country=country)
    locations, total = LocationService.get_locations(db, skip=skip, limit=limit, search=search)
    
    return LocationSearchResult(
        locations=locations,
        total=total,
        page=(skip // limit) + 1,
        per_page=limit
    )

@router.get("/search", response_model=List[Location])
def search_locations(
    q: str = Query(..., min_length=1, description="Search query"),
    limit: int = Query(10, ge=1, le=50, description="Maximum number of results"),
    db: Session = Depends(get_db)
):
    """Search locations by name for autocomplete"""
    return LocationService.search_locations_by_name(db, keyword=q, limit=limit)

@router.get("/country/{country}", response_model=List[Location])
def get_locations_by_country(country: str, db: Session = Depends(get_db)):
    return LocationService.get_locations_by_country(db, country)

@router.get("/city/{city}", response_model=List[Location])
def get_locations_by_city(city: str, db: Session = Depends(get_db)):
    return LocationService.get_locations_by_city(db, city)

@router.get("/{location_id}", response_model=Location)
def get_location(location_id: int, db: Session = Depends(get_db)):
    """Get location details"""
    return LocationService.get_location_by_id(db, location_id)

@router.post("/", response_model=Location, status_code=status.HTTP_201_CREATED)
def create_location(data: LocationCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return LocationService.create_location(db, data)

@router.put("/{location_id}", response_model=Location)
def update_location(
    location_id: int,
    data: LocationUpdate,
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    return LocationService.update_location(db, location_id, data)

@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(location_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    LocationService.delete_location(db, location_id)
