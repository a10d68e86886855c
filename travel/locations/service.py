from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional, Tuple
from travel.database import unit_of_work
from travel.exceptions import DeletionNotAllowed, NotFound
from travel.models import Location, Tour, Lodge, Transport
from travel.locations.schemas import LocationCreate, LocationUpdate, LocationSearch
from travel.validation import require_text

class LocationService:
    @staticmethod
    def get_location_by_id(db: Session, location_id: int) -> Location:
        """Get location by ID or raise NotFound"""
        location = db.get(Location, location_id)
        if location is None:
            raise NotFound("Location", location_id)
        return location
    
    @staticmethod
    def get_locations(
        db: Session,
        skip: int = 0,
        limit: int = 50,
        search: Optional[LocationSearch] = None
    ) -> Tuple[List[Location], int]:
        """Get locations with optional search filters"""
        query = db.query(Location)
        
        if search:
            if search.query:
                query = query.filter(Location.name.ilike(f"%{search.query}%"))
            if search.city:
                query = query.filter(Location.city == search.city)
            if search.country:
                query = query.filter(Location.country == search.country)
        
        total = query.count()
        locations = query.order_by(Location.name).offset(skip).limit(limit).all()
        
        return locations, total
    
    @staticmethod
    def create_location(db: Session, data: LocationCreate) -> Location:
        require_text(data.name, "name")
        location = Location(**data.model_dump())
        with unit_of_work(db):
            db.add(location)
            db.flush()
        return location
    
    @staticmethod
    def update_location(db: Session, location_id: int, data: LocationUpdate) -> Location:
        location = LocationService.get_location_by_id(db, location_id)
        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            require_text(update_data["name"], "name")
        
        with unit_of_work(db):
            for field, value in update_data.items():
                setattr(location, field, value)
            db.flush()
        return location
    
    @staticmethod
    def delete_location(db: Session, location_id: int) -> None:
        """Delete a location no tour, lodge or transport refers to"""
        location = LocationService.get_location_by_id(db, location_id)
        
        in_use = (
            db.query(Tour.id).filter(Tour.location_id == location_id).first()
            or db.query(Lodge.id).filter(Lodge.location_id == location_id).first()
            or db.query(Transport.id).filter(
                or_(Transport.from_location_id == location_id, Transport.to_location_id == location_id)
            ).first()
        )
        if in_use:
            raise DeletionNotAllowed("Cannot delete a location that tours, lodges or transports refer to")
        
        with unit_of_work(db):
            db.delete(location)
    
    @staticmethod
    def get_locations_by_country(db: Session, country: str) -> List[Location]:
        require_text(country, "country")
        return db.query(Location).filter(Location.country == country).order_by(Location.name).all()
    
    @staticmethod
    def get_locations_by_city(db: Session, city: str) -> List[Location]:
        require_text(city, "city")
        return db.query(Location).filter(Location.city == city).order_by(Location.name).all()
    
    @staticmethod
    def search_locations_by_name(db: Session, keyword: str, limit: int = 10) -> List[Location]:
        """Search locations by name for autocomplete"""
        require_text(keyword, "keyword")
        return db.query(Location).filter(
            Location.name.ilike(f"%{keyword}%")
        ).order_by(Location.name).limit(limit).all()
