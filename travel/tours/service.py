import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from travel.database import unit_of_work
from travel.enums import ResourceType
from travel.exceptions import DeletionNotAllowed, NotFound
from travel.inventory import InventoryLedger
from travel.models import Location, Tour
from travel.tours.schemas import TourCreate, TourUpdate
from travel.validation import (
    require_capacity, require_date_order, require_non_negative, require_positive,
    require_price_range, require_text
)

logger = logging.getLogger(__name__)

class TourService:
    @staticmethod
    def get_tour_by_id(db: Session, tour_id: int) -> Tour:
        tour = db.get(Tour, tour_id)
        if tour is None:
            raise NotFound("Tour", tour_id)
        return tour
    
    @staticmethod
    def get_tours(db: Session, skip: int = 0, limit: int = 50) -> Tuple[List[Tour], int]:
        query = db.query(Tour)
        total = query.count()
        return query.order_by(Tour.start_date).offset(skip).limit(limit).all(), total
    
    @staticmethod
    def create_tour(db: Session, data: TourCreate) -> Tour:
        """Create a tour; availability starts at full capacity unless given"""
        available = data.capacity if data.available is None else data.available
        TourService._validate(data.name, data.price, data.duration_days, data.start_date, data.end_date)
        require_capacity(data.capacity, available)
        if data.location_id is not None:
            TourService._get_location(db, data.location_id)
        
        tour = Tour(**data.model_dump(exclude={"available"}), available=available)
        with unit_of_work(db):
            db.add(tour)
            db.flush()
        
        logger.info(f"Tour {tour.id} created with {tour.capacity} seats")
        return tour
    
    @staticmethod
    def update_tour(db: Session, tour_id: int, data: TourUpdate) -> Tour:
        """Update tour details; a capacity change keeps already reserved seats"""
        ledger = InventoryLedger(db)
        update_data = data.model_dump(exclude_unset=True)
        capacity = update_data.pop("capacity", None)
        
        with unit_of_work(db):
            tour = ledger.get_resource(ResourceType.TOUR, tour_id, lock=True)
            TourService._validate(
                update_data.get("name", tour.name),
                update_data.get("price", tour.price),
                update_data.get("duration_days", tour.duration_days),
                update_data.get("start_date", tour.start_date),
                update_data.get("end_date", tour.end_date)
            )
            if update_data.get("location_id") is not None:
                TourService._get_location(db, update_data["location_id"])
            
            for field, value in update_data.items():
                setattr(tour, field, value)
            db.flush()
            
            if capacity is not None and capacity != tour.capacity:
                ledger.resize(ResourceType.TOUR, tour_id, capacity)
        
        return tour
    
    @staticmethod
    def delete_tour(db: Session, tour_id: int) -> None:
        ledger = InventoryLedger(db)
        with unit_of_work(db):
            tour = ledger.get_resource(ResourceType.TOUR, tour_id, lock=True)
            if ledger.has_active_reservations(ResourceType.TOUR, tour_id):
                raise DeletionNotAllowed("Cannot delete a tour with active bookings")
            db.delete(tour)
        logger.info(f"Tour {tour_id} deleted")
    
    @staticmethod
    def get_tours_by_location(db: Session, location_id: int) -> List[Tour]:
        TourService._get_location(db, location_id)
        return db.query(Tour).filter(Tour.location_id == location_id).order_by(Tour.start_date).all()
    
    @staticmethod
    def get_available_tours(db: Session, today: Optional[date] = None) -> List[Tour]:
        """Tours with free seats that have not started yet"""
        today = today or date.today()
        return db.query(Tour).filter(
            Tour.available > 0,
            Tour.start_date >= today
        ).order_by(Tour.start_date).all()
    
    @staticmethod
    def get_tours_by_price_range(db: Session, min_price: Decimal, max_price: Decimal) -> List[Tour]:
        require_price_range(min_price, max_price)
        return db.query(Tour).filter(Tour.price.between(min_price, max_price)).order_by(Tour.price).all()
    
    @staticmethod
    def get_tours_by_date_range(db: Session, start_date: date, end_date: date) -> List[Tour]:
        require_date_order(start_date, end_date)
        return db.query(Tour).filter(
            Tour.start_date.between(start_date, end_date)
        ).order_by(Tour.start_date).all()
    
    @staticmethod
    def search_tours_by_name(db: Session, keyword: str) -> List[Tour]:
        require_text(keyword, "keyword")
        return db.query(Tour).filter(Tour.name.ilike(f"%{keyword}%")).order_by(Tour.name).all()
    
    @staticmethod
    def _validate(name, price, duration_days, start_date, end_date):
        require_text(name, "name")
        require_non_negative(price, "price")
        require_positive(duration_days, "duration_days")
        require_date_order(start_date, end_date)
    
    @staticmethod
    def _get_location(db: Session, location_id: int) -> Location:
        location = db.get(Location, location_id)
        if location is None:
            raise NotFound("Location", location_id)
        return location
