import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.orm import Session

from travel.database import unit_of_work
from travel.enums import ResourceType
from travel.exceptions import DeletionNotAllowed, NotFound
from travel.inventory import InventoryLedger
from travel.models import Location, Lodge
from travel.lodges.schemas import LodgeCreate, LodgeUpdate
from travel.validation import (
    require_capacity, require_non_negative, require_price_range, require_range, require_text
)

logger = logging.getLogger(__name__)

TOP_RATING = Decimal("4.0")

class LodgeService:
    @staticmethod
    def get_lodge_by_id(db: Session, lodge_id: int) -> Lodge:
        lodge = db.get(Lodge, lodge_id)
        if lodge is None:
            raise NotFound("Lodge", lodge_id)
        return lodge
    
    @staticmethod
    def get_lodges(db: Session, skip: int = 0, limit: int = 50) -> Tuple[List[Lodge], int]:
        query = db.query(Lodge)
        total = query.count()
        return query.order_by(Lodge.name).offset(skip).limit(limit).all(), total
    
    @staticmethod
    def create_lodge(db: Session, data: LodgeCreate) -> Lodge:
        available = data.capacity if data.available is None else data.available
        LodgeService._validate(data.name, data.type, data.address, data.price_per_night, data.rating)
        require_capacity(data.capacity, available)
        if data.location_id is not None:
            LodgeService._get_location(db, data.location_id)
        
        lodge = Lodge(**data.model_dump(exclude={"available"}), available=available)
        with unit_of_work(db):
            db.add(lodge)
            db.flush()
        
        logger.info(f"Lodge {lodge.id} created with {lodge.capacity} rooms")
        return lodge
    
    @staticmethod
    def update_lodge(db: Session, lodge_id: int, data: LodgeUpdate) -> Lodge:
        ledger = InventoryLedger(db)
        update_data = data.model_dump(exclude_unset=True)
        capacity = update_data.pop("capacity", None)
        
        with unit_of_work(db):
            lodge = ledger.get_resource(ResourceType.LODGE, lodge_id, lock=True)
            LodgeService._validate(
                update_data.get("name", lodge.name),
                update_data.get("type", lodge.type),
                update_data.get("address", lodge.address),
                update_data.get("price_per_night", lodge.price_per_night),
                update_data.get("rating", lodge.rating)
            )
            if update_data.get("location_id") is not None:
                LodgeService._get_location(db, update_data["location_id"])
            
            for field, value in update_data.items():
                setattr(lodge, field, value)
            db.flush()
            
            if capacity is not None and capacity != lodge.capacity:
                ledger.resize(ResourceType.LODGE, lodge_id, capacity)
        
        return lodge
    
    @staticmethod
    def delete_lodge(db: Session, lodge_id: int) -> None:
        ledger = InventoryLedger(db)
        with unit_of_work(db):
            lodge = ledger.get_resource(ResourceType.LODGE, lodge_id, lock=True)
            if ledger.has_active_reservations(ResourceType.LODGE, lodge_id):
                raise DeletionNotAllowed("Cannot delete a lodge with active bookings")
            db.delete(lodge)
        logger.info(f"Lodge {lodge_id} deleted")
    
    @staticmethod
    def get_lodges_by_location(db: Session, location_id: int) -> List[Lodge]:
        LodgeService._get_location(db, location_id)
        return db.query(Lodge).filter(Lodge.location_id == location_id).order_by(Lodge.name).all()
    
    @staticmethod
    def get_lodges_by_type(db: Session, lodge_type: str) -> List[Lodge]:
        require_text(lodge_type, "type")
        return db.query(Lodge).filter(Lodge.type == lodge_type).order_by(Lodge.name).all()
    
    @staticmethod
    def get_available_lodges(db: Session) -> List[Lodge]:
        return db.query(Lodge).filter(Lodge.available > 0).order_by(Lodge.name).all()
    
    @staticmethod
    def get_lodges_by_price_range(db: Session, min_price: Decimal, max_price: Decimal) -> List[Lodge]:
        require_price_range(min_price, max_price)
        return db.query(Lodge).filter(
            Lodge.price_per_night.between(min_price, max_price)
        ).order_by(Lodge.price_per_night).all()
    
    @staticmethod
    def search_lodges_by_name(db: Session, keyword: str) -> List[Lodge]:
        require_text(keyword, "keyword")
        return db.query(Lodge).filter(Lodge.name.ilike(f"%{keyword}%")).order_by(Lodge.name).all()
    
    @staticmethod
    def get_lodges_by_rating(db: Session, min_rating: Decimal) -> List[Lodge]:
        require_range(min_rating, "rating", 0, 5)
        return db.query(Lodge).filter(Lodge.rating >= min_rating).order_by(Lodge.rating.desc()).all()
    
    @staticmethod
    def get_top_rated_lodges(db: Session) -> List[Lodge]:
        return LodgeService.get_lodges_by_rating(db, TOP_RATING)
    
    @staticmethod
    def calculate_average_price_by_location(db: Session, location_id: int) -> Decimal:
        """Average nightly price of a location's lodges, 0 when it has none"""
        lodges = LodgeService.get_lodges_by_location(db, location_id)
        if not lodges:
            return Decimal("0")
        total = sum((Decimal(l.price_per_night) for l in lodges), Decimal("0"))
        return (total / len(lodges)).quantize(Decimal("0.01"))
    
    @staticmethod
    def _validate(name, lodge_type, address, price_per_night, rating):
        require_text(name, "name")
        require_text(lodge_type, "type")
        require_text(address, "address")
        require_non_negative(price_per_night, "price_per_night")
        if rating is not None:
            require_range(rating, "rating", 0, 5)
    
    @staticmethod
    def _get_location(db: Session, location_id: int) -> Location:
        location = db.get(Location, location_id)
        if location is None:
            raise NotFound("Location", location_id)
        return location
