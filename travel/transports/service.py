import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from travel.database import unit_of_work
from travel.enums import ResourceType
from travel.exceptions import DeletionNotAllowed, InvalidInput, NotFound
from travel.inventory import InventoryLedger
from travel.models import Location, Transport
from travel.transports.schemas import TransportCreate, TransportUpdate
from travel.validation import require_capacity, require_non_negative, require_price_range, require_text

logger = logging.getLogger(__name__)

class TransportService:
    @staticmethod
    def get_transport_by_id(db: Session, transport_id: int) -> Transport:
        transport = db.get(Transport, transport_id)
        if transport is None:
            raise NotFound("Transport", transport_id)
        return transport
    
    @staticmethod
    def get_transports(db: Session, skip: int = 0, limit: int = 50) -> Tuple[List[Transport], int]:
        query = db.query(Transport)
        total = query.count()
        return query.order_by(Transport.name).offset(skip).limit(limit).all(), total
    
    @staticmethod
    def create_transport(db: Session, data: TransportCreate) -> Transport:
        available = data.capacity if data.available is None else data.available
        TransportService._validate(data.name, data.type, data.price_per_ticket)
        require_capacity(data.capacity, available)
        TransportService._check_route(db, data.from_location_id, data.to_location_id)
        
        transport = Transport(**data.model_dump(exclude={"available"}), available=available)
        with unit_of_work(db):
            db.add(transport)
            db.flush()
        
        logger.info(f"Transport {transport.id} created with {transport.capacity} seats")
        return transport
    
    @staticmethod
    def update_transport(db: Session, transport_id: int, data: TransportUpdate) -> Transport:
        ledger = InventoryLedger(db)
        update_data = data.model_dump(exclude_unset=True)
        capacity = update_data.pop("capacity", None)
        
        with unit_of_work(db):
            transport = ledger.get_resource(ResourceType.TRANSPORT, transport_id, lock=True)
            TransportService._validate(
                update_data.get("name", transport.name),
                update_data.get("type", transport.type),
                update_data.get("price_per_ticket", transport.price_per_ticket)
            )
            TransportService._check_route(
                db,
                update_data.get("from_location_id", transport.from_location_id),
                update_data.get("to_location_id", transport.to_location_id)
            )
            
            for field, value in update_data.items():
                setattr(transport, field, value)
            db.flush()
            
            if capacity is not None and capacity != transport.capacity:
                ledger.resize(ResourceType.TRANSPORT, transport_id, capacity)
        
        return transport
    
    @staticmethod
    def delete_transport(db: Session, transport_id: int) -> None:
        ledger = InventoryLedger(db)
        with unit_of_work(db):
            transport = ledger.get_resource(ResourceType.TRANSPORT, transport_id, lock=True)
            if ledger.has_active_reservations(ResourceType.TRANSPORT, transport_id):
                raise DeletionNotAllowed("Cannot delete a transport with active bookings")
            db.delete(transport)
        logger.info(f"Transport {transport_id} deleted")
    
    @staticmethod
    def get_transports_by_type(db: Session, transport_type: str) -> List[Transport]:
        require_text(transport_type, "type")
        return db.query(Transport).filter(Transport.type == transport_type).order_by(Transport.name).all()
    
    @staticmethod
    def get_transports_by_location(db: Session, location_id: int) -> List[Transport]:
        """Transports departing from or arriving at a location"""
        TransportService._get_location(db, location_id)
        return db.query(Transport).filter(
            or_(Transport.from_location_id == location_id, Transport.to_location_id == location_id)
        ).order_by(Transport.name).all()
    
    @staticmethod
    def get_available_transports(db: Session) -> List[Transport]:
        return db.query(Transport).filter(Transport.available > 0).order_by(Transport.name).all()
    
    @staticmethod
    def get_transports_by_price_range(db: Session, min_price: Decimal, max_price: Decimal) -> List[Transport]:
        require_price_range(min_price, max_price)
        return db.query(Transport).filter(
            Transport.price_per_ticket.between(min_price, max_price)
        ).order_by(Transport.price_per_ticket).all()
    
    @staticmethod
    def _validate(name, transport_type, price_per_ticket):
        require_text(name, "name")
        require_text(transport_type, "type")
        require_non_negative(price_per_ticket, "price_per_ticket")
    
    @staticmethod
    def _check_route(db: Session, from_location_id, to_location_id):
        if from_location_id is not None:
            TransportService._get_location(db, from_location_id)
        if to_location_id is not None:
            TransportService._get_location(db, to_location_id)
        if from_location_id is not None and from_location_id == to_location_id:
            raise InvalidInput("Departure and arrival locations must differ", field="to_location_id")
    
    @staticmethod
    def _get_location(db: Session, location_id: int) -> Location:
        location = db.get(Location, location_id)
        if location is None:
            raise NotFound("Location", location_id)
        return location
