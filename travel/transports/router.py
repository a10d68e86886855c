from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from decimal import Decimal
from travel.database import get_db
from travel.auth.dependencies import require_admin
from travel.transports.schemas import Transport, TransportCreate, TransportUpdate, TransportSearchResult
from travel.transports.service import TransportService

router = APIRouter()

@router.get("/", response_model=TransportSearchResult)
def get_transports(
    skip: int = Query(0, ge=0, description="Number of transports to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of transports to return"),
    db: Session = Depends(get_db)
):
    transports, total = TransportService.get_transports(db, skip=skip, limit=limit)
    return TransportSearchResult(transports=transports, total=total, page=(skip // limit) + 1, per_page=limit)

@router.get("/available", response_model=List[Transport])
def get_available_transports(db: Session = Depends(get_db)):
    return TransportService.get_available_transports(db)

@router.get("/price-range", response_model=List[Transport])
def get_transports_by_price_range(
    min_price: Decimal = Query(..., description="Minimum ticket price"),
    max_price: Decimal = Query(..., description="Maximum ticket price"),
    db: Session = Depends(get_db)
):
    return TransportService.get_transports_by_price_range(db, min_price, max_price)

@router.get("/type/{transport_type}", response_model=List[Transport])
def get_transports_by_type(transport_type: str, db: Session = Depends(get_db)):
    return TransportService.get_transports_by_type(db, transport_type)

@router.get("/location/{location_id}", response_model=List[Transport])
def get_transports_by_location(location_id: int, db: Session = Depends(get_db)):
    """Transports departing from or arriving at a location"""
    return TransportService.get_transports_by_location(db, location_id)

@router.get("/{transport_id}", response_model=Transport)
def get_transport(transport_id: int, db: Session = Depends(get_db)):
    return TransportService.get_transport_by_id(db, transport_id)

@router.post("/", response_model=Transport, status_code=status.HTTP_201_CREATED)
def create_transport(data: TransportCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return TransportService.create_transport(db, data)

@router.put("/{transport_id}", response_model=Transport)
def update_transport(
    transport_id: int,
    data: TransportUpdate,
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    return TransportService.update_transport(db, transport_id, data)

@router.delete("/{transport_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transport(transport_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    TransportService.delete_transport(db, transport_id)
