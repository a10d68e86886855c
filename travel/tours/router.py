from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from datetime import date
from decimal import Decimal
from travel.database import get_db
from travel.auth.dependencies import require_admin
from travel.tours.schemas import Tour, TourCreate, TourUpdate, TourSearchResult
from travel.tours.service import TourService

router = APIRouter()

@router.get("/", response_model=TourSearchResult)
def get_tours(
    skip: int = Query(0, ge=0, description="Number of tours to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of tours to return"),
    db: Session = Depends(get_db)
):
    """List tours ordered by start date"""
    tours, total = TourService.get_tours(db, skip=skip, limit=limit)
    return TourSearchResult(tours=tours, total=total, page=(skip // limit) + 1, per_page=limit)

@router.get("/available", response_model=List[Tour])
def get_available_tours(db: Session = Depends(get_db)):
    """Tours with free seats that have not started"""
    return TourService.get_available_tours(db)

@router.get("/search", response_model=List[Tour])
def search_tours(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return TourService.search_tours_by_name(db, q)

@router.get("/price-range", response_model=List[Tour])
def get_tours_by_price_range(
    min_price: Decimal = Query(..., description="Minimum price"),
    max_price: Decimal = Query(..., description="Maximum price"),
    db: Session = Depends(get_db)
):
    return TourService.get_tours_by_price_range(db, min_price, max_price)

@router.get("/date-range", response_model=List[Tour])
def get_tours_by_date_range(
    start_date: date = Query(..., description="Earliest start date"),
    end_date: date = Query(..., description="Latest start date"),
    db: Session = Depends(get_db)
):
    return TourService.get_tours_by_date_range(db, start_date, end_date)

@router.get("/location/{location_id}", response_model=List[Tour])
def get_tours_by_location(location_id: int, db: Session = Depends(get_db)):
    return TourService.get_tours_by_location(db, location_id)

@router.get("/{tour_id}", response_model=Tour)
def get_tour(tour_id: int, db: Session = Depends(get_db)):
    return TourService.get_tour_by_id(db, tour_id)

@router.post("/", response_model=Tour, status_code=status.HTTP_201_CREATED)
def create_tour(data: TourCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return TourService.create_tour(db, data)

@router.put("/{tour_id}", response_model=Tour)
def update_tour(tour_id: int, data: TourUpdate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return TourService.update_tour(db, tour_id, data)

@router.delete("/{tour_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tour(tour_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    TourService.delete_tour(db, tour_id)
