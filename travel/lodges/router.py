from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from decimal import Decimal
from travel.database import get_db
from travel.auth.dependencies import require_admin
from travel.lodges.schemas import Lodge, LodgeCreate, LodgeUpdate, LodgeSearchResult, AveragePrice
from travel.lodges.service import LodgeService

router = APIRouter()

@router.get("/", response_model=LodgeSearchResult)
def get_lodges(
    skip: int = Query(0, ge=0, description="Number of lodges to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of lodges to return"),
    db: Session = Depends(get_db)
):
    lodges, total = LodgeService.get_lodges(db, skip=skip, limit=limit)
    return LodgeSearchResult(lodges=lodges, total=total, page=(skip // limit) + 1, per_page=limit)

@router.get("/available", response_model=List[Lodge])
def get_available_lodges(db: Session = Depends(get_db)):
    return LodgeService.get_available_lodges(db)

@router.get("/top-rated", response_model=List[Lodge])
def get_top_rated_lodges(db: Session = Depends(get_db)):
    return LodgeService.get_top_rated_lodges(db)

@router.get("/search", response_model=List[Lodge])
def search_lodges(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return LodgeService.search_lodges_by_name(db, q)

@router.get("/rating", response_model=List[Lodge])
def get_lodges_by_rating(
    min_rating: Decimal = Query(..., description="Minimum rating (0-5)"),
    db: Session = Depends(get_db)
):
    return LodgeService.get_lodges_by_rating(db, min_rating)

@router.get("/price-range", response_model=List[Lodge])
def get_lodges_by_price_range(
    min_price: Decimal = Query(..., description="Minimum price per night"),
    max_price: Decimal = Query(..., description="Maximum price per night"),
    db: Session = Depends(get_db)
):
    return LodgeService.get_lodges_by_price_range(db, min_price, max_price)

@router.get("/type/{lodge_type}", response_model=List[Lodge])
def get_lodges_by_type(lodge_type: str, db: Session = Depends(get_db)):
    return LodgeService.get_lodges_by_type(db, lodge_type)

@router.get("/location/{location_id}", response_model=List[Lodge])
def get_lodges_by_location(location_id: int, db: Session = Depends(get_db)):
    return LodgeService.get_lodges_by_location(db, location_id)

@router.get("/location/{location_id}/average-price", response_model=AveragePrice)
def get_average_price_by_location(location_id: int, db: Session = Depends(get_db)):
    average = LodgeService.calculate_average_price_by_location(db, location_id)
    return AveragePrice(location_id=location_id, average_price_per_night=average)

@router.get("/{lodge_id}", response_model=Lodge)
def get_lodge(lodge_id: int, db: Session = Depends(get_db)):
    return LodgeService.get_lodge_by_id(db, lodge_id)

@router.post("/", response_model=Lodge, status_code=status.HTTP_201_CREATED)
def create_lodge(data: LodgeCreate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return LodgeService.create_lodge(db, data)

@router.put("/{lodge_id}", response_model=Lodge)
def update_lodge(lodge_id: int, data: LodgeUpdate, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return LodgeService.update_lodge(db, lodge_id, data)

@router.delete("/{lodge_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lodge(lodge_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    LodgeService.delete_lodge(db, lodge_id)
