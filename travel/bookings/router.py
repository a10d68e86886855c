from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from travel.database import get_db
from travel.auth.dependencies import get_current_user, require_admin
from travel.auth.service import UserService
from travel.enums import BookingStatus, ResourceType
from travel.exceptions import PermissionDenied
from travel.bookings.schemas import (
    Booking, BookingCreate, BookingUpdate, BookingList, AvailabilityResponse, BookingSummary
)
from travel.bookings.service import BookingService

router = APIRouter()

def _owned_booking(service: BookingService, booking_id: int, current_user, db: Session):
    """Load a booking the caller owns; admins may access any booking"""
    booking = service.get_booking(booking_id)
    if booking.user_id != current_user.id and not UserService.is_admin(db, current_user.id):
        raise PermissionDenied("You can only access your own bookings")
    return booking

# Booking lifecycle
@router.post("/", response_model=Booking, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    """Reserve units of a tour, lodge or transport for the current user"""
    service = BookingService(db)
    return service.create_booking(
        user_id=current_user.id,
        resource_type=request.resource_type,
        resource_id=request.resource_id,
        quantity=request.quantity,
        special_requests=request.special_requests
    )

@router.get("/availability", response_model=AvailabilityResponse)
def check_availability(
    resource_type: ResourceType = Query(..., description="TOUR, LODGE or TRANSPORT"),
    resource_id: int = Query(..., description="Resource ID"),
    quantity: int = Query(1, description="Units wanted"),
    db: Session = Depends(get_db)
):
    """Check whether a reservation could be made right now"""
    service = BookingService(db)
    available = service.ledger.is_available(resource_type, resource_id, quantity)
    return AvailabilityResponse(
        resource_type=resource_type,
        resource_id=resource_id,
        quantity=quantity,
        available=available
    )

@router.get("/my-bookings", response_model=List[Booking])
def get_my_bookings(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return BookingService(db).get_bookings_by_user(current_user.id)

@router.get("/{booking_id}", response_model=Booking)
def get_booking(booking_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return _owned_booking(BookingService(db), booking_id, current_user, db)

@router.put("/{booking_id}", response_model=Booking)
def update_booking(
    booking_id: int,
    request: BookingUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    """Change quantity or special requests of a pending booking"""
    service = BookingService(db)
    _owned_booking(service, booking_id, current_user, db)
    return service.update_booking(
        booking_id,
        quantity=request.quantity,
        special_requests=request.special_requests
    )

@router.post("/{booking_id}/confirm", response_model=Booking)
def confirm_booking(booking_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    """Confirm a booking without a payment; customers confirm by paying"""
    return BookingService(db).confirm_booking(booking_id)

@router.post("/{booking_id}/cancel", response_model=Booking)
def cancel_booking(booking_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    """Cancel a booking and give its units back"""
    service = BookingService(db)
    _owned_booking(service, booking_id, current_user, db)
    return service.cancel_booking(booking_id)

@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    service = BookingService(db)
    _owned_booking(service, booking_id, current_user, db)
    service.delete_booking(booking_id)

# Admin listings
@router.get("/", response_model=BookingList)
def get_all_bookings(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    service = BookingService(db)
    return BookingList(
        bookings=service.get_all_bookings(skip=skip, limit=limit),
        total=service.get_total_booking_count()
    )

@router.get("/admin/summary", response_model=BookingSummary)
def get_booking_summary(db: Session = Depends(get_db), admin = Depends(require_admin)):
    service = BookingService(db)
    return BookingSummary(
        total_bookings=service.get_total_booking_count(),
        pending_bookings=len(service.get_pending_bookings()),
        confirmed_bookings=len(service.get_confirmed_bookings()),
        total_revenue=service.calculate_total_revenue()
    )

@router.get("/user/{user_id}", response_model=List[Booking])
def get_bookings_by_user(user_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return BookingService(db).get_bookings_by_user(user_id)

@router.get("/status/{booking_status}", response_model=List[Booking])
def get_bookings_by_status(
    booking_status: BookingStatus,
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    return BookingService(db).get_bookings_by_status(booking_status)

@router.get("/resource/{resource_type}/{resource_id}", response_model=List[Booking])
def get_bookings_by_resource(
    resource_type: ResourceType,
    resource_id: int,
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    return BookingService(db).get_bookings_by_resource(resource_type, resource_id)
