from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from travel.config import settings
from travel.database import get_db
from travel.auth.dependencies import get_current_user, require_admin
from travel.auth.service import UserService
from travel.enums import PaymentStatus
from travel.exceptions import PermissionDenied
from travel.payments.schemas import (
    Payment, PaymentCreate, PaymentUpdate, PaymentFailure, PaymentSummary, PaymentList
)
from travel.payments.service import PaymentService

router = APIRouter()

def _check_owner(service: PaymentService, booking_id: int, current_user, db: Session):
    booking = service.bookings.get_booking(booking_id)
    if booking.user_id != current_user.id and not UserService.is_admin(db, current_user.id):
        raise PermissionDenied("You can only access payments for your own bookings")

def _check_amount_override(amount, current_user, db: Session):
    """Customers pay the booking total; only admins may set another amount"""
    if amount is not None and not UserService.is_admin(db, current_user.id):
        raise PermissionDenied("Only admins can set a payment amount", field="amount")

def _owned_payment(service: PaymentService, payment_id: int, current_user, db: Session):
    payment = service.get_payment(payment_id)
    _check_owner(service, payment.booking_id, current_user, db)
    return payment

# Payment lifecycle
@router.post("/", response_model=Payment, status_code=status.HTTP_201_CREATED)
def create_payment(request: PaymentCreate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    """Start a payment for one of the caller's bookings"""
    service = PaymentService(db)
    _check_owner(service, request.booking_id, current_user, db)
    _check_amount_override(request.amount, current_user, db)
    return service.create_payment(request.booking_id, method=request.method, amount=request.amount)

@router.get("/my-payments", response_model=List[Payment])
def get_my_payments(db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return PaymentService(db).get_payments_by_user(current_user.id)

@router.get("/booking/{booking_id}", response_model=List[Payment])
def get_payments_by_booking(booking_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    service = PaymentService(db)
    _check_owner(service, booking_id, current_user, db)
    return service.get_payments_by_booking(booking_id)

@router.get("/{payment_id}", response_model=Payment)
def get_payment(payment_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    return _owned_payment(PaymentService(db), payment_id, current_user, db)

@router.post("/{payment_id}/process", response_model=Payment)
def process_payment(payment_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    """Charge the payment and confirm its booking"""
    service = PaymentService(db)
    _owned_payment(service, payment_id, current_user, db)
    return service.process_payment(payment_id)

@router.put("/{payment_id}", response_model=Payment)
def update_payment(
    payment_id: int,
    request: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    service = PaymentService(db)
    _owned_payment(service, payment_id, current_user, db)
    _check_amount_override(request.amount, current_user, db)
    return service.update_payment(payment_id, amount=request.amount, method=request.method)

@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: int, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    service = PaymentService(db)
    _owned_payment(service, payment_id, current_user, db)
    service.delete_payment(payment_id)

# Admin operations
@router.post("/{payment_id}/refund", response_model=Payment)
def refund_payment(payment_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    """Refund a completed payment and cancel its booking"""
    return PaymentService(db).refund_payment(payment_id)

@router.post("/{payment_id}/fail", response_model=Payment)
def mark_payment_failed(
    payment_id: int,
    request: PaymentFailure,
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    return PaymentService(db).mark_payment_failed(payment_id, request.reason)

@router.get("/", response_model=PaymentList)
def get_all_payments(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    admin = Depends(require_admin)
):
    service = PaymentService(db)
    return PaymentList(payments=service.get_all_payments(skip=skip, limit=limit), total=service.get_total_payment_count())

@router.get("/admin/summary", response_model=PaymentSummary)
def get_payment_summary(db: Session = Depends(get_db), admin = Depends(require_admin)):
    service = PaymentService(db)
    return PaymentSummary(
        total_revenue=service.calculate_total_revenue(),
        pending_amount=service.calculate_pending_amount(),
        pending_payments=len(service.get_pending_payments()),
        completed_payments=len(service.get_completed_payments()),
        currency=settings.CURRENCY
    )

@router.get("/transaction/{transaction_id}", response_model=Payment)
def get_payment_by_transaction(transaction_id: str, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return PaymentService(db).get_payment_by_transaction_id(transaction_id)

@router.get("/user/{user_id}", response_model=List[Payment])
def get_payments_by_user(user_id: int, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return PaymentService(db).get_payments_by_user(user_id)

@router.get("/status/{payment_status}", response_model=List[Payment])
def get_payments_by_status(payment_status: PaymentStatus, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return PaymentService(db).get_payments_by_status(payment_status)

@router.get("/method/{method}", response_model=List[Payment])
def get_payments_by_method(method: str, db: Session = Depends(get_db), admin = Depends(require_admin)):
    return PaymentService(db).get_payments_by_method(method)
