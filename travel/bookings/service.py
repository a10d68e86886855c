import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from travel.database import unit_of_work
from travel.enums import BookingStatus, PaymentStatus, ResourceType
from travel.exceptions import (
    DeletionNotAllowed, InvalidInput, InvalidTransition, NotFound, UpdateNotAllowed
)
from travel.inventory import InventoryLedger, policy_for
from travel.models import Booking, Payment, User
from travel.validation import require, require_positive

logger = logging.getLogger(__name__)

class BookingService:
    """Service owning the booking lifecycle and the inventory each booking reserves.

    States: PENDING -> CONFIRMED | CANCELLED, and CONFIRMED -> CANCELLED.
    A booking's quantity stays deducted from its resource while it is PENDING
    or CONFIRMED and is released exactly once, on cancellation or on deletion
    while PENDING.
    """

    def __init__(self, db: Session, ledger: Optional[InventoryLedger] = None):
        self.db = db
        self.ledger = ledger or InventoryLedger(db)

    # ---- lifecycle ----

    def create_booking(
        self,
        user_id: int,
        resource_type: Union[ResourceType, str],
        resource_id: int,
        quantity: int,
        special_requests: Optional[str] = None
    ) -> Booking:
        """Reserve inventory and record a PENDING booking"""
        require(user_id, "user_id", "User is required for booking")
        policy = policy_for(resource_type)
        require(resource_id, "resource_id", f"{policy.label} is required for booking")
        require_positive(quantity, "quantity")

        with unit_of_work(self.db):
            if self.db.get(User, user_id) is None:
                raise NotFound("User", user_id)

            resource = self.ledger.reserve(resource_type, resource_id, quantity)

            booking = Booking(
                user_id=user_id,
                resource_type=ResourceType(resource_type).value,
                resource_id=resource_id,
                quantity=quantity,
                status=BookingStatus.PENDING.value,
                booking_date=datetime.now(),
                total_amount=policy.unit_price(resource) * quantity,
                special_requests=special_requests
            )
            self.db.add(booking)
            self.db.flush()

        logger.info(
            f"Booking {booking.id} created for user {user_id}: "
            f"{quantity} on {policy.label} {resource_id}"
        )
        return booking

    def update_booking(
        self,
        booking_id: int,
        quantity: Optional[int] = None,
        special_requests: Optional[str] = None
    ) -> Booking:
        """Change a PENDING booking, adjusting its reservation by the difference"""
        if quantity is not None:
            require_positive(quantity, "quantity")

        with unit_of_work(self.db):
            booking = self._get_for_update(booking_id)

            if booking.status != BookingStatus.PENDING:
                logger.warning(f"Rejected update of {booking.status} booking {booking_id}")
                raise UpdateNotAllowed(f"Cannot update a {booking.status} booking")

            if quantity is not None and quantity != booking.quantity:
                difference = quantity - booking.quantity
                if difference > 0:
                    resource = self.ledger.reserve(booking.resource_type, booking.resource_id, difference)
                else:
                    resource = self.ledger.release(booking.resource_type, booking.resource_id, -difference)

                booking.quantity = quantity
                booking.total_amount = policy_for(booking.resource_type).unit_price(resource) * quantity

            if special_requests is not None:
                booking.special_requests = special_requests

            self.db.flush()

        logger.info(f"Booking {booking_id} updated")
        return booking

    def confirm_booking(self, booking_id: int) -> Booking:
        """PENDING -> CONFIRMED; the reservation made at creation is kept"""
        with unit_of_work(self.db):
            booking = self._get_for_update(booking_id)

            if booking.status != BookingStatus.PENDING:
                raise InvalidTransition(
                    f"Only PENDING bookings can be confirmed, booking {booking_id} is {booking.status}"
                )

            booking.status = BookingStatus.CONFIRMED.value
            self.db.flush()

        logger.info(f"Booking {booking_id} confirmed")
        return booking

    def cancel_booking(self, booking_id: int) -> Booking:
        """Release the reservation and move the booking to CANCELLED"""
        with unit_of_work(self.db):
            booking = self._get_for_update(booking_id)

            # The status gate is what makes release happen once per booking
            if booking.status == BookingStatus.CANCELLED:
                raise InvalidTransition("Booking is already cancelled")

            if self.has_completed_payment(booking.id):
                raise InvalidTransition("Booking has a completed payment, refund the payment instead")

            self.ledger.release(booking.resource_type, booking.resource_id, booking.quantity)
            booking.status = BookingStatus.CANCELLED.value
            self.db.flush()

        logger.info(f"Booking {booking_id} cancelled")
        return booking

    def delete_booking(self, booking_id: int) -> None:
        """Remove a booking; a PENDING one gives its reservation back first"""
        with unit_of_work(self.db):
            booking = self._get_for_update(booking_id)

            if booking.status == BookingStatus.CONFIRMED:
                raise DeletionNotAllowed("Cannot delete a confirmed booking. Please cancel it first.")

            # Only PENDING and FAILED payments are removed with the booking
            if self.has_settled_payment(booking.id):
                raise DeletionNotAllowed("Cannot delete a booking with a completed or refunded payment")

            if booking.status == BookingStatus.PENDING:
                self.ledger.release(booking.resource_type, booking.resource_id, booking.quantity)

            self.db.delete(booking)
            self.db.flush()

        logger.info(f"Booking {booking_id} deleted")

    # ---- queries ----

    def get_booking(self, booking_id: int) -> Booking:
        require(booking_id, "booking_id")
        booking = self.db.get(Booking, booking_id)
        if booking is None:
            raise NotFound("Booking", booking_id)
        return booking

    def get_all_bookings(self, skip: int = 0, limit: int = 100) -> List[Booking]:
        return self.db.query(Booking).order_by(Booking.booking_date.desc()).offset(skip).limit(limit).all()

    def get_bookings_by_user(self, user_id: int) -> List[Booking]:
        """Get all bookings for a user, newest first"""
        if self.db.get(User, user_id) is None:
            raise NotFound("User", user_id)
        return self.db.query(Booking).filter(
            Booking.user_id == user_id
        ).order_by(Booking.booking_date.desc()).all()

    def get_bookings_by_resource(self, resource_type: Union[ResourceType, str], resource_id: int) -> List[Booking]:
        self.ledger.get_resource(resource_type, resource_id)
        return self.db.query(Booking).filter(
            Booking.resource_type == ResourceType(resource_type).value,
            Booking.resource_id == resource_id
        ).order_by(Booking.booking_date.desc()).all()

    def get_bookings_by_status(self, status: Union[BookingStatus, str]) -> List[Booking]:
        try:
            status = BookingStatus(status)
        except ValueError:
            raise InvalidInput(f"Unknown booking status: {status}", field="status")
        return self.db.query(Booking).filter(Booking.status == status.value).all()

    def get_pending_bookings(self) -> List[Booking]:
        return self.get_bookings_by_status(BookingStatus.PENDING)

    def get_confirmed_bookings(self) -> List[Booking]:
        return self.get_bookings_by_status(BookingStatus.CONFIRMED)

    def calculate_total_revenue(self) -> Decimal:
        """Sum of confirmed booking totals"""
        return sum((b.total_amount for b in self.get_confirmed_bookings()), Decimal("0"))

    def get_total_booking_count(self) -> int:
        return self.db.query(Booking).count()

    def get_booking_count_by_user(self, user_id: int) -> int:
        return len(self.get_bookings_by_user(user_id))

    # ---- helpers ----

    def _get_for_update(self, booking_id: int) -> Booking:
        require(booking_id, "booking_id")
        booking = self.db.query(Booking).filter(
            Booking.id == booking_id
        ).with_for_update().populate_existing().first()
        if booking is None:
            raise NotFound("Booking", booking_id)
        return booking

    def has_completed_payment(self, booking_id: int) -> bool:
        return self.db.query(Payment.id).filter(
            Payment.booking_id == booking_id,
            Payment.status == PaymentStatus.COMPLETED.value
        ).first() is not None

    def has_settled_payment(self, booking_id: int) -> bool:
        """Whether a COMPLETED or REFUNDED payment records money moving for the booking"""
        return self.db.query(Payment.id).filter(
            Payment.booking_id == booking_id,
            Payment.status.in_([PaymentStatus.COMPLETED.value, PaymentStatus.REFUNDED.value])
        ).first() is not None
