import logging
import secrets
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from travel.bookings.service import BookingService
from travel.database import unit_of_work
from travel.enums import BookingStatus, PaymentStatus
from travel.exceptions import (
    AlreadyProcessed, Conflict, DeletionNotAllowed, InvalidInput, InvalidTransition, NotFound,
    PaymentAlreadyExists, PaymentNotAllowed, RefundNotAllowed, Unprocessable, UpdateNotAllowed
)
from travel.models import Booking, Payment, User
from travel.payments.gateway import PaymentGateway, SimulatedGateway
from travel.validation import require, require_positive, require_text

logger = logging.getLogger(__name__)

def generate_transaction_id() -> str:
    return f"TXN{secrets.token_hex(8).upper()}"

class PaymentService:
    """Service owning the payment lifecycle.

    States: PENDING -> COMPLETED | FAILED, and COMPLETED -> REFUNDED.
    Settling a payment confirms its booking and refunding it cancels the
    booking, each in the same unit of work as the payment change, so a
    COMPLETED payment always belongs to a CONFIRMED booking.
    """

    def __init__(
        self,
        db: Session,
        bookings: Optional[BookingService] = None,
        gateway: Optional[PaymentGateway] = None
    ):
        self.db = db
        self.bookings = bookings or BookingService(db)
        self.gateway = gateway or SimulatedGateway()

    # ---- lifecycle ----

    def create_payment(self, booking_id: int, method: str, amount: Optional[Decimal] = None) -> Payment:
        """Record a PENDING payment for a booking"""
        require(booking_id, "booking_id", "Booking is required for payment")
        require_text(method, "method")
        if amount is not None:
            require_positive(amount, "amount")

        with unit_of_work(self.db):
            booking = self.bookings.get_booking(booking_id)

            if booking.status == BookingStatus.CANCELLED:
                raise PaymentNotAllowed("Cannot process payment for a cancelled booking")
            if self.bookings.has_completed_payment(booking.id):
                raise PaymentAlreadyExists("Payment already completed for this booking")

            payment = Payment(
                booking_id=booking.id,
                amount=booking.total_amount if amount is None else amount,
                status=PaymentStatus.PENDING.value,
                method=method.strip(),
                transaction_id=generate_transaction_id(),
                payment_date=datetime.now()
            )
            self.db.add(payment)
            self.db.flush()

        logger.info(f"Payment {payment.id} ({payment.transaction_id}) created for booking {booking_id}")
        return payment

    def process_payment(self, payment_id: int) -> Payment:
        """Charge a PENDING payment and confirm its booking.

        A declined charge leaves the payment FAILED and raises Unprocessable.
        If the booking cannot be confirmed, nothing from the attempt is kept
        except the payment being marked FAILED, and the confirm error is
        re-raised. Conflict is re-raised untouched so the caller can retry.
        """
        settling = False
        try:
            with unit_of_work(self.db):
                payment = self._get_for_update(payment_id)

                if payment.status == PaymentStatus.COMPLETED:
                    raise AlreadyProcessed("Payment has already been processed")
                if payment.status == PaymentStatus.FAILED:
                    raise Unprocessable("Cannot process a failed payment. Create a new payment.")
                if payment.status == PaymentStatus.REFUNDED:
                    raise Unprocessable("Cannot process a refunded payment")

                result = self.gateway.charge(payment.transaction_id, Decimal(payment.amount), payment.method)

                if not result.approved:
                    payment.status = PaymentStatus.FAILED.value
                    payment.failure_reason = result.reason
                    self.db.flush()
                else:
                    payment.status = PaymentStatus.COMPLETED.value
                    payment.payment_date = datetime.now()
                    self.db.flush()
                    settling = True
                    self.bookings.confirm_booking(payment.booking_id)
        except Conflict:
            raise
        except Exception as e:
            if settling:
                logger.error(f"Settlement of payment {payment_id} failed, marking it FAILED: {e}")
                self._record_failure(payment_id, f"Payment processing failed: {e}")
            raise

        if not result.approved:
            logger.warning(f"Payment {payment_id} declined: {result.reason}")
            raise Unprocessable(f"Payment was declined: {result.reason}")

        logger.info(f"Payment {payment_id} completed, booking {payment.booking_id} confirmed")
        return payment

    def refund_payment(self, payment_id: int) -> Payment:
        """COMPLETED -> REFUNDED and cancel the booking, releasing its inventory"""
        with unit_of_work(self.db):
            payment = self._get_for_update(payment_id)

            if payment.status == PaymentStatus.REFUNDED:
                raise RefundNotAllowed("Payment has already been refunded")
            if payment.status != PaymentStatus.COMPLETED:
                raise RefundNotAllowed("Only completed payments can be refunded")

            payment.status = PaymentStatus.REFUNDED.value
            # cancel_booking refuses while a COMPLETED payment is visible
            self.db.flush()
            self.bookings.cancel_booking(payment.booking_id)

        logger.info(f"Payment {payment_id} refunded, booking {payment.booking_id} cancelled")
        return payment

    def update_payment(self, payment_id: int, amount: Optional[Decimal] = None, method: Optional[str] = None) -> Payment:
        if amount is not None:
            require_positive(amount, "amount")
        if method is not None:
            require_text(method, "method")

        with unit_of_work(self.db):
            payment = self._get_for_update(payment_id)

            if payment.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED):
                raise UpdateNotAllowed(f"Cannot update a {payment.status.lower()} payment")

            if amount is not None:
                payment.amount = amount
            if method is not None:
                payment.method = method.strip()
            self.db.flush()

        logger.info(f"Payment {payment_id} updated")
        return payment

    def delete_payment(self, payment_id: int) -> None:
        with unit_of_work(self.db):
            payment = self._get_for_update(payment_id)

            if payment.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED):
                raise DeletionNotAllowed(f"Cannot delete a {payment.status.lower()} payment")

            self.db.delete(payment)
            self.db.flush()

        logger.info(f"Payment {payment_id} deleted")

    def mark_payment_failed(self, payment_id: int, reason: str) -> Payment:
        require_text(reason, "reason")

        with unit_of_work(self.db):
            payment = self._get_for_update(payment_id)

            if payment.status != PaymentStatus.PENDING:
                raise InvalidTransition(f"Only PENDING payments can be marked failed, payment {payment_id} is {payment.status}")

            payment.status = PaymentStatus.FAILED.value
            payment.failure_reason = reason
            self.db.flush()

        logger.info(f"Payment {payment_id} marked FAILED: {reason}")
        return payment

    # ---- queries ----

    def get_payment(self, payment_id: int) -> Payment:
        require(payment_id, "payment_id")
        payment = self.db.get(Payment, payment_id)
        if payment is None:
            raise NotFound("Payment", payment_id)
        return payment

    def get_payment_by_transaction_id(self, transaction_id: str) -> Payment:
        require_text(transaction_id, "transaction_id")
        payment = self.db.query(Payment).filter(Payment.transaction_id == transaction_id).first()
        if payment is None:
            raise NotFound("Payment", transaction_id)
        return payment

    def get_all_payments(self, skip: int = 0, limit: int = 100) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.payment_date.desc()).offset(skip).limit(limit).all()

    def get_total_payment_count(self) -> int:
        return self.db.query(Payment).count()

    def get_payments_by_booking(self, booking_id: int) -> List[Payment]:
        self.bookings.get_booking(booking_id)
        return self.db.query(Payment).filter(
            Payment.booking_id == booking_id
        ).order_by(Payment.payment_date.desc()).all()

    def get_payments_by_user(self, user_id: int) -> List[Payment]:
        if self.db.get(User, user_id) is None:
            raise NotFound("User", user_id)
        return self.db.query(Payment).join(Booking).filter(
            Booking.user_id == user_id
        ).order_by(Payment.payment_date.desc()).all()

    def get_payments_by_status(self, status: Union[PaymentStatus, str]) -> List[Payment]:
        try:
            status = PaymentStatus(status)
        except ValueError:
            raise InvalidInput(f"Unknown payment status: {status}", field="status")
        return self.db.query(Payment).filter(Payment.status == status.value).all()

    def get_payments_by_method(self, method: str) -> List[Payment]:
        require_text(method, "method")
        return self.db.query(Payment).filter(Payment.method == method).all()

    def get_pending_payments(self) -> List[Payment]:
        return self.get_payments_by_status(PaymentStatus.PENDING)

    def get_completed_payments(self) -> List[Payment]:
        return self.get_payments_by_status(PaymentStatus.COMPLETED)

    def calculate_total_revenue(self) -> Decimal:
        """Sum of completed payments"""
        return sum((p.amount for p in self.get_completed_payments()), Decimal("0"))

    def calculate_pending_amount(self) -> Decimal:
        return sum((p.amount for p in self.get_pending_payments()), Decimal("0"))

    # ---- helpers ----

    def _get_for_update(self, payment_id: int) -> Payment:
        require(payment_id, "payment_id")
        payment = self.db.query(Payment).filter(
            Payment.id == payment_id
        ).with_for_update().populate_existing().first()
        if payment is None:
            raise NotFound("Payment", payment_id)
        return payment

    def _record_failure(self, payment_id: int, reason: str) -> None:
        """Persist FAILED after the settlement unit was rolled back"""
        with unit_of_work(self.db):
            payment = self._get_for_update(payment_id)
            if payment.status == PaymentStatus.PENDING:
                payment.status = PaymentStatus.FAILED.value
                payment.failure_reason = reason
                self.db.flush()
