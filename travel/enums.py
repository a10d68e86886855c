from enum import Enum


class ResourceType(str, Enum):
    """Kinds of bookable resource"""
    TOUR = "TOUR"
    LODGE = "LODGE"
    TRANSPORT = "TRANSPORT"


class BookingStatus(str, Enum):
    """Booking status enumeration"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Payment status enumeration"""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
