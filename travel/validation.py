"""
Precondition checks shared by every mutating operation.

Each check raises ``InvalidInput`` naming the offending field and has no side
effects, so it can run before anything is loaded or locked.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from travel.exceptions import InvalidInput

Number = Union[int, float, Decimal]


def require(value: Any, field: str, message: Optional[str] = None) -> Any:
    """Reject a missing value"""
    if value is None:
        raise InvalidInput(message or f"{field} is required", field=field)
    return value


def require_text(value: Optional[str], field: str) -> str:
    """Reject a missing or blank string"""
    if value is None or not str(value).strip():
        raise InvalidInput(f"{field} is required", field=field)
    return value


def require_positive(value: Optional[Number], field: str) -> Number:
    require(value, field)
    if value <= 0:
        raise InvalidInput(f"{field} must be positive", field=field)
    return value


def require_non_negative(value: Optional[Number], field: str) -> Number:
    require(value, field)
    if value < 0:
        raise InvalidInput(f"{field} cannot be negative", field=field)
    return value


def require_range(
    value: Optional[Number],
    field: str,
    minimum: Number,
    maximum: Number
) -> Number:
    require(value, field)
    if value < minimum or value > maximum:
        raise InvalidInput(f"{field} must be between {minimum} and {maximum}", field=field)
    return value


def require_date_order(start: Optional[date], end: Optional[date], field: str = "start_date"):
    """Both dates present and start not after end"""
    if start is None or end is None:
        raise InvalidInput("Start and end dates are required", field=field)
    if start > end:
        raise InvalidInput("Start date must be before end date", field=field)


def require_price_range(min_price: Number, max_price: Number):
    if min_price < 0 or max_price < 0 or min_price > max_price:
        raise InvalidInput("Invalid price range", field="min_price")


def require_capacity(capacity: Optional[int], available: Optional[int], field: str = "available"):
    """Counters satisfy 0 <= available <= capacity"""
    require_positive(capacity, "capacity")
    require_non_negative(available, field)
    if available > capacity:
        raise InvalidInput(f"{field} cannot exceed capacity of {capacity}", field=field)
