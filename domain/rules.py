"""Reservation rules: stay limits, availability and pricing.

Everything here is a pure function over values already loaded by the caller.
None of it touches storage, so the service decides what to load and when.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from domain.entities import CampsiteType, Reservation
from domain.exceptions import CampsiteUnavailable, InvalidDateRange, StayTooLong, ValidationError
from domain.value_objects import DateRange, Money


# ==================== STAY RULES ====================

def validate_stay(check_in: date, check_out: date, campsite_type: CampsiteType) -> int:
    """Check date order, then stay length. Returns the number of nights.

    The first failing rule wins.
    """
    if check_out <= check_in:
        raise InvalidDateRange(check_in, check_out)

    nights = (check_out - check_in).days
    if nights > campsite_type.max_reservation_days:
        raise StayTooLong(requested=nights, maximum=campsite_type.max_reservation_days)

    return nights


# ==================== AVAILABILITY ====================

def find_conflict(
    candidate: DateRange,
    existing: Iterable[Reservation]
) -> Optional[Reservation]:
    """Return the overlapping reservation with the earliest check-in, if any.

    Linear in the number of reservations on the campsite. Keeping the
    reservations sorted by check-in and bisecting would bound the scan if a
    single campsite ever carries enough bookings to matter.
    """
    conflicts = [r for r in existing if r.date_range.overlaps(candidate)]
    if not conflicts:
        return None
    return min(conflicts, key=lambda r: (r.check_in, r.id if r.id is not None else 0))


def check_availability(candidate: DateRange, existing: Iterable[Reservation]) -> None:
    conflict = find_conflict(candidate, existing)
    if conflict is not None:
        raise CampsiteUnavailable(conflicting_reservation_id=conflict.id)


# ==================== PRICING ====================

def calculate_total_cost(nights: int, fee_per_night: Decimal, currency: str = "USD") -> Money:
    """nights x fee_per_night in decimal arithmetic"""
    if nights <= 0:
        raise ValidationError(field="nights", reason="must be a positive number of nights")
    return Money(amount=Decimal(nights) * Decimal(fee_per_night), currency=currency)
