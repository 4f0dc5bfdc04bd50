from datetime import date
from typing import AbstractSet, FrozenSet, Iterable, List

from models.common import BookingBase
from utils.pricing import iter_nights


def compute_blocked_dates(bookings: Iterable[BookingBase]) -> FrozenSet[date]:
    """Get every date occupied by an existing booking.

    The check-out day stays bookable, so a new guest can arrive the day the
    previous one leaves. Overlapping bookings collapse into one set.
    """
    blocked = set()
    for booking in bookings:
        blocked.update(iter_nights(booking.check_in_date, booking.check_out_date))
    return frozenset(blocked)


def is_before_today(day: date, today: date) -> bool:
    return day < today


def is_date_disabled(day: date, blocked: AbstractSet[date], today: date) -> bool:
    """Whether a date picker must refuse this date for a new selection."""
    return is_before_today(day, today) or day in blocked


def find_unavailable_dates(
    check_in: date, check_out: date, blocked: AbstractSet[date], today: date
) -> List[date]:
    """Get the nights of a requested stay that cannot be booked, sorted."""
    return [
        night
        for night in iter_nights(check_in, check_out)
        if is_date_disabled(night, blocked, today)
    ]
