from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence

from models.common import DateRange, Extra, PriceBreakdown, PricingBasis, PricingRule

SERVICE_FEE = Decimal("50.00")  # Flat fee per stay
WEEKLY_DISCOUNT_MIN_NIGHTS = 7

# date.weekday(): Saturday = 5, Sunday = 6
WEEKEND_DAYS = (5, 6)


def iter_nights(check_in: date, check_out: date) -> Iterator[date]:
    """Yield the start date of every night in [check_in, check_out)."""
    for offset in range((check_out - check_in).days):
        yield check_in + timedelta(days=offset)


def is_weekend_night(night: date) -> bool:
    """A night is priced by the day it starts on."""
    return night.weekday() in WEEKEND_DAYS


def extra_cost(extra: Extra, nights: int, guest_count: int) -> Decimal:
    if extra.pricing_basis == PricingBasis.PER_NIGHT:
        return extra.price * nights
    if extra.pricing_basis == PricingBasis.PER_PERSON:
        return extra.price * guest_count
    return extra.price


def select_extras(pricing_rule: PricingRule, names: Sequence[str]) -> List[Extra]:
    """Resolve selected extra names against the property's offered extras."""
    offered = {extra.name: extra for extra in pricing_rule.extras}
    selected = []
    seen = set()
    for name in names:
        if name in seen:
            raise ValueError(f"Extra selected more than once: {name}")
        if name not in offered:
            raise ValueError(f"Unknown extra: {name}")
        seen.add(name)
        selected.append(offered[name])
    return selected


def compute_price(
    date_range: Optional[DateRange],
    pricing_rule: PricingRule,
    selected_extras: Sequence[Extra],
    guest_count: int,
) -> PriceBreakdown:
    """Price a stay.

    An absent or incomplete range, or one where check-out is not after
    check-in, yields an all-zero breakdown. Extras are summed as given;
    resolving them against the property is the caller's job (see
    select_extras).
    """
    if date_range is None or not date_range.is_complete:
        return PriceBreakdown()
    if date_range.check_out <= date_range.check_in:
        return PriceBreakdown()

    nightly_rates = {}
    weekday_nights = 0
    weekend_nights = 0
    for night in iter_nights(date_range.check_in, date_range.check_out):
        if is_weekend_night(night):
            weekend_nights += 1
            nightly_rates[night.isoformat()] = pricing_rule.weekend_rate
        else:
            weekday_nights += 1
            nightly_rates[night.isoformat()] = pricing_rule.base_price_per_night

    nights = weekday_nights + weekend_nights
    base_price = (
        weekday_nights * pricing_rule.base_price_per_night
        + weekend_nights * pricing_rule.weekend_rate
    )

    discount = Decimal("0")
    if nights >= WEEKLY_DISCOUNT_MIN_NIGHTS and pricing_rule.weekly_discount_percent:
        discount = base_price * pricing_rule.weekly_discount_percent / Decimal("100")
    assert discount <= base_price

    extras_total = sum(
        (extra_cost(extra, nights, guest_count) for extra in selected_extras),
        Decimal("0"),
    )

    total = base_price - discount + extras_total + SERVICE_FEE

    return PriceBreakdown(
        nights=nights,
        weekday_nights=weekday_nights,
        weekend_nights=weekend_nights,
        base_price=base_price,
        discount=discount,
        extras_total=extras_total,
        service_fee=SERVICE_FEE,
        total=total,
        nightly_rates=nightly_rates,
    )
