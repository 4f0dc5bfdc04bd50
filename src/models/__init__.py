from .common import (
    Booking,
    BookingBase,
    CreateBookingRequest,
    DateRange,
    Extra,
    PriceBreakdown,
    PricingBasis,
    PricingRule,
    Property,
    PropertyStatus,
    QuoteRequest,
    UserIdentity,
)

__all__ = [
    "Booking",
    "BookingBase",
    "CreateBookingRequest",
    "DateRange",
    "Extra",
    "PriceBreakdown",
    "PricingBasis",
    "PricingRule",
    "Property",
    "PropertyStatus",
    "QuoteRequest",
    "UserIdentity",
]
