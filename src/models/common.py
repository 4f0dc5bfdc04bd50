from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

ZERO = Decimal("0")


class PricingBasis(str, Enum):
    PER_NIGHT = "per_night"
    PER_PERSON = "per_person"
    PER_STAY = "per_stay"


class PropertyStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Extra(BaseModel):
    """Optional paid add-on offered with a property."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    pricing_basis: PricingBasis


class PricingRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_price_per_night: Decimal = Field(ge=0)
    weekend_price_per_night: Optional[Decimal] = Field(default=None, ge=0)
    weekly_discount_percent: Optional[int] = Field(default=None, ge=0, le=100)
    extras: List[Extra] = Field(default_factory=list)

    @field_validator("extras")
    @classmethod
    def extra_names_unique(cls, v):
        names = [extra.name for extra in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate extra names: {', '.join(duplicates)}")
        return v

    @property
    def weekend_rate(self) -> Decimal:
        """Weekend nightly rate, falling back to the base rate."""
        if self.weekend_price_per_night is None:
            return self.base_price_per_night
        return self.weekend_price_per_night


class DateRange(BaseModel):
    """Prospective stay. Either bound may be missing while the guest is still picking."""

    model_config = ConfigDict(frozen=True)

    check_in: Optional[date] = None
    check_out: Optional[date] = None

    @property
    def is_complete(self) -> bool:
        return self.check_in is not None and self.check_out is not None


class PriceBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    nights: int = Field(default=0, ge=0)
    weekday_nights: int = Field(default=0, ge=0)
    weekend_nights: int = Field(default=0, ge=0)
    base_price: Decimal = ZERO
    discount: Decimal = Field(default=ZERO, ge=0)
    extras_total: Decimal = Field(default=ZERO, ge=0)
    service_fee: Decimal = ZERO
    total: Decimal = ZERO
    # night (ISO date) -> rate charged
    nightly_rates: Dict[str, Decimal] = Field(default_factory=dict)


class Property(BaseModel):
    id: UUID
    name: str
    location: str
    owner_id: str
    max_guests: int = Field(ge=1)
    long_stay: bool = False
    status: PropertyStatus = PropertyStatus.PENDING
    pricing: PricingRule
    created_at: datetime
    updated_at: datetime

    def validate_guest_count(self, guests: int) -> None:
        if guests > self.max_guests:
            raise ValueError(f"{self.name} accommodates at most {self.max_guests} guests")


class BookingBase(BaseModel):
    check_in_date: date
    check_out_date: date
    guests: int = Field(default=1, ge=1)
    extras: List[str] = Field(default_factory=list)

    @field_validator("check_out_date")
    @classmethod
    def check_out_after_check_in(cls, v, info):
        check_in = info.data.get("check_in_date")
        if check_in is not None and v <= check_in:
            raise ValueError("check_out_date must be after check_in_date")
        return v

    @property
    def nights(self) -> int:
        """Number of nights. The check-out day is not counted."""
        return (self.check_out_date - self.check_in_date).days

    @property
    def date_range(self) -> DateRange:
        return DateRange(check_in=self.check_in_date, check_out=self.check_out_date)

    def get_dates(self) -> List[date]:
        """Get all occupied dates, check-out day excluded."""
        return [self.check_in_date + timedelta(days=i) for i in range(self.nights)]


class Booking(BookingBase):
    id: UUID
    property_id: UUID
    user_id: str
    property_name: str
    property_location: str
    price: PriceBreakdown
    total_price: Decimal
    created_at: datetime
    updated_at: datetime


class CreateBookingRequest(BookingBase):
    pass


class QuoteRequest(BaseModel):
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: int = Field(default=1, ge=1)
    extras: List[str] = Field(default_factory=list)

    @property
    def date_range(self) -> DateRange:
        return DateRange(check_in=self.check_in, check_out=self.check_out)


class UserIdentity(BaseModel):
    """Signed-in user as reported by the authentication provider."""

    user_id: str
    email: str
    email_verified: bool = False
