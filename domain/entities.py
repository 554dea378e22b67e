"""Domain Entities"""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

from domain.value_objects import DateRange, Money, construct, quantize_amount


class CampsiteType(BaseModel):
    """Reference data: nightly fee and stay limit for a category of site"""
    model_config = ConfigDict(frozen=True, from_attributes=True, str_strip_whitespace=True)

    id: Optional[int] = None
    name: str = Field(min_length=1, max_length=50)
    fee_per_night: Decimal = Field(gt=0)
    max_reservation_days: int = Field(gt=0)

    @field_validator("fee_per_night")
    @classmethod
    def two_fractional_digits(cls, v: Decimal) -> Decimal:
        return quantize_amount(v)

    @staticmethod
    def create(
        name: str,
        fee_per_night: Decimal,
        max_reservation_days: int,
        id: Optional[int] = None
    ) -> "CampsiteType":
        return construct(
            CampsiteType,
            id=id,
            name=name,
            fee_per_night=fee_per_night,
            max_reservation_days=max_reservation_days
        )


class Campsite(BaseModel):
    """An individual site, referencing its CampsiteType by id"""
    model_config = ConfigDict(frozen=True, from_attributes=True, str_strip_whitespace=True)

    id: Optional[int] = None
    campsite_type_id: int = Field(gt=0)
    nickname: str = Field(min_length=1, max_length=100)
    image_url: Optional[str] = None

    @staticmethod
    def create(
        campsite_type_id: int,
        nickname: str,
        image_url: Optional[str] = None,
        id: Optional[int] = None
    ) -> "Campsite":
        return construct(
            Campsite,
            id=id,
            campsite_type_id=campsite_type_id,
            nickname=nickname,
            image_url=image_url
        )


class UserProfile(BaseModel):
    """Person who holds reservations"""
    model_config = ConfigDict(frozen=True, from_attributes=True, str_strip_whitespace=True)

    id: Optional[int] = None
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr

    @staticmethod
    def create(
        first_name: str,
        last_name: str,
        email: str,
        id: Optional[int] = None
    ) -> "UserProfile":
        return construct(
            UserProfile,
            id=id,
            first_name=first_name,
            last_name=last_name,
            email=email
        )


class Reservation(BaseModel):
    """A campsite booked by one user for [check_in, check_out).

    Never mutated once stored: changing dates means cancelling and booking
    again. total_cost is fixed when the reservation is created and is not
    recomputed if the campsite type's fee changes later.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[int] = None
    campsite_id: int = Field(gt=0)
    user_profile_id: int = Field(gt=0)
    check_in: date
    check_out: date
    total_cost: Money

    @field_validator("check_out")
    @classmethod
    def check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        if "check_in" in info.data and v <= info.data["check_in"]:
            raise ValueError("Check-out must be after check-in")
        return v

    @staticmethod
    def create(
        campsite_id: int,
        user_profile_id: int,
        date_range: DateRange,
        total_cost: Money,
        id: Optional[int] = None
    ) -> "Reservation":
        return construct(
            Reservation,
            id=id,
            campsite_id=campsite_id,
            user_profile_id=user_profile_id,
            check_in=date_range.check_in,
            check_out=date_range.check_out,
            total_cost=total_cost
        )

    @property
    def date_range(self) -> DateRange:
        return DateRange(check_in=self.check_in, check_out=self.check_out)

    def get_nights(self) -> int:
        return self.date_range.nights()

    def with_id(self, reservation_id: int) -> "Reservation":
        return self.model_copy(update={"id": reservation_id})


# ==================== READ MODELS ====================

class CampsiteDetails(BaseModel):
    """Campsite hydrated with its type"""
    model_config = ConfigDict(frozen=True)

    campsite: Campsite
    campsite_type: CampsiteType


class ReservationDetails(BaseModel):
    """Reservation joined with its campsite, campsite type and user profile"""
    model_config = ConfigDict(frozen=True)

    reservation: Reservation
    campsite: Campsite
    campsite_type: CampsiteType
    user_profile: UserProfile
