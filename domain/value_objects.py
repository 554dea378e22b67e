"""Domain Value Objects"""
from datetime import date
from decimal import Decimal
from typing import Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from domain.exceptions import ValidationError

CENTS = Decimal("0.01")

ModelT = TypeVar("ModelT", bound=BaseModel)


def quantize_amount(value: Decimal) -> Decimal:
    """Normalize a currency amount to two fractional digits.

    Sub-cent amounts are rejected, never rounded.
    """
    value = Decimal(value)
    quantized = value.quantize(CENTS)
    if quantized != value:
        raise ValueError("Amount must not have more than two fractional digits")
    return quantized


def construct(model: Type[ModelT], **fields) -> ModelT:
    """Build a model, reporting constraint failures as a domain ValidationError"""
    try:
        return model(**fields)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


class DateRange(BaseModel):
    """Half-open stay interval [check_in, check_out)"""
    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date

    @field_validator("check_out")
    @classmethod
    def check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        if "check_in" in info.data and v <= info.data["check_in"]:
            raise ValueError("Check-out must be after check-in")
        return v

    @classmethod
    def of(cls, check_in: date, check_out: date) -> "DateRange":
        return construct(cls, check_in=check_in, check_out=check_out)

    def nights(self) -> int:
        """Calculate number of nights"""
        return (self.check_out - self.check_in).days

    def overlaps(self, other: "DateRange") -> bool:
        # a checkout on day D and a checkin on day D do not collide
        return self.check_in < other.check_out and other.check_in < self.check_out


class Money(BaseModel):
    """Value Object for monetary amounts"""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(ge=0)
    currency: str = "USD"

    @field_validator("amount")
    @classmethod
    def two_fractional_digits(cls, v: Decimal) -> Decimal:
        return quantize_amount(v)

    def times(self, factor: int) -> "Money":
        return Money(amount=self.amount * factor, currency=self.currency)
