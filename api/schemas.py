"""API Schemas - Request and Response DTOs"""
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator

ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _iso_calendar_date(value: Any) -> date:
    """Accept only YYYY-MM-DD, never timestamps or datetimes"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and ISO_DATE.fullmatch(value):
        return date.fromisoformat(value)
    raise ValueError("Date must be written as YYYY-MM-DD")


IsoDate = Annotated[date, BeforeValidator(_iso_calendar_date)]


# ============================================================================
# CAMPSITE TYPE SCHEMAS
# ============================================================================

class CreateCampsiteTypeRequest(BaseModel):
    """Create campsite type request DTO"""
    name: str
    fee_per_night: Decimal
    max_reservation_days: int


class CampsiteTypeResponse(BaseModel):
    """Campsite type response DTO"""
    id: int
    name: str
    fee_per_night: Decimal
    max_reservation_days: int


# ============================================================================
# CAMPSITE SCHEMAS
# ============================================================================

class CampsiteRequest(BaseModel):
    """Create/replace campsite request DTO"""
    campsite_type_id: int
    nickname: str
    image_url: Optional[str] = None


class CampsiteResponse(BaseModel):
    """Campsite response DTO"""
    id: int
    campsite_type_id: int
    nickname: str
    image_url: Optional[str] = None


class CampsiteDetailResponse(CampsiteResponse):
    """Campsite with its type"""
    campsite_type: CampsiteTypeResponse


# ============================================================================
# USER PROFILE SCHEMAS
# ============================================================================

class CreateUserProfileRequest(BaseModel):
    """Create user profile request DTO"""
    first_name: str
    last_name: str
    email: str


class UserProfileResponse(BaseModel):
    """User profile response DTO"""
    id: int
    first_name: str
    last_name: str
    email: str


# ============================================================================
# RESERVATION SCHEMAS
# ============================================================================

class CreateReservationRequest(BaseModel):
    """Create reservation request DTO; dates as YYYY-MM-DD"""
    user_profile_id: int
    campsite_id: int
    check_in: IsoDate
    check_out: IsoDate


class ReservationResponse(BaseModel):
    """Reservation response DTO"""
    id: int
    campsite_id: int
    user_profile_id: int
    check_in: date
    check_out: date
    nights: int
    total_cost: Decimal
    currency: str


class ReservationDetailResponse(ReservationResponse):
    """Reservation joined with campsite, campsite type and user profile"""
    campsite: CampsiteResponse
    campsite_type: CampsiteTypeResponse
    user_profile: UserProfileResponse


class HealthResponse(BaseModel):
    status: str
    message: str
    seed_version: int
