import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, Response

from api.schemas import (
    # Campsite types
    CreateCampsiteTypeRequest, CampsiteTypeResponse,
    # Campsites
    CampsiteRequest, CampsiteResponse, CampsiteDetailResponse,
    # User profiles
    CreateUserProfileRequest, UserProfileResponse,
    # Reservations
    CreateReservationRequest, ReservationResponse, ReservationDetailResponse,
    HealthResponse
)
from api import dependencies
from api.dependencies import (
    get_campsite_type_service, get_campsite_service,
    get_user_profile_service, get_reservation_service
)
from application.services import (
    CampsiteService, CampsiteTypeService, ReservationService, UserProfileService
)
from domain.exceptions import (
    DomainError, ValidationError, InvalidDateRange, StayTooLong, CampsiteUnavailable,
    NotFound, CampsiteInUse, PersistenceError
)
from infrastructure.config import get_settings
from infrastructure.seed import SEED_VERSION, seed_reference_data

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_on_startup:
        await seed_reference_data(
            dependencies.campsite_type_repo,
            dependencies.campsite_repo,
            dependencies.user_profile_repo,
            dependencies.reservation_repo
        )
    yield


app = FastAPI(
    title=settings.app_title,
    description="Campsite types, campsites, user profiles and reservations for Creek River park",
    version="1.0.0",
    lifespan=lifespan
)

ERROR_STATUS = {
    ValidationError: 422,
    InvalidDateRange: 400,
    StayTooLong: 400,
    NotFound: 404,
    CampsiteUnavailable: 409,
    CampsiteInUse: 409,
    PersistenceError: 503,
}


def _http_error(error: DomainError) -> HTTPException:
    """Map a domain error to its HTTP status, keeping the structured fields"""
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(error, cls)), 500
    )
    if status_code >= 500:
        logger.error(f"{error.kind}: {error.message}")
    return HTTPException(status_code=status_code, detail=error.to_dict())

# ============================================================================
# HEALTH
# ============================================================================

@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running", "seed_version": SEED_VERSION}

# ============================================================================
# CAMPSITE TYPE ENDPOINTS
# ============================================================================

@app.get("/api/campsitetypes", response_model=List[CampsiteTypeResponse], tags=["Campsite Types"])
async def list_campsite_types(service: CampsiteTypeService = Depends(get_campsite_type_service)):
    """Get all campsite types"""
    try:
        campsite_types = await service.list_campsite_types()
        return [_campsite_type_to_response(t) for t in campsite_types]
    except DomainError as e:
        raise _http_error(e)

@app.get("/api/campsitetypes/{campsite_type_id}", response_model=CampsiteTypeResponse, tags=["Campsite Types"])
async def get_campsite_type(
    campsite_type_id: int,
    service: CampsiteTypeService = Depends(get_campsite_type_service)
):
    """Get campsite type by ID"""
    try:
        return _campsite_type_to_response(await service.get_campsite_type(campsite_type_id))
    except DomainError as e:
        raise _http_error(e)

@app.post("/api/campsitetypes", response_model=CampsiteTypeResponse, status_code=201, tags=["Campsite Types"])
async def create_campsite_type(
    request: CreateCampsiteTypeRequest,
    service: CampsiteTypeService = Depends(get_campsite_type_service)
):
    """Create campsite type"""
    try:
        campsite_type = await service.create_campsite_type(
            name=request.name,
            fee_per_night=request.fee_per_night,
            max_reservation_days=request.max_reservation_days
        )
        return _campsite_type_to_response(campsite_type)
    except DomainError as e:
        raise _http_error(e)

# ============================================================================
# CAMPSITE ENDPOINTS
# ============================================================================

@app.get("/api/campsites", response_model=List[CampsiteResponse], tags=["Campsites"])
async def list_campsites(service: CampsiteService = Depends(get_campsite_service)):
    """Get all campsites"""
    try:
        campsites = await service.list_campsites()
        return [_campsite_to_response(c) for c in campsites]
    except DomainError as e:
        raise _http_error(e)

@app.get("/api/campsites/{campsite_id}", response_model=CampsiteDetailResponse, tags=["Campsites"])
async def get_campsite(
    campsite_id: int,
    service: CampsiteService = Depends(get_campsite_service)
):
    """Get campsite by ID, including its campsite type"""
    try:
        details = await service.get_campsite(campsite_id)
        return CampsiteDetailResponse(
            **_campsite_to_response(details.campsite).model_dump(),
            campsite_type=_campsite_type_to_response(details.campsite_type)
        )
    except DomainError as e:
        raise _http_error(e)

@app.post("/api/campsites", response_model=CampsiteResponse, status_code=201, tags=["Campsites"])
async def create_campsite(
    request: CampsiteRequest,
    service: CampsiteService = Depends(get_campsite_service)
):
    """Create campsite"""
    try:
        campsite = await service.create_campsite(
            campsite_type_id=request.campsite_type_id,
            nickname=request.nickname,
            image_url=request.image_url
        )
        return _campsite_to_response(campsite)
    except DomainError as e:
        raise _http_error(e)

@app.put("/api/campsites/{campsite_id}", response_model=CampsiteResponse, tags=["Campsites"])
async def update_campsite(
    campsite_id: int,
    request: CampsiteRequest,
    service: CampsiteService = Depends(get_campsite_service)
):
    """Replace campsite nickname, type and image"""
    try:
        campsite = await service.update_campsite(
            campsite_id=campsite_id,
            campsite_type_id=request.campsite_type_id,
            nickname=request.nickname,
            image_url=request.image_url
        )
        return _campsite_to_response(campsite)
    except DomainError as e:
        raise _http_error(e)

@app.delete("/api/campsites/{campsite_id}", status_code=204, tags=["Campsites"])
async def delete_campsite(
    campsite_id: int,
    service: CampsiteService = Depends(get_campsite_service)
):
    """Delete campsite; rejected while reservations reference it"""
    try:
        await service.delete_campsite(campsite_id)
        return Response(status_code=204)
    except DomainError as e:
        raise _http_error(e)

# ============================================================================
# USER PROFILE ENDPOINTS
# ============================================================================

@app.get("/api/userprofiles", response_model=List[UserProfileResponse], tags=["User Profiles"])
async def list_user_profiles(service: UserProfileService = Depends(get_user_profile_service)):
    """Get all user profiles"""
    try:
        user_profiles = await service.list_user_profiles()
        return [_user_profile_to_response(u) for u in user_profiles]
    except DomainError as e:
        raise _http_error(e)

@app.get("/api/userprofiles/{user_profile_id}", response_model=UserProfileResponse, tags=["User Profiles"])
async def get_user_profile(
    user_profile_id: int,
    service: UserProfileService = Depends(get_user_profile_service)
):
    """Get user profile by ID"""
    try:
        return _user_profile_to_response(await service.get_user_profile(user_profile_id))
    except DomainError as e:
        raise _http_error(e)

@app.post("/api/userprofiles", response_model=UserProfileResponse, status_code=201, tags=["User Profiles"])
async def create_user_profile(
    request: CreateUserProfileRequest,
    service: UserProfileService = Depends(get_user_profile_service)
):
    """Create user profile"""
    try:
        user_profile = await service.create_user_profile(
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email
        )
        return _user_profile_to_response(user_profile)
    except DomainError as e:
        raise _http_error(e)

# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.get("/api/reservations", response_model=List[ReservationDetailResponse], tags=["Reservations"])
async def list_reservations(
    campsite_id: Optional[int] = None,
    user_profile_id: Optional[int] = None,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get reservations with campsite, type and user, ordered by check-in date"""
    try:
        details = await service.list_reservations(
            campsite_id=campsite_id,
            user_profile_id=user_profile_id
        )
        return [_reservation_details_to_response(d) for d in details]
    except DomainError as e:
        raise _http_error(e)

@app.get("/api/reservations/{reservation_id}", response_model=ReservationDetailResponse, tags=["Reservations"])
async def get_reservation(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get reservation by ID"""
    try:
        return _reservation_details_to_response(await service.get_reservation(reservation_id))
    except DomainError as e:
        raise _http_error(e)

@app.post("/api/reservations", response_model=ReservationResponse, status_code=201, tags=["Reservations"])
async def create_reservation(
    request: CreateReservationRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    """Create new reservation"""
    try:
        reservation = await service.create_reservation(
            user_profile_id=request.user_profile_id,
            campsite_id=request.campsite_id,
            check_in=request.check_in,
            check_out=request.check_out
        )
        return _reservation_to_response(reservation)
    except DomainError as e:
        raise _http_error(e)

@app.delete("/api/reservations/{reservation_id}", status_code=204, tags=["Reservations"])
async def cancel_reservation(
    reservation_id: int,
    service: ReservationService = Depends(get_reservation_service)
):
    """Cancel reservation"""
    try:
        await service.cancel_reservation(reservation_id)
        return Response(status_code=204)
    except DomainError as e:
        raise _http_error(e)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _campsite_type_to_response(campsite_type) -> CampsiteTypeResponse:
    """Convert CampsiteType entity to CampsiteTypeResponse"""
    return CampsiteTypeResponse(
        id=campsite_type.id,
        name=campsite_type.name,
        fee_per_night=campsite_type.fee_per_night,
        max_reservation_days=campsite_type.max_reservation_days
    )

def _campsite_to_response(campsite) -> CampsiteResponse:
    """Convert Campsite entity to CampsiteResponse"""
    return CampsiteResponse(
        id=campsite.id,
        campsite_type_id=campsite.campsite_type_id,
        nickname=campsite.nickname,
        image_url=campsite.image_url
    )

def _user_profile_to_response(user_profile) -> UserProfileResponse:
    """Convert UserProfile entity to UserProfileResponse"""
    return UserProfileResponse(
        id=user_profile.id,
        first_name=user_profile.first_name,
        last_name=user_profile.last_name,
        email=user_profile.email
    )

def _reservation_to_response(reservation) -> ReservationResponse:
    """Convert Reservation entity to ReservationResponse"""
    return ReservationResponse(
        id=reservation.id,
        campsite_id=reservation.campsite_id,
        user_profile_id=reservation.user_profile_id,
        check_in=reservation.check_in,
        check_out=reservation.check_out,
        nights=reservation.get_nights(),
        total_cost=reservation.total_cost.amount,
        currency=reservation.total_cost.currency
    )

def _reservation_details_to_response(details) -> ReservationDetailResponse:
    """Convert ReservationDetails read model to ReservationDetailResponse"""
    return ReservationDetailResponse(
        **_reservation_to_response(details.reservation).model_dump(),
        campsite=_campsite_to_response(details.campsite),
        campsite_type=_campsite_type_to_response(details.campsite_type),
        user_profile=_user_profile_to_response(details.user_profile)
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
