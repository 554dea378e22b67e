"""API Dependencies - repositories and service wiring"""
from application.services import (
    CampsiteService, CampsiteTypeService, ReservationService, UserProfileService
)
from infrastructure.repositories.in_memory_repositories import (
    InMemoryCampsiteRepository, InMemoryCampsiteTypeRepository,
    InMemoryReservationRepository, InMemoryUserProfileRepository
)

# Process-wide storage; every request re-reads it through the services
campsite_type_repo = InMemoryCampsiteTypeRepository()
campsite_repo = InMemoryCampsiteRepository()
user_profile_repo = InMemoryUserProfileRepository()
reservation_repo = InMemoryReservationRepository()


def get_campsite_type_service() -> CampsiteTypeService:
    return CampsiteTypeService(campsite_type_repo)


def get_campsite_service() -> CampsiteService:
    return CampsiteService(campsite_repo, campsite_type_repo, reservation_repo)


def get_user_profile_service() -> UserProfileService:
    return UserProfileService(user_profile_repo)


def get_reservation_service() -> ReservationService:
    return ReservationService(reservation_repo, campsite_repo, campsite_type_repo, user_profile_repo)
