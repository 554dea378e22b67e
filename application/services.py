"""Application Services - Business use cases"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from domain.entities import (
    Campsite, CampsiteDetails, CampsiteType, Reservation, ReservationDetails, UserProfile
)
from domain.exceptions import (
    CampsiteInUse, CampsiteUnavailable, InvalidDateRange, NotFound, PersistenceError,
    ReservationConflictError, StayTooLong, ValidationError
)
from domain.repositories import (
    CampsiteRepository, CampsiteTypeRepository, ReservationRepository, UserProfileRepository
)
from domain.rules import calculate_total_cost, check_availability, validate_stay
from domain.value_objects import DateRange

logger = logging.getLogger(__name__)


class CampsiteTypeService:
    """Service for CampsiteType reference data"""

    def __init__(self, repository: CampsiteTypeRepository):
        self.repository = repository

    async def create_campsite_type(
        self,
        name: str,
        fee_per_night: Decimal,
        max_reservation_days: int
    ) -> CampsiteType:
        campsite_type = CampsiteType.create(
            name=name,
            fee_per_night=fee_per_night,
            max_reservation_days=max_reservation_days
        )
        campsite_type = await self.repository.add(campsite_type)
        logger.info(f"Created campsite type {campsite_type.id} ({campsite_type.name})")
        return campsite_type

    async def get_campsite_type(self, campsite_type_id: int) -> CampsiteType:
        campsite_type = await self.repository.find_by_id(campsite_type_id)
        if campsite_type is None:
            raise NotFound("CampsiteType", campsite_type_id)
        return campsite_type

    async def list_campsite_types(self) -> List[CampsiteType]:
        return await self.repository.find_all()


class UserProfileService:
    """Service for UserProfile use cases"""

    def __init__(self, repository: UserProfileRepository):
        self.repository = repository

    async def create_user_profile(self, first_name: str, last_name: str, email: str) -> UserProfile:
        user_profile = UserProfile.create(first_name=first_name, last_name=last_name, email=email)
        if await self.repository.find_by_email(user_profile.email):
            raise ValidationError(field="email", reason="already registered")
        user_profile = await self.repository.add(user_profile)
        logger.info(f"Created user profile {user_profile.id}")
        return user_profile

    async def get_user_profile(self, user_profile_id: int) -> UserProfile:
        user_profile = await self.repository.find_by_id(user_profile_id)
        if user_profile is None:
            raise NotFound("UserProfile", user_profile_id)
        return user_profile

    async def list_user_profiles(self) -> List[UserProfile]:
        return await self.repository.find_all()


class CampsiteService:
    """Service for Campsite administration"""

    def __init__(self,
                 repository: CampsiteRepository,
                 campsite_type_repo: CampsiteTypeRepository,
                 reservation_repo: ReservationRepository):
        self.repository = repository
        self.campsite_type_repo = campsite_type_repo
        self.reservation_repo = reservation_repo

    async def _require_campsite_type(self, campsite_type_id: int) -> CampsiteType:
        campsite_type = await self.campsite_type_repo.find_by_id(campsite_type_id)
        if campsite_type is None:
            raise NotFound("CampsiteType", campsite_type_id)
        return campsite_type

    async def list_campsites(self) -> List[Campsite]:
        return await self.repository.find_all()

    async def get_campsite(self, campsite_id: int) -> CampsiteDetails:
        """Campsite together with its type"""
        campsite = await self.repository.find_by_id(campsite_id)
        if campsite is None:
            raise NotFound("Campsite", campsite_id)
        campsite_type = await self.campsite_type_repo.find_by_id(campsite.campsite_type_id)
        if campsite_type is None:
            raise PersistenceError(
                f"Campsite {campsite_id} references missing campsite type {campsite.campsite_type_id}"
            )
        return CampsiteDetails(campsite=campsite, campsite_type=campsite_type)

    async def create_campsite(
        self,
        campsite_type_id: int,
        nickname: str,
        image_url: Optional[str] = None
    ) -> Campsite:
        campsite = Campsite.create(
            campsite_type_id=campsite_type_id,
            nickname=nickname,
            image_url=image_url
        )
        await self._require_campsite_type(campsite.campsite_type_id)
        campsite = await self.repository.add(campsite)
        logger.info(f"Created campsite {campsite.id} ({campsite.nickname})")
        return campsite

    async def update_campsite(
        self,
        campsite_id: int,
        campsite_type_id: int,
        nickname: str,
        image_url: Optional[str] = None
    ) -> Campsite:
        """Replace nickname, type and image of an existing campsite"""
        updated = Campsite.create(
            id=campsite_id,
            campsite_type_id=campsite_type_id,
            nickname=nickname,
            image_url=image_url
        )
        if await self.repository.find_by_id(campsite_id) is None:
            raise NotFound("Campsite", campsite_id)
        await self._require_campsite_type(updated.campsite_type_id)
        updated = await self.repository.update(updated)
        logger.info(f"Updated campsite {campsite_id}")
        return updated

    async def delete_campsite(self, campsite_id: int) -> None:
        """Delete a campsite nobody holds a reservation on"""
        async with self.reservation_repo.campsite_transaction(campsite_id):
            if await self.repository.find_by_id(campsite_id) is None:
                raise NotFound("Campsite", campsite_id)
            active = await self.reservation_repo.find_active_by_campsite(campsite_id)
            if active:
                raise CampsiteInUse(campsite_id, len(active))
            await self.repository.delete(campsite_id)
        logger.info(f"Deleted campsite {campsite_id}")


class ReservationService:
    """Service for Reservation business use cases"""

    def __init__(self,
                 repository: ReservationRepository,
                 campsite_repo: CampsiteRepository,
                 campsite_type_repo: CampsiteTypeRepository,
                 user_profile_repo: UserProfileRepository):
        self.repository = repository
        self.campsite_repo = campsite_repo
        self.campsite_type_repo = campsite_type_repo
        self.user_profile_repo = user_profile_repo

    async def create_reservation(
        self,
        user_profile_id: int,
        campsite_id: int,
        check_in: date,
        check_out: date
    ) -> Reservation:
        """Validate, price and store a new reservation.

        The campsite lookup, the overlap check and the insert all run inside
        one campsite transaction, so two overlapping requests cannot both
        pass the check.
        """
        if await self.user_profile_repo.find_by_id(user_profile_id) is None:
            raise NotFound("UserProfile", user_profile_id)

        async with self.repository.campsite_transaction(campsite_id):
            campsite = await self.campsite_repo.find_by_id(campsite_id)
            if campsite is None:
                raise NotFound("Campsite", campsite_id)
            campsite_type = await self.campsite_type_repo.find_by_id(campsite.campsite_type_id)
            if campsite_type is None:
                raise NotFound("CampsiteType", campsite.campsite_type_id)

            try:
                nights = validate_stay(check_in, check_out, campsite_type)
                date_range = DateRange.of(check_in, check_out)
                check_availability(
                    date_range, await self.repository.find_active_by_campsite(campsite_id)
                )
            except (InvalidDateRange, StayTooLong, CampsiteUnavailable) as e:
                logger.warning(f"Rejected reservation on campsite {campsite_id}: {e.kind} ({e.message})")
                raise

            reservation = Reservation.create(
                campsite_id=campsite_id,
                user_profile_id=user_profile_id,
                date_range=date_range,
                total_cost=calculate_total_cost(nights, campsite_type.fee_per_night)
            )
            try:
                reservation = await self.repository.insert(reservation)
            except ReservationConflictError as e:
                logger.warning(
                    f"Rejected reservation on campsite {campsite_id}: lost race to "
                    f"reservation {e.conflicting_reservation_id}"
                )
                raise CampsiteUnavailable(e.conflicting_reservation_id) from e

        logger.info(
            f"Created reservation {reservation.id} on campsite {campsite_id} "
            f"{check_in.isoformat()}..{check_out.isoformat()} for {reservation.total_cost.amount}"
        )
        return reservation

    async def get_reservation(self, reservation_id: int) -> ReservationDetails:
        reservation = await self.repository.find_by_id(reservation_id)
        if reservation is None:
            raise NotFound("Reservation", reservation_id)
        return (await self._hydrate([reservation]))[0]

    async def list_reservations(
        self,
        campsite_id: Optional[int] = None,
        user_profile_id: Optional[int] = None
    ) -> List[ReservationDetails]:
        """Reservations with campsite, type and user, ordered by check-in then id"""
        reservations = await self.repository.find_all(
            campsite_id=campsite_id, user_profile_id=user_profile_id
        )
        reservations.sort(key=lambda r: (r.check_in, r.id))
        return await self._hydrate(reservations)

    async def cancel_reservation(self, reservation_id: int) -> None:
        """Remove a reservation so its dates become available again"""
        reservation = await self.repository.find_by_id(reservation_id)
        if reservation is None:
            raise NotFound("Reservation", reservation_id)

        async with self.repository.campsite_transaction(reservation.campsite_id):
            if not await self.repository.delete(reservation_id):
                raise NotFound("Reservation", reservation_id)
        logger.info(f"Cancelled reservation {reservation_id} on campsite {reservation.campsite_id}")

    async def _hydrate(self, reservations: List[Reservation]) -> List[ReservationDetails]:
        campsites: Dict[int, Campsite] = {}
        campsite_types: Dict[int, CampsiteType] = {}
        user_profiles: Dict[int, UserProfile] = {}

        details = []
        for reservation in reservations:
            if reservation.campsite_id not in campsites:
                campsites[reservation.campsite_id] = await self._load(
                    self.campsite_repo, "Campsite", reservation.campsite_id
                )
            campsite = campsites[reservation.campsite_id]

            if campsite.campsite_type_id not in campsite_types:
                campsite_types[campsite.campsite_type_id] = await self._load(
                    self.campsite_type_repo, "CampsiteType", campsite.campsite_type_id
                )

            if reservation.user_profile_id not in user_profiles:
                user_profiles[reservation.user_profile_id] = await self._load(
                    self.user_profile_repo, "UserProfile", reservation.user_profile_id
                )

            details.append(ReservationDetails(
                reservation=reservation,
                campsite=campsite,
                campsite_type=campsite_types[campsite.campsite_type_id],
                user_profile=user_profiles[reservation.user_profile_id]
            ))
        return details

    @staticmethod
    async def _load(repository, entity: str, entity_id: int):
        row = await repository.find_by_id(entity_id)
        if row is None:
            raise PersistenceError(f"Reservation references missing {entity} {entity_id}")
        return row
