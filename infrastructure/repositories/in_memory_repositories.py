"""In-Memory Repository Implementations"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from domain.repositories import (
    CampsiteRepository, CampsiteTypeRepository, ReservationRepository, UserProfileRepository
)
from domain.entities import Campsite, CampsiteType, Reservation, UserProfile
from domain.exceptions import PersistenceError, ReservationConflictError


class _IdSequence:
    """Identity column: ids only move forward, even after rows are deleted"""

    def __init__(self):
        self._last = 0

    def next(self) -> int:
        self._last += 1
        return self._last

    def observe(self, entity_id: int) -> None:
        self._last = max(self._last, entity_id)


def _check_new_key(storage: Dict[int, object], entity_id: int, table: str) -> None:
    if entity_id in storage:
        raise PersistenceError(f"Duplicate key {entity_id} in {table}")


class InMemoryCampsiteTypeRepository(CampsiteTypeRepository):
    """In-memory implementation of CampsiteTypeRepository"""

    def __init__(self):
        self._storage: Dict[int, CampsiteType] = {}
        self._ids = _IdSequence()

    async def add(self, campsite_type: CampsiteType) -> CampsiteType:
        """Save campsite type to memory"""
        if campsite_type.id is None:
            campsite_type = campsite_type.model_copy(update={"id": self._ids.next()})
        _check_new_key(self._storage, campsite_type.id, "campsite_types")
        self._ids.observe(campsite_type.id)
        self._storage[campsite_type.id] = campsite_type
        return campsite_type

    async def find_by_id(self, campsite_type_id: int) -> Optional[CampsiteType]:
        return self._storage.get(campsite_type_id)

    async def find_all(self) -> List[CampsiteType]:
        return [self._storage[key] for key in sorted(self._storage)]


class InMemoryCampsiteRepository(CampsiteRepository):
    """In-memory implementation of CampsiteRepository"""

    def __init__(self):
        self._storage: Dict[int, Campsite] = {}
        self._ids = _IdSequence()

    async def add(self, campsite: Campsite) -> Campsite:
        """Save campsite to memory"""
        if campsite.id is None:
            campsite = campsite.model_copy(update={"id": self._ids.next()})
        _check_new_key(self._storage, campsite.id, "campsites")
        self._ids.observe(campsite.id)
        self._storage[campsite.id] = campsite
        return campsite

    async def find_by_id(self, campsite_id: int) -> Optional[Campsite]:
        return self._storage.get(campsite_id)

    async def find_all(self) -> List[Campsite]:
        return [self._storage[key] for key in sorted(self._storage)]

    async def update(self, campsite: Campsite) -> Campsite:
        if campsite.id in self._storage:
            self._storage[campsite.id] = campsite
            return campsite
        raise PersistenceError(f"Campsite {campsite.id} is not stored")

    async def delete(self, campsite_id: int) -> bool:
        if campsite_id in self._storage:
            del self._storage[campsite_id]
            return True
        return False


class InMemoryUserProfileRepository(UserProfileRepository):
    """In-memory implementation of UserProfileRepository"""

    def __init__(self):
        self._storage: Dict[int, UserProfile] = {}
        self._ids = _IdSequence()

    async def add(self, user_profile: UserProfile) -> UserProfile:
        """Save user profile to memory"""
        if user_profile.id is None:
            user_profile = user_profile.model_copy(update={"id": self._ids.next()})
        _check_new_key(self._storage, user_profile.id, "user_profiles")
        self._ids.observe(user_profile.id)
        self._storage[user_profile.id] = user_profile
        return user_profile

    async def find_by_id(self, user_profile_id: int) -> Optional[UserProfile]:
        return self._storage.get(user_profile_id)

    async def find_by_email(self, email: str) -> Optional[UserProfile]:
        for user_profile in self._storage.values():
            if user_profile.email.lower() == email.lower():
                return user_profile
        return None

    async def find_all(self) -> List[UserProfile]:
        return [self._storage[key] for key in sorted(self._storage)]


class InMemoryReservationRepository(ReservationRepository):
    """In-memory implementation of ReservationRepository.

    A per-campsite asyncio.Lock stands in for a serializable transaction, and
    insert() re-checks overlap the way a range exclusion constraint would.
    """

    def __init__(self):
        self._storage: Dict[int, Reservation] = {}
        self._ids = _IdSequence()
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_holders: Dict[int, int] = {}

    @asynccontextmanager
    async def campsite_transaction(self, campsite_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(campsite_id, asyncio.Lock())
        self._lock_holders[campsite_id] = self._lock_holders.get(campsite_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            # holders count waiters too, so a lock is dropped only once nobody needs it
            self._lock_holders[campsite_id] -= 1
            if not self._lock_holders[campsite_id]:
                del self._lock_holders[campsite_id]
                del self._locks[campsite_id]

    async def insert(self, reservation: Reservation) -> Reservation:
        """Save reservation to memory"""
        for committed in self._storage.values():
            if (committed.campsite_id == reservation.campsite_id
                    and committed.date_range.overlaps(reservation.date_range)):
                raise ReservationConflictError(committed.id)

        if reservation.id is None:
            reservation = reservation.with_id(self._ids.next())
        _check_new_key(self._storage, reservation.id, "reservations")
        self._ids.observe(reservation.id)
        self._storage[reservation.id] = reservation
        return reservation

    async def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        return self._storage.get(reservation_id)

    async def find_active_by_campsite(self, campsite_id: int) -> List[Reservation]:
        return [r for r in self._storage.values() if r.campsite_id == campsite_id]

    async def find_all(
        self,
        campsite_id: Optional[int] = None,
        user_profile_id: Optional[int] = None
    ) -> List[Reservation]:
        return [
            r for r in self._storage.values()
            if (campsite_id is None or r.campsite_id == campsite_id)
            and (user_profile_id is None or r.user_profile_id == user_profile_id)
        ]

    async def delete(self, reservation_id: int) -> bool:
        if reservation_id in self._storage:
            del self._storage[reservation_id]
            return True
        return False
