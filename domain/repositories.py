"""Domain Repository Interfaces

Implementations raise PersistenceError for storage faults and return None
for rows that do not exist.
"""
from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional

from domain.entities import Campsite, CampsiteType, Reservation, UserProfile


class CampsiteTypeRepository(ABC):
    """Repository interface for CampsiteType reference data"""

    @abstractmethod
    async def add(self, campsite_type: CampsiteType) -> CampsiteType:
        """Store a campsite type, assigning an id when it has none"""
        pass

    @abstractmethod
    async def find_by_id(self, campsite_type_id: int) -> Optional[CampsiteType]:
        """Find campsite type by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[CampsiteType]:
        """Find all campsite types"""
        pass


class CampsiteRepository(ABC):
    """Repository interface for Campsite"""

    @abstractmethod
    async def add(self, campsite: Campsite) -> Campsite:
        """Store a campsite, assigning an id when it has none"""
        pass

    @abstractmethod
    async def find_by_id(self, campsite_id: int) -> Optional[Campsite]:
        """Find campsite by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Campsite]:
        """Find all campsites"""
        pass

    @abstractmethod
    async def update(self, campsite: Campsite) -> Campsite:
        """Replace a stored campsite"""
        pass

    @abstractmethod
    async def delete(self, campsite_id: int) -> bool:
        """Delete campsite; False when it did not exist"""
        pass


class UserProfileRepository(ABC):
    """Repository interface for UserProfile"""

    @abstractmethod
    async def add(self, user_profile: UserProfile) -> UserProfile:
        """Store a user profile, assigning an id when it has none"""
        pass

    @abstractmethod
    async def find_by_id(self, user_profile_id: int) -> Optional[UserProfile]:
        """Find user profile by ID"""
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[UserProfile]:
        """Find user profile by email"""
        pass

    @abstractmethod
    async def find_all(self) -> List[UserProfile]:
        """Find all user profiles"""
        pass


class ReservationRepository(ABC):
    """Repository interface for Reservation"""

    @abstractmethod
    def campsite_transaction(self, campsite_id: int) -> AsyncContextManager[None]:
        """Serialize read-then-insert sequences for one campsite.

        Everything awaited inside the block sees no concurrent insert or
        delete on the same campsite.
        """
        pass

    @abstractmethod
    async def insert(self, reservation: Reservation) -> Reservation:
        """Store a new reservation and return it with its id.

        Raises ReservationConflictError when the dates overlap a committed
        reservation on the same campsite.
        """
        pass

    @abstractmethod
    async def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        """Find reservation by ID"""
        pass

    @abstractmethod
    async def find_active_by_campsite(self, campsite_id: int) -> List[Reservation]:
        """Reservations on a campsite that still block its dates"""
        pass

    @abstractmethod
    async def find_all(
        self,
        campsite_id: Optional[int] = None,
        user_profile_id: Optional[int] = None
    ) -> List[Reservation]:
        """Find reservations, optionally filtered"""
        pass

    @abstractmethod
    async def delete(self, reservation_id: int) -> bool:
        """Delete reservation; False when it did not exist"""
        pass
