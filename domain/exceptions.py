"""Domain Errors"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for every error the reservation core raises"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Structured payload for the API boundary"""
        return {"error": self.kind, "message": self.message}


class ValidationError(DomainError):
    """Malformed input or a field constraint violated at construction"""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field, "reason": self.reason}

    @classmethod
    def from_pydantic(cls, error) -> "ValidationError":
        """Build from the first entry of a pydantic ValidationError"""
        first = error.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "__root__"
        return cls(field=field, reason=first.get("msg", "invalid value"))


class InvalidDateRange(DomainError):
    """Check-out is not strictly after check-in"""

    def __init__(self, check_in, check_out):
        super().__init__(
            f"Check-out {check_out} must be after check-in {check_in}"
        )
        self.check_in = check_in
        self.check_out = check_out

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
        }


class StayTooLong(DomainError):
    """Requested nights exceed the campsite type's maximum stay"""

    def __init__(self, requested: int, maximum: int):
        super().__init__(
            f"Requested stay of {requested} nights exceeds the maximum of {maximum}"
        )
        self.requested = requested
        self.maximum = maximum

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "requested": self.requested, "maximum": self.maximum}


class CampsiteUnavailable(DomainError):
    """Candidate dates overlap an existing reservation on the same campsite"""

    def __init__(self, conflicting_reservation_id: Optional[int]):
        super().__init__(
            f"Campsite is already reserved (conflicts with reservation {conflicting_reservation_id})"
        )
        self.conflicting_reservation_id = conflicting_reservation_id

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "conflicting_reservation_id": self.conflicting_reservation_id}


class NotFound(DomainError):
    """Referenced entity does not exist"""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "entity": self.entity, "entity_id": self.entity_id}


class CampsiteInUse(DomainError):
    """Campsite deletion blocked by reservations that still reference it"""

    def __init__(self, campsite_id: int, reservation_count: int):
        super().__init__(
            f"Campsite {campsite_id} has {reservation_count} reservation(s) and cannot be deleted"
        )
        self.campsite_id = campsite_id
        self.reservation_count = reservation_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "campsite_id": self.campsite_id,
            "reservation_count": self.reservation_count,
        }


class PersistenceError(DomainError):
    """Storage layer failure; wraps the underlying cause"""


class ReservationConflictError(PersistenceError):
    """Insert rejected by the storage backstop because the dates overlap a committed reservation"""

    def __init__(self, conflicting_reservation_id: int):
        super().__init__(
            f"Insert conflicts with committed reservation {conflicting_reservation_id}"
        )
        self.conflicting_reservation_id = conflicting_reservation_id
