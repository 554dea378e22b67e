"""Reference data loaded once into empty storage"""
import logging
from datetime import date
from decimal import Decimal

from domain.entities import Campsite, CampsiteType, Reservation, UserProfile
from domain.repositories import (
    CampsiteRepository, CampsiteTypeRepository, ReservationRepository, UserProfileRepository
)
from domain.rules import calculate_total_cost
from domain.value_objects import DateRange

logger = logging.getLogger(__name__)

SEED_VERSION = 1

CAMPSITE_TYPES = [
    CampsiteType.create(id=1, name="Tent", fee_per_night=Decimal("15.99"), max_reservation_days=7),
    CampsiteType.create(id=2, name="RV", fee_per_night=Decimal("26.50"), max_reservation_days=14),
    CampsiteType.create(id=3, name="Primitive", fee_per_night=Decimal("10.00"), max_reservation_days=3),
    CampsiteType.create(id=4, name="Cabins", fee_per_night=Decimal("12.00"), max_reservation_days=7),
]

CAMPSITES = [
    Campsite.create(
        id=1, campsite_type_id=1, nickname="Barred Owl",
        image_url="https://tnstateparks.com/assets/images/content-images/campgrounds/249/colsp-area2-site73.jpg"
    ),
    Campsite.create(
        id=2, campsite_type_id=2, nickname="Chickasaw",
        image_url="https://tnstateparks.com/assets/images/hero-images/chickasaw.jpg"
    ),
    Campsite.create(
        id=3, campsite_type_id=3, nickname="Fall Creek Falls",
        image_url="https://tnstateparks.com/assets/images/hero-images/fall-creek-falls.jpg"
    ),
    Campsite.create(
        id=4, campsite_type_id=4, nickname="Natchez Trace",
        image_url="https://tnstateparks.com/assets/images/content-images/campgrounds/5030/natchez-trace_camping-cabin3__lazy_xs.jpg"
    ),
    Campsite.create(
        id=5, campsite_type_id=1, nickname="Bledsoe Creek",
        image_url="https://tnstateparks.com/assets/images/content-images/campgrounds/248/bc-camping__lazy_xs.jpg"
    ),
]

USER_PROFILES = [
    UserProfile.create(id=123, first_name="Taylor", last_name="Seager", email="tseager@aol.com"),
]

# (id, campsite_id, user_profile_id, check_in, check_out)
RESERVATIONS = [
    (1, 3, 123, "2024-06-10", "2024-06-13"),
]


async def seed_reference_data(
    campsite_types: CampsiteTypeRepository,
    campsites: CampsiteRepository,
    user_profiles: UserProfileRepository,
    reservations: ReservationRepository
) -> dict:
    """Insert the seed rows into each empty table; tables that already hold rows are skipped.

    Returns the number of rows inserted per table.
    """
    inserted = {"campsite_types": 0, "campsites": 0, "user_profiles": 0, "reservations": 0}

    if not await campsite_types.find_all():
        for campsite_type in CAMPSITE_TYPES:
            await campsite_types.add(campsite_type)
        inserted["campsite_types"] = len(CAMPSITE_TYPES)

    if not await campsites.find_all():
        for campsite in CAMPSITES:
            await campsites.add(campsite)
        inserted["campsites"] = len(CAMPSITES)

    if not await user_profiles.find_all():
        for user_profile in USER_PROFILES:
            await user_profiles.add(user_profile)
        inserted["user_profiles"] = len(USER_PROFILES)

    if not await reservations.find_all():
        fees = {t.id: t.fee_per_night for t in CAMPSITE_TYPES}
        type_of = {c.id: c.campsite_type_id for c in CAMPSITES}
        for reservation_id, campsite_id, user_profile_id, check_in, check_out in RESERVATIONS:
            date_range = DateRange.of(date.fromisoformat(check_in), date.fromisoformat(check_out))
            reservation = Reservation.create(
                id=reservation_id,
                campsite_id=campsite_id,
                user_profile_id=user_profile_id,
                date_range=date_range,
                total_cost=calculate_total_cost(date_range.nights(), fees[type_of[campsite_id]])
            )
            await reservations.insert(reservation)
        inserted["reservations"] = len(RESERVATIONS)

    if any(inserted.values()):
        logger.info(f"Seed v{SEED_VERSION} applied: {inserted}")
    else:
        logger.info(f"Seed v{SEED_VERSION} skipped, storage already populated")
    return inserted
