from .tables import (
    BOOKING_STATUSES,
    LIVE_BOOKING_STATUSES,
    Base,
    Bookings,
    TimeSlots,
    TrainerSchedules,
    Trainers,
    TrainerVacations,
)

__all__ = [
    "BOOKING_STATUSES",
    "LIVE_BOOKING_STATUSES",
    "Base",
    "Bookings",
    "TimeSlots",
    "TrainerSchedules",
    "Trainers",
    "TrainerVacations",
]
