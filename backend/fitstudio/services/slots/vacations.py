# backend/fitstudio/services/slots/vacations.py
"""
Vacation filter: is the trainer away on a given date?

Ranges are inclusive on both ends and may overlap; any covering range wins.
"""

from datetime import date
from sqlalchemy.orm import Session

from ...models import TrainerVacations


def is_on_vacation(db: Session, trainer_id: str, target_date: date) -> bool:
    date_str = target_date.isoformat()

    hit = (
        db.query(TrainerVacations.id)
        .filter(
            TrainerVacations.trainer_id == trainer_id,
            TrainerVacations.start_date <= date_str,
            TrainerVacations.end_date >= date_str,
        )
        .first()
    )
    return hit is not None
