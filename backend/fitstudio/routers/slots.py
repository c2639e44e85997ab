# backend/fitstudio/routers/slots.py
"""
Slots API.

GET /slots/{trainer_id}?date=YYYY-MM-DD
  vacation → {slots: [], onVacation: true}, nothing materialized
  otherwise → ensure_slots_fresh (cache fill), then unbooked slots
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import ValidationError
from ..schemas.slots import SlotsResponse, TimeSlotRead
from ..services.slots import ensure_slots_fresh, is_on_vacation, list_available_slots
from ..services.trainers import get_trainer
from ..services.validation import require_date

router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("/{trainer_id}", response_model=SlotsResponse)
def get_trainer_slots(
    trainer_id: str,
    date: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    if not date:
        raise ValidationError("Date parameter is required")
    target_date = require_date(date)
    get_trainer(db, trainer_id)

    if is_on_vacation(db, trainer_id, target_date):
        return SlotsResponse(slots=[], on_vacation=True)

    ensure_slots_fresh(db, trainer_id, target_date)
    slots = list_available_slots(db, trainer_id, target_date)

    return SlotsResponse(
        slots=[TimeSlotRead.model_validate(s) for s in slots],
        on_vacation=False,
    )
