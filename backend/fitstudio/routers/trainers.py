# backend/fitstudio/routers/trainers.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.trainers import TrainerRead
from ..services.trainers import list_trainers

router = APIRouter(prefix="/trainers", tags=["trainers"])


@router.get("", response_model=list[TrainerRead])
def get_trainers(db: Session = Depends(get_db)):
    return list_trainers(db)
