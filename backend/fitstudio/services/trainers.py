from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Trainers


def get_trainer(db: Session, trainer_id: str) -> Trainers:
    trainer = db.get(Trainers, trainer_id)
    if trainer is None:
        raise NotFoundError(f"Trainer {trainer_id} not found")
    return trainer


def list_trainers(db: Session) -> list[Trainers]:
    return db.query(Trainers).order_by(Trainers.name).all()
