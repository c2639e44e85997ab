# backend/fitstudio/schemas/trainers.py

from typing import Optional

from .common import CamelModel


class TrainerRead(CamelModel):
    id: str
    name: str
    specialty: str
    image: str
    description: str
    rating: float
    phone: Optional[str] = None
