# backend/fitstudio/schemas/availability.py

from typing import Optional

from .common import CamelModel


class ScheduleEntryCreate(CamelModel):
    trainer_id: str
    weekday: int  # 0 = Monday … 6 = Sunday
    time: str  # HH:MM


class ScheduleEntryRead(CamelModel):
    id: int
    trainer_id: str
    weekday: int
    time: str


class ScheduleChangeResponse(CamelModel):
    success: bool = True
    changed: bool
    resynced_dates: int = 0


class VacationCreate(CamelModel):
    trainer_id: str
    start_date: str
    end_date: str
    note: Optional[str] = None


class VacationRead(CamelModel):
    id: int
    trainer_id: str
    start_date: str
    end_date: str
    note: Optional[str] = None
