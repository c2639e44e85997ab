from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

BOOKING_STATUSES = ("pending", "confirmed", "rejected")
LIVE_BOOKING_STATUSES = ("pending", "confirmed")


class Trainers(Base):
    __tablename__ = 'trainers'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    specialty = Column(Text, nullable=False, server_default=text("''"))
    image = Column(Text, nullable=False, server_default=text("''"))
    description = Column(Text, nullable=False, server_default=text("''"))
    rating = Column(Float, nullable=False, server_default=text('5.0'))
    phone = Column(Text)

    schedules = relationship('TrainerSchedules', back_populates='trainer')
    vacations = relationship('TrainerVacations', back_populates='trainer')
    time_slots = relationship('TimeSlots', back_populates='trainer')
    bookings = relationship('Bookings', back_populates='trainer')


class TrainerSchedules(Base):
    __tablename__ = 'trainer_schedules'
    __table_args__ = (
        CheckConstraint('weekday >= 0 AND weekday <= 6', name='ck_trainer_schedules_weekday'),
        UniqueConstraint('trainer_id', 'weekday', 'time', name='uq_trainer_schedules_slot'),
    )

    id = Column(Integer, primary_key=True)
    trainer_id = Column(ForeignKey('trainers.id'), nullable=False)
    weekday = Column(Integer, nullable=False)  # 0 = Monday
    time = Column(Text, nullable=False)  # "HH:MM"

    trainer = relationship('Trainers', back_populates='schedules')


class TrainerVacations(Base):
    __tablename__ = 'trainer_vacations'
    __table_args__ = (
        CheckConstraint('start_date <= end_date', name='ck_trainer_vacations_range'),
    )

    id = Column(Integer, primary_key=True)
    trainer_id = Column(ForeignKey('trainers.id'), nullable=False)
    start_date = Column(Text, nullable=False)
    end_date = Column(Text, nullable=False)  # inclusive
    note = Column(Text)

    trainer = relationship('Trainers', back_populates='vacations')


class TimeSlots(Base):
    __tablename__ = 'time_slots'
    __table_args__ = (
        Index('idx_time_slots_trainer_date', 'trainer_id', 'date'),
    )

    id = Column(Text, primary_key=True)  # "{trainer_id}-{date}-{time}"
    trainer_id = Column(ForeignKey('trainers.id'), nullable=False)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    is_booked = Column(Integer, nullable=False, server_default=text('0'))

    trainer = relationship('Trainers', back_populates='time_slots')


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        # One live booking per slot; rejected rows stay as history.
        Index(
            'uq_bookings_live_slot',
            'slot_id',
            unique=True,
            sqlite_where=text("status IN ('pending', 'confirmed')"),
            postgresql_where=text("status IN ('pending', 'confirmed')"),
        ),
    )

    id = Column(Text, primary_key=True)
    trainer_id = Column(ForeignKey('trainers.id'), nullable=False)
    trainer_name = Column(Text, nullable=False)
    slot_id = Column(ForeignKey('time_slots.id'), nullable=False)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    client_name = Column(Text, nullable=False)
    client_email = Column(Text, nullable=False)
    client_phone = Column(Text, nullable=False)
    booked_at = Column(Text, nullable=False)
    status = Column(
        Enum(*BOOKING_STATUSES, name='booking_status'),
        nullable=False,
        server_default=text("'pending'"),
    )

    trainer = relationship('Trainers', back_populates='bookings')
    slot = relationship('TimeSlots')
