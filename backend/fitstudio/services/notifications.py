# backend/fitstudio/services/notifications.py
"""
Booking notification fan-out: one event per recipient (client / trainer).

Everything here is best-effort. Failures are logged and swallowed; callers
invoke these only after the booking decision has been committed.
"""

import logging
from dataclasses import asdict, dataclass
from urllib.parse import quote

from ..config import settings
from .events import EventEmitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingDetails:
    booking_id: str
    client_name: str
    client_email: str
    client_phone: str
    trainer_name: str
    trainer_phone: str | None
    date: str
    time: str
    status: str
    manage_url: str


def build_manage_url(booking_id: str, client_email: str) -> str:
    base = settings.site_url.rstrip("/")
    return (
        f"{base}/personal-training/manage"
        f"?id={quote(booking_id)}&email={quote(client_email)}"
    )


def booking_details(booking, trainer_phone: str | None) -> BookingDetails:
    return BookingDetails(
        booking_id=booking.id,
        client_name=booking.client_name,
        client_email=booking.client_email,
        client_phone=booking.client_phone,
        trainer_name=booking.trainer_name,
        trainer_phone=trainer_phone,
        date=booking.date,
        time=booking.time,
        status=booking.status,
        manage_url=build_manage_url(booking.id, booking.client_email),
    )


def _send(emitter: EventEmitter, event_type: str, recipient: str, details: BookingDetails, **extra) -> None:
    try:
        emitter.emit(event_type, {"recipient": recipient, **asdict(details), **extra})
    except Exception:
        logger.exception(f"Notification {event_type} → {recipient} failed for booking {details.booking_id}")


def notify_booking_created(emitter: EventEmitter, details: BookingDetails) -> None:
    """Client request (pending) or staff-entered booking (confirmed)."""
    event_type = "booking_requested" if details.status == "pending" else "booking_created"
    _send(emitter, event_type, "client", details)
    _send(emitter, event_type, "trainer", details)


def notify_booking_confirmed(emitter: EventEmitter, details: BookingDetails) -> None:
    _send(emitter, "booking_confirmed", "client", details)
    _send(emitter, "booking_confirmed", "trainer", details)


def notify_booking_rejected(emitter: EventEmitter, details: BookingDetails) -> None:
    _send(emitter, "booking_rejected", "client", details)


def notify_booking_cancelled(emitter: EventEmitter, details: BookingDetails) -> None:
    _send(emitter, "booking_cancelled", "client", details)
    _send(emitter, "booking_cancelled", "trainer", details)


def notify_booking_updated(
    emitter: EventEmitter,
    details: BookingDetails,
    previous_trainer_phone: str | None = None,
    trainer_changed: bool = False,
) -> None:
    _send(emitter, "booking_updated", "client", details)
    _send(emitter, "booking_updated", "trainer", details)
    if trainer_changed:
        _send(
            emitter,
            "booking_updated",
            "previous_trainer",
            details,
            previous_trainer_phone=previous_trainer_phone,
        )
