# backend/fitstudio/ratelimit/dependency.py

import logging

from fastapi import Request

from ..config import settings
from ..errors import RateLimitError
from .admission import AdmissionControl, Denied

logger = logging.getLogger(__name__)


def client_origin(request: Request) -> str:
    """
    Behind a trusted proxy: first X-Forwarded-For hop, then X-Real-IP.
    Otherwise, or when neither is set, the socket peer.
    """
    if settings.trust_proxy_headers:
        origin = _forwarded_origin(request.headers)
        if origin:
            return origin
    if request.client:
        return request.client.host
    return "unknown"


def _forwarded_origin(headers) -> str | None:
    forwarded = headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return None


def get_admission_control(request: Request) -> AdmissionControl:
    return request.app.state.admission_control


def enforce_booking_admission(request: Request) -> None:
    """
    Dependency for booking creation: runs before the body is validated
    or anything is persisted.
    """
    admission = get_admission_control(request)
    origin = client_origin(request)
    decision = admission.check(f"booking:{origin}")
    if isinstance(decision, Denied):
        logger.warning(f"Booking rate limit exceeded: origin={origin}")
        raise RateLimitError(
            "Too many booking attempts, please try again later",
            retry_after=decision.retry_after,
        )
