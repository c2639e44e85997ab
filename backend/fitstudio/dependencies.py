# backend/fitstudio/dependencies.py

import hmac
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from .config import settings
from .services.events import EventEmitter


def get_event_emitter(request: Request) -> EventEmitter:
    return request.app.state.event_emitter


def require_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    """
    Placeholder admin gate: a shared token in X-Admin-Token.
    No token configured → admin API is closed.
    """
    expected = settings.admin_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access is not configured",
        )
    if not x_admin_token or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
        )
