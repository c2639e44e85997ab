# backend/fitstudio/main.py

import logging

from fastapi import FastAPI
from sqlalchemy import text

from .config import settings
from .database import engine
from .errors import register_error_handlers
from .middleware.audit import audit_middleware
from .ratelimit.admission import build_admission_control
from .redis_client import redis_client
from .routers import admin, bookings, slots, trainers
from .services.events import build_event_emitter

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Fitness Studio Booking API")

app.middleware("http")(audit_middleware)
register_error_handlers(app)

# Swappable in tests via app.state
app.state.admission_control = build_admission_control(
    settings.rate_limit_backend,
    limit=settings.rate_limit_max_requests,
    window=settings.rate_limit_window_seconds,
    redis=redis_client,
)
app.state.event_emitter = build_event_emitter(redis_client)

app.include_router(trainers.router)
app.include_router(slots.router)
app.include_router(bookings.router)
app.include_router(admin.router)


@app.get("/health")
def health():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.error(f"Health check: database unavailable: {e}")
        database = "error"

    if redis_client is None:
        redis_state = "disabled"
    else:
        try:
            redis_state = "ok" if redis_client.ping() else "error"
        except Exception as e:
            logger.error(f"Health check: redis unavailable: {e}")
            redis_state = "error"

    return {
        "status": "ok" if database == "ok" and redis_state != "error" else "degraded",
        "database": database,
        "redis": redis_state,
    }
