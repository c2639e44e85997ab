# backend/fitstudio/middleware/audit.py
"""
Request audit log: one JSON line per request on the `fitstudio.audit` logger.

Never blocks a request and never touches the database. Server errors are
logged at WARNING so they stand out from routine traffic; a request that
blows up before producing a response is recorded with status 500 and the
exception is re-raised untouched.
"""

import json
import logging
import time

from fastapi import Request

from ..ratelimit.dependency import client_origin

logger = logging.getLogger("fitstudio.audit")

# Health checks would drown out real traffic
SKIP_PATHS = frozenset({"/health"})


def _record(request: Request, status: int, started: float) -> dict:
    record = {
        "ts": int(time.time()),
        "method": request.method,
        "path": request.url.path,
        "status": status,
        "origin": client_origin(request),
        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
    }
    if request.url.query:
        record["query"] = request.url.query
    user_agent = request.headers.get("User-Agent")
    if user_agent:
        record["ua"] = user_agent
    return record


async def audit_middleware(request: Request, call_next):
    if request.url.path in SKIP_PATHS:
        return await call_next(request)

    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.warning(json.dumps(_record(request, 500, started), ensure_ascii=False))
        raise

    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(level, json.dumps(_record(request, response.status_code, started), ensure_ascii=False))
    return response
