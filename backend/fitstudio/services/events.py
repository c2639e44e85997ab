"""
backend/fitstudio/services/events.py

Outbound event queue for booking notifications.

Contract: best-effort. `emit` never raises and is never awaited for
correctness; a messaging outage must not block or roll back a booking.

Implementations:
- RedisEventEmitter: RPUSH onto `events:p2p` for a delivery consumer
- LogEventEmitter: log-only, used when no Redis is configured
"""

import json
import time
import logging

from redis import Redis

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def build_event(event_type: str, payload: dict) -> dict:
    return {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }


class EventEmitter:
    """Outbound notification queue interface."""

    def emit(self, event_type: str, payload: dict) -> None:
        raise NotImplementedError


class RedisEventEmitter(EventEmitter):
    def __init__(self, redis: Redis, queue: str = P2P_QUEUE):
        self.redis = redis
        self.queue = queue

    def emit(self, event_type: str, payload: dict) -> None:
        event = build_event(event_type, payload)
        try:
            self.redis.rpush(self.queue, json.dumps(event))
            logger.info(f"Event emitted: {event_type} → {self.queue}")
        except Exception as e:
            logger.error(f"Failed to emit event {event_type}: {e}")


class LogEventEmitter(EventEmitter):
    def emit(self, event_type: str, payload: dict) -> None:
        event = build_event(event_type, payload)
        logger.info(f"Event (no queue configured): {json.dumps(event, ensure_ascii=False)}")


def build_event_emitter(redis: Redis | None) -> EventEmitter:
    if redis is None:
        return LogEventEmitter()
    return RedisEventEmitter(redis)
