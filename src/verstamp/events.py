from __future__ import annotations

import contextvars
import time
from contextlib import contextmanager
from typing import Any

from blinker import Namespace

UPDATE_STARTED = "update.started"
STATE_ENTERED = "state.entered"
UPDATE_FAILED = "update.failed"
UPDATE_FINISHED = "update.finished"
PHASE_STARTED = "phase.started"
PHASE_FINISHED = "phase.finished"
PHASE_FAILED = "phase.failed"

_ns = Namespace()
_event_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "verstamp_event_context", default={}
)


def now_ms() -> int:
    return int(time.time() * 1000)


def signal(name: str):
    return _ns.signal(name)


def current_context() -> dict[str, Any]:
    return dict(_event_context.get())


@contextmanager
def with_context(**kwargs):
    merged = current_context()
    merged.update({k: v for k, v in kwargs.items() if v is not None})
    token = _event_context.set(merged)
    try:
        yield merged
    finally:
        _event_context.reset(token)


def emit(name: str, **payload):
    msg = current_context()
    msg.update(payload)
    msg.setdefault("ts", now_ms())
    return signal(name).send(None, event=name, **msg)


@contextmanager
def phase_span(phase_name: str, **payload):
    """Emits started/finished/failed events with the elapsed time around a remote call."""
    start = time.perf_counter()
    emit(PHASE_STARTED, phase=phase_name, **payload)
    try:
        yield
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start) * 1000
        emit(
            PHASE_FAILED,
            phase=phase_name,
            elapsed_ms=elapsed_ms,
            error=str(e),
            error_type=type(e).__name__,
            **payload,
        )
        raise
    else:
        elapsed_ms = (time.perf_counter() - start) * 1000
        emit(PHASE_FINISHED, phase=phase_name, elapsed_ms=elapsed_ms, **payload)
