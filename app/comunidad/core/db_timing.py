from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass
class _QueryClock:
    total_ms: float = 0.0


# Shared by reference so tasks and threadpool workers spawned for the request add to the same total.
_request_clock: ContextVar[_QueryClock | None] = ContextVar("request_db_clock", default=None)


def begin_request_timing() -> Token:
    return _request_clock.set(_QueryClock())


def end_request_timing(token: Token) -> None:
    _request_clock.reset(token)


def record_query_time(elapsed_ms: float) -> None:
    clock = _request_clock.get()
    if clock is not None:
        clock.total_ms += elapsed_ms


def request_db_time_ms() -> float | None:
    clock = _request_clock.get()
    return clock.total_ms if clock is not None else None
