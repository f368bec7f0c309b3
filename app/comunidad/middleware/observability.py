from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.comunidad.core.db_timing import begin_request_timing, end_request_timing, request_db_time_ms
from app.comunidad.core.logging import log_json
from app.comunidad.core.metrics import metrics

logger = logging.getLogger("comunidad.request")


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def request_log_payload(
    request: Request,
    status_code: int,
    latency_ms: float,
    db_time_ms: float | None,
) -> dict:
    return {
        "event": "http_request",
        "trace_id": getattr(request.state, "trace_id", ""),
        "user_id": getattr(request.state, "user_id", None),
        "route": _route_template(request),
        "method": request.method,
        "status_code": status_code,
        "latency_ms": round(latency_ms, 2),
        "db_time_ms": round(db_time_ms, 2) if db_time_ms is not None else None,
        "error_code": getattr(request.state, "error_code", None),
        "error_class": getattr(request.state, "error_class", None),
    }


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        token = begin_request_timing()
        status_code = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            latency_ms = (time.perf_counter() - started) * 1000
            db_time_ms = request_db_time_ms()
            end_request_timing(token)
            payload = request_log_payload(request, status_code, latency_ms, db_time_ms)
            log_json(logger, payload)
            metrics.record_http_request(
                route=payload["route"],
                method=request.method,
                status_code=status_code,
                latency_ms=latency_ms,
            )
