import logging
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
ACTOR_HEADER = "X-Actor-Id"


def _actor_id(request: Request) -> Optional[int]:
    raw = request.headers.get(ACTOR_HEADER)
    return int(raw) if raw and raw.isdigit() else None


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request, tagged with the gateway's actor and request ids."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        actor_id = _actor_id(request)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[{request_id}] {request.method} {request.url.path} failed after "
                f"{(time.perf_counter() - started) * 1000:.1f}ms",
                extra={"request_id": request_id, "actor_id": actor_id, "route": _route_template(request)},
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} "
            f"actor={actor_id if actor_id is not None else '-'} ({duration_ms}ms)",
            extra={
                "request_id": request_id,
                "actor_id": actor_id,
                "route": _route_template(request),
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time-Ms"] = str(duration_ms)
        return response
