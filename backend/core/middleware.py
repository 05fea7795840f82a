"""Request Correlation Middleware

Each request runs with a correlation id bound to the structlog context, so
the ``register_request`` and ``validation_failed`` events of one call can be
joined in the logs. A client-supplied ``X-Correlation-ID`` is reused; the id
is always returned in the same header.
"""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import api_logger, bind_context, clear_context, generate_correlation_id

log = api_logger()

CORRELATION_HEADER = "X-Correlation-ID"


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()

        clear_context()
        bind_context(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        log.info("request_started", client_ip=request.client.host if request.client else None)

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception("request_failed", error_type=type(exc).__name__, duration_ms=_elapsed_ms(start))
            raise
        else:
            response.headers[CORRELATION_HEADER] = correlation_id
            status = response.status_code
            if status >= 500:
                log_method = log.error
            elif status >= 400:
                log_method = log.warning
            else:
                log_method = log.info
            log_method("request_completed", status=status, duration_ms=_elapsed_ms(start))
            return response
        finally:
            clear_context()
