"""FastAPI exception handlers producing one plain-text response per error."""

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hookrelay.errors.exceptions import (
    AuthError,
    ConfigError,
    HookRelayError,
    MethodNotAllowedError,
    RelayError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(HookRelayError)
    async def hookrelay_error_handler(request: Request, exc: HookRelayError):
        trace_id = getattr(request.state, "trace_id", "unknown")
        log_extra = {
            "path": request.url.path,
            "method": request.method,
            "trace_id": trace_id,
            "error_code": exc.code,
        }
        if isinstance(exc, ConfigError):
            logger.error(
                "operator_misconfiguration: %s",
                exc.message,
                extra={**log_extra, "error_kind": "operator_misconfiguration"},
            )
        elif isinstance(exc, RelayError):
            logger.error("relay_failed: %s", exc.message, extra={**log_extra, "error_kind": "relay"})
        elif isinstance(exc, AuthError):
            logger.warning("signature_rejected", extra={**log_extra, "error_kind": "caller"})
        else:
            logger.info("request_rejected: %s", exc.message, extra={**log_extra, "error_kind": "caller"})

        headers = {"Allow": "POST"} if isinstance(exc, MethodNotAllowedError) else None
        return PlainTextResponse(exc.message, status_code=exc.status_code, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        # Routing rejects methods the delivery route does not list (TRACE, PROPFIND, ...)
        if exc.status_code == 405:
            return await hookrelay_error_handler(request, MethodNotAllowedError())
        return await http_exception_handler(request, exc)
