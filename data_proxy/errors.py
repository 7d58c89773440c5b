"""Error taxonomy of the data proxy and its JSON rendering."""
from collections.abc import Iterable

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .logging_utils import redact

logger = structlog.get_logger(__name__)

EXCERPT_LIMIT = 200


def excerpt(text: str, limit: int = EXCERPT_LIMIT) -> str:
    """Bounded single-line excerpt of an upstream body, for diagnostics."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[:limit] + "..."


class ProxyError(Exception):
    status_code = 500
    error = "Failed to load data"

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details

    def to_body(self) -> dict[str, str]:
        return {"error": self.error, "details": self.details}


class InvalidPath(ProxyError):
    status_code = 400
    error = "Invalid path parameter"


class ConfigurationError(ProxyError):
    error = "Server configuration error"

    def __init__(self, details: str = "GitHub token not configured"):
        super().__init__(details)


class NotFound(ProxyError):
    status_code = 404
    error = "File not found"

    def __init__(self, file_path: str):
        super().__init__(f"File not found at path: {file_path}")
        self.file_path = file_path


class UpstreamAuthFailure(ProxyError):
    error = "Authentication failed"

    def __init__(self, upstream_status: int):
        super().__init__("Invalid or missing GitHub token")
        self.upstream_status = upstream_status


class UpstreamError(ProxyError):
    def __init__(self, upstream_status: int, body_excerpt: str):
        message = f"Failed to fetch from GitHub: HTTP {upstream_status}"
        if body_excerpt:
            message = f"{message}: {body_excerpt}"
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body_excerpt = body_excerpt


class UnexpectedFailure(ProxyError):
    """Network failures and anything else raised while handling a request."""

    @classmethod
    def from_exception(
        cls, exc: BaseException, secrets: Iterable[str] = ()
    ) -> "UnexpectedFailure":
        details = redact(str(exc) or type(exc).__name__, secrets)
        return cls(excerpt(details))


def _error_response(exc: ProxyError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_body(),
        headers={"Cache-Control": "no-store"},
    )


async def _proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    logger.warning(
        "Request failed",
        error=exc.error,
        path=request.url.path,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
    )
    return _error_response(exc)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Reached for failures outside the route body, e.g. while resolving settings
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        exception_type=type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(UnexpectedFailure.from_exception(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProxyError, _proxy_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
