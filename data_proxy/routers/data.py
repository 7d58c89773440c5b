import time

import httpx
import structlog
from fastapi import APIRouter, Depends, Request, Response

from ..auth import mask_token
from ..config import Settings, get_settings
from ..content import classify_content
from ..errors import ConfigurationError, ProxyError, UnexpectedFailure
from ..paths import ROUTE_PREFIX, join_segments, resolve_path
from ..upstream import GitHubContentsClient, get_client

logger = structlog.get_logger(__name__)

# The method is not inspected; every one of these fetches the file
PROXIED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter(
    prefix=ROUTE_PREFIX,
    tags=["data"],
)


async def _load_file(request: Request, settings: Settings, client: httpx.AsyncClient) -> Response:
    raw_path = request.scope.get("raw_path", b"").decode("latin-1") or request.url.path
    segments = resolve_path(request.query_params.getlist("path") or None, raw_path)
    file_path = join_segments(segments)
    logger.info("Resolved file path", file_path=file_path, segment_count=len(segments))

    # Checked before any network call
    token = settings.github_token
    if not token:
        logger.error("GITHUB_PAT is not configured")
        raise ConfigurationError()
    logger.debug("Using GitHub token", token=mask_token(token))

    raw = await GitHubContentsClient(client, settings, token).fetch(file_path)

    content = classify_content(raw)
    logger.info(
        "Classified content",
        file_path=file_path,
        content_kind=content.kind.value,
        payload_type=type(content.payload).__name__,
        size_bytes=len(raw),
    )
    return Response(
        content=content.raw,
        status_code=200,
        media_type=content.media_type,
        headers={"Cache-Control": settings.cache_control},
    )


@router.api_route("", methods=PROXIED_METHODS)
@router.api_route("/{file_path:path}", methods=PROXIED_METHODS)
async def get_data_file(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_client),
):
    started = time.perf_counter()
    logger.info("Request started", method=request.method, path=request.url.path)
    outcome = "error"
    try:
        response = await _load_file(request, settings, client)
        outcome = "ok"
        return response
    except ProxyError:
        raise
    except Exception as exc:
        logger.exception(
            "Unexpected failure while loading data",
            exception_type=type(exc).__name__,
        )
        raise UnexpectedFailure.from_exception(exc, [settings.github_token or ""]) from exc
    finally:
        logger.info(
            "Request finished",
            path=request.url.path,
            outcome=outcome,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )
