from contextlib import asynccontextmanager
from urllib.parse import quote

import httpx
import structlog

from .auth import build_upstream_headers
from .config import Settings
from .errors import InvalidPath, NotFound, UpstreamAuthFailure, UpstreamError, excerpt

logger = structlog.get_logger(__name__)

# Connection pool for api.github.com; holds no per-request data
_client: httpx.AsyncClient | None = None


def get_client() -> httpx.AsyncClient:
    """Dependency returning the GitHub connection pool, reopened after shutdown."""
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(follow_redirects=True)
    return _client


@asynccontextmanager
async def lifespan(_app):
    """Closes the GitHub connection pool when the app stops."""
    yield
    if _client and not _client.is_closed:
        await _client.aclose()


def build_contents_url(settings: Settings, file_path: str) -> str:
    """
    GitHub REST contents endpoint for ``file_path`` on the configured repository.

    Each component is percent-encoded on its own and dot components are
    refused, so the URL always stays under ``/repos/{owner}/{repo}/contents/``.
    """
    parts = file_path.split("/")
    if any(part in ("", ".", "..") for part in parts):
        raise InvalidPath(f"Path cannot be mapped inside the repository: {file_path!r}")
    quoted = "/".join(quote(part, safe="") for part in parts)
    return (
        f"{settings.api_base_url}/repos/{quote(settings.repo_owner, safe='')}/"
        f"{quote(settings.repo_name, safe='')}/contents/{quoted}"
    )


class GitHubContentsClient:
    """Reads one file from the private data repository per call."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings, token: str):
        self._client = http_client
        self._settings = settings
        self._token = token

    async def fetch(self, file_path: str) -> bytes:
        """
        Single GET, no retries. Returns the raw file bytes.

        Raises:
            NotFound: upstream 404
            UpstreamAuthFailure: upstream 401 or 403
            UpstreamError: any other non-success status
            httpx.HTTPError: transport failures
        """
        url = build_contents_url(self._settings, file_path)
        logger.info("Fetching file from GitHub", upstream_url=url, ref=self._settings.repo_branch)

        upstream = await self._client.get(
            url,
            params={"ref": self._settings.repo_branch},
            headers=build_upstream_headers(self._token, self._settings.user_agent),
        )

        logger.info("GitHub responded", file_path=file_path, status_code=upstream.status_code)

        if upstream.is_success:
            return upstream.content

        if upstream.status_code == 404:
            raise NotFound(file_path)
        if upstream.status_code in (401, 403):
            logger.error("GitHub rejected the configured token", status_code=upstream.status_code)
            raise UpstreamAuthFailure(upstream.status_code)

        body_excerpt = excerpt(upstream.text)
        logger.error(
            "GitHub returned an error",
            status_code=upstream.status_code,
            body_excerpt=body_excerpt,
        )
        raise UpstreamError(upstream.status_code, body_excerpt)
