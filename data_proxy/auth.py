"""Upstream authentication: the server-held GitHub token never leaves this process."""
RAW_MEDIA_TYPE = "application/vnd.github.raw+json"
API_VERSION = "2022-11-28"

# Prefixes of GitHub personal access, OAuth, app and refresh tokens.
TOKEN_PREFIXES = ("github_pat_", "ghp_", "gho_", "ghu_", "ghs_", "ghr_")


def build_upstream_headers(token: str, user_agent: str) -> dict[str, str]:
    """
    Headers for one GitHub contents request: bearer token, raw content
    media type and a client identifier (GitHub rejects requests without one).
    """
    return {
        "Authorization": f"Bearer {token}",
        "Accept": RAW_MEDIA_TYPE,
        "User-Agent": user_agent,
        "X-GitHub-Api-Version": API_VERSION,
    }


def mask_token(token: str | None) -> str:
    """Short fingerprint of the token, safe to log."""
    if not token:
        return "<unset>"
    if len(token) < 12:
        return "****"
    prefix = next((p for p in TOKEN_PREFIXES if token.startswith(p)), "")
    return f"{prefix}...{token[-4:]}"
