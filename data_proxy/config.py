"""Configuration for the proxy (upstream GitHub token and repository coordinates)."""
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_OWNER = "kiwidiwi"
DEFAULT_REPO = "vlm-liturgical-data"
DEFAULT_BRANCH = "main"
USER_AGENT = "vlm-liturgical-data-proxy"
CACHE_MAX_AGE = 3600


def get_github_token() -> str | None:
    """
    Personal access token with read access to the data repository.

    GITHUB_PAT wins; otherwise the first line of the file named by
    GITHUB_PAT_FILE (a mounted secret). None when neither yields a value,
    which the data route reports as a configuration error.
    """
    token = os.environ.get("GITHUB_PAT", "").strip()
    if token:
        return token
    secret_file = os.environ.get("GITHUB_PAT_FILE", "").strip()
    if not secret_file or not Path(secret_file).is_file():
        return None
    lines = Path(secret_file).read_text().strip().splitlines()
    return lines[0].strip() if lines else None


def _env(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


@dataclass(frozen=True)
class Settings:
    github_token: str | None = None
    repo_owner: str = DEFAULT_OWNER
    repo_name: str = DEFAULT_REPO
    repo_branch: str = DEFAULT_BRANCH
    api_base_url: str = DEFAULT_API_URL
    user_agent: str = USER_AGENT
    cache_max_age: int = CACHE_MAX_AGE

    @property
    def cache_control(self) -> str:
        return f"s-maxage={self.cache_max_age}, stale-while-revalidate"


def get_settings() -> Settings:
    """Build settings from the environment. Called once per request."""
    return Settings(
        github_token=get_github_token(),
        repo_owner=_env("DATA_REPO_OWNER", DEFAULT_OWNER),
        repo_name=_env("DATA_REPO_NAME", DEFAULT_REPO),
        repo_branch=_env("DATA_REPO_BRANCH", DEFAULT_BRANCH),
        api_base_url=_env("GITHUB_API_URL", DEFAULT_API_URL).rstrip("/"),
    )
