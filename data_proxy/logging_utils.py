"""
Structured logging for the data proxy, built on structlog.

structlog loggers and plain stdlib loggers (httpx, uvicorn) both end up in
the same ProcessorFormatter. Its final chain runs CredentialRedactor after
exceptions are formatted, so the GitHub token cannot reach the output
through the event, bound fields or a traceback.
"""
import logging
import re
import sys
from collections.abc import Iterable
from typing import IO, Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.typing import EventDict, Processor

from .auth import TOKEN_PREFIXES

REDACTED = "[REDACTED]"

_TOKEN_PATTERN = re.compile(
    "(?:" + "|".join(re.escape(p) for p in TOKEN_PREFIXES) + r")[A-Za-z0-9_]+"
)
_AUTH_VALUE_PATTERN = re.compile(
    r"(?i)\b(bearer|token)\s+(?=[A-Za-z0-9_\-\.=]*\d)[A-Za-z0-9_\-\.=]{8,}"
)


def redact(text: str, secrets: Iterable[str] = ()) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    text = _TOKEN_PATTERN.sub(REDACTED, text)
    return _AUTH_VALUE_PATTERN.sub(lambda m: f"{m.group(1)} {REDACTED}", text)


class CredentialRedactor:
    """structlog processor scrubbing credentials from every string in the event."""

    def __init__(self, secrets: Iterable[str] = ()):
        self._secrets = tuple(s for s in secrets if s)

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            return redact(value, self._secrets)
        if isinstance(value, dict):
            return {k: self._scrub(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self._scrub(v) for v in value)
        return value

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        return {key: self._scrub(value) for key, value in event_dict.items()}


_SHARED_PROCESSORS: list[Processor] = [
    merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def build_formatter(secrets: Iterable[str] = ()) -> structlog.stdlib.ProcessorFormatter:
    """JSON-line formatter for stdlib handlers, redaction included."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            CredentialRedactor(secrets),
            structlog.processors.JSONRenderer(),
        ],
    )


def setup_logging(
    log_level: str = "INFO",
    secrets: Iterable[str] = (),
    stream: IO[str] | None = None,
) -> None:
    """
    Configure structlog and the root stdlib handler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        secrets: Literal values to scrub from every entry
        stream: Output stream, stdout by default
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(build_formatter(secrets))
    logging.basicConfig(
        handlers=[handler],
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
