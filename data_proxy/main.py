import os

from fastapi import FastAPI

from .config import get_github_token
from .errors import register_exception_handlers
from .logging_utils import setup_logging
from .routers import data
from .upstream import lifespan

setup_logging(os.environ.get("LOG_LEVEL", "INFO"), secrets=[get_github_token() or ""])

app = FastAPI(title="Data Proxy", lifespan=lifespan)

register_exception_handlers(app)

app.include_router(data.router)
