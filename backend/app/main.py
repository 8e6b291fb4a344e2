"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import task
from app.core.config import settings
from app.core.logging import configure_logging
from app.db import models  # noqa: F401  registers ORM tables on the metadata
from app.db.base import Base
from app.db.session import engine
from app.observability.client import init_opik

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(log_level=settings.log_level)
    init_opik()
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (timezone=%s)", settings.app_name, settings.timezone)
    yield
    logger.info("%s shutting down", settings.app_name)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/health", tags=["health"])
def health() -> dict:
    return {"status": "ok"}


app.include_router(task.router, prefix="/api")
