"""Opik client lifecycle."""
from __future__ import annotations

import logging
from typing import Optional

import opik

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[opik.Opik] = None


def init_opik() -> None:
    """Create the shared Opik client when tracing is enabled."""
    if not settings.opik_enabled:
        logger.info("Opik tracing disabled")
        return
    if get_opik_client() is not None:
        logger.info("Opik tracing enabled (project=%s)", settings.opik_project)


def get_opik_client() -> Optional[opik.Opik]:
    """Return the shared client, or None when tracing is off or unavailable."""
    global _client
    if not settings.opik_enabled:
        return None
    if _client is None:
        try:
            _client = opik.Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
        except Exception:
            logger.exception("Failed to initialise Opik client; tracing disabled")
            return None
    return _client
