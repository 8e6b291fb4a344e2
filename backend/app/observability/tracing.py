"""Tracing helpers that record request work as Opik traces."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from app.observability import client as opik_client

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Any]:
    """Record a block of work as an Opik trace.

    Yields the trace object, or None when no Opik client is configured.
    Exceptions from the wrapped block propagate unchanged.
    """
    base_metadata = {**(metadata or {}), "request_id": request_id}
    client = opik_client.get_opik_client()
    span = None
    if client is not None:
        try:
            span = client.trace(name=name, metadata=base_metadata)
        except Exception:  # pragma: no cover
            logger.debug("Could not open trace %s", name, exc_info=True)

    start = perf_counter()
    try:
        yield span
    except Exception as exc:
        logger.warning("%s failed after %.2fms (request_id=%s)", name, (perf_counter() - start) * 1000, request_id)
        _close(span, {"latency_ms": (perf_counter() - start) * 1000, "error": type(exc).__name__})
        raise
    latency_ms = (perf_counter() - start) * 1000
    logger.debug("%s completed in %.2fms (request_id=%s)", name, latency_ms, request_id)
    _close(span, {"latency_ms": latency_ms})


def _close(span: Any, output: Dict[str, Any]) -> None:
    if not span:
        return
    try:
        span.end(output=output)
    except Exception:  # pragma: no cover
        logger.debug("Could not close trace", exc_info=True)
