"""Lightweight metric emission through the logging pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("app.metrics")


def log_metric(name: str, value: float, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Emit a single metric data point as a structured log record."""
    payload = {key: val for key, val in (metadata or {}).items() if val is not None}
    logger.info("metric %s=%s", name, value, extra={"metric_name": name, "metric_value": value, "metric_metadata": payload})
