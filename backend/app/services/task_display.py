"""Human-readable labels for task priority and due dates."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Dict, Optional

PRIORITY_LABELS: Dict[str, str] = {
    "P1": "Critical",
    "P2": "High",
    "P3": "Medium",
    "P4": "Low",
}

_SECONDS_PER_DAY = 60 * 60 * 24


def priority_label(priority: str | None) -> str:
    return PRIORITY_LABELS.get(priority or "", PRIORITY_LABELS["P3"])


def relative_due_label(due_date: datetime | None, now: datetime) -> Optional[str]:
    """Describe how far ``due_date`` is from ``now`` in whole days, rounding up."""
    if due_date is None:
        return None

    diff_days = math.ceil((due_date - now).total_seconds() / _SECONDS_PER_DAY)
    if diff_days == 0:
        return "Due today"
    if diff_days == 1:
        return "Due tomorrow"
    if diff_days > 0:
        return f"Due in {diff_days} days"
    return f"Overdue by {abs(diff_days)} days"
