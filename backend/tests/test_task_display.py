from datetime import datetime, timedelta

import pytest

from app.services.task_display import priority_label, relative_due_label

NOW = datetime(2025, 6, 18, 9, 30)


@pytest.mark.parametrize(
    "priority, label",
    [("P1", "Critical"), ("P2", "High"), ("P3", "Medium"), ("P4", "Low"), ("P9", "Medium"), (None, "Medium")],
)
def test_priority_label(priority, label):
    assert priority_label(priority) == label


def test_relative_due_label_rounds_up_partial_days():
    assert relative_due_label(None, NOW) is None
    assert relative_due_label(NOW, NOW) == "Due today"
    assert relative_due_label(NOW + timedelta(hours=5), NOW) == "Due tomorrow"
    assert relative_due_label(NOW + timedelta(days=3), NOW) == "Due in 3 days"
    assert relative_due_label(NOW - timedelta(hours=5), NOW) == "Due today"
    assert relative_due_label(NOW - timedelta(days=2, hours=1), NOW) == "Overdue by 2 days"
