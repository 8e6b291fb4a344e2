"""Task ORM model."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, func

from app.db.base import Base

TASK_STATUSES = ("pending", "in-progress", "completed", "cancelled")
TASK_PRIORITIES = ("P1", "P2", "P3", "P4")


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_due_date", "due_date"),
        Index("ix_tasks_assignee", "assignee"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    assignee = Column(String(length=120), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    priority = Column(String(length=2), nullable=False, server_default="P3", default="P3")
    status = Column(String(length=20), nullable=False, server_default="pending", default="pending")
    original_input = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
