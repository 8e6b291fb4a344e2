"""Persistence helpers for tasks."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy import asc, func, nulls_last
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.models.task import TASK_PRIORITIES, TASK_STATUSES, Task
from app.services.meeting_minutes import split_sentences
from app.services.task_parser import ParsedTask, parse_task

logger = logging.getLogger(__name__)

SORT_FIELDS = ("dueDate", "priority", "name", "assignee", "createdAt")

_SORT_ORDER = {
    "dueDate": (nulls_last(asc(Task.due_date)),),
    "priority": (asc(Task.priority),),
    "name": (asc(func.lower(Task.name)),),
    "assignee": (nulls_last(asc(func.lower(Task.assignee))),),
    "createdAt": (asc(Task.created_at),),
}

_EDITABLE_FIELDS = {"name", "description", "assignee", "due_date", "priority", "status", "original_input"}
_REQUIRED_FIELDS = {"name", "priority", "status"}
_CLOSED_STATUSES = {"completed", "cancelled"}


@dataclass
class TaskSummary:
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=lambda: {status: 0 for status in TASK_STATUSES})
    by_priority: Dict[str, int] = field(default_factory=lambda: {priority: 0 for priority in TASK_PRIORITIES})
    overdue: int = 0
    unscheduled: int = 0


def app_timezone() -> tzinfo:
    return ZoneInfo(settings.timezone)


def app_now() -> datetime:
    """Current time in the configured application timezone."""
    return datetime.now(app_timezone())


def localize(value: Optional[datetime], tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Express ``value`` in the application timezone.

    Naive values are assumed to already be wall-clock time in that timezone,
    which is how SQLite hands stored timestamps back.
    """
    if value is None:
        return None
    tz = tz or app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def create_task(db: Session, payload: Mapping[str, Any]) -> Task:
    data = {key: value for key, value in payload.items() if key in _EDITABLE_FIELDS}
    data["due_date"] = localize(data.get("due_date"))
    task = Task(**data)
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Created task id=%s priority=%s assignee=%s", task.id, task.priority, task.assignee)
    return task


def create_from_parsed(db: Session, parsed: ParsedTask, original_input: str | None = None) -> Task:
    return create_task(
        db,
        {
            "name": parsed.name,
            "assignee": parsed.assignee,
            "due_date": parsed.due_date,
            "priority": parsed.priority,
            "original_input": original_input,
        },
    )


def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.get(Task, task_id)


def list_tasks(
    db: Session,
    *,
    priority: str | None = None,
    status: str | None = None,
    assignee: str | None = None,
    sort: str = "dueDate",
) -> List[Task]:
    """List tasks with optional filters, ordered by ``sort`` then id."""
    if sort not in _SORT_ORDER:
        raise ValueError(f"Unsupported sort field: {sort}")

    query = db.query(Task)
    if priority:
        query = query.filter(Task.priority == priority)
    if status:
        query = query.filter(Task.status == status)
    if assignee:
        query = query.filter(func.lower(Task.assignee) == assignee.lower())

    return query.order_by(*_SORT_ORDER[sort], asc(Task.id)).all()


def update_task(db: Session, task_id: int, changes: Mapping[str, Any]) -> Optional[Task]:
    """Apply a partial update. Returns None when the task does not exist."""
    task = db.get(Task, task_id)
    if not task:
        return None

    for key, value in changes.items():
        if key not in _EDITABLE_FIELDS:
            continue
        if key in _REQUIRED_FIELDS and value is None:
            raise ValueError(f"{key} cannot be null")
        if key == "due_date":
            value = localize(value)
        setattr(task, key, value)

    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Updated task id=%s fields=%s", task_id, sorted(changes))
    return task


def delete_task(db: Session, task_id: int) -> bool:
    task = db.get(Task, task_id)
    if not task:
        return False
    db.delete(task)
    db.commit()
    logger.info("Deleted task id=%s", task_id)
    return True


def import_transcript(db: Session, transcript: str, now: datetime) -> Tuple[List[Task], int]:
    """Persist one task per valid transcript sentence.

    Returns the created tasks and the number of sentences that were skipped.
    """
    created: List[Task] = []
    skipped = 0
    for sentence in split_sentences(transcript):
        parsed = parse_task(sentence, now=now)
        if not (parsed.is_valid and parsed.name):
            skipped += 1
            continue
        task = Task(
            name=parsed.name,
            assignee=parsed.assignee,
            due_date=localize(parsed.due_date),
            priority=parsed.priority,
            original_input=sentence,
        )
        db.add(task)
        created.append(task)

    db.commit()
    for task in created:
        db.refresh(task)
    logger.info("Imported transcript: created=%s skipped=%s", len(created), skipped)
    return created, skipped


def get_task_summary(db: Session, now: datetime) -> TaskSummary:
    """Aggregate counts shown on the dashboard."""
    now = localize(now)
    summary = TaskSummary()
    for task in db.query(Task).all():
        summary.total += 1
        if task.status in summary.by_status:
            summary.by_status[task.status] += 1
        if task.priority in summary.by_priority:
            summary.by_priority[task.priority] += 1

        due = localize(task.due_date, now.tzinfo)
        if due is None:
            summary.unscheduled += 1
        elif due < now and task.status not in _CLOSED_STATUSES:
            summary.overdue += 1
    return summary
