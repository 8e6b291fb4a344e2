"""Task parsing and CRUD API routes."""
from __future__ import annotations

from datetime import datetime
from time import perf_counter
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.schemas.task import (
    ParsedTaskResponse,
    ParseTaskRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskSummaryResponse,
    TaskUpdateRequest,
    TranscriptImportResponse,
    TranscriptRequest,
)
from app.core.config import settings
from app.db.deps import get_db
from app.db.models.task import Task
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services import task_service
from app.services.meeting_minutes import parse_transcript
from app.services.task_display import priority_label, relative_due_label
from app.services.task_parser import ParsedTask, parse_task

router = APIRouter()

_SORT_PATTERN = "^(" + "|".join(task_service.SORT_FIELDS) + ")$"


@router.post("/tasks/parse", response_model=ParsedTaskResponse, tags=["tasks"])
def parse_task_input(payload: ParseTaskRequest, http_request: Request) -> ParsedTaskResponse:
    """Parse a single free-form task description without saving it."""
    request_id = getattr(http_request.state, "request_id", None)
    text = payload.input.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="input must not be empty")

    start = perf_counter()
    with trace("task.parse", metadata={"route": "/tasks/parse", "text_length": len(text)}, request_id=request_id) as span:
        parsed = parse_task(text, now=task_service.app_now())
        if span:
            span.update(metadata={"warnings": len(parsed.warnings), "priority": parsed.priority})

    log_metric("task.parse.latency_ms", (perf_counter() - start) * 1000, metadata={"request_id": request_id})
    log_metric("task.parse.assignee_found", 1 if parsed.assignee else 0)
    return _serialize_parsed(parsed)


@router.post("/tasks/parse-transcript", response_model=List[ParsedTaskResponse], tags=["tasks"])
def parse_transcript_input(payload: TranscriptRequest, http_request: Request) -> List[ParsedTaskResponse]:
    """Preview the tasks found in a meeting transcript, one per sentence."""
    request_id = getattr(http_request.state, "request_id", None)
    transcript = _validated_transcript(payload.transcript)

    with trace("task.parse_transcript", metadata={"text_length": len(transcript)}, request_id=request_id):
        parsed_tasks = parse_transcript(transcript, now=task_service.app_now())

    log_metric("task.parse_transcript.count", len(parsed_tasks), metadata={"request_id": request_id})
    return [_serialize_parsed(parsed) for parsed in parsed_tasks]


@router.post(
    "/tasks/import-transcript",
    response_model=TranscriptImportResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def import_transcript(payload: TranscriptRequest, http_request: Request, db: Session = Depends(get_db)) -> TranscriptImportResponse:
    """Parse a meeting transcript and save every valid task found in it."""
    request_id = getattr(http_request.state, "request_id", None)
    transcript = _validated_transcript(payload.transcript)
    now = task_service.app_now()

    with trace("task.import_transcript", metadata={"text_length": len(transcript)}, request_id=request_id):
        try:
            created, skipped = task_service.import_transcript(db, transcript, now)
        except IntegrityError as exc:  # pragma: no cover - DB constraint guard
            db.rollback()
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save tasks") from exc

    log_metric("task.import_transcript.created", len(created), metadata={"request_id": request_id})
    log_metric("task.import_transcript.skipped", skipped, metadata={"request_id": request_id})
    return TranscriptImportResponse(created=[_serialize_task(task, now) for task in created], skipped=skipped)


@router.post("/tasks/quick-add", response_model=TaskResponse, status_code=status.HTTP_201_CREATED, tags=["tasks"])
def quick_add_task(payload: ParseTaskRequest, http_request: Request, db: Session = Depends(get_db)) -> TaskResponse:
    """Parse a task description and save the result in one step."""
    request_id = getattr(http_request.state, "request_id", None)
    text = payload.input.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="input must not be empty")
    now = task_service.app_now()

    with trace("task.quick_add", metadata={"text_length": len(text)}, request_id=request_id):
        parsed = parse_task(text, now=now)
        try:
            task = task_service.create_from_parsed(db, parsed, original_input=text)
        except IntegrityError as exc:  # pragma: no cover - DB constraint guard
            db.rollback()
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save task") from exc

    log_metric("task.quick_add.success", 1, metadata={"request_id": request_id})
    return _serialize_task(task, now)


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED, tags=["tasks"])
def create_task(payload: TaskCreateRequest, http_request: Request, db: Session = Depends(get_db)) -> TaskResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.create", metadata={"priority": payload.priority}, request_id=request_id):
        try:
            task = task_service.create_task(db, payload.model_dump())
        except IntegrityError as exc:  # pragma: no cover - DB constraint guard
            db.rollback()
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save task") from exc

    log_metric("task.create.success", 1, metadata={"request_id": request_id})
    return _serialize_task(task, task_service.app_now())


@router.get("/tasks", response_model=List[TaskResponse], tags=["tasks"])
def list_tasks(
    http_request: Request,
    priority: Optional[str] = Query(default=None, pattern="^P[1-4]$"),
    status_filter: Optional[str] = Query(
        default=None,
        alias="status",
        pattern="^(pending|in-progress|completed|cancelled)$",
    ),
    assignee: Optional[str] = Query(default=None, max_length=120),
    sort: str = Query("dueDate", pattern=_SORT_PATTERN),
    db: Session = Depends(get_db),
) -> List[TaskResponse]:
    """List tasks with optional priority/status/assignee filters."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata: Dict[str, Any] = {
        "route": "/tasks",
        "priority": priority,
        "status": status_filter,
        "assignee": assignee,
        "sort": sort,
    }

    with trace("task.list", metadata=metadata, request_id=request_id):
        tasks = task_service.list_tasks(db, priority=priority, status=status_filter, assignee=assignee, sort=sort)

    log_metric("task.list.count", len(tasks), metadata={"sort": sort, "request_id": request_id})
    now = task_service.app_now()
    return [_serialize_task(task, now) for task in tasks]


@router.get("/tasks/summary", response_model=TaskSummaryResponse, tags=["tasks"])
def get_task_summary(http_request: Request, db: Session = Depends(get_db)) -> TaskSummaryResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.summary", request_id=request_id):
        summary = task_service.get_task_summary(db, task_service.app_now())

    return TaskSummaryResponse(
        total=summary.total,
        by_status=summary.by_status,
        by_priority=summary.by_priority,
        overdue=summary.overdue,
        unscheduled=summary.unscheduled,
    )


@router.get("/tasks/{task_id}", response_model=TaskResponse, tags=["tasks"])
def get_task(task_id: int, db: Session = Depends(get_db)) -> TaskResponse:
    task = task_service.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return _serialize_task(task, task_service.app_now())


@router.put("/tasks/{task_id}", response_model=TaskResponse, tags=["tasks"])
def update_task(
    task_id: int,
    payload: TaskUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Update only the fields present in the request body."""
    request_id = getattr(http_request.state, "request_id", None)
    changes = payload.model_dump(exclude_unset=True)

    with trace("task.update", metadata={"task_id": task_id, "fields": sorted(changes)}, request_id=request_id):
        try:
            task = task_service.update_task(db, task_id, changes)
        except ValueError as exc:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        if not task:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    log_metric("task.update.success", 1, metadata={"task_id": task_id})
    return _serialize_task(task, task_service.app_now())


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["tasks"])
def delete_task(task_id: int, http_request: Request, db: Session = Depends(get_db)) -> Response:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("task.delete", metadata={"task_id": task_id}, request_id=request_id):
        deleted = task_service.delete_task(db, task_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    log_metric("task.delete.success", 1, metadata={"task_id": task_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _validated_transcript(raw: str) -> str:
    transcript = raw.strip()
    if not transcript:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="transcript must not be empty")
    if len(transcript) > settings.transcript_max_length:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="transcript is too long")
    return transcript


def _serialize_parsed(parsed: ParsedTask) -> ParsedTaskResponse:
    return ParsedTaskResponse(
        name=parsed.name,
        assignee=parsed.assignee,
        due_date=parsed.due_date,
        due_time=parsed.due_time,
        priority=parsed.priority,
        is_valid=parsed.is_valid,
        warnings=list(parsed.warnings),
        errors=list(parsed.errors),
    )


def _serialize_task(task: Task, now: datetime) -> TaskResponse:
    due_date = task_service.localize(task.due_date, now.tzinfo)
    return TaskResponse(
        id=task.id,
        name=task.name,
        description=task.description,
        assignee=task.assignee,
        due_date=due_date,
        priority=task.priority,
        status=task.status,
        original_input=task.original_input,
        created_at=task.created_at,
        priority_label=priority_label(task.priority),
        due_label=relative_due_label(due_date, now),
    )
