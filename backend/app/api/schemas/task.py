"""Schemas for task parsing and task CRUD."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["P1", "P2", "P3", "P4"]
TaskStatus = Literal["pending", "in-progress", "completed", "cancelled"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParseTaskRequest(CamelModel):
    input: str = Field(..., min_length=1, max_length=2000)


class ParsedTaskResponse(CamelModel):
    name: str
    assignee: Optional[str] = None
    due_date: Optional[datetime] = None
    due_time: Optional[str] = None
    priority: Priority
    is_valid: bool
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class TranscriptRequest(CamelModel):
    transcript: str = Field(..., min_length=1)


class TaskCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    assignee: Optional[str] = Field(default=None, max_length=120)
    due_date: Optional[datetime] = None
    priority: Priority = "P3"
    status: TaskStatus = "pending"
    original_input: Optional[str] = None


class TaskUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    assignee: Optional[str] = Field(default=None, max_length=120)
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None
    original_input: Optional[str] = None


class TaskResponse(CamelModel):
    id: int
    name: str
    description: Optional[str]
    assignee: Optional[str]
    due_date: Optional[datetime]
    priority: str
    status: str
    original_input: Optional[str]
    created_at: Optional[datetime]
    priority_label: str
    due_label: Optional[str]


class TranscriptImportResponse(CamelModel):
    created: List[TaskResponse]
    skipped: int


class TaskSummaryResponse(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    overdue: int
    unscheduled: int
