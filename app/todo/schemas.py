"""
待办清单 / 任务的请求与响应模型

请求模型负责入参校验（长度、枚举、截止时间不得早于当前时刻），
响应视图只暴露对外字段；timeline_status 由服务层计算后填入。
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.db.models.task import TaskPriority, TaskStatus
from app.todo.timeline import TimelineStatus, utc_now

_REQUEST_CONFIG = ConfigDict(str_strip_whitespace=True, extra="forbid")


def _future_due_date(value: datetime | None) -> datetime | None:
    """截止时间统一转为 UTC，且不得早于当前时刻"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    if value < utc_now():
        raise ValueError("截止时间不能早于当前时间")
    return value


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ── 待办清单 ──


class TodoListCreate(BaseModel):
    model_config = _REQUEST_CONFIG

    name: str = Field(min_length=3, max_length=50)
    description: str | None = Field(default=None, max_length=500)


class TodoListUpdate(BaseModel):
    model_config = _REQUEST_CONFIG

    name: str | None = Field(default=None, min_length=3, max_length=50)
    description: str | None = Field(default=None, max_length=500)

    def to_patch(self) -> dict:
        """只取显式传入的字段；name 不可置空，description 允许显式清空"""
        patch = self.model_dump(exclude_unset=True)
        if patch.get("name") is None:
            patch.pop("name", None)
        return patch


class TodoListFilters(BaseModel):
    search: str | None = None

    @field_validator("search")
    @classmethod
    def normalize_search(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


# ── 任务 ──


class TaskCreate(BaseModel):
    model_config = _REQUEST_CONFIG

    title: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, v: datetime | None) -> datetime | None:
        return _future_due_date(v)


class TaskUpdate(BaseModel):
    model_config = _REQUEST_CONFIG

    title: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, v: datetime | None) -> datetime | None:
        return _future_due_date(v)

    def to_patch(self) -> dict:
        """只取显式传入的字段；除 description 外的列均为 NOT NULL，显式 null 视为未传"""
        patch = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in patch.items()
            if value is not None or key == "description"
        }


class TaskFilters(BaseModel):
    """任务列表过滤条件：所有字段可选，同时给出时按 AND 组合"""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    due_date_start: datetime | None = None
    due_date_end: datetime | None = None

    @field_validator("search")
    @classmethod
    def normalize_search(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @field_validator("due_date_start", "due_date_end")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_due_range(self) -> "TaskFilters":
        if (
            self.due_date_start is not None
            and self.due_date_end is not None
            and self.due_date_start > self.due_date_end
        ):
            raise ValueError("due_date_start 不能晚于 due_date_end")
        return self


# ── 响应视图 ──


class TaskView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    is_deleted: bool
    todo_list_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    timeline_status: TimelineStatus


class TodoListView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None = None
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class TodoListDetail(TodoListView):
    """清单详情：附带未删除的任务"""

    tasks: list[TaskView] = Field(default_factory=list)


class DeleteResult(BaseModel):
    success: bool = True
    message: str
