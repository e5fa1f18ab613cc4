"""
路由层公共依赖：服务实例、分页参数、过滤条件
"""

from dataclasses import dataclass
from datetime import datetime

from fastapi import Depends, Query, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.common.errors import ValidationFailed
from app.config import get_settings
from app.db.engine import get_db
from app.db.models.task import TaskPriority, TaskStatus
from app.todo import TaskService, TodoListService
from app.todo.schemas import TaskFilters, TodoListFilters

settings = get_settings()


@dataclass
class PageParams:
    page: int
    limit: int
    url: str  # 当前请求的完整 URL，用于生成分页链接


def get_page_params(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGE_DEFAULT_LIMIT, ge=1, le=settings.PAGE_MAX_LIMIT),
) -> PageParams:
    return PageParams(page=page, limit=limit, url=str(request.url))


def get_todo_list_filters(search: str | None = Query(None, max_length=100)) -> TodoListFilters:
    return TodoListFilters(search=search)


def get_task_filters(
    status: TaskStatus | None = Query(None),
    priority: TaskPriority | None = Query(None),
    search: str | None = Query(None, max_length=100),
    due_date_start: datetime | None = Query(None),
    due_date_end: datetime | None = Query(None),
) -> TaskFilters:
    try:
        return TaskFilters(
            status=status,
            priority=priority,
            search=search,
            due_date_start=due_date_start,
            due_date_end=due_date_end,
        )
    except ValidationError as e:
        # 组合校验（起止时间先后）不属于单个参数，手动转成 400
        raise ValidationFailed(e.errors()[0]["msg"])


def get_todo_list_service(db: AsyncSession = Depends(get_db)) -> TodoListService:
    return TodoListService(db)


def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)
