"""
待办清单服务：清单直接归属用户，所有方法显式接收 owner_id
"""

import uuid
from collections.abc import Callable
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.common.errors import NotFound, UpdateFailed
from app.common.pagination import PaginatedResult, page_offset, paginate
from app.db.models.todo_list import TodoList
from app.todo.repository import TaskRepository, TodoListRepository
from app.todo.schemas import (
    DeleteResult,
    TaskFilters,
    TodoListCreate,
    TodoListDetail,
    TodoListFilters,
    TodoListUpdate,
    TodoListView,
)
from app.todo.task_service import TODO_LIST_NOT_FOUND, to_task_view
from app.todo.timeline import utc_now

log = structlog.get_logger()


class TodoListService:
    """待办清单业务服务"""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.todo_lists = TodoListRepository(db)
        self.tasks = TaskRepository(db)

    async def create(self, dto: TodoListCreate, owner_id: uuid.UUID) -> TodoListView:
        todo_list = await self.todo_lists.insert(
            TodoList(name=dto.name, description=dto.description, user_id=owner_id)
        )
        await self.db.commit()

        log.info("待办清单已创建", todo_list_id=str(todo_list.id), user_id=str(owner_id))
        return TodoListView.model_validate(todo_list)

    async def list_by_owner(
        self,
        owner_id: uuid.UUID,
        filters: TodoListFilters,
        *,
        page: int,
        limit: int,
        url: str,
    ) -> PaginatedResult:
        offset = page_offset(page, limit)
        items, total = await self.todo_lists.find_many(owner_id, filters, offset=offset, limit=limit)
        return paginate([TodoListView.model_validate(item) for item in items], total, page, limit, url)

    async def get_by_id(self, list_id: uuid.UUID, owner_id: uuid.UUID) -> TodoListDetail:
        """清单详情：附带未删除任务（同样按截止时间排序并计算时间线状态）"""
        todo_list = await self.todo_lists.find_one(list_id, owner_id)
        if todo_list is None:
            raise NotFound(TODO_LIST_NOT_FOUND)

        tasks, _ = await self.tasks.find_many(list_id, owner_id, TaskFilters())
        now = self.clock()
        return TodoListDetail(
            **TodoListView.model_validate(todo_list).model_dump(),
            tasks=[to_task_view(task, now) for task in tasks],
        )

    async def update(self, list_id: uuid.UUID, owner_id: uuid.UUID, dto: TodoListUpdate) -> TodoListView:
        todo_list = await self.todo_lists.find_one(list_id, owner_id)
        if todo_list is None:
            raise NotFound(TODO_LIST_NOT_FOUND)

        patch = dto.to_patch()
        if not patch:
            return TodoListView.model_validate(todo_list)

        affected = await self.todo_lists.update_by_id(list_id, owner_id, patch)
        if affected == 0:
            await self.db.rollback()
            log.error("待办清单更新未命中任何行", todo_list_id=str(list_id), user_id=str(owner_id))
            raise UpdateFailed("待办清单更新失败")
        await self.db.commit()

        updated = await self.todo_lists.find_one(list_id, owner_id)
        if updated is None:
            raise UpdateFailed("待办清单更新失败")

        log.info("待办清单已更新", todo_list_id=str(list_id), fields=sorted(patch))
        return TodoListView.model_validate(updated)

    async def delete(self, list_id: uuid.UUID, owner_id: uuid.UUID) -> DeleteResult:
        """物理删除清单，任务随外键级联删除"""
        todo_list = await self.todo_lists.find_one(list_id, owner_id)
        if todo_list is None:
            raise NotFound(TODO_LIST_NOT_FOUND)

        affected = await self.todo_lists.delete_by_id(list_id, owner_id)
        if affected == 0:
            await self.db.rollback()
            raise NotFound(TODO_LIST_NOT_FOUND)
        await self.db.commit()

        log.info("待办清单已删除", todo_list_id=str(list_id), user_id=str(owner_id))
        return DeleteResult(message="待办清单已删除")
