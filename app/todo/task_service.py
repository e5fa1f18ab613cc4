"""
任务服务：归属校验 + 过滤分页 + 时间线状态派生

- 任务的有效归属 = 所属清单的归属，所有方法显式接收 owner_id
- timeline_status 只在输出视图上计算，不落库
- 更新采用"先查后写"：先按归属查询（失败 → NotFound），
  再执行带归属条件的 UPDATE（0 行 → UpdateFailed）
"""

import uuid
from collections.abc import Callable
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.common.errors import NotFound, UpdateFailed
from app.common.pagination import PaginatedResult, page_offset, paginate
from app.db.models.task import Task
from app.todo.repository import TaskRepository, TodoListRepository
from app.todo.schemas import DeleteResult, TaskCreate, TaskFilters, TaskUpdate, TaskView
from app.todo.timeline import classify_timeline, utc_now

log = structlog.get_logger()

TODO_LIST_NOT_FOUND = "待办清单不存在"
TASK_NOT_FOUND = "任务不存在"


def to_task_view(task: Task, now: datetime) -> TaskView:
    """ORM 实体 → 输出视图，附加按 now 计算的 timeline_status"""
    return TaskView.model_validate(
        {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "status": task.status,
            "priority": task.priority,
            "due_date": task.due_date,
            "is_deleted": task.is_deleted,
            "todo_list_id": task.todo_list_id,
            "created_at": task.created_at,
            "updated_at": task.updated_at,
            "timeline_status": classify_timeline(task.due_date, now),
        }
    )


class TaskService:
    """任务业务服务（每个请求一个实例，绑定请求级 AsyncSession）"""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.tasks = TaskRepository(db)
        self.todo_lists = TodoListRepository(db)

    async def create(self, list_id: uuid.UUID, dto: TaskCreate, owner_id: uuid.UUID) -> TaskView:
        """在指定清单下创建任务；清单不存在或不属于 owner 时 NotFound"""
        todo_list = await self.todo_lists.find_one(list_id, owner_id)
        if todo_list is None:
            raise NotFound(TODO_LIST_NOT_FOUND)

        task = await self.tasks.insert(
            Task(
                title=dto.title,
                description=dto.description,
                priority=dto.priority,
                due_date=dto.due_date,
                todo_list_id=todo_list.id,
            )
        )
        await self.db.commit()

        log.info("任务已创建", task_id=str(task.id), todo_list_id=str(list_id), user_id=str(owner_id))
        return to_task_view(task, self.clock())

    async def list_by_parent(
        self,
        list_id: uuid.UUID,
        owner_id: uuid.UUID,
        filters: TaskFilters,
        *,
        page: int,
        limit: int,
        url: str,
    ) -> PaginatedResult:
        """清单内任务分页查询（排除软删除），每项附加 timeline_status"""
        offset = page_offset(page, limit)

        todo_list = await self.todo_lists.find_one(list_id, owner_id)
        if todo_list is None:
            raise NotFound(TODO_LIST_NOT_FOUND)

        items, total = await self.tasks.find_many(list_id, owner_id, filters, offset=offset, limit=limit)

        now = self.clock()
        return paginate([to_task_view(task, now) for task in items], total, page, limit, url)

    async def _find_owned(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        list_id: uuid.UUID | None,
        include_deleted: bool = False,
    ) -> Task:
        """按归属查找任务；路由带清单 id 时任务还必须属于该清单"""
        task = await self.tasks.find_one(task_id, owner_id, include_deleted=include_deleted)
        if task is None or (list_id is not None and task.todo_list_id != list_id):
            raise NotFound(TASK_NOT_FOUND)
        return task

    async def get_by_id(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        *,
        list_id: uuid.UUID | None = None,
        include_deleted: bool = False,
    ) -> TaskView:
        task = await self._find_owned(task_id, owner_id, list_id, include_deleted)
        return to_task_view(task, self.clock())

    async def update(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        dto: TaskUpdate,
        *,
        list_id: uuid.UUID | None = None,
    ) -> TaskView:
        task = await self._find_owned(task_id, owner_id, list_id)

        patch = dto.to_patch()
        if not patch:
            return to_task_view(task, self.clock())

        affected = await self.tasks.update_by_id(task_id, owner_id, patch)
        if affected == 0:
            await self.db.rollback()
            log.error("任务更新未命中任何行", task_id=str(task_id), user_id=str(owner_id))
            raise UpdateFailed("任务更新失败")
        await self.db.commit()

        updated = await self.tasks.find_one(task_id, owner_id)
        if updated is None:
            raise UpdateFailed("任务更新失败")

        log.info("任务已更新", task_id=str(task_id), fields=sorted(patch))
        return to_task_view(updated, self.clock())

    async def delete(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        *,
        list_id: uuid.UUID | None = None,
    ) -> DeleteResult:
        """软删除：只打标记，保留数据行"""
        await self._find_owned(task_id, owner_id, list_id)

        affected = await self.tasks.soft_delete_by_id(task_id, owner_id)
        if affected == 0:
            await self.db.rollback()
            raise NotFound(TASK_NOT_FOUND)
        await self.db.commit()

        log.info("任务已软删除", task_id=str(task_id), user_id=str(owner_id))
        return DeleteResult(message="任务已删除")
