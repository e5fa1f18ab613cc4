"""
待办清单 / 任务存储层（PG，SQLAlchemy async）

所有查询都显式带上 owner_id：清单直接按 user_id 过滤，
任务通过 JOIN todo_lists 传递归属。写操作同样带归属条件，
返回受影响行数，由服务层区分"未找到"和"写入失败"。
"""

import uuid
from typing import Any

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.task import Task
from app.db.models.todo_list import TodoList
from app.todo.schemas import TaskFilters, TodoListFilters


def _owned_list_ids(owner_id: uuid.UUID) -> Select:
    return select(TodoList.id).where(TodoList.user_id == owner_id)


async def _count(db: AsyncSession, stmt: Select) -> int:
    result = await db.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))
    return result.scalar_one()


class TodoListRepository:
    """待办清单 CRUD"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, todo_list: TodoList) -> TodoList:
        self.db.add(todo_list)
        await self.db.flush()
        await self.db.refresh(todo_list, ["created_at", "updated_at"])
        return todo_list

    async def find_one(self, list_id: uuid.UUID, owner_id: uuid.UUID) -> TodoList | None:
        result = await self.db.execute(
            select(TodoList)
            .where(TodoList.id == list_id, TodoList.user_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_many(
        self,
        owner_id: uuid.UUID,
        filters: TodoListFilters,
        *,
        offset: int,
        limit: int,
    ) -> tuple[list[TodoList], int]:
        """按用户分页查询，返回 (当前页, 总数)；按创建时间倒序"""
        stmt = select(TodoList).where(TodoList.user_id == owner_id)
        if filters.search:
            stmt = stmt.where(
                or_(
                    TodoList.name.icontains(filters.search, autoescape=True),
                    TodoList.description.icontains(filters.search, autoescape=True),
                )
            )

        total = await _count(self.db, stmt)
        result = await self.db.execute(
            stmt.order_by(TodoList.created_at.desc(), TodoList.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def update_by_id(self, list_id: uuid.UUID, owner_id: uuid.UUID, patch: dict[str, Any]) -> int:
        """带归属条件的原子更新，返回受影响行数"""
        result = await self.db.execute(
            update(TodoList)
            .where(TodoList.id == list_id, TodoList.user_id == owner_id)
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_id(self, list_id: uuid.UUID, owner_id: uuid.UUID) -> int:
        """物理删除；任务由外键 ON DELETE CASCADE 级联清理"""
        result = await self.db.execute(
            delete(TodoList)
            .where(TodoList.id == list_id, TodoList.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class TaskRepository:
    """任务 CRUD：默认排除软删除记录"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, task: Task) -> Task:
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task, ["status", "priority", "is_deleted", "created_at", "updated_at"])
        return task

    async def find_one(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        *,
        include_deleted: bool = False,
    ) -> Task | None:
        stmt = (
            select(Task)
            .join(TodoList, Task.todo_list_id == TodoList.id)
            .where(Task.id == task_id, TodoList.user_id == owner_id)
        )
        if not include_deleted:
            stmt = stmt.where(Task.is_deleted.is_(False))
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def find_many(
        self,
        list_id: uuid.UUID,
        owner_id: uuid.UUID,
        filters: TaskFilters,
        *,
        offset: int | None = None,
        limit: int | None = None,
    ) -> tuple[list[Task], int]:
        """
        按清单分页查询，返回 (当前页, 总数)。

        排序固定为 due_date 升序 → created_at 降序 → id，保证翻页稳定。
        """
        stmt = (
            select(Task)
            .join(TodoList, Task.todo_list_id == TodoList.id)
            .where(
                Task.todo_list_id == list_id,
                TodoList.user_id == owner_id,
                Task.is_deleted.is_(False),
            )
        )
        if filters.status is not None:
            stmt = stmt.where(Task.status == filters.status)
        if filters.priority is not None:
            stmt = stmt.where(Task.priority == filters.priority)
        if filters.search:
            stmt = stmt.where(
                or_(
                    Task.title.icontains(filters.search, autoescape=True),
                    Task.description.icontains(filters.search, autoescape=True),
                )
            )
        if filters.due_date_start is not None:
            stmt = stmt.where(Task.due_date >= filters.due_date_start)
        if filters.due_date_end is not None:
            stmt = stmt.where(Task.due_date <= filters.due_date_end)

        total = await _count(self.db, stmt)
        stmt = stmt.order_by(Task.due_date.asc(), Task.created_at.desc(), Task.id.desc())
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def update_by_id(self, task_id: uuid.UUID, owner_id: uuid.UUID, patch: dict[str, Any]) -> int:
        """
        条件更新：id + 未删除 + 所属清单仍归 owner 所有，三者在同一条 UPDATE 中判定，
        归属在检查与写入之间发生变化时返回 0 而不是写到别人的数据上。
        """
        result = await self.db.execute(
            update(Task)
            .where(
                Task.id == task_id,
                Task.is_deleted.is_(False),
                Task.todo_list_id.in_(_owned_list_ids(owner_id)),
            )
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def soft_delete_by_id(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> int:
        return await self.update_by_id(task_id, owner_id, {"is_deleted": True})
