"""
模型统一导出：Alembic 自动发现需要导入所有模型
"""

from app.db.models.base import Base
from app.db.models.user import User
from app.db.models.todo_list import TodoList
from app.db.models.task import Task, TaskPriority, TaskStatus

__all__ = ["Base", "User", "TodoList", "Task", "TaskPriority", "TaskStatus"]
