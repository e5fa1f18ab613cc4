"""
Todo 模块：待办清单与任务

对外提供 TodoListService / TaskService，路由层只依赖这两个服务；
存储细节在 repository，时间线状态判定在 timeline。
"""

from app.todo.list_service import TodoListService
from app.todo.task_service import TaskService
from app.todo.timeline import classify_timeline

__all__ = ["TodoListService", "TaskService", "classify_timeline"]
