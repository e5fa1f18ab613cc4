"""
任务模型

timeline_status 是按请求时刻计算的派生字段，不落库，
由 TaskService 在组装输出视图时附加（见 app.todo.timeline）。
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String, Text, Uuid, false, func
from sqlalchemy.orm import Mapped, mapped_column
from uuid6 import uuid7

from app.config import get_settings
from app.db.models.base import Base

settings = get_settings()
_schema = settings.DB_SCHEMA


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """库里存枚举值（pending）而不是成员名（PENDING）"""
    return [member.value for member in enum_cls]


class Task(Base):
    """任务表：软删除，is_deleted=true 的记录默认查询不可见"""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_list_due", "todo_list_id", "is_deleted", "due_date"),
        {"schema": Base.__table_args__["schema"]},
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    title: Mapped[str] = mapped_column(String(100), nullable=False, comment="任务标题")
    description: Mapped[str | None] = mapped_column(Text, comment="任务描述")
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status", values_callable=_enum_values, schema=_schema),
        nullable=False,
        default=TaskStatus.PENDING,
        server_default=TaskStatus.PENDING.value,
        comment="状态: pending/in_progress/completed",
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, name="task_priority", values_callable=_enum_values, schema=_schema),
        nullable=False,
        default=TaskPriority.MEDIUM,
        server_default=TaskPriority.MEDIUM.value,
        comment="优先级: low/medium/high",
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, comment="截止时间")
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), comment="软删除标记"
    )
    todo_list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey(f"{_schema}.todo_lists.id", ondelete="CASCADE"),
        nullable=False,
        comment="所属清单",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), comment="创建时间"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), comment="更新时间"
    )
