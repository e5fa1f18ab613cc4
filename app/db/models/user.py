"""
用户模型
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column
from uuid6 import uuid7

from app.db.models.base import Base


class User(Base):
    """用户表"""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, comment="登录邮箱（小写归一化）")
    name: Mapped[str] = mapped_column(String(64), nullable=False, comment="显示名称")
    # 默认查询不加载密码哈希，只有登录校验时显式 undefer；误访问直接报错而不是隐式回源
    password_hash: Mapped[str] = mapped_column(
        String(256),
        nullable=False,
        deferred=True,
        deferred_raiseload=True,
        comment="密码哈希",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), comment="创建时间"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), comment="更新时间"
    )
