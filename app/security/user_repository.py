"""
用户存储层：按邮箱 / id 查询，密码哈希只在显式要求时加载
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from app.db.models.user import User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_email(self, email: str, *, with_password_hash: bool = False) -> User | None:
        stmt = select(User).where(User.email == email)
        if with_password_hash:
            stmt = stmt.options(undefer(User.password_hash))
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def insert(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user, ["created_at", "updated_at"])
        return user
