"""
认证服务：注册 / 登录

- 注册前先查重，任何写入之前抛 DuplicateIdentity；并发注册撞唯一约束同样映射为 DuplicateIdentity
- 登录失败不区分"邮箱不存在"和"密码错误"，统一 InvalidCredentials
- 日志与异常中不出现明文密码或密码哈希
"""

import uuid

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.common.errors import DuplicateIdentity, InvalidCredentials
from app.db.models.user import User
from app.observability.metrics import AUTH_EVENT_TOTAL
from app.security.auth import create_access_token
from app.security.passwords import hash_password, verify_password
from app.security.user_repository import UserRepository

log = structlog.get_logger()


class UserSummary(BaseModel):
    """对外用户摘要：永远不含密码哈希"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str


class AuthResult(BaseModel):
    user: UserSummary
    access_token: str
    token_type: str = "bearer"


def normalize_email(email: str) -> str:
    """邮箱统一去空格 + 小写，唯一性按大小写不敏感处理"""
    return email.strip().lower()


def _issue(user: User) -> AuthResult:
    return AuthResult(
        user=UserSummary.model_validate(user),
        access_token=create_access_token(sub=str(user.id)),
    )


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def register(self, email: str, name: str, password: str) -> AuthResult:
        email = normalize_email(email)
        if await self.users.find_by_email(email) is not None:
            AUTH_EVENT_TOTAL.labels(event="register", result="failure").inc()
            raise DuplicateIdentity()

        try:
            user = await self.users.insert(
                User(email=email, name=name, password_hash=hash_password(password))
            )
            await self.db.commit()
        except IntegrityError:
            # 查重与写入之间被并发注册抢先
            await self.db.rollback()
            AUTH_EVENT_TOTAL.labels(event="register", result="failure").inc()
            raise DuplicateIdentity()

        AUTH_EVENT_TOTAL.labels(event="register", result="success").inc()
        log.info("用户注册成功", user_id=str(user.id))
        return _issue(user)

    async def login(self, email: str, password: str) -> AuthResult:
        email = normalize_email(email)
        user = await self.users.find_by_email(email, with_password_hash=True)

        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            AUTH_EVENT_TOTAL.labels(event="login", result="failure").inc()
            raise InvalidCredentials()

        AUTH_EVENT_TOTAL.labels(event="login", result="success").inc()
        log.info("用户登录成功", user_id=str(user.id))
        return _issue(user)
