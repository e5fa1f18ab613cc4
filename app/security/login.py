"""
认证接口：注册 / 登录 / 注销
"""

import re

import redis.asyncio as aioredis
import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.redis_client import get_redis
from app.common.response import api_response
from app.db.engine import get_db
from app.observability.metrics import AUTH_EVENT_TOTAL
from app.security.auth import AuthenticatedUser, get_current_user, revoke_token
from app.security.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["认证"])
log = structlog.get_logger()

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]*$")
# 至少包含大写、小写、数字、特殊字符各一个
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&].*$")


# ── 请求模型 ──

class RegisterRequest(BaseModel):
    email: EmailStr
    name: str = Field(min_length=2, max_length=50)
    password: str = Field(min_length=8, max_length=32)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not NAME_PATTERN.match(v):
            raise ValueError("姓名只能包含字母和空格")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not PASSWORD_PATTERN.match(v):
            raise ValueError("密码必须同时包含大写字母、小写字母、数字和特殊字符")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# ── 接口 ──

@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """注册：创建用户并直接签发 Token"""
    result = await AuthService(db).register(body.email, body.name, body.password)
    return api_response(result, 201)


@router.post("/login")
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """用户登录：校验密码，签发 JWT"""
    result = await AuthService(db).login(body.email, body.password)
    return api_response(result)


@router.post("/logout")
async def logout(
    user: AuthenticatedUser = Depends(get_current_user),
    redis_conn: aioredis.Redis = Depends(get_redis),
):
    """注销：将当前 Token 加入黑名单"""
    await revoke_token(redis_conn, jti=user.jti, exp=user.exp)
    AUTH_EVENT_TOTAL.labels(event="logout", result="success").inc()
    log.info("用户注销", user_id=str(user.id))
    return api_response({"message": "已注销"})
