"""
JWT 鉴权模块：Token 签发 / 校验 / 黑名单检查

Token 只携带用户 id（sub）及标准声明 jti / iat / exp，不放任何用户资料。
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
import redis.asyncio as aioredis
import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.redis_client import blacklist_token, get_redis, is_token_blacklisted
from app.config import get_settings
from app.db.engine import get_db
from app.observability.context import bind_user
from app.security.user_repository import UserRepository

settings = get_settings()
log = structlog.get_logger()
# 自行返回 401，不依赖 HTTPBearer 在缺少请求头时的默认状态码
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    """鉴权后的用户上下文，作为 owner_id 显式传给各业务服务"""

    id: uuid.UUID
    email: str
    name: str
    jti: str | None = None
    exp: int | None = None


def create_access_token(*, sub: str) -> str:
    """签发 access_token"""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """校验签名与过期时间；失败抛 jwt.InvalidTokenError 及其子类"""
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


async def revoke_token(redis: aioredis.Redis, *, jti: str | None, exp: int | None) -> None:
    """注销：jti 写入黑名单，TTL = token 剩余有效时间"""
    if not jti or not exp:
        return
    await blacklist_token(redis, jti, int(exp - datetime.now(timezone.utc).timestamp()))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    redis: aioredis.Redis = Depends(get_redis),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """FastAPI 依赖注入：校验 JWT 并返回用户上下文"""
    if credentials is None:
        raise HTTPException(status_code=401, detail="缺少认证信息")

    # 1. 解码 JWT
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = uuid.UUID(payload["sub"])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token 已过期")
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="无效 Token")

    # 2. 检查黑名单（已注销的 Token）
    jti = payload.get("jti")
    if jti and await is_token_blacklisted(redis, jti):
        raise HTTPException(status_code=401, detail="Token 已注销")

    # 3. 用户必须仍然存在
    user = await UserRepository(db).find_by_id(user_id)
    if user is None:
        log.warning("Token 对应用户不存在", user_id=str(user_id))
        raise HTTPException(status_code=401, detail="无效 Token")

    bind_user(str(user.id))
    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        name=user.name,
        jti=jti,
        exp=payload.get("exp"),
    )
