"""
Redis 客户端：连接池 + Token 黑名单

Redis 在本服务里只承担一件事：记录已注销 Token 的 jti，
TTL 与 Token 剩余有效期对齐，过期后自动清理。
"""

import redis.asyncio as aioredis

from app.config import get_settings

settings = get_settings()


def blacklist_key(jti: str) -> str:
    """黑名单 Key：{应用名}:token:revoked:{jti}"""
    return f"{settings.APP_NAME}:token:revoked:{jti}"


async def blacklist_token(redis: aioredis.Redis, jti: str, ttl_seconds: int) -> None:
    await redis.setex(blacklist_key(jti), max(ttl_seconds, 1), "1")


async def is_token_blacklisted(redis: aioredis.Redis, jti: str) -> bool:
    return bool(await redis.exists(blacklist_key(jti)))


redis_pool = aioredis.ConnectionPool.from_url(
    settings.REDIS_URL,
    max_connections=settings.REDIS_MAX_CONNECTIONS,
    decode_responses=True,
    socket_timeout=5,
    socket_connect_timeout=5,
    retry_on_timeout=True,
)

redis_client = aioredis.Redis(connection_pool=redis_pool)


async def get_redis() -> aioredis.Redis:
    """FastAPI 依赖注入：共享连接池上的客户端"""
    return redis_client
