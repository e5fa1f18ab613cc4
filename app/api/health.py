"""
健康检查接口：PG / Redis 探活

任一依赖不可用时返回 503，供负载均衡摘除实例；错误详情只进日志，不回传给调用方。
"""

from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.redis_client import get_redis
from app.config import get_settings
from app.db.engine import get_db

router = APIRouter(tags=["健康检查"])
log = structlog.get_logger()
settings = get_settings()


async def _probe(name: str, check: Callable[[], Awaitable[object]]) -> str:
    try:
        await check()
    except Exception as e:
        log.error("依赖探活失败", dependency=name, error=str(e))
        return "error"
    return "ok"


@router.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
):
    checks = {
        "postgres": await _probe("postgres", lambda: db.execute(text("SELECT 1"))),
        "redis": await _probe("redis", redis.ping),
    }
    healthy = all(state == "ok" for state in checks.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "degraded", "app": settings.APP_NAME, **checks},
    )
