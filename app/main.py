"""
FastAPI 应用主入口
"""

import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from pathlib import Path

# 将项目根目录添加到 python path，以便直接运行 main.py 时能找到 app 模块
sys.path.append(str(Path(__file__).resolve().parent.parent))

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from prometheus_client import make_asgi_app
from sqlalchemy import text
from starlette.exceptions import HTTPException

from app.cache.redis_client import redis_client
from app.common.errors import AppError
from app.common.response import error_response
from app.config import get_settings
from app.db.engine import engine
from app.observability.logging_config import setup_logging
from app.observability.metrics import ERROR_TOTAL
from app.observability.metrics_middleware import MetricsMiddleware
from app.observability.request_logger import RequestLoggerMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时预检依赖服务，关闭时清理资源"""
    log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

    # ── Warm-up：Fail Fast，依赖不可用时拒绝启动 ──
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    log.info("PG 连接正常")

    await redis_client.ping()
    log.info("Redis 连接正常")

    yield

    # 关闭数据库连接池
    await engine.dispose()
    # 关闭 Redis 连接池
    await redis_client.aclose()
    log.info("应用关闭，资源已释放")


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# ── 中间件（执行顺序：从下往上注册，从上往下执行） ──
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(MetricsMiddleware)

# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


# ── 异常处理：统一错误信封 ──

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """业务异常 → 对应状态码；只记录状态码与消息，不记录请求体"""
    ERROR_TOTAL.labels(error_type=type(exc).__name__).inc()
    emit = log.error if exc.status_code >= 500 else log.warning
    emit(
        "业务异常",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.message, path=request.url.path, error=exc.error)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """参数校验失败 → 400，多个错误只返回第一条"""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "请求参数不合法"
    ERROR_TOTAL.labels(error_type="ValidationFailed").inc()
    log.warning("参数校验失败", method=request.method, path=request.url.path, message=message)
    return error_response(400, message, path=request.url.path, error="Bad Request")


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """鉴权失败、路由不存在等框架层 HTTPException 也走统一信封"""
    log.warning("请求被拒绝", method=request.method, path=request.url.path, status_code=exc.status_code)
    return error_response(
        exc.status_code,
        str(exc.detail),
        path=request.url.path,
        error=HTTPStatus(exc.status_code).phrase,
    )


# ── 路由注册 ──
from app.api.health import router as health_router
from app.api.tasks import router as tasks_router
from app.api.todo_lists import router as todo_lists_router
from app.security.login import router as auth_router

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(todo_lists_router)
app.include_router(tasks_router)


if __name__ == "__main__":
    import uvicorn
    # 允许直接运行 python app/main.py 启动服务
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.APP_PORT, reload=True)
