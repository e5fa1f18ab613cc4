"""
请求日志中间件：每个 HTTP 请求结束时记录一条访问日志 + trace_id 注入

只记录方法、路径、状态码、耗时，不记录请求体（注册 / 登录请求体里有明文密码）。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.observability.context import bind_trace, new_trace_id

log = structlog.get_logger()

# 探活 / 指标抓取频率高，不打访问日志
_QUIET_PATHS = ("/health", "/metrics")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """HTTP 访问日志 + trace_id 上下文注入"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("X-Trace-ID") or new_trace_id()
        bind_trace(trace_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = int((time.monotonic() - start) * 1000)

        if not request.url.path.startswith(_QUIET_PATHS):
            # 5xx 升级为 error，便于告警按级别过滤
            emit = log.error if response.status_code >= 500 else log.info
            emit(
                "请求完成",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                client_ip=request.client.host if request.client else "unknown",
            )

        response.headers["X-Trace-ID"] = trace_id
        response.headers["X-Duration-Ms"] = str(duration_ms)
        return response
