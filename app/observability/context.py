"""
请求级日志上下文：trace_id / user_id 绑定到 structlog contextvars，
同一请求内的所有日志自动携带
"""

import uuid

import structlog


def new_trace_id() -> str:
    return uuid.uuid4().hex


def bind_trace(trace_id: str) -> None:
    """请求入口调用：先清空上一个请求残留的上下文"""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id)


def bind_user(user_id: str) -> None:
    """鉴权通过后绑定 user_id"""
    structlog.contextvars.bind_contextvars(user_id=user_id)
