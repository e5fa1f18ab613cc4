"""
structlog 初始化

- 所有日志自动合并 contextvars 中的 trace_id / user_id
- production 输出单行 JSON，其余环境输出彩色控制台格式
- 标准库 logging（SQLAlchemy、uvicorn）统一写 stdout
"""

import logging
import sys

import structlog

# 第三方库日志默认压到 WARNING，避免访问日志重复 + SQL 刷屏
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def _renderers(env: str) -> list:
    if env == "production":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer(ensure_ascii=False)]
    # ConsoleRenderer 自带异常美化，不能再叠 format_exc_info
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging(env: str = "development", level: str = "INFO") -> None:
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        *_renderers(env),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
