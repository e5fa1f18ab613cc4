"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件和业务代码按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "taskboard_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "taskboard_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[10, 25, 50, 100, 200, 500, 1000, 2000],
)

# ── 认证指标 ──

AUTH_EVENT_TOTAL = Counter(
    "taskboard_auth_event_total",
    "认证事件总数",
    ["event", "result"],  # event: register/login/logout，result: success/failure
)

# ── 错误指标 ──

ERROR_TOTAL = Counter(
    "taskboard_error_total",
    "业务错误总数",
    ["error_type"],  # NotFound/DuplicateIdentity/InvalidCredentials/UpdateFailed/ValidationFailed
)
