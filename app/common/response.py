"""
统一响应信封

成功：{"status": "success", "status_code": 200, "data": ...}
失败：{"status": "error", "status_code": 404, "message": ..., "errors": {...}}
"""

from datetime import datetime, timezone
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(payload: Any, status_code: int = 200, errors: dict | None = None) -> dict:
    """按状态码选择 data / message 字段，错误时附加 errors 明细"""
    is_error = status_code >= 400
    body: dict[str, Any] = {
        "status": "error" if is_error else "success",
        "status_code": status_code,
        "message" if is_error else "data": jsonable_encoder(payload),
    }
    if is_error and errors:
        body["errors"] = errors
    return body


def error_response(status_code: int, message: str, *, path: str, error: str) -> JSONResponse:
    """异常处理器使用：构造错误信封 JSONResponse"""
    return JSONResponse(
        status_code=status_code,
        content=api_response(
            message,
            status_code,
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": path,
                "error": error,
            },
        ),
    )
