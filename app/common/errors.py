"""
业务异常定义

服务层在检测点直接抛出，不重试、不吞掉；
app.main 中注册的异常处理器统一映射为 HTTP 状态码 + 错误信封。
异常消息面向调用方，禁止携带明文密码 / 密码哈希等敏感信息。
"""


class AppError(Exception):
    """业务异常基类：每种异常对应唯一的 HTTP 状态码"""

    status_code: int = 500
    error: str = "Internal Server Error"
    default_message: str = "服务器内部错误"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(AppError):
    """请求参数不合法"""

    status_code = 400
    error = "Bad Request"
    default_message = "请求参数不合法"


class InvalidCredentials(AppError):
    """登录失败：不区分"邮箱不存在"与"密码错误"，防止账号枚举"""

    status_code = 401
    error = "Unauthorized"
    default_message = "邮箱或密码错误"

    def __init__(self):
        # 固定消息，调用方无法传入区分性的文案
        super().__init__()


class NotFound(AppError):
    """资源不存在或不属于当前用户（两种情况对调用方不可区分）"""

    status_code = 404
    error = "Not Found"
    default_message = "资源不存在"


class DuplicateIdentity(AppError):
    """注册邮箱已存在"""

    status_code = 409
    error = "Conflict"
    default_message = "邮箱已被注册"


class UpdateFailed(AppError):
    """归属校验通过后写入却未命中任何行：并发丢失更新或存储不一致，属于服务端错误"""

    status_code = 500
    error = "Internal Server Error"
    default_message = "更新失败"
