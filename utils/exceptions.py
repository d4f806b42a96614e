"""
统一异常定义模块
提供客户端特定的异常类和错误响应格式
"""

from typing import Optional, Dict, Any


class QuoteClientError(Exception):
    """名言客户端基础异常类"""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(QuoteClientError):
    """配置相关错误"""
    pass


class ValidationError(QuoteClientError):
    """输入验证错误，按字段携带提示信息"""

    def __init__(self, field_errors: Dict[str, str], message: Optional[str] = None):
        super().__init__(
            message or f"Invalid input: {', '.join(sorted(field_errors))}",
            ErrorCodes.VALIDATION_FAILED,
            {'fields': sorted(field_errors)}
        )
        self.field_errors = dict(field_errors)


class ApiError(QuoteClientError):
    """远端API错误，保留原始响应以便上层解析"""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 status: Optional[int] = None, response_data: Any = None,
                 original: Optional[BaseException] = None):
        super().__init__(message, error_code, {'status': status} if status is not None else None)
        self.status = status
        self.response_data = response_data
        self.original = original


class TransportFault(ApiError):
    """网络不可达、超时或非2xx响应"""
    pass


class ServerRejection(ApiError):
    """2xx响应但信封 status 表示失败"""
    pass


# 错误代码常量
class ErrorCodes:
    """错误代码常量"""

    # 配置错误
    CONFIG_NOT_FOUND = "CONFIG_001"
    CONFIG_INVALID_FORMAT = "CONFIG_002"
    CONFIG_LOAD_ERROR = "CONFIG_003"

    # 验证错误
    VALIDATION_FAILED = "VAL_001"

    # 网络错误
    NETWORK_TIMEOUT = "NET_001"
    NETWORK_CONNECTION_ERROR = "NET_002"
    NETWORK_BAD_STATUS = "NET_003"

    # 服务端错误
    SERVER_REJECTED = "SRV_001"
    SERVER_INVALID_RESPONSE = "SRV_002"


def create_error_response(error: QuoteClientError) -> Dict[str, Any]:
    """创建标准化的错误响应"""
    response = {
        "error": True,
        "error_code": error.error_code,
        "message": error.message,
        "context": error.context
    }

    if isinstance(error, ValidationError):
        response["field_errors"] = error.field_errors
    elif isinstance(error, ApiError):
        response["status"] = error.status
        response["response_data"] = error.response_data

    return response
