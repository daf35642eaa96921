# hitl_dashboard/core/errors.py
# 后端请求错误分类
#
# 功能说明：
# 把 httpx 抛出的原始传输错误归类为四种用户可读的错误：
# 1. TIMEOUT        - 超时，后端可能在冷启动
# 2. SERVER_ERROR   - 后端返回了非 2xx 响应
# 3. NETWORK_ERROR  - 请求已发出但没有收到任何响应
# 4. UNKNOWN_ERROR  - 其他情况，原样透传错误描述
#
# 分类只在传输边界做一次（client/api.py），上层拿到的 message
# 已经可以直接展示给用户，不需要再解释。
#
# 使用方法：
#   try:
#       ...
#   except httpx.HTTPError as e:
#       raise classify_error(e) from e

from enum import Enum
from typing import Any, Optional

import httpx


# ==================== 用户提示文案 ====================

TIMEOUT_MESSAGE = (
    "The server is starting up. This can take 30-50 seconds on the first request. "
    "Please try again."
)

NETWORK_ERROR_MESSAGE = (
    "Cannot connect to server. Please check your internet connection or try again later."
)

# 请求超过 SLOW_WARNING_SECONDS 仍未返回时展示
SLOW_WARNING_MESSAGE = (
    "This is taking longer than usual... The server may be waking up from sleep. "
    "This can take 30-50 seconds on the first request. Please wait..."
)

# 请求期间触发过慢请求提示时，仪表盘 API 在响应中带上这个头
SLOW_WARNING_HEADER = "X-Slow-Warning"


class ErrorKind(str, Enum):
    """错误类型枚举"""
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN_ERROR = "unknown_error"


class ClassifiedError(Exception):
    """
    已分类的错误

    str(error) 就是给用户看的 message，原始错误通过 __cause__ 保留

    Attributes:
        kind: 错误类型
        message: 用户可读的错误信息
        status_code: 后端响应状态码（仅 SERVER_ERROR）
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @property
    def http_status(self) -> int:
        """仪表盘 API 对外返回的状态码"""
        if self.kind == ErrorKind.TIMEOUT:
            return 504
        if self.kind == ErrorKind.NETWORK_ERROR:
            return 502
        if self.kind == ErrorKind.SERVER_ERROR:
            # 4xx 是调用方的问题，原样返回；5xx 是上游故障
            if self.status_code is not None and 400 <= self.status_code < 500:
                return self.status_code
            return 502
        return 500

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind.value}

    def __repr__(self) -> str:
        return f"ClassifiedError(kind={self.kind.value!r}, message={self.message!r})"


def _server_message(response: httpx.Response) -> str:
    """优先使用后端返回的 message 字段，否则使用 "Server error: {status}" """
    try:
        data: Any = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        message = data.get("message")
        if message:
            return str(message)

    return f"Server error: {response.status_code}"


def classify_error(exc: BaseException) -> ClassifiedError:
    """
    将原始错误归类

    判断顺序很重要：httpx.TimeoutException 也是 RequestError 的子类，
    必须先判断超时。

    未知错误原样透传 str(exc)；描述为空时改用异常类名，避免给用户空白提示。

    Args:
        exc: 原始错误

    Returns:
        ClassifiedError: 分类后的错误（已分类的错误原样返回）
    """
    if isinstance(exc, ClassifiedError):
        return exc

    if isinstance(exc, httpx.TimeoutException):
        return ClassifiedError(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE)

    if isinstance(exc, httpx.HTTPStatusError):
        return ClassifiedError(
            ErrorKind.SERVER_ERROR,
            _server_message(exc.response),
            status_code=exc.response.status_code,
        )

    if isinstance(exc, httpx.RequestError):
        return ClassifiedError(ErrorKind.NETWORK_ERROR, NETWORK_ERROR_MESSAGE)

    return ClassifiedError(ErrorKind.UNKNOWN_ERROR, str(exc) or type(exc).__name__)
