# hitl_dashboard/api/deps.py
# 路由公共依赖
#
# 每个请求都使用独立的 RequestLifecycleController，
# 所以并发请求之间互不影响。

from typing import Awaitable, Callable, Dict, TypeVar

from fastapi import Response

from hitl_dashboard.core.errors import SLOW_WARNING_HEADER, SLOW_WARNING_MESSAGE
from hitl_dashboard.core.lifecycle import RequestLifecycleController
from hitl_dashboard.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

__all__ = [
    "SLOW_WARNING_HEADER",
    "lifecycle_callbacks",
    "mark_slow_response",
    "run_backend_call",
]


def lifecycle_callbacks(label: str) -> Dict[str, Callable[[], None]]:
    """生成写日志的 on_warning / on_settled 回调，label 为日志中显示的操作名称"""

    def on_warning() -> None:
        logger.warning(f"[{label}] {SLOW_WARNING_MESSAGE}")

    def on_settled() -> None:
        logger.debug(f"[{label}] 已结束")

    return {"on_warning": on_warning, "on_settled": on_settled}


def mark_slow_response(response: Response, controller: RequestLifecycleController) -> None:
    """请求期间触发过慢请求提示时写入响应头"""
    if controller.attempt is not None and controller.attempt.warning_fired:
        response.headers[SLOW_WARNING_HEADER] = "true"


async def run_backend_call(
    operation: Callable[[], Awaitable[T]],
    response: Response,
    label: str,
) -> T:
    """
    通过生命周期控制器调用后端

    Args:
        operation: 无参数的异步后端调用
        response: 当前响应，用于写入慢请求提示头
        label: 日志中显示的操作名称

    Raises:
        ClassifiedError: 后端调用失败，由 main.py 的异常处理器转换为 JSON 响应
    """
    controller = RequestLifecycleController()
    result = await controller.run(operation, **lifecycle_callbacks(label))
    mark_slow_response(response, controller)
    return result
