# hitl_dashboard/core/lifecycle.py
# 请求生命周期控制器
#
# 功能说明：
# 包装一次对后端的异步调用：
# 1. 超过 SLOW_WARNING_SECONDS 仍未返回时触发"慢请求"提示（后端冷启动）
# 2. 失败时把原始错误归类为用户可读的错误信息
# 3. 不论成功失败，都保证 busy / 慢请求提示状态被复位
#
# 使用方法：
#   controller = RequestLifecycleController()
#   workflow = await controller.run(
#       lambda: client.workflows.create(data),
#       on_warning=lambda: print(SLOW_WARNING_MESSAGE),
#       on_settled=lambda: print("done"),
#   )
#
# 并发约定：
# 同一个控制器实例同时只允许一个进行中的请求，重复调用会抛出
# AttemptInProgressError。需要并行的请求请各自创建控制器实例。

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, TypeVar

from hitl_dashboard.core.config import settings
from hitl_dashboard.core.errors import ClassifiedError, classify_error
from hitl_dashboard.core.logging import get_logger

T = TypeVar("T")


class AttemptInProgressError(RuntimeError):
    """同一控制器上已有请求在进行中"""


@dataclass
class RequestAttempt:
    """
    一次请求尝试的状态

    只由控制器修改，调用方只读。

    Attributes:
        started_at: 开始时间
        busy: 请求进行中
        slow_warning_active: 慢请求提示正在显示（只可能在 busy 时为 True）
        warning_fired: 本次请求是否触发过慢请求提示
        error: 失败时的分类错误
        settled_at: 结束时间
    """
    started_at: datetime
    busy: bool = True
    slow_warning_active: bool = False
    warning_fired: bool = False
    error: Optional[ClassifiedError] = None
    settled_at: Optional[datetime] = None

    @property
    def elapsed_ms(self) -> Optional[float]:
        if self.settled_at is None:
            return None
        return (self.settled_at - self.started_at).total_seconds() * 1000


class RequestLifecycleController:
    """
    请求生命周期控制器

    Args:
        warning_delay: 慢请求提示延迟（秒），默认读取配置
        logger: 注入的 logger，默认使用模块 logger
    """

    def __init__(
        self,
        warning_delay: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.warning_delay = (
            settings.SLOW_WARNING_SECONDS if warning_delay is None else warning_delay
        )
        self.logger = logger or get_logger(__name__)
        self._attempt: Optional[RequestAttempt] = None

    # ==================== 只读状态 ====================

    @property
    def attempt(self) -> Optional[RequestAttempt]:
        """最近一次请求尝试"""
        return self._attempt

    @property
    def busy(self) -> bool:
        return self._attempt is not None and self._attempt.busy

    @property
    def slow_warning_active(self) -> bool:
        return self._attempt is not None and self._attempt.slow_warning_active

    @property
    def error(self) -> Optional[ClassifiedError]:
        return self._attempt.error if self._attempt is not None else None

    # ==================== 执行 ====================

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        on_warning: Optional[Callable[[], None]] = None,
        on_settled: Optional[Callable[[], None]] = None,
    ) -> T:
        """
        执行一次后端调用

        Args:
            operation: 无参数的异步操作
            on_warning: 慢请求提示回调，最多触发一次，且只会在请求结束前触发
            on_settled: 请求结束回调，不论成功失败都恰好调用一次

        Returns:
            operation 的返回值

        Raises:
            ClassifiedError: 请求失败（message 为用户可读信息）
            AttemptInProgressError: 本实例已有请求在进行中
        """
        if self.busy:
            raise AttemptInProgressError("A request is already in flight on this controller")

        attempt = RequestAttempt(started_at=datetime.now(timezone.utc))
        self._attempt = attempt

        loop = asyncio.get_running_loop()
        timer = loop.call_later(self.warning_delay, self._fire_warning, attempt, on_warning)

        try:
            return await operation()
        except asyncio.CancelledError:
            self.logger.info("请求被取消")
            raise
        except Exception as e:
            classified = classify_error(e)
            attempt.error = classified
            if classified is e:
                raise
            raise classified from e
        finally:
            # 取消未触发的定时器；已触发或已取消时 cancel() 无副作用
            timer.cancel()
            attempt.busy = False
            attempt.slow_warning_active = False
            attempt.settled_at = datetime.now(timezone.utc)
            self._log_settled(attempt)
            if on_settled is not None:
                on_settled()

    def _fire_warning(
        self,
        attempt: RequestAttempt,
        on_warning: Optional[Callable[[], None]],
    ) -> None:
        """定时器回调：请求仍在进行中时打开慢请求提示"""
        if not attempt.busy or attempt.warning_fired:
            return

        attempt.slow_warning_active = True
        attempt.warning_fired = True
        self.logger.warning(
            f"请求超过 {self.warning_delay:g}s 仍未返回，后端可能正在冷启动"
        )
        if on_warning is not None:
            on_warning()

    def _log_settled(self, attempt: RequestAttempt) -> None:
        outcome = attempt.error.kind.value if attempt.error else "success"
        extra = {
            "extra_data": {
                "outcome": outcome,
                "elapsed_ms": round(attempt.elapsed_ms or 0),
                "slow": attempt.warning_fired,
            }
        }
        if attempt.error is not None:
            self.logger.info(
                f"请求失败 ({outcome}, {attempt.elapsed_ms:.0f}ms): {attempt.error.message}",
                extra=extra,
            )
        else:
            self.logger.debug(f"请求完成 ({attempt.elapsed_ms:.0f}ms)", extra=extra)
