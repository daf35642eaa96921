# tests/test_lifecycle.py
# RequestLifecycleController 单元测试
#
# 慢请求提示延迟缩小为 WARNING_DELAY 秒，场景中的 2s / 7s 按比例缩放
#
# 运行方式：
#   cd dashboard
#   pytest tests/test_lifecycle.py -v

import asyncio

import httpx
import pytest

from hitl_dashboard.core.errors import (
    ClassifiedError,
    ErrorKind,
    NETWORK_ERROR_MESSAGE,
)
from hitl_dashboard.core.lifecycle import (
    AttemptInProgressError,
    RequestLifecycleController,
)

WARNING_DELAY = 0.05


class Recorder:
    """记录回调调用次数和调用时的控制器状态"""

    def __init__(self, controller: RequestLifecycleController):
        self.controller = controller
        self.warnings = 0
        self.settled = 0
        self.busy_at_warning = None
        self.slow_at_settled = None

    def on_warning(self):
        self.warnings += 1
        self.busy_at_warning = self.controller.busy

    def on_settled(self):
        self.settled += 1
        self.slow_at_settled = self.controller.slow_warning_active


def delayed(seconds: float, value=None, exc: Exception = None):
    async def _operation():
        await asyncio.sleep(seconds)
        if exc is not None:
            raise exc
        return value
    return _operation


@pytest.fixture
def controller():
    return RequestLifecycleController(warning_delay=WARNING_DELAY)


# ==================== 成功场景 ====================

@pytest.mark.asyncio
async def test_fast_success_never_warns(controller):
    """场景 A：请求在提示延迟内完成，不提示、无错误"""
    rec = Recorder(controller)

    result = await controller.run(
        delayed(WARNING_DELAY * 0.2, value="ok"),
        on_warning=rec.on_warning,
        on_settled=rec.on_settled,
    )

    assert result == "ok"
    assert rec.warnings == 0
    assert rec.settled == 1
    assert controller.busy is False
    assert controller.error is None
    assert controller.attempt.warning_fired is False

    # 定时器已取消，之后也不会再触发
    await asyncio.sleep(WARNING_DELAY * 2)
    assert rec.warnings == 0


@pytest.mark.asyncio
async def test_slow_success_warns_once_then_clears(controller):
    """场景 B：请求超过提示延迟才完成，提示恰好一次，结束后清除"""
    rec = Recorder(controller)
    seen_active = []

    async def operation():
        await asyncio.sleep(WARNING_DELAY * 2)
        seen_active.append(controller.slow_warning_active)
        return {"id": "wf-1"}

    result = await controller.run(operation, on_warning=rec.on_warning, on_settled=rec.on_settled)

    assert result == {"id": "wf-1"}
    assert rec.warnings == 1
    assert rec.busy_at_warning is True
    assert seen_active == [True]
    assert rec.settled == 1
    assert rec.slow_at_settled is False
    assert controller.slow_warning_active is False
    assert controller.busy is False
    assert controller.error is None
    assert controller.attempt.warning_fired is True


@pytest.mark.asyncio
async def test_busy_while_pending(controller):
    observed = []

    async def operation():
        observed.append((controller.busy, controller.slow_warning_active))
        return 1

    await controller.run(operation)

    assert observed == [(True, False)]
    assert controller.busy is False


# ==================== 失败场景 ====================

@pytest.mark.asyncio
async def test_timeout_is_classified(controller):
    """场景 C：超时失败，提示冷启动，busy 复位"""
    rec = Recorder(controller)
    request = httpx.Request("POST", "http://backend.test/api/workflows")

    with pytest.raises(ClassifiedError) as exc_info:
        await controller.run(
            delayed(WARNING_DELAY * 2, exc=httpx.ReadTimeout("timed out", request=request)),
            on_warning=rec.on_warning,
            on_settled=rec.on_settled,
        )

    error = exc_info.value
    assert error.kind == ErrorKind.TIMEOUT
    assert "30-50 seconds" in error.message
    assert isinstance(error.__cause__, httpx.ReadTimeout)
    assert rec.warnings == 1
    assert rec.settled == 1
    assert rec.slow_at_settled is False
    assert controller.busy is False
    assert controller.error is error


@pytest.mark.asyncio
async def test_server_error_uses_response_message(controller):
    """场景 D：后端返回 400 {message: "Invalid name"}"""
    request = httpx.Request("POST", "http://backend.test/api/workflows")
    response = httpx.Response(400, json={"message": "Invalid name"}, request=request)
    raw = httpx.HTTPStatusError("400 Bad Request", request=request, response=response)

    with pytest.raises(ClassifiedError) as exc_info:
        await controller.run(delayed(0, exc=raw))

    assert exc_info.value.kind == ErrorKind.SERVER_ERROR
    assert exc_info.value.message == "Invalid name"
    assert str(exc_info.value) == "Invalid name"


@pytest.mark.asyncio
async def test_network_error_is_classified(controller):
    """场景 E：请求发出但没有任何响应"""
    rec = Recorder(controller)
    request = httpx.Request("GET", "http://backend.test/api/workflows")

    with pytest.raises(ClassifiedError) as exc_info:
        await controller.run(
            delayed(0, exc=httpx.ConnectError("connection refused", request=request)),
            on_settled=rec.on_settled,
        )

    assert exc_info.value.kind == ErrorKind.NETWORK_ERROR
    assert exc_info.value.message == NETWORK_ERROR_MESSAGE
    assert rec.settled == 1


@pytest.mark.asyncio
async def test_unknown_error_passes_message_through(controller):
    with pytest.raises(ClassifiedError) as exc_info:
        await controller.run(delayed(0, exc=ValueError("unexpected payload")))

    assert exc_info.value.kind == ErrorKind.UNKNOWN_ERROR
    assert exc_info.value.message == "unexpected payload"


@pytest.mark.asyncio
async def test_already_classified_error_is_not_reclassified(controller):
    original = ClassifiedError(ErrorKind.SERVER_ERROR, "Workflow not found", status_code=404)

    with pytest.raises(ClassifiedError) as exc_info:
        await controller.run(delayed(0, exc=original))

    assert exc_info.value is original
    assert controller.error is original


@pytest.mark.asyncio
async def test_failed_fast_attempt_never_warns(controller):
    rec = Recorder(controller)

    with pytest.raises(ClassifiedError):
        await controller.run(
            delayed(0, exc=RuntimeError("boom")),
            on_warning=rec.on_warning,
            on_settled=rec.on_settled,
        )

    await asyncio.sleep(WARNING_DELAY * 2)
    assert rec.warnings == 0
    assert rec.settled == 1


# ==================== 多次尝试 ====================

@pytest.mark.asyncio
async def test_next_attempt_starts_without_previous_error(controller):
    with pytest.raises(ClassifiedError):
        await controller.run(delayed(0, exc=RuntimeError("first failure")))
    assert controller.error is not None

    observed = []

    async def operation():
        observed.append(controller.error)
        return "second"

    assert await controller.run(operation) == "second"
    assert observed == [None]
    assert controller.error is None


@pytest.mark.asyncio
async def test_overlapping_run_is_rejected(controller):
    """同一控制器上第二次调用被拒绝，不影响进行中的请求"""
    rec = Recorder(controller)
    first = asyncio.create_task(
        controller.run(delayed(WARNING_DELAY * 0.5, value="first"), on_settled=rec.on_settled)
    )
    await asyncio.sleep(0)

    second_settled = []
    with pytest.raises(AttemptInProgressError):
        await controller.run(delayed(0, value="second"), on_settled=lambda: second_settled.append(1))

    assert controller.busy is True
    assert await first == "first"
    assert rec.settled == 1
    assert second_settled == []
    assert controller.busy is False


@pytest.mark.asyncio
async def test_independent_controllers_run_concurrently():
    a = RequestLifecycleController(warning_delay=WARNING_DELAY)
    b = RequestLifecycleController(warning_delay=WARNING_DELAY)

    results = await asyncio.gather(
        a.run(delayed(0.01, value="a")),
        b.run(delayed(0.01, value="b")),
    )

    assert results == ["a", "b"]
    assert not a.busy and not b.busy


@pytest.mark.asyncio
async def test_cancelled_attempt_still_settles(controller):
    """调用方取消等待时，仍然复位状态并调用 on_settled，且不再提示"""
    rec = Recorder(controller)
    task = asyncio.create_task(
        controller.run(delayed(10), on_warning=rec.on_warning, on_settled=rec.on_settled)
    )
    await asyncio.sleep(WARNING_DELAY * 0.2)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert rec.settled == 1
    assert controller.busy is False
    assert controller.error is None

    await asyncio.sleep(WARNING_DELAY * 2)
    assert rec.warnings == 0


def test_default_delay_comes_from_settings():
    from hitl_dashboard.core.config import settings

    assert RequestLifecycleController().warning_delay == settings.SLOW_WARNING_SECONDS
    assert settings.SLOW_WARNING_SECONDS == 5.0
