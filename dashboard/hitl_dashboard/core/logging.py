# hitl_dashboard/core/logging.py
# 日志配置模块
#
# 功能说明：
# 1. 统一管理应用日志输出（替代前端到处散落的 console.log）
# 2. 支持两种格式：彩色控制台（开发）和 JSON（生产）
# 3. 自动记录仪表盘自身的请求信息（中间件）
#
# 使用方法：
#   from hitl_dashboard.core.logging import get_logger
#   logger = get_logger(__name__)
#   logger.info("这是一条日志")

import logging
import sys
import json
import time
from datetime import datetime
from typing import Optional, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hitl_dashboard.core.config import settings
from hitl_dashboard.core.errors import SLOW_WARNING_HEADER


# ==================== 彩色输出支持 ====================

class Colors:
    """终端颜色代码"""
    RESET = "\033[0m"
    RED = "\033[31m"       # ERROR
    GREEN = "\033[32m"     # INFO
    YELLOW = "\033[33m"    # WARNING
    BLUE = "\033[34m"      # DEBUG
    MAGENTA = "\033[35m"   # CRITICAL
    CYAN = "\033[36m"      # 时间戳
    GRAY = "\033[90m"      # 位置信息


# 日志级别对应的颜色
LEVEL_COLORS = {
    "DEBUG": Colors.BLUE,
    "INFO": Colors.GREEN,
    "WARNING": Colors.YELLOW,
    "ERROR": Colors.RED,
    "CRITICAL": Colors.MAGENTA,
}


# ==================== 自定义 Formatter ====================

class ColoredFormatter(logging.Formatter):
    """
    彩色日志格式化器（开发环境使用）

    输出格式：
    2026-01-30 12:00:00 | INFO     | hitl_dashboard.client.api:_log_request:88 - GET https://.../api/workflows
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        level_name = record.levelname
        level_color = LEVEL_COLORS.get(level_name, Colors.RESET)

        # 模块名:函数名:行号
        location = f"{record.name}:{record.funcName}:{record.lineno}"

        formatted = (
            f"{Colors.CYAN}{timestamp}{Colors.RESET} | "
            f"{level_color}{level_name:8}{Colors.RESET} | "
            f"{Colors.GRAY}{location}{Colors.RESET} - "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


class JSONFormatter(logging.Formatter):
    """
    JSON 日志格式化器（生产环境使用）

    每行一个 JSON 对象：
    {"timestamp": "2026-01-30T12:00:00", "level": "INFO", "logger": "hitl_dashboard.core.lifecycle", ...}

    通过 extra={"extra_data": {...}} 传入的上下文会放到 "extra" 字段
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        return json.dumps(log_data, ensure_ascii=False, default=str)


# ==================== Logger 工厂函数 ====================

def setup_logging() -> None:
    """
    初始化日志系统

    应用启动时调用一次（main.py 模块加载时、CLI 脚本入口处）
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL)

    # 清除已有的 handler（避免重复添加）
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.LOG_LEVEL)

    if settings.LOG_FORMAT == "json":
        formatter = JSONFormatter()
    else:
        formatter = ColoredFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # 第三方库日志级别
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    # httpx 自己的请求日志与我们的 event hook 重复
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    获取 logger 实例

    Args:
        name: logger 名称，通常传入 __name__

    Returns:
        logging.Logger: logger 实例
    """
    return logging.getLogger(name)


# ==================== 请求日志中间件 ====================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP 请求日志中间件

    记录仪表盘收到的每个请求：方法、路径、状态码、耗时
    后端响应慢（响应头带 X-Slow-Warning）的成功请求用 WARNING 级别

    输出示例：
    WARNING | POST /api/workflows -> 201 (5210ms) [slow backend]
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("hitl_dashboard.request")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        method = request.method
        path = request.url.path
        query = str(request.url.query) if request.url.query else ""

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            duration = (time.time() - start_time) * 1000
            self.logger.error(
                f"{method} {path} -> 500 ERROR ({duration:.0f}ms) - {str(e)}"
            )
            raise

        duration = (time.time() - start_time) * 1000

        log_message = f"{method} {path}"
        if query:
            log_message += f"?{query}"
        log_message += f" -> {status_code} ({duration:.0f}ms)"

        slow = response.headers.get(SLOW_WARNING_HEADER) == "true"
        if slow:
            log_message += " [slow backend]"

        # 200-299 用 INFO（后端慢时 WARNING），400-499 用 WARNING，500+ 用 ERROR
        if status_code >= 500:
            self.logger.error(log_message)
        elif status_code >= 400 or slow:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

        return response
