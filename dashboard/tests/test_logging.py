# tests/test_logging.py
# 日志格式化与请求日志中间件测试

import json
import logging

from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from hitl_dashboard.core.config import settings
from hitl_dashboard.core.errors import SLOW_WARNING_HEADER
from hitl_dashboard.core.logging import (
    ColoredFormatter,
    JSONFormatter,
    RequestLoggingMiddleware,
    setup_logging,
)


def make_record(message: str = "请求完成", level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="hitl_dashboard.core.lifecycle",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=message,
        args=(),
        exc_info=None,
        func="run",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_data():
    record = make_record(extra_data={"outcome": "timeout", "elapsed_ms": 60000})

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "hitl_dashboard.core.lifecycle"
    assert data["function"] == "run"
    assert data["line"] == 42
    assert data["message"] == "请求完成"
    assert data["extra"] == {"outcome": "timeout", "elapsed_ms": 60000}


def test_json_formatter_without_extra():
    data = json.loads(JSONFormatter().format(make_record()))

    assert "extra" not in data


def test_colored_formatter_location():
    output = ColoredFormatter().format(make_record(level=logging.WARNING))

    assert "WARNING" in output
    assert "hitl_dashboard.core.lifecycle:run:42" in output
    assert output.endswith("请求完成")


def test_request_logging_levels(caplog):
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, logger=logging.getLogger("test.request"))

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    @app.get("/missing")
    async def missing():
        from fastapi import HTTPException
        raise HTTPException(status_code=404)

    with caplog.at_level(logging.INFO, logger="test.request"):
        with TestClient(app) as client:
            client.get("/ok?x=1")
            client.get("/missing")

    records = [r for r in caplog.records if r.name == "test.request"]
    assert records[0].levelno == logging.INFO
    assert records[0].getMessage().startswith("GET /ok?x=1 -> 200")
    assert records[1].levelno == logging.WARNING
    assert "-> 404" in records[1].getMessage()


def test_request_logging_flags_slow_backend(caplog):
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware, logger=logging.getLogger("test.slow"))

    @app.get("/slow")
    async def slow(response: Response):
        response.headers[SLOW_WARNING_HEADER] = "true"
        return {"ok": True}

    with caplog.at_level(logging.INFO, logger="test.slow"):
        with TestClient(app) as client:
            client.get("/slow")

    records = [r for r in caplog.records if r.name == "test.slow"]
    assert records[0].levelno == logging.WARNING
    assert records[0].getMessage().endswith("[slow backend]")


def test_setup_logging_uses_json_format(monkeypatch):
    monkeypatch.setattr(settings, "LOG_FORMAT", "json")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level

    try:
        setup_logging()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
