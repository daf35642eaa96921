# tests/conftest.py
# Pytest 配置文件
#
# 功能：
# 1. 把 dashboard 目录加入 Python 路径
# 2. 提供工作流数据工厂和模拟后端 transport

import os
import sys
import json

import httpx
import pytest

# 将 dashboard 目录添加到 Python 路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ==================== 数据工厂 ====================

@pytest.fixture
def make_workflow():
    """创建后端工作流 JSON 的工厂函数"""
    counter = {"n": 0}

    def _make(
        name: str = "Deploy to Production",
        status: str = "pending_approval",
        created_at: str = "2026-10-19T10:00:00Z",
        updated_at=None,
        **extra,
    ) -> dict:
        counter["n"] += 1
        data = {
            "_id": f"wf-{counter['n']}",
            "name": name,
            "description": "test workflow",
            "type": "deployment",
            "riskLevel": "high",
            "status": status,
            "createdAt": created_at,
        }
        if updated_at is not None:
            data["updatedAt"] = updated_at
        data.update(extra)
        return data

    return _make


# ==================== 模拟后端 ====================

class FakeBackend:
    """
    模拟审批后端

    routes: {(method, path): handler 或 (status, body)}
    requests: 收到的请求列表
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method: str, path: str, status: int = 200, body=None):
        self.routes[(method, path)] = (status, body)

    def add_handler(self, method: str, path: str, handler):
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def json_body(self, index: int = -1):
        return json.loads(self.requests[index].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_backend():
    """模拟后端"""
    return FakeBackend()
