# hitl_dashboard/client/api.py
# 审批后端 API 客户端
#
# 功能说明：
# 1. 封装 httpx.AsyncClient，统一 base_url、超时（冷启动需要 60 秒）和 JSON 请求头
# 2. 通过 event hook 记录每个请求/响应
# 3. 在传输边界把 httpx 错误归类为 ClassifiedError（见 core/errors.py）
# 4. 按资源提供 workflows / approvals 两组接口
#
# 使用方法：
#   async with BackendClient() as client:
#       workflows = await client.workflows.get_all()
#
#   # FastAPI 中使用全局实例（在 lifespan 中 connect/close）
#   client: BackendClient = Depends(get_backend_client)

from typing import Any, List, Optional

import httpx

from hitl_dashboard.core.config import settings
from hitl_dashboard.core.errors import ClassifiedError, classify_error
from hitl_dashboard.core.logging import get_logger
from hitl_dashboard.schemas.approval import Approval, ApprovalDecision
from hitl_dashboard.schemas.workflow import (
    Workflow,
    WorkflowCreate,
    WorkflowStatus,
)

logger = get_logger(__name__)


class BackendClient:
    """
    审批后端 HTTP 客户端

    Args:
        base_url: 后端地址，默认读取 API_BASE_URL
        timeout: 请求超时（秒），默认读取 API_TIMEOUT_SECONDS
        transport: 自定义 httpx transport（测试时传入 MockTransport）
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = settings.API_TIMEOUT_SECONDS if timeout is None else timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self.workflows = WorkflowAPI(self)
        self.approvals = ApprovalAPI(self)

    async def connect(self) -> None:
        """创建底层 httpx 客户端"""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
            event_hooks={
                "request": [self._log_request],
                "response": [self._log_response],
            },
        )
        logger.info(f"后端客户端已创建: {self.base_url} (timeout={self.timeout:g}s)")

    async def close(self) -> None:
        """关闭底层 httpx 客户端"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BackendClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> httpx.AsyncClient:
        """获取底层 httpx 客户端"""
        if self._client is None:
            raise RuntimeError("Backend client not connected. Call connect() first.")
        return self._client

    # ==================== 日志 hook ====================

    async def _log_request(self, request: httpx.Request) -> None:
        logger.info(f"API Request: {request.method} {request.url}")

    async def _log_response(self, response: httpx.Response) -> None:
        logger.info(f"API Response: {response.status_code} {response.request.url}")

    # ==================== 请求 ====================

    async def request(
        self,
        method: str,
        url: str,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        """
        发送请求

        非 2xx 响应与传输错误都会被归类后抛出

        Raises:
            ClassifiedError: 请求失败
        """
        try:
            response = await self.client.request(method, url, json=json)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            classified = classify_error(e)
            self._log_failure(classified, e)
            raise classified from e

    def _log_failure(self, error: ClassifiedError, raw: httpx.HTTPError) -> None:
        if isinstance(raw, httpx.HTTPStatusError):
            logger.error(
                f"API Error: {raw.response.status_code} {raw.request.url} - {raw.response.text[:500]}"
            )
        else:
            logger.error(f"API {error.kind.value}: {type(raw).__name__}: {raw}")

    async def get(self, url: str) -> Any:
        return _json_or_none(await self.request("GET", url))

    async def post(self, url: str, data: Optional[Any] = None) -> Any:
        return _json_or_none(await self.request("POST", url, json=data))

    async def patch(self, url: str, data: Optional[Any] = None) -> Any:
        return _json_or_none(await self.request("PATCH", url, json=data))

    async def delete(self, url: str) -> Any:
        return _json_or_none(await self.request("DELETE", url))


def _json_or_none(response: httpx.Response) -> Any:
    """解析 JSON 响应，空响应（如 204）返回 None"""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _unwrap_list(payload: Any) -> Optional[list]:
    """
    从响应中取出列表

    支持 [...] 和 {"data": [...]} 两种结构，都不是时返回 None
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return None


def _unwrap_item(payload: Any) -> Any:
    """单个资源可能被包在 {"data": {...}} 里"""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload


# ==================== Workflow APIs ====================

class WorkflowAPI:
    """工作流接口"""

    def __init__(self, backend: BackendClient):
        self._backend = backend

    async def get_all(self) -> List[Workflow]:
        """
        获取所有工作流

        后端返回 {data: Workflow[]}；data 不是数组时记录错误并返回空列表
        """
        payload = await self._backend.get("/workflows")
        items = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            logger.error(f"Workflows is not an array: {payload!r}"[:500])
            return []
        return [Workflow.model_validate(item) for item in items]

    async def get_by_id(self, workflow_id: str) -> Workflow:
        payload = await self._backend.get(f"/workflows/{workflow_id}")
        return Workflow.model_validate(_unwrap_item(payload))

    async def create(self, data: WorkflowCreate) -> Workflow:
        payload = await self._backend.post("/workflows", data.to_payload())
        workflow = Workflow.model_validate(_unwrap_item(payload))
        logger.info(f"Workflow created: {workflow.id} ({workflow.name})")
        return workflow

    async def update_status(self, workflow_id: str, status: WorkflowStatus) -> Workflow:
        payload = await self._backend.patch(
            f"/workflows/{workflow_id}/status",
            {"status": WorkflowStatus(status).value},
        )
        return Workflow.model_validate(_unwrap_item(payload))

    async def delete(self, workflow_id: str) -> None:
        await self._backend.delete(f"/workflows/{workflow_id}")


# ==================== Approval APIs ====================

class ApprovalAPI:
    """审批接口"""

    def __init__(self, backend: BackendClient):
        self._backend = backend

    async def _list(self, url: str) -> List[Approval]:
        payload = await self._backend.get(url)
        items = _unwrap_list(payload)
        if items is None:
            logger.error(f"Approvals is not an array: {payload!r}"[:500])
            return []
        return [Approval.model_validate(item) for item in items]

    async def get_pending(self) -> List[Approval]:
        return await self._list("/approvals/pending")

    async def get_all(self) -> List[Approval]:
        return await self._list("/approvals")

    async def get_by_id(self, approval_id: str) -> Approval:
        payload = await self._backend.get(f"/approvals/{approval_id}")
        return Approval.model_validate(_unwrap_item(payload))

    async def approve(
        self,
        approval_id: str,
        decision: Optional[ApprovalDecision] = None,
    ) -> Approval:
        body = (decision or ApprovalDecision()).to_payload()
        payload = await self._backend.post(f"/approvals/{approval_id}/approve", body)
        return Approval.model_validate(_unwrap_item(payload))

    async def reject(
        self,
        approval_id: str,
        decision: Optional[ApprovalDecision] = None,
    ) -> Approval:
        body = (decision or ApprovalDecision()).to_payload()
        payload = await self._backend.post(f"/approvals/{approval_id}/reject", body)
        return Approval.model_validate(_unwrap_item(payload))


# 全局客户端实例，在 main.py 的 lifespan 中 connect/close
backend_client = BackendClient()


async def get_backend_client() -> BackendClient:
    """Dependency to get the backend client"""
    return backend_client
