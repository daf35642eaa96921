# hitl_dashboard/client/__init__.py
# 审批后端 API 客户端包

from hitl_dashboard.client.api import (
    BackendClient,
    WorkflowAPI,
    ApprovalAPI,
    backend_client,
    get_backend_client,
)

__all__ = [
    "BackendClient",
    "WorkflowAPI",
    "ApprovalAPI",
    "backend_client",
    "get_backend_client",
]
