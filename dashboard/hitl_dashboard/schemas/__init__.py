# hitl_dashboard/schemas/__init__.py
# Pydantic Schema 包
#
# 使用方式：from hitl_dashboard.schemas import Workflow, WorkflowCreate

from hitl_dashboard.schemas.workflow import (
    WorkflowType,
    RiskLevel,
    WorkflowStatus,
    WorkflowCreate,
    WorkflowStatusUpdate,
    Workflow,
    WorkflowListResponse,
    status_label,
)
from hitl_dashboard.schemas.approval import (
    Approval,
    ApprovalDecision,
)
from hitl_dashboard.schemas.dashboard import (
    DashboardStats,
    ActivityItem,
    DashboardResponse,
)

__all__ = [
    "WorkflowType",
    "RiskLevel",
    "WorkflowStatus",
    "WorkflowCreate",
    "WorkflowStatusUpdate",
    "Workflow",
    "WorkflowListResponse",
    "status_label",
    "Approval",
    "ApprovalDecision",
    "DashboardStats",
    "ActivityItem",
    "DashboardResponse",
]
