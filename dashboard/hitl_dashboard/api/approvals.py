# hitl_dashboard/api/approvals.py
# 审批 API 端点
#
# API 列表：
# - GET  /api/approvals/pending        - 待审批列表
# - GET  /api/approvals                - 所有审批记录
# - GET  /api/approvals/{id}           - 审批详情
# - POST /api/approvals/{id}/approve   - 审批通过
# - POST /api/approvals/{id}/reject    - 审批拒绝

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Response

from hitl_dashboard.api.deps import run_backend_call
from hitl_dashboard.client.api import BackendClient, get_backend_client
from hitl_dashboard.core.logging import get_logger
from hitl_dashboard.schemas.approval import Approval, ApprovalDecision

logger = get_logger(__name__)

router = APIRouter(prefix="/api/approvals", tags=["Approvals"])


@router.get("/pending", response_model=List[Approval])
async def list_pending_approvals(
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """获取待审批列表"""
    return await run_backend_call(client.approvals.get_pending, response, "pending approvals")


@router.get("", response_model=List[Approval])
async def list_approvals(
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """获取所有审批记录"""
    return await run_backend_call(client.approvals.get_all, response, "list approvals")


@router.get("/{approval_id}", response_model=Approval)
async def get_approval(
    approval_id: str,
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """获取审批详情"""
    return await run_backend_call(
        lambda: client.approvals.get_by_id(approval_id),
        response,
        "get approval",
    )


@router.post("/{approval_id}/approve", response_model=Approval)
async def approve(
    approval_id: str,
    response: Response,
    decision: Optional[ApprovalDecision] = Body(None),
    client: BackendClient = Depends(get_backend_client),
):
    """审批通过"""
    logger.info(f"审批通过: {approval_id}")
    return await run_backend_call(
        lambda: client.approvals.approve(approval_id, decision),
        response,
        "approve",
    )


@router.post("/{approval_id}/reject", response_model=Approval)
async def reject(
    approval_id: str,
    response: Response,
    decision: Optional[ApprovalDecision] = Body(None),
    client: BackendClient = Depends(get_backend_client),
):
    """审批拒绝"""
    logger.info(f"审批拒绝: {approval_id}")
    return await run_backend_call(
        lambda: client.approvals.reject(approval_id, decision),
        response,
        "reject",
    )
