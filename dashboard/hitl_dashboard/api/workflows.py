# hitl_dashboard/api/workflows.py
# 工作流 API 端点
#
# 功能说明：
# 转发到审批后端的工作流接口，每次调用都经过 RequestLifecycleController：
# 慢请求会在响应头中标记，失败会返回分类后的错误信息。
#
# API 列表：
# - GET    /api/workflows               - 工作流列表
# - GET    /api/workflows/{id}          - 工作流详情
# - POST   /api/workflows               - 创建工作流
# - PATCH  /api/workflows/{id}/status   - 更新工作流状态
# - DELETE /api/workflows/{id}          - 删除工作流

from fastapi import APIRouter, Depends, Response, status

from hitl_dashboard.api.deps import run_backend_call
from hitl_dashboard.client.api import BackendClient, get_backend_client
from hitl_dashboard.core.logging import get_logger
from hitl_dashboard.schemas.workflow import (
    Workflow,
    WorkflowCreate,
    WorkflowListResponse,
    WorkflowStatusUpdate,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/workflows",
    tags=["Workflows"],
)


@router.get("", response_model=WorkflowListResponse)
async def list_workflows(
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """获取所有工作流"""
    workflows = await run_backend_call(client.workflows.get_all, response, "list workflows")
    return WorkflowListResponse(data=workflows)


@router.get("/{workflow_id}", response_model=Workflow)
async def get_workflow(
    workflow_id: str,
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """获取工作流详情"""
    return await run_backend_call(
        lambda: client.workflows.get_by_id(workflow_id),
        response,
        "get workflow",
    )


@router.post(
    "",
    response_model=Workflow,
    status_code=status.HTTP_201_CREATED,
    summary="创建工作流",
    description="创建一个需要人工审批的工作流，后端冷启动时可能需要 30-50 秒",
)
async def create_workflow(
    data: WorkflowCreate,
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """
    创建工作流

    Args:
        data: name、description、type、riskLevel

    Returns:
        Workflow: 后端创建的工作流
    """
    logger.info(f"创建工作流: {data.name} (type={data.type.value}, risk={data.risk_level.value})")
    return await run_backend_call(
        lambda: client.workflows.create(data),
        response,
        "create workflow",
    )


@router.patch("/{workflow_id}/status", response_model=Workflow)
async def update_workflow_status(
    workflow_id: str,
    data: WorkflowStatusUpdate,
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """更新工作流状态"""
    logger.info(f"更新工作流状态: {workflow_id} -> {data.status.value}")
    return await run_backend_call(
        lambda: client.workflows.update_status(workflow_id, data.status),
        response,
        "update workflow status",
    )


@router.delete("/{workflow_id}")
async def delete_workflow(
    workflow_id: str,
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """删除工作流"""
    logger.info(f"删除工作流: {workflow_id}")
    await run_backend_call(
        lambda: client.workflows.delete(workflow_id),
        response,
        "delete workflow",
    )
    return {"success": True, "message": "Workflow deleted"}
