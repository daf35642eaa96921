# hitl_dashboard/api/dashboard.py
# 仪表盘 API
#
# API 列表：
# - GET /api/dashboard - 工作流统计 + 最近动态

from fastapi import APIRouter, Depends, Response

from hitl_dashboard.api.deps import lifecycle_callbacks, mark_slow_response
from hitl_dashboard.client.api import BackendClient, get_backend_client
from hitl_dashboard.core.lifecycle import RequestLifecycleController
from hitl_dashboard.schemas.dashboard import DashboardResponse
from hitl_dashboard.services.dashboard import load_dashboard

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    response: Response,
    client: BackendClient = Depends(get_backend_client),
):
    """
    获取仪表盘数据

    统计 pending_approval / approved / rejected 数量，
    最近动态按创建时间倒序取前 5 条
    """
    controller = RequestLifecycleController()
    dashboard = await load_dashboard(client, controller, **lifecycle_callbacks("dashboard"))
    mark_slow_response(response, controller)
    return dashboard
