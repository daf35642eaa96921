# hitl_dashboard/schemas/dashboard.py
# 仪表盘响应模式

from typing import List, Optional

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """工作流统计"""
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class ActivityItem(BaseModel):
    """最近动态条目"""
    id: Optional[str] = None
    name: str
    status: Optional[str] = Field(None, description="显示状态，pending_approval 显示为 pending")
    time: str = Field(..., description="相对时间，如 5 minutes ago")


class DashboardResponse(BaseModel):
    """GET /api/dashboard 响应"""
    stats: DashboardStats
    recent_activity: List[ActivityItem]
