# hitl_dashboard/services/dashboard.py
# 仪表盘统计服务
#
# 功能说明：
# 1. 按状态统计工作流数量
# 2. 生成最近动态（按创建时间倒序取前 N 条）
# 3. 相对时间格式化（just now / N minutes ago / ...）
#
# 使用方法：
#   from hitl_dashboard.services.dashboard import load_dashboard
#   dashboard = await load_dashboard(backend_client, RequestLifecycleController())

from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from hitl_dashboard.client.api import BackendClient
from hitl_dashboard.core.config import settings
from hitl_dashboard.core.lifecycle import RequestLifecycleController
from hitl_dashboard.core.logging import get_logger
from hitl_dashboard.schemas.dashboard import (
    ActivityItem,
    DashboardResponse,
    DashboardStats,
)
from hitl_dashboard.schemas.workflow import Workflow, WorkflowStatus, status_label

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    """无时区的时间按 UTC 处理"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_time_ago(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    相对时间格式化

    - 不到 1 分钟: just now
    - 不到 1 小时: N minutes ago
    - 不到 1 天:   N hours ago
    - 不到 7 天:   N days ago
    - 更早:        日期（YYYY-MM-DD）
    """
    if value is None:
        return "unknown"

    value = _as_utc(value)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    seconds = int((now - value).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    if seconds < 604800:
        return f"{seconds // 86400} days ago"
    return value.date().isoformat()


def compute_stats(workflows: Iterable[Workflow]) -> DashboardStats:
    """按状态统计工作流数量"""
    workflows = list(workflows)
    statuses = [w.status for w in workflows]
    return DashboardStats(
        total=len(workflows),
        pending=statuses.count(WorkflowStatus.PENDING_APPROVAL.value),
        approved=statuses.count(WorkflowStatus.APPROVED.value),
        rejected=statuses.count(WorkflowStatus.REJECTED.value),
    )


def recent_activity(
    workflows: Iterable[Workflow],
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[ActivityItem]:
    """
    最近动态

    按 createdAt 倒序（没有创建时间的排在最后），取前 limit 条
    """
    limit = settings.RECENT_ACTIVITY_LIMIT if limit is None else limit
    workflows = list(workflows)

    dated = [w for w in workflows if w.created_at is not None]
    undated = [w for w in workflows if w.created_at is None]
    dated.sort(key=lambda w: _as_utc(w.created_at), reverse=True)

    return [
        ActivityItem(
            id=w.id,
            name=w.name,
            status=status_label(w.status),
            time=format_time_ago(w.updated_at or w.created_at, now=now),
        )
        for w in (dated + undated)[:limit]
    ]


def build_dashboard(
    workflows: List[Workflow],
    now: Optional[datetime] = None,
) -> DashboardResponse:
    stats = compute_stats(workflows)
    logger.debug(
        f"Calculated stats: total={stats.total} pending={stats.pending} "
        f"approved={stats.approved} rejected={stats.rejected}"
    )
    return DashboardResponse(
        stats=stats,
        recent_activity=recent_activity(workflows, now=now),
    )


async def load_dashboard(
    client: BackendClient,
    controller: Optional[RequestLifecycleController] = None,
    on_warning: Optional[Callable[[], None]] = None,
    on_settled: Optional[Callable[[], None]] = None,
) -> DashboardResponse:
    """
    拉取工作流列表并生成仪表盘数据

    Args:
        client: 已连接的后端客户端
        controller: 生命周期控制器，默认新建一个
        on_warning: 慢请求提示回调
        on_settled: 请求结束回调

    Raises:
        ClassifiedError: 拉取失败
    """
    controller = controller or RequestLifecycleController()
    logger.info("Fetching dashboard data...")
    workflows = await controller.run(
        client.workflows.get_all,
        on_warning=on_warning,
        on_settled=on_settled,
    )
    logger.info(f"Fetched {len(workflows)} workflows")
    return build_dashboard(workflows)
