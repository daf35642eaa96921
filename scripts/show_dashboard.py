#!/usr/bin/env python3
# scripts/show_dashboard.py
# 命令行查看仪表盘
#
# 使用方法：
#   python scripts/show_dashboard.py

import asyncio
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'dashboard'))

from hitl_dashboard.client.api import BackendClient
from hitl_dashboard.core.errors import ClassifiedError, SLOW_WARNING_MESSAGE
from hitl_dashboard.core.logging import setup_logging
from hitl_dashboard.services.dashboard import load_dashboard


async def show_dashboard() -> bool:
    async with BackendClient() as client:
        try:
            dashboard = await load_dashboard(
                client,
                on_warning=lambda: print(f"⏳ {SLOW_WARNING_MESSAGE}"),
            )
        except ClassifiedError as e:
            print(f"❌ {e.message}")
            return False

    stats = dashboard.stats

    print("=" * 50)
    print(f"Total: {stats.total}  Pending: {stats.pending}  "
          f"Approved: {stats.approved}  Rejected: {stats.rejected}")
    print("=" * 50)

    if not dashboard.recent_activity:
        print("No recent activity")
    for item in dashboard.recent_activity:
        print(f"  [{item.status}] {item.name} - {item.time}")

    return True


if __name__ == "__main__":
    setup_logging()
    sys.exit(0 if asyncio.run(show_dashboard()) else 1)
