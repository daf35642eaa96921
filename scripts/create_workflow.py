#!/usr/bin/env python3
# scripts/create_workflow.py
# 命令行创建工作流
#
# 功能说明：
# 1. 提交一个新的工作流到审批后端
# 2. 超过 5 秒未返回时提示"后端可能正在唤醒"
# 3. 失败时输出分类后的错误信息，退出码为 1
#
# 使用方法：
#   python scripts/create_workflow.py --name "Deploy to Production" \
#       --description "Roll out release 2.4" --type deployment --risk-level high

import asyncio
import argparse
import sys
import os

# 将 dashboard 目录添加到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'dashboard'))

from pydantic import ValidationError

from hitl_dashboard.client.api import BackendClient
from hitl_dashboard.core.errors import ClassifiedError, SLOW_WARNING_MESSAGE
from hitl_dashboard.core.lifecycle import RequestLifecycleController
from hitl_dashboard.core.logging import setup_logging
from hitl_dashboard.schemas.workflow import RiskLevel, WorkflowCreate, WorkflowType


async def create_workflow(name: str, description: str, workflow_type: str, risk_level: str) -> bool:
    """
    创建工作流

    Returns:
        bool: 是否创建成功
    """
    try:
        data = WorkflowCreate(
            name=name,
            description=description,
            type=workflow_type,
            risk_level=risk_level,
        )
    except ValidationError as e:
        print(f"❌ 参数错误: {e}")
        return False

    controller = RequestLifecycleController()

    async with BackendClient() as client:
        try:
            workflow = await controller.run(
                lambda: client.workflows.create(data),
                on_warning=lambda: print(f"⏳ {SLOW_WARNING_MESSAGE}"),
            )
        except ClassifiedError as e:
            print(f"❌ {e.message}")
            return False

    print("✅ Workflow created successfully!")
    print(f"   ID:     {workflow.id}")
    print(f"   名称:   {workflow.name}")
    print(f"   状态:   {workflow.status}")
    return True


def main():
    parser = argparse.ArgumentParser(description="创建需要审批的工作流")
    parser.add_argument("--name", required=True, help="工作流名称")
    parser.add_argument("--description", required=True, help="工作流描述")
    parser.add_argument(
        "--type",
        default=WorkflowType.OTHER.value,
        choices=[t.value for t in WorkflowType],
        help="工作流类型",
    )
    parser.add_argument(
        "--risk-level",
        default=RiskLevel.MEDIUM.value,
        choices=[r.value for r in RiskLevel],
        help="风险等级",
    )

    args = parser.parse_args()

    setup_logging()
    ok = asyncio.run(create_workflow(args.name, args.description, args.type, args.risk_level))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
