# hitl_dashboard/schemas/approval.py
# 审批数据验证模式

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Approval(BaseModel):
    """后端返回的审批记录"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")
    # 后端可能返回工作流 ID，也可能返回展开后的工作流对象
    workflow_id: Optional[Any] = Field(None, alias="workflowId")
    status: Optional[str] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class ApprovalDecision(BaseModel):
    """
    审批通过/拒绝请求模式

    用于 POST /approvals/{id}/approve 和 /approvals/{id}/reject
    """
    comments: Optional[str] = Field(None, description="审批意见或拒绝原因")
    reviewer: Optional[str] = Field(None, description="审批人")

    def to_payload(self) -> dict:
        """未填写的字段不发送"""
        return self.model_dump(exclude_none=True)
