# hitl_dashboard/schemas/workflow.py
# 工作流数据验证模式
#
# 功能说明：
# 1. 定义后端工作流接口的请求和响应格式
# 2. 后端字段使用 camelCase（riskLevel、createdAt），Mongo 主键为 _id，
#    这里通过 alias 对应，Python 侧统一使用 snake_case
#
# 命名规范：
# - XxxCreate: 创建数据时使用（不包含 id）
# - Xxx: 后端返回的数据（宽松解析，保留未知字段）

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WorkflowType(str, Enum):
    """工作流类型"""
    DEPLOYMENT = "deployment"
    EMAIL_CAMPAIGN = "email_campaign"
    FINANCIAL_TRANSACTION = "financial_transaction"
    CODE_REVIEW = "code_review"
    OTHER = "other"


class RiskLevel(str, Enum):
    """风险等级"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WorkflowStatus(str, Enum):
    """工作流状态（由后端维护）"""
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


# 状态显示名称，未列出的状态原样显示
STATUS_LABELS = {
    WorkflowStatus.PENDING_APPROVAL.value: "pending",
}


def status_label(status: Optional[str]) -> Optional[str]:
    """pending_approval -> pending"""
    return STATUS_LABELS.get(status, status)


class WorkflowCreate(BaseModel):
    """
    创建工作流请求模式

    用于 POST /workflows，默认值与创建表单一致（type=other, riskLevel=medium）
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="工作流名称",
        examples=["Deploy to Production"],
    )
    description: str = Field(
        ...,
        min_length=1,
        description="工作流描述",
        examples=["Roll out release 2.4 to the production cluster"],
    )
    type: WorkflowType = Field(
        default=WorkflowType.OTHER,
        description="工作流类型",
    )
    risk_level: RiskLevel = Field(
        default=RiskLevel.MEDIUM,
        alias="riskLevel",
        description="风险等级",
    )

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    def to_payload(self) -> dict:
        """转换为后端请求体"""
        return self.model_dump(mode="json", by_alias=True)


class WorkflowStatusUpdate(BaseModel):
    """更新工作流状态请求模式，用于 PATCH /workflows/{id}/status"""
    status: WorkflowStatus


class Workflow(BaseModel):
    """后端返回的工作流"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")
    name: str = ""
    description: str = ""
    type: Optional[str] = None
    risk_level: Optional[str] = Field(None, alias="riskLevel")
    status: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class WorkflowListResponse(BaseModel):
    """工作流列表，与后端 {data: [...]} 结构保持一致"""
    data: List[Workflow]
