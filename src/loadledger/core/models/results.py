"""操作入参与返回结构 -- 核心层对外接口的数据形状

所有读视图与写结果都以 ok 字段开头，便于边界层直接序列化。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .task import TaskHeader


class DeltaRequest(BaseModel):
    """单次增量提交

    字段均可缺省：缺失与格式问题由增量引擎按顺序校验并给出领域错误，
    而不是在反序列化阶段失败。
    """

    action_id: str | None = Field(default=None, description="幂等键，建议 UUID")
    task_id: str | None = None
    material_id: str | None = None
    actor_id: str | None = None
    delta: Any = Field(default=None, description="原始增量值，需可解析为整数")


class StartResult(BaseModel):
    """任务开始结果"""

    ok: bool = True


class DeltaResult(BaseModel):
    """增量写入结果"""

    ok: bool = True
    idempotent: bool = Field(description="True 表示幂等命中，未写入新行")


class SessionResult(BaseModel):
    """会话创建结果 -- 未知操作者时 ok=False, reason="no_user"，不抛异常"""

    ok: bool
    session_id: str | None = None
    reason: str | None = None


class SummaryItem(BaseModel):
    """全局汇总行"""

    material_id: str
    number: int
    name: str
    unit: str
    image_url: str | None = None
    active: bool = True
    plan: int = Field(description="执行项起始数量")
    current: int = Field(description="plan + 全部增量")


class SessionSummaryItem(SummaryItem):
    """会话汇总行"""

    before: int = Field(description="会话起点快照")
    added: int = Field(description="本操作员自会话开始以来的增量之和")


class SummaryResult(BaseModel):
    ok: bool = True
    items: list[SummaryItem] = Field(default_factory=list)


class SessionSummaryResult(BaseModel):
    ok: bool = True
    items: list[SessionSummaryItem] = Field(default_factory=list)
    session_id: str | None = None


class MaterialHistoryItem(BaseModel):
    """物料操作历史行（新到旧）"""

    action_id: str
    created_at: datetime
    delta: int
    actor_id: str
    actor_name: str | None = None
    material_id: str
    material_number: int | None = None
    material_name: str | None = None


class ExecutionView(BaseModel):
    """执行页面数据：抬头 + 汇总

    有会话时 items 为会话汇总行，否则为全局汇总行。
    """

    header: TaskHeader
    actor_id: str | None = None
    session_id: str | None = None
    items: list[SessionSummaryItem] | list[SummaryItem] = Field(default_factory=list)
