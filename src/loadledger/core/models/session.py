"""Operator Session Domain Model -- 操作员会话与会话起点快照

同一 (task, operator) 可有多个会话，started_at 最新者为当前会话。
快照在会话创建时写入，之后不再修改。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class OperatorSession(BaseModel):
    """操作员在某任务上的一次激活"""

    id: str = Field(description="唯一标识，UUID 格式")
    task_id: str
    operator_id: str
    started_at: datetime = Field(description="会话开始时间，也是 added 统计的下界")


class OperatorSnapshot(BaseModel):
    """会话起点时某物料的全局数量"""

    session_id: str
    material_id: str
    start_qty: int
    created_at: datetime
