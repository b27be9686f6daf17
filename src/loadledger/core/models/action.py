"""Execution Action Domain Model -- 账本条目

账本表 append-only，不允许更新或删除。
action_id 同时是幂等键。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ExecAction(BaseModel):
    """账本条目 -- 对单个物料数量的一次带符号调整"""

    action_id: str = Field(description="唯一标识兼幂等键，UUID 格式")
    task_id: str = Field(description="关联的 Task ID")
    material_id: str = Field(description="关联的物料 ID")
    actor_id: str = Field(description="操作者 ID")
    delta: int = Field(description="带符号整数增量")
    created_at: datetime = Field(description="写入时间戳")
