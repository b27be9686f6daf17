"""Task Domain Model -- 装车任务、计划项、执行项

任务由计划侧创建，核心层只推进 NEW -> IN_PROGRESS。
执行项在任务开始时由计划项播种，之后不再覆盖。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import ExecSource, TaskStatus


class Task(BaseModel):
    """Task 数据模型"""

    id: str = Field(description="唯一标识，UUID 格式")
    task_no: str = Field(description="人工可读任务编号")
    status: TaskStatus = Field(default=TaskStatus.NEW, description="当前状态")
    operator_id: str | None = Field(default=None, description="指派的操作员")
    vehicle_plate: str | None = Field(default=None, description="车牌号")
    created_at: datetime = Field(description="创建时间")
    started_at: datetime | None = Field(default=None, description="开始时间")
    started_by: str | None = Field(default=None, description="开始操作者")


class TaskHeader(BaseModel):
    """任务头信息（执行页面抬头）"""

    id: str
    task_no: str
    status: TaskStatus
    operator_id: str | None = None
    vehicle_plate: str | None = None


class PlanItem(BaseModel):
    """计划项 -- (task, material) 的计划数量，只读种子数据"""

    task_id: str
    material_id: str
    qty: int = Field(default=0, description="计划数量")


class ExecItem(BaseModel):
    """执行项 -- 每个 (task, material) 至多一条，任务开始时写入"""

    task_id: str
    material_id: str
    qty: int = Field(description="起始数量")
    source: ExecSource = Field(default=ExecSource.PLAN, description="来源标签")
    created_at: datetime
