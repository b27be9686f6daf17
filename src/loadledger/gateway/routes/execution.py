"""任务执行路由 -- 开始任务、写入增量、开启会话

POST /api/tasks/{task_id}/start
POST /api/tasks/{task_id}/materials/{material_id}/delta
POST /api/tasks/{task_id}/sessions
- 404: 任务/物料不存在
- 403: 非指派操作员 / 操作者未识别
- 409: 输入越界、状态不允许、减量守卫
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from loadledger.core.errors import ExecutionError
from loadledger.core.models import (
    DeltaRequest,
    SessionResult,
    SessionSummaryItem,
    StartResult,
)
from loadledger.core.service import TaskExecutionService
from pydantic import BaseModel, Field

from ..deps import get_current_actor, get_service

router = APIRouter()


class StartBody(BaseModel):
    """开始任务请求体（可选，缺省使用当前操作者）"""

    operator_id: str | None = None


class DeltaBody(BaseModel):
    """增量请求体"""

    action_id: str | None = Field(default=None, description="幂等键，建议客户端生成 UUID")
    delta: Any = None
    actor_id: str | None = Field(default=None, description="优先于当前操作者")


class DeltaResponse(BaseModel):
    ok: bool
    idempotent: bool
    item: SessionSummaryItem | None = Field(
        default=None,
        description="写入后该物料的会话汇总行",
    )


@router.post("/api/tasks/{task_id}/start", response_model=StartResult)
async def start_task(
    task_id: str,
    body: StartBody | None = Body(default=None),
    actor_id: str | None = Depends(get_current_actor),
    service: TaskExecutionService = Depends(get_service),
):
    operator_id = (body.operator_id if body else None) or actor_id
    if not operator_id:
        raise ExecutionError.forbidden("Actor not identified")
    return await service.start_task(task_id, operator_id)


@router.post(
    "/api/tasks/{task_id}/materials/{material_id}/delta",
    response_model=DeltaResponse,
)
async def apply_delta(
    task_id: str,
    material_id: str,
    body: DeltaBody,
    actor_id: str | None = Depends(get_current_actor),
    service: TaskExecutionService = Depends(get_service),
):
    """写入增量并返回该物料刷新后的会话汇总行"""
    effective_actor = (body.actor_id or "").strip() or actor_id
    result = await service.apply_delta(
        DeltaRequest(
            action_id=body.action_id,
            task_id=task_id,
            material_id=material_id,
            actor_id=effective_actor,
            delta=body.delta,
        )
    )

    summary = await service.get_task_exec_summary_for_operator_session(
        task_id, effective_actor
    )
    item = next((x for x in summary.items if x.material_id == material_id), None)

    return DeltaResponse(ok=result.ok, idempotent=result.idempotent, item=item)


@router.post("/api/tasks/{task_id}/sessions", response_model=SessionResult)
async def create_session(
    task_id: str,
    actor_id: str | None = Depends(get_current_actor),
    service: TaskExecutionService = Depends(get_service),
):
    """开启操作员会话；未知操作者返回 ok=false, reason=no_user"""
    if actor_id is None:
        raise ExecutionError.forbidden("Actor not identified")
    return await service.create_operator_session(task_id, actor_id)
