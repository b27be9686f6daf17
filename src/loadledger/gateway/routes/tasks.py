"""任务查询路由

GET /api/tasks/{task_id}: 任务抬头。
GET /api/tasks/{task_id}/summary: 全局汇总（plan / current）。
GET /api/tasks/{task_id}/sessions/summary: 当前操作者的会话汇总。
GET /api/tasks/{task_id}/execute: 执行页面数据（会自动开启会话）。
GET /api/tasks/{task_id}/material-history: 物料操作历史。
"""

from fastapi import APIRouter, Depends, Query
from loadledger.core.errors import ExecutionError
from loadledger.core.models import (
    ExecutionView,
    MaterialHistoryItem,
    SessionSummaryResult,
    SummaryResult,
    TaskHeader,
)
from loadledger.core.service import TaskExecutionService, clamp_history_limit
from pydantic import BaseModel

from ..deps import get_current_actor, get_service

router = APIRouter()


class HistoryMeta(BaseModel):
    limit: int
    count: int


class HistoryResponse(BaseModel):
    """物料操作历史响应"""

    items: list[MaterialHistoryItem]
    meta: HistoryMeta


@router.get("/api/tasks/{task_id}", response_model=TaskHeader)
async def get_task_header(
    task_id: str,
    service: TaskExecutionService = Depends(get_service),
):
    """任务抬头，不存在返回 404"""
    return await service.get_task_header(task_id)


@router.get("/api/tasks/{task_id}/summary", response_model=SummaryResult)
async def get_task_summary(
    task_id: str,
    service: TaskExecutionService = Depends(get_service),
):
    return await service.get_task_exec_summary(task_id)


@router.get("/api/tasks/{task_id}/sessions/summary", response_model=SessionSummaryResult)
async def get_session_summary(
    task_id: str,
    session_id: str | None = Query(default=None, description="显式指定会话"),
    actor_id: str | None = Depends(get_current_actor),
    service: TaskExecutionService = Depends(get_service),
):
    if actor_id is None:
        raise ExecutionError.forbidden("Actor not identified")
    return await service.get_task_exec_summary_for_operator_session(
        task_id, actor_id, session_id
    )


@router.get("/api/tasks/{task_id}/execute", response_model=ExecutionView)
async def open_execution_view(
    task_id: str,
    actor_id: str | None = Depends(get_current_actor),
    service: TaskExecutionService = Depends(get_service),
):
    """执行页面：有操作者时开启新会话"""
    return await service.open_execution_view(task_id, actor_id)


@router.get("/api/tasks/{task_id}/material-history", response_model=HistoryResponse)
async def get_material_history(
    task_id: str,
    limit: str | None = Query(default=None),
    service: TaskExecutionService = Depends(get_service),
):
    """物料操作历史，新到旧；limit 非法时取 50，最大 200"""
    effective_limit = clamp_history_limit(limit)
    items = await service.list_material_history(task_id, effective_limit)
    return HistoryResponse(
        items=items,
        meta=HistoryMeta(limit=effective_limit, count=len(items)),
    )
