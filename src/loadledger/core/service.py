"""TaskExecutionService -- 核心层对外的操作集合

边界层（HTTP 路由、CLI）只通过此类调用核心，不直接触碰 Store。
"""

import structlog

from . import lifecycle, ledger, reconciler, sessions
from .config import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT
from .errors import ExecutionError
from .models.catalog import Material
from .models.results import (
    DeltaRequest,
    DeltaResult,
    ExecutionView,
    MaterialHistoryItem,
    SessionResult,
    SessionSummaryResult,
    StartResult,
    SummaryResult,
)
from .models.task import TaskHeader
from .store import StoreGroup

log = structlog.get_logger()


def clamp_history_limit(raw: int | str | None) -> int:
    """非法或非正数取默认值，上限 HISTORY_MAX_LIMIT"""
    try:
        limit = int(raw) if raw is not None else HISTORY_DEFAULT_LIMIT
    except (TypeError, ValueError):
        return HISTORY_DEFAULT_LIMIT
    if limit <= 0:
        return HISTORY_DEFAULT_LIMIT
    return min(limit, HISTORY_MAX_LIMIT)


class TaskExecutionService:
    """任务执行业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def start_task(self, task_id: str, operator_id: str) -> StartResult:
        return await lifecycle.start_task(self._stores, task_id, operator_id)

    async def apply_delta(self, request: DeltaRequest) -> DeltaResult:
        return await ledger.apply_delta(self._stores, request)

    async def get_task_exec_summary(self, task_id: str) -> SummaryResult:
        return await reconciler.get_task_exec_summary(self._stores, task_id)

    async def create_operator_session(
        self, task_id: str, operator_id: str
    ) -> SessionResult:
        return await sessions.create_operator_session(self._stores, task_id, operator_id)

    async def get_task_exec_summary_for_operator_session(
        self,
        task_id: str,
        operator_id: str,
        session_id: str | None = None,
    ) -> SessionSummaryResult:
        return await reconciler.get_task_exec_summary_for_operator_session(
            self._stores, task_id, operator_id, session_id
        )

    async def get_task_header(self, task_id: str) -> TaskHeader:
        return await lifecycle.get_task_header(self._stores, task_id)

    async def list_material_history(
        self,
        task_id: str,
        limit: int | str | None = None,
    ) -> list[MaterialHistoryItem]:
        """任务的物料操作历史（新到旧）

        Raises:
            ExecutionError: NOT_FOUND 任务不存在
        """
        async with self._stores.snapshot() as uow:
            if await uow.task_store.get_header(task_id) is None:
                raise ExecutionError.not_found("Task not found")
            return await uow.ledger_store.list_history(task_id, clamp_history_limit(limit))

    async def list_materials(self) -> list[Material]:
        """物料目录（含停用物料）"""
        async with self._stores.snapshot() as uow:
            return await uow.catalog_store.list_materials()

    async def open_execution_view(
        self,
        task_id: str,
        actor_id: str | None,
    ) -> ExecutionView:
        """进入执行页面

        有操作者时开启新会话并返回会话汇总；操作者未知时退回全局汇总。

        Raises:
            ExecutionError: NOT_FOUND 任务不存在
        """
        header = await self.get_task_header(task_id)

        if actor_id:
            session = await self.create_operator_session(task_id, actor_id)
            if session.ok:
                summary = await self.get_task_exec_summary_for_operator_session(
                    task_id, actor_id, session.session_id
                )
                return ExecutionView(
                    header=header,
                    actor_id=actor_id,
                    session_id=summary.session_id,
                    items=summary.items,
                )
            await log.ainfo(
                "execution_view_without_session",
                task_id=task_id,
                actor_id=actor_id,
            )

        fallback = await self.get_task_exec_summary(task_id)
        return ExecutionView(header=header, actor_id=actor_id, items=fallback.items)
