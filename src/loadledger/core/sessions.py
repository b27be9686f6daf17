"""操作员会话管理 -- 创建会话并记录起点快照

快照值为会话创建时刻每个启用物料的全局数量（执行项起始数量 + 全部增量）。
"""

import uuid

import structlog

from .errors import ExecutionError
from .models.results import SessionResult
from .models.session import OperatorSession, OperatorSnapshot
from .store import StoreGroup
from .store.common import utc_now

log = structlog.get_logger()

NO_USER = "no_user"


async def create_operator_session(
    stores: StoreGroup,
    task_id: str,
    operator_id: str,
) -> SessionResult:
    """为 (task, operator) 创建新会话

    未知操作者返回 ok=False, reason="no_user"，调用方应退回无会话汇总。

    Raises:
        ExecutionError: NOT_FOUND 任务不存在
    """
    async with stores.snapshot() as uow:
        known = await uow.catalog_store.actor_exists(operator_id)
    if not known:
        await log.ainfo("operator_session_no_user", task_id=task_id, operator_id=operator_id)
        return SessionResult(ok=False, reason=NO_USER)

    async with stores.transaction() as uow:
        if await uow.task_store.get_task(task_id) is None:
            raise ExecutionError.not_found("Task not found")

        now = utc_now()
        session = OperatorSession(
            id=str(uuid.uuid4()),
            task_id=task_id,
            operator_id=operator_id,
            started_at=now,
        )
        await uow.session_store.create_session(session)

        plan = await uow.task_store.get_plan_quantities(task_id)
        totals = await uow.ledger_store.sum_deltas(task_id)
        materials = await uow.catalog_store.list_materials(active_only=True)
        snapshots = [
            OperatorSnapshot(
                session_id=session.id,
                material_id=m.id,
                start_qty=plan.get(m.id, 0) + totals.get(m.id, 0),
                created_at=now,
            )
            for m in materials
        ]
        inserted = await uow.session_store.insert_snapshots(snapshots)

    await log.ainfo(
        "operator_session_created",
        task_id=task_id,
        operator_id=operator_id,
        session_id=session.id,
        snapshot_count=inserted,
    )
    return SessionResult(ok=True, session_id=session.id)
