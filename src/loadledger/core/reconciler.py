"""汇总对账 -- 从账本与会话快照重建四列视图

Plan    执行项起始数量
Before  会话起点快照
Added   本操作员自会话开始（含）以来的增量之和
Current Plan + 该物料在该任务上的全部增量

SQL 侧只做按物料的 SUM 聚合，逐物料组装在内存中完成。
停用物料一律不出现在结果中，即便账本里有它的条目。
"""

import structlog

from .models.catalog import Material
from .models.results import (
    SessionSummaryItem,
    SessionSummaryResult,
    SummaryItem,
    SummaryResult,
)
from .models.session import OperatorSession
from .store import StoreGroup, UnitOfWork

log = structlog.get_logger()


def build_summary_items(
    materials: list[Material],
    plan: dict[str, int],
    totals: dict[str, int],
) -> list[SummaryItem]:
    """组装全局汇总行，顺序沿用 materials（按序号升序）"""
    items = []
    for m in materials:
        if not m.active:
            continue
        planned = plan.get(m.id, 0)
        items.append(
            SummaryItem(
                material_id=m.id,
                number=m.number,
                name=m.name,
                unit=m.unit,
                image_url=m.image_url,
                active=m.active,
                plan=planned,
                current=planned + totals.get(m.id, 0),
            )
        )
    return items


def build_session_items(
    materials: list[Material],
    plan: dict[str, int],
    totals: dict[str, int],
    before: dict[str, int],
    added: dict[str, int],
) -> list[SessionSummaryItem]:
    """在全局汇总行上补充 before / added 两列"""
    return [
        SessionSummaryItem(
            **item.model_dump(),
            before=before.get(item.material_id, 0),
            added=added.get(item.material_id, 0),
        )
        for item in build_summary_items(materials, plan, totals)
    ]


async def get_task_exec_summary(stores: StoreGroup, task_id: str) -> SummaryResult:
    """无会话上下文的全局汇总"""
    async with stores.snapshot() as uow:
        materials = await uow.catalog_store.list_materials(active_only=True)
        plan = await uow.task_store.get_plan_quantities(task_id)
        totals = await uow.ledger_store.sum_deltas(task_id)

    return SummaryResult(ok=True, items=build_summary_items(materials, plan, totals))


async def _resolve_session(
    uow: UnitOfWork,
    task_id: str,
    operator_id: str,
    session_id: str | None,
) -> OperatorSession | None:
    """确定本次汇总使用的会话行

    显式 session_id 必须属于该 (task, operator)，否则视为无会话；
    未指定时取最近一次会话。before 与 added 都以返回的这一行为准。
    """
    if session_id is None:
        return await uow.session_store.get_latest_session(task_id, operator_id)

    session = await uow.session_store.get_session(session_id)
    if session is None or session.task_id != task_id or session.operator_id != operator_id:
        await log.awarning(
            "summary_session_mismatch",
            task_id=task_id,
            operator_id=operator_id,
            session_id=session_id,
        )
        return None
    return session


async def get_task_exec_summary_for_operator_session(
    stores: StoreGroup,
    task_id: str,
    operator_id: str,
    session_id: str | None = None,
) -> SessionSummaryResult:
    """会话范围汇总

    没有可用会话时 before / added 退化为 0，session_id 返回 None。
    """
    async with stores.snapshot() as uow:
        session = await _resolve_session(uow, task_id, operator_id, session_id)

        materials = await uow.catalog_store.list_materials(active_only=True)
        plan = await uow.task_store.get_plan_quantities(task_id)
        totals = await uow.ledger_store.sum_deltas(task_id)

        if session is None:
            before: dict[str, int] = {}
            added: dict[str, int] = {}
        else:
            before = await uow.session_store.get_snapshot_quantities(session.id)
            added = await uow.ledger_store.sum_deltas(
                task_id,
                actor_id=operator_id,
                since=session.started_at,
            )

    return SessionSummaryResult(
        ok=True,
        items=build_session_items(materials, plan, totals, before, added),
        session_id=session.id if session else None,
    )
