"""任务状态机 -- 开始任务与任务抬头

start_task 在一个写事务内完成：锁定任务、校验指派与状态、
推进到 IN_PROGRESS 并按计划项播种执行项。任何失败都不会留下部分播种。
"""

import structlog

from .errors import ExecutionError
from .models.enums import TaskStatus, validate_transition
from .models.results import StartResult
from .models.task import TaskHeader
from .store import StoreGroup
from .store.common import utc_now

log = structlog.get_logger()


async def start_task(stores: StoreGroup, task_id: str, operator_id: str) -> StartResult:
    """开始任务：仅指派的操作员、仅 NEW 状态

    Raises:
        ExecutionError: NOT_FOUND 任务不存在；FORBIDDEN 非指派操作员；
            CONFLICT 任务已开始或已结束
    """
    async with stores.transaction() as uow:
        task = await uow.task_store.get_task(task_id)
        if task is None:
            raise ExecutionError.not_found("Task not found")

        if task.operator_id != operator_id:
            raise ExecutionError.forbidden("Not assigned operator")

        if not validate_transition(task.status, TaskStatus.IN_PROGRESS):
            raise ExecutionError.conflict("Task already started or closed")

        now = utc_now()
        await uow.task_store.mark_started(task_id, operator_id, now)
        seeded = await uow.task_store.seed_exec_items_from_plan(task_id, now)

    await log.ainfo(
        "task_started",
        task_id=task_id,
        operator_id=operator_id,
        seeded_items=seeded,
    )
    return StartResult(ok=True)


async def get_task_header(stores: StoreGroup, task_id: str) -> TaskHeader:
    """查询任务抬头

    Raises:
        ExecutionError: NOT_FOUND 任务不存在
    """
    async with stores.snapshot() as uow:
        header = await uow.task_store.get_header(task_id)
    if header is None:
        raise ExecutionError.not_found("Task not found")
    return header
