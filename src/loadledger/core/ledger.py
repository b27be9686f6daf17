"""增量引擎 -- 账本唯一的写入口

校验顺序固定，每一步都是独立的失败：
1. 四个 ID 必填                 -> CONFLICT
2. delta 可解析为整数           -> CONFLICT
3. delta != 0                   -> CONFLICT
4. delta >= -1                  -> CONFLICT
5. |delta| <= 1000              -> CONFLICT
6. actor_id 为 UUID 形状        -> FORBIDDEN
写事务内（任务持写锁）：
7. 任务存在且 IN_PROGRESS       -> NOT_FOUND / CONFLICT
8. 操作者在目录中               -> FORBIDDEN
9. 幂等命中直接提交             -> idempotent=True
10. 物料存在且启用              -> NOT_FOUND / CONFLICT
11. -1 只能撤销本会话内自己加的  -> CONFLICT
12. 写入账本条目
"""

import uuid

import aiosqlite
import structlog

from .config import UNDO_DELTA
from .errors import ExecutionError
from .models.action import ExecAction
from .models.enums import TaskStatus
from .models.results import DeltaRequest, DeltaResult
from .store import StoreGroup, UnitOfWork
from .store.common import utc_now
from .validation import check_delta_bounds, is_uuid, parse_delta

log = structlog.get_logger()


def is_action_id_conflict(error: Exception) -> bool:
    """是否为账本 action_id 唯一约束冲突（并发重复提交）"""
    if not isinstance(error, aiosqlite.IntegrityError):
        return False
    text = str(error)
    return "UNIQUE" in text and "task_exec_actions.action_id" in text


async def apply_delta(stores: StoreGroup, request: DeltaRequest) -> DeltaResult:
    """校验并写入一次数量调整

    非 UUID 形状的 action_id 会被替换为服务端生成的 UUID，此时不做幂等判断。

    Raises:
        ExecutionError: 见模块说明中的校验顺序
    """
    if not request.action_id:
        raise ExecutionError.conflict("actionId is required")
    if not request.task_id:
        raise ExecutionError.conflict("taskId is required")
    if not request.material_id:
        raise ExecutionError.conflict("materialId is required")
    if not request.actor_id:
        raise ExecutionError.conflict("actorId is required")

    delta = parse_delta(request.delta)
    check_delta_bounds(delta)

    if not is_uuid(request.actor_id):
        raise ExecutionError.forbidden("Invalid actorId")

    action_is_uuid = is_uuid(request.action_id)
    action_id = request.action_id if action_is_uuid else str(uuid.uuid4())

    try:
        async with stores.transaction() as uow:
            task = await uow.task_store.get_task(request.task_id)
            if task is None:
                raise ExecutionError.not_found("Task not found")
            if task.status != TaskStatus.IN_PROGRESS:
                raise ExecutionError.conflict("Task is not in progress")

            if not await uow.catalog_store.actor_exists(request.actor_id):
                raise ExecutionError.forbidden("Actor not recognized")

            if action_is_uuid and await uow.ledger_store.action_exists(action_id):
                await log.ainfo(
                    "delta_idempotent_hit",
                    task_id=request.task_id,
                    action_id=action_id,
                )
                return DeltaResult(ok=True, idempotent=True)

            material = await uow.catalog_store.get_material(request.material_id)
            if material is None:
                raise ExecutionError.not_found("Material not found")
            if not material.active:
                raise ExecutionError.conflict("Material is inactive")

            if delta == UNDO_DELTA:
                await _guard_decrement(uow, request)

            await uow.ledger_store.append_action(
                ExecAction(
                    action_id=action_id,
                    task_id=request.task_id,
                    material_id=request.material_id,
                    actor_id=request.actor_id,
                    delta=delta,
                    created_at=utc_now(),
                )
            )
    except aiosqlite.IntegrityError as e:
        if is_action_id_conflict(e):
            # 幂等检查与插入之间被并发的同一提交抢先写入
            await log.awarning(
                "delta_idempotent_race",
                task_id=request.task_id,
                action_id=action_id,
            )
            return DeltaResult(ok=True, idempotent=True)
        raise

    await log.ainfo(
        "delta_applied",
        task_id=request.task_id,
        material_id=request.material_id,
        actor_id=request.actor_id,
        action_id=action_id,
        delta=delta,
        server_generated_id=not action_is_uuid,
    )
    return DeltaResult(ok=True, idempotent=False)


async def _guard_decrement(uow: UnitOfWork, request: DeltaRequest) -> None:
    """-1 仅当操作者在当前会话内对该物料的净增量为正时允许"""
    session = await uow.session_store.get_latest_session(
        request.task_id, request.actor_id
    )
    if session is None:
        raise ExecutionError.conflict("No operator session; cannot decrement")

    sums = await uow.ledger_store.sum_deltas(
        request.task_id,
        actor_id=request.actor_id,
        since=session.started_at,
        material_id=request.material_id,
    )
    if sums.get(request.material_id, 0) <= 0:
        raise ExecutionError.conflict("Cannot decrement more than you added")
