"""TaskStore SQLite 实现 -- tasks / task_plan_items / task_exec_items

任务状态只在写事务内更新；执行项由计划项播种，插入即止，不覆盖。
"""

from datetime import datetime

import aiosqlite

from ..models.enums import ExecSource, TaskStatus
from ..models.task import ExecItem, PlanItem, Task, TaskHeader
from .common import execute, format_ts, parse_ts


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录（计划侧使用）"""
        await execute(
            self._conn,
            """
            INSERT INTO tasks (id, task_no, status, operator_id, vehicle_plate,
                               created_at, started_at, started_by)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                task.task_no,
                task.status.value,
                task.operator_id,
                task.vehicle_plate,
                format_ts(task.created_at),
                format_ts(task.started_at) if task.started_at else None,
                task.started_by,
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务

        在 BEGIN IMMEDIATE 事务内调用时，读取发生在写锁之下，
        等价于 SELECT ... FOR UPDATE。
        """
        cursor = await execute(
            self._conn,
            "SELECT * FROM tasks WHERE id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def get_header(self, task_id: str) -> TaskHeader | None:
        cursor = await execute(
            self._conn,
            """
            SELECT id, task_no, status, operator_id, vehicle_plate
            FROM tasks
            WHERE id = ?
            """,
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return TaskHeader(
            id=row["id"],
            task_no=row["task_no"],
            status=TaskStatus(row["status"]),
            operator_id=row["operator_id"],
            vehicle_plate=row["vehicle_plate"],
        )

    async def mark_started(
        self,
        task_id: str,
        operator_id: str,
        started_at: datetime,
    ) -> None:
        """NEW -> IN_PROGRESS，记录开始时间与开始者"""
        await execute(
            self._conn,
            """
            UPDATE tasks
            SET status = ?, started_at = ?, started_by = ?
            WHERE id = ?
            """,
            (TaskStatus.IN_PROGRESS.value, format_ts(started_at), operator_id, task_id),
        )

    async def add_plan_item(self, item: PlanItem) -> None:
        """写入计划项（计划侧使用）"""
        await execute(
            self._conn,
            "INSERT INTO task_plan_items (task_id, material_id, qty) VALUES (?, ?, ?)",
            (item.task_id, item.material_id, item.qty),
        )

    async def seed_exec_items_from_plan(self, task_id: str, created_at: datetime) -> int:
        """按计划项播种执行项，已存在的 (task, material) 保持不变

        Returns:
            新写入的执行项数量
        """
        cursor = await execute(
            self._conn,
            """
            INSERT INTO task_exec_items (task_id, material_id, qty, source, created_at)
            SELECT tpi.task_id, tpi.material_id, COALESCE(tpi.qty, 0), ?, ?
            FROM task_plan_items tpi
            WHERE tpi.task_id = ?
            ON CONFLICT (task_id, material_id) DO NOTHING
            """,
            (ExecSource.PLAN.value, format_ts(created_at), task_id),
        )
        return cursor.rowcount

    async def list_exec_items(self, task_id: str) -> list[ExecItem]:
        cursor = await execute(
            self._conn,
            "SELECT * FROM task_exec_items WHERE task_id = ?",
            (task_id,),
        )
        rows = await cursor.fetchall()
        return [
            ExecItem(
                task_id=row["task_id"],
                material_id=row["material_id"],
                qty=row["qty"],
                source=ExecSource(row["source"]),
                created_at=parse_ts(row["created_at"]),
            )
            for row in rows
        ]

    async def get_plan_quantities(self, task_id: str) -> dict[str, int]:
        """material_id -> 执行项起始数量"""
        cursor = await execute(
            self._conn,
            "SELECT material_id, qty FROM task_exec_items WHERE task_id = ?",
            (task_id,),
        )
        rows = await cursor.fetchall()
        return {row["material_id"]: row["qty"] for row in rows}

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row["id"],
            task_no=row["task_no"],
            status=TaskStatus(row["status"]),
            operator_id=row["operator_id"],
            vehicle_plate=row["vehicle_plate"],
            created_at=parse_ts(row["created_at"]),
            started_at=parse_ts(row["started_at"]),
            started_by=row["started_by"],
        )
