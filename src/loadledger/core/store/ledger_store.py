"""LedgerStore SQLite 实现 -- task_exec_actions 账本

账本表 append-only：只允许插入，不允许更新或删除。
action_id 主键即幂等键，重复插入由数据库唯一约束拒绝。
"""

from datetime import datetime

import aiosqlite

from ..models.action import ExecAction
from ..models.results import MaterialHistoryItem
from .common import execute, format_ts, parse_ts


class SqliteLedgerStore:
    """LedgerStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_action(self, action: ExecAction) -> None:
        """追加账本条目（append-only）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await execute(
            self._conn,
            """
            INSERT INTO task_exec_actions (action_id, task_id, material_id,
                                           actor_id, delta, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                action.action_id,
                action.task_id,
                action.material_id,
                action.actor_id,
                action.delta,
                format_ts(action.created_at),
            ),
        )

    async def action_exists(self, action_id: str) -> bool:
        """检查幂等键是否已存在"""
        cursor = await execute(
            self._conn,
            "SELECT 1 FROM task_exec_actions WHERE action_id = ? LIMIT 1",
            (action_id,),
        )
        return await cursor.fetchone() is not None

    async def sum_deltas(
        self,
        task_id: str,
        *,
        actor_id: str | None = None,
        since: datetime | None = None,
        material_id: str | None = None,
    ) -> dict[str, int]:
        """按物料聚合增量之和

        Args:
            task_id: 任务
            actor_id: 仅统计该操作者的条目
            since: 仅统计 created_at >= since 的条目（含边界）
            material_id: 仅统计该物料

        Returns:
            material_id -> sum(delta)，没有条目的物料不出现
        """
        clauses = ["task_id = ?"]
        params: list = [task_id]
        if actor_id is not None:
            clauses.append("actor_id = ?")
            params.append(actor_id)
        if since is not None:
            clauses.append("created_at >= ?")
            params.append(format_ts(since))
        if material_id is not None:
            clauses.append("material_id = ?")
            params.append(material_id)

        cursor = await execute(
            self._conn,
            f"""
            SELECT material_id, COALESCE(SUM(delta), 0) AS total
            FROM task_exec_actions
            WHERE {" AND ".join(clauses)}
            GROUP BY material_id
            """,
            params,
        )
        rows = await cursor.fetchall()
        return {row["material_id"]: row["total"] for row in rows}

    async def get_actions_for_task(self, task_id: str) -> list[ExecAction]:
        """查询指定任务的所有条目，按写入时间正序"""
        cursor = await execute(
            self._conn,
            """
            SELECT * FROM task_exec_actions
            WHERE task_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (task_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_action(row) for row in rows]

    async def list_history(self, task_id: str, limit: int) -> list[MaterialHistoryItem]:
        """物料操作历史（新到旧），带操作者登录名与物料信息"""
        cursor = await execute(
            self._conn,
            """
            SELECT
                a.action_id,
                a.created_at,
                a.delta,
                a.actor_id,
                u.login  AS actor_name,
                a.material_id,
                m.number AS material_number,
                m.name   AS material_name
            FROM task_exec_actions a
            LEFT JOIN users u ON u.id = a.actor_id
            LEFT JOIN materials m ON m.id = a.material_id
            WHERE a.task_id = ?
            ORDER BY a.created_at DESC, a.rowid DESC
            LIMIT ?
            """,
            (task_id, limit),
        )
        rows = await cursor.fetchall()
        return [
            MaterialHistoryItem(
                action_id=row["action_id"],
                created_at=parse_ts(row["created_at"]),
                delta=row["delta"],
                actor_id=row["actor_id"],
                actor_name=row["actor_name"],
                material_id=row["material_id"],
                material_number=row["material_number"],
                material_name=row["material_name"],
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_action(row: aiosqlite.Row) -> ExecAction:
        """将数据库行转换为 ExecAction 模型"""
        return ExecAction(
            action_id=row["action_id"],
            task_id=row["task_id"],
            material_id=row["material_id"],
            actor_id=row["actor_id"],
            delta=row["delta"],
            created_at=parse_ts(row["created_at"]),
        )
