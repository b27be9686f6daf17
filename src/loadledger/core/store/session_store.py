"""SessionStore SQLite 实现 -- 操作员会话与起点快照

会话与快照写入后不再修改；新会话只在逻辑上取代旧会话。
"""

import aiosqlite

from ..models.session import OperatorSession, OperatorSnapshot
from .common import execute, format_ts, parse_ts


class SqliteSessionStore:
    """SessionStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_session(self, session: OperatorSession) -> None:
        await execute(
            self._conn,
            """
            INSERT INTO task_operator_sessions (id, task_id, operator_id, started_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                session.id,
                session.task_id,
                session.operator_id,
                format_ts(session.started_at),
            ),
        )

    async def get_session(self, session_id: str) -> OperatorSession | None:
        cursor = await execute(
            self._conn,
            "SELECT * FROM task_operator_sessions WHERE id = ?",
            (session_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_session(row)

    async def get_latest_session(
        self,
        task_id: str,
        operator_id: str,
    ) -> OperatorSession | None:
        """操作员在该任务上最近的会话（当前会话）"""
        cursor = await execute(
            self._conn,
            """
            SELECT * FROM task_operator_sessions
            WHERE task_id = ? AND operator_id = ?
            ORDER BY started_at DESC, rowid DESC
            LIMIT 1
            """,
            (task_id, operator_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_session(row)

    async def insert_snapshots(self, snapshots: list[OperatorSnapshot]) -> int:
        """批量写入快照，已存在的 (session, material) 跳过

        Returns:
            实际写入行数
        """
        inserted = 0
        for snapshot in snapshots:
            cursor = await execute(
                self._conn,
                """
                INSERT INTO task_operator_snapshots (session_id, material_id,
                                                     start_qty, created_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (session_id, material_id) DO NOTHING
                """,
                (
                    snapshot.session_id,
                    snapshot.material_id,
                    snapshot.start_qty,
                    format_ts(snapshot.created_at),
                ),
            )
            inserted += cursor.rowcount
        return inserted

    async def get_snapshot_quantities(self, session_id: str) -> dict[str, int]:
        """material_id -> start_qty"""
        cursor = await execute(
            self._conn,
            """
            SELECT material_id, start_qty
            FROM task_operator_snapshots
            WHERE session_id = ?
            """,
            (session_id,),
        )
        rows = await cursor.fetchall()
        return {row["material_id"]: row["start_qty"] for row in rows}

    @staticmethod
    def _row_to_session(row: aiosqlite.Row) -> OperatorSession:
        return OperatorSession(
            id=row["id"],
            task_id=row["task_id"],
            operator_id=row["operator_id"],
            started_at=parse_ts(row["started_at"]),
        )
