"""CatalogStore SQLite 实现 -- users / materials 外部目录

核心层只读；写入方法供目录维护侧、CLI 与测试播种使用。
"""

import aiosqlite

from ..models.catalog import Actor, Material
from .common import execute


class SqliteCatalogStore:
    """物料与操作者目录"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_actor(self, actor: Actor) -> None:
        await execute(
            self._conn,
            "INSERT INTO users (id, login) VALUES (?, ?)",
            (actor.id, actor.login),
        )

    async def actor_exists(self, actor_id: str) -> bool:
        cursor = await execute(
            self._conn,
            "SELECT 1 FROM users WHERE id = ? LIMIT 1",
            (actor_id,),
        )
        return await cursor.fetchone() is not None

    async def create_material(self, material: Material) -> None:
        await execute(
            self._conn,
            """
            INSERT INTO materials (id, number, name, unit, image_url, active)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                material.id,
                material.number,
                material.name,
                material.unit,
                material.image_url,
                int(material.active),
            ),
        )

    async def get_material(self, material_id: str) -> Material | None:
        cursor = await execute(
            self._conn,
            "SELECT * FROM materials WHERE id = ?",
            (material_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_material(row)

    async def list_materials(self, active_only: bool = False) -> list[Material]:
        """按序号升序列出物料"""
        if active_only:
            cursor = await execute(
                self._conn,
                "SELECT * FROM materials WHERE active = 1 ORDER BY number ASC",
            )
        else:
            cursor = await execute(
                self._conn,
                "SELECT * FROM materials ORDER BY number ASC",
            )
        rows = await cursor.fetchall()
        return [self._row_to_material(row) for row in rows]

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        return Material(
            id=row["id"],
            number=row["number"],
            name=row["name"],
            unit=row["unit"],
            image_url=row["image_url"],
            active=bool(row["active"]),
        )
