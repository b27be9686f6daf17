"""loadledger Core Store -- SQLite 持久化实现

StoreGroup 只持有数据库路径；每次操作通过 transaction() / snapshot()
获得独立连接上的 UnitOfWork，请求之间互不共享事务。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from .catalog_store import SqliteCatalogStore
from .ledger_store import SqliteLedgerStore
from .session_store import SqliteSessionStore
from .sqlite_init import init_db, verify_wal_mode
from .task_store import SqliteTaskStore
from .transaction import UnitOfWork, connect, unit_of_work


class StoreGroup:
    """Store 入口 -- 按需打开工作单元"""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[UnitOfWork]:
        """写事务（BEGIN IMMEDIATE）"""
        async with unit_of_work(self.db_path, write=True) as uow:
            yield uow

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[UnitOfWork]:
        """只读事务，读到开始时刻的已提交状态"""
        async with unit_of_work(self.db_path, write=False) as uow:
            yield uow

    async def ping(self) -> bool:
        """连通性检查"""
        conn = await connect(self.db_path)
        try:
            cursor = await conn.execute("SELECT 1")
            row = await cursor.fetchone()
            return row is not None
        finally:
            await conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 StoreGroup 并初始化 schema

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    try:
        await init_db(conn)
    finally:
        await conn.close()

    return StoreGroup(db_path)


__all__ = [
    "StoreGroup",
    "UnitOfWork",
    "create_store_group",
    "unit_of_work",
    "SqliteTaskStore",
    "SqliteLedgerStore",
    "SqliteSessionStore",
    "SqliteCatalogStore",
    "init_db",
    "verify_wal_mode",
]
