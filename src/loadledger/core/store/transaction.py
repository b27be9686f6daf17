"""工作单元 -- 每个操作一个连接、一个事务

写事务以 BEGIN IMMEDIATE 开始：在读取任务行之前就拿到 SQLite 写锁，
同一任务上并发的 start / apply 因此串行化，状态检查不存在竞态。
读事务以 BEGIN (DEFERRED) 开始，WAL 下整个汇总读到同一个已提交快照。
任何异常都会回滚整个事务并向上抛出。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
import structlog

from .catalog_store import SqliteCatalogStore
from .ledger_store import SqliteLedgerStore
from .session_store import SqliteSessionStore
from .sqlite_init import apply_pragmas
from .task_store import SqliteTaskStore

log = structlog.get_logger()


class UnitOfWork:
    """绑定在同一连接上的 Store 实例组"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.task_store = SqliteTaskStore(conn)
        self.ledger_store = SqliteLedgerStore(conn)
        self.session_store = SqliteSessionStore(conn)
        self.catalog_store = SqliteCatalogStore(conn)


async def connect(db_path: str) -> aiosqlite.Connection:
    """打开手动事务模式的连接（isolation_level=None，由调用方显式 BEGIN）"""
    conn = await aiosqlite.connect(db_path, isolation_level=None)
    conn.row_factory = aiosqlite.Row
    await apply_pragmas(conn)
    return conn


@asynccontextmanager
async def unit_of_work(db_path: str, *, write: bool) -> AsyncIterator[UnitOfWork]:
    """在独立连接上执行一个全有或全无的事务

    Args:
        db_path: SQLite 数据库文件路径
        write: True 使用 BEGIN IMMEDIATE（持有写锁），False 使用只读快照

    Raises:
        Exception: 事务体内的任何异常，回滚后原样抛出
    """
    conn = await connect(db_path)
    try:
        await conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
        try:
            yield UnitOfWork(conn)
            await conn.execute("COMMIT")
        except Exception:
            # 部分错误会让 SQLite 自动回滚，此时不能再发 ROLLBACK
            if conn.in_transaction:
                await conn.execute("ROLLBACK")
            raise
    finally:
        await conn.close()
