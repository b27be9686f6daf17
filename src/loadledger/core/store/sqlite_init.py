"""SQLite 数据库初始化

PRAGMA 配置 + 八张表 DDL + 索引创建。
使用 aiosqlite 异步操作，可重复执行。
"""

import aiosqlite

from ..config import get_busy_timeout_ms

# 外部目录：操作者、物料
_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id      TEXT PRIMARY KEY,
    login   TEXT NOT NULL DEFAULT ''
);
"""

_MATERIALS_DDL = """
CREATE TABLE IF NOT EXISTS materials (
    id          TEXT PRIMARY KEY,
    number      INTEGER NOT NULL,
    name        TEXT NOT NULL,
    unit        TEXT NOT NULL DEFAULT 'szt.',
    image_url   TEXT,
    active      INTEGER NOT NULL DEFAULT 1
);
"""

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id              TEXT PRIMARY KEY,
    task_no         TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'NEW',
    operator_id     TEXT,
    vehicle_plate   TEXT,
    created_at      TEXT NOT NULL,
    started_at      TEXT,
    started_by      TEXT,

    FOREIGN KEY (operator_id) REFERENCES users(id)
);
"""

_TASK_PLAN_ITEMS_DDL = """
CREATE TABLE IF NOT EXISTS task_plan_items (
    task_id     TEXT NOT NULL,
    material_id TEXT NOT NULL,
    qty         INTEGER,

    PRIMARY KEY (task_id, material_id),
    FOREIGN KEY (task_id) REFERENCES tasks(id),
    FOREIGN KEY (material_id) REFERENCES materials(id)
);
"""

_TASK_EXEC_ITEMS_DDL = """
CREATE TABLE IF NOT EXISTS task_exec_items (
    task_id     TEXT NOT NULL,
    material_id TEXT NOT NULL,
    qty         INTEGER NOT NULL DEFAULT 0,
    source      TEXT NOT NULL,
    created_at  TEXT NOT NULL,

    PRIMARY KEY (task_id, material_id),
    FOREIGN KEY (task_id) REFERENCES tasks(id),
    FOREIGN KEY (material_id) REFERENCES materials(id)
);
"""

# 账本表：append-only
_TASK_EXEC_ACTIONS_DDL = """
CREATE TABLE IF NOT EXISTS task_exec_actions (
    action_id   TEXT PRIMARY KEY,
    task_id     TEXT NOT NULL,
    material_id TEXT NOT NULL,
    actor_id    TEXT NOT NULL,
    delta       INTEGER NOT NULL,
    created_at  TEXT NOT NULL,

    FOREIGN KEY (task_id) REFERENCES tasks(id),
    FOREIGN KEY (material_id) REFERENCES materials(id),
    FOREIGN KEY (actor_id) REFERENCES users(id)
);
"""

_TASK_OPERATOR_SESSIONS_DDL = """
CREATE TABLE IF NOT EXISTS task_operator_sessions (
    id          TEXT PRIMARY KEY,
    task_id     TEXT NOT NULL,
    operator_id TEXT NOT NULL,
    started_at  TEXT NOT NULL,

    FOREIGN KEY (task_id) REFERENCES tasks(id),
    FOREIGN KEY (operator_id) REFERENCES users(id)
);
"""

_TASK_OPERATOR_SNAPSHOTS_DDL = """
CREATE TABLE IF NOT EXISTS task_operator_snapshots (
    session_id  TEXT NOT NULL,
    material_id TEXT NOT NULL,
    start_qty   INTEGER NOT NULL,
    created_at  TEXT NOT NULL,

    PRIMARY KEY (session_id, material_id),
    FOREIGN KEY (session_id) REFERENCES task_operator_sessions(id),
    FOREIGN KEY (material_id) REFERENCES materials(id)
);
"""

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_materials_number ON materials(number);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    # 汇总按 (task, material) 聚合
    (
        "CREATE INDEX IF NOT EXISTS idx_actions_task_material "
        "ON task_exec_actions(task_id, material_id);"
    ),
    # 减量守卫与 added 统计按 (task, actor, 时间) 过滤
    (
        "CREATE INDEX IF NOT EXISTS idx_actions_task_actor_ts "
        "ON task_exec_actions(task_id, actor_id, created_at);"
    ),
    (
        "CREATE INDEX IF NOT EXISTS idx_sessions_task_operator "
        "ON task_operator_sessions(task_id, operator_id, started_at DESC);"
    ),
]

_ALL_DDL = [
    _USERS_DDL,
    _MATERIALS_DDL,
    _TASKS_DDL,
    _TASK_PLAN_ITEMS_DDL,
    _TASK_EXEC_ITEMS_DDL,
    _TASK_EXEC_ACTIONS_DDL,
    _TASK_OPERATOR_SESSIONS_DDL,
    _TASK_OPERATOR_SNAPSHOTS_DDL,
]


async def apply_pragmas(conn: aiosqlite.Connection) -> None:
    """设置连接级 PRAGMA（每个新连接都需要）"""
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute(f"PRAGMA busy_timeout = {get_busy_timeout_ms()};")


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await apply_pragmas(conn)

    for ddl in _ALL_DDL:
        await conn.execute(ddl)

    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
