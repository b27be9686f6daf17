"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、锁等待时间、慢查询阈值，以及账本业务边界常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("LOADLEDGER_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "LOADLEDGER_DB_PATH",
        str(_get_base_dir() / "sqlite" / "loadledger.db"),
    )


def get_busy_timeout_ms() -> int:
    """写锁等待上限（毫秒），超时后 SQLite 报 database is locked"""
    return int(os.environ.get("LOADLEDGER_BUSY_TIMEOUT_MS", "5000"))


def get_slow_query_ms() -> int:
    """慢查询告警阈值（毫秒）"""
    return int(os.environ.get("LOADLEDGER_SLOW_QUERY_MS", "200"))


def get_default_actor_id() -> str | None:
    """开发环境默认操作者（替代真实认证），未设置时返回 None"""
    return os.environ.get("LOADLEDGER_DEFAULT_ACTOR_ID") or None


# 单次增量绝对值上限（防滥用）
MAX_ABS_DELTA: int = 1000

# 唯一允许的负增量（撤销一件）
UNDO_DELTA: int = -1

# 物料操作历史分页
HISTORY_DEFAULT_LIMIT: int = 50
HISTORY_MAX_LIMIT: int = 200
