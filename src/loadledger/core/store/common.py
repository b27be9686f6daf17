"""Store 公共工具 -- 时间戳格式与计时查询

时间戳统一存为微秒精度的 UTC ISO-8601 字符串，保证字典序即时间序，
"created_at >= started_at" 这类比较可以直接在 SQL 中完成。
"""

import time
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import aiosqlite
import structlog

from ..config import get_slow_query_ms

log = structlog.get_logger()


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_ts(value: datetime) -> str:
    """datetime -> 存储格式（固定微秒精度）"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def parse_ts(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


async def execute(
    conn: aiosqlite.Connection,
    sql: str,
    params: Iterable[Any] = (),
) -> aiosqlite.Cursor:
    """执行 SQL，超过阈值时记录 slow_query 告警"""
    start = time.monotonic()
    cursor = await conn.execute(sql, tuple(params))
    elapsed_ms = int((time.monotonic() - start) * 1000)
    if elapsed_ms > get_slow_query_ms():
        log.warning(
            "slow_query",
            elapsed_ms=elapsed_ms,
            sql=" ".join(sql.split())[:200],
        )
    return cursor
