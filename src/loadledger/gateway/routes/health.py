"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性与 WAL 模式、磁盘空间。
"""

import shutil
from pathlib import Path

import aiosqlite
import structlog
from fastapi import APIRouter, Request
from loadledger.core.store import verify_wal_mode
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. wal: journal_mode 是否为 WAL（读写并发依赖它）
    3. disk_space_mb: 数据库所在磁盘剩余空间
    """
    checks = {}
    all_ok = True
    store_group = request.app.state.store_group

    # 1. SQLite 连通性检查
    try:
        await store_group.ping()
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("ready_sqlite_error", error_type=type(e).__name__)
        checks["sqlite"] = "error"
        all_ok = False

    # 2. WAL 模式检查
    try:
        async with aiosqlite.connect(store_group.db_path) as conn:
            checks["wal"] = "ok" if await verify_wal_mode(conn) else "disabled"
    except Exception as e:
        log.warning("ready_wal_error", error_type=type(e).__name__)
        checks["wal"] = "error"
        all_ok = False

    # 3. 磁盘空间检查
    try:
        disk_usage = shutil.disk_usage(Path(store_group.db_path).parent)
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
