"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store、Service 与当前操作者

StoreGroup 通过 app.state 管理，在 lifespan 中初始化。
当前操作者的解析是外部能力的替身，部署时替换 get_current_actor 即可。
"""

from fastapi import Depends, Header, Query, Request
from loadledger.core.config import get_default_actor_id
from loadledger.core.service import TaskExecutionService
from loadledger.core.store import StoreGroup


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_service(
    store_group: StoreGroup = Depends(get_store_group),
) -> TaskExecutionService:
    return TaskExecutionService(store_group)


def get_current_actor(
    x_actor_id: str | None = Header(default=None),
    actor_id: str | None = Query(default=None, alias="actorId"),
) -> str | None:
    """当前操作者：X-Actor-Id 头 > actorId 查询参数 > 开发默认值"""
    for candidate in (x_actor_id, actor_id):
        if candidate and candidate.strip():
            return candidate.strip()
    return get_default_actor_id()
