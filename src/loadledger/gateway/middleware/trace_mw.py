"""TraceMiddleware -- 为任务操作绑定 trace_id

trace_id 由路径中的 task_id 生成，贯穿该任务的所有日志。
"""

import structlog
from loadledger.core.validation import is_uuid
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # /api/tasks/{task_id}/...
        parts = request.url.path.split("/")
        for i, part in enumerate(parts):
            if part == "tasks" and i + 1 < len(parts) and is_uuid(parts[i + 1]):
                structlog.contextvars.bind_contextvars(trace_id=f"trace-{parts[i + 1]}")
                break

        return await call_next(request)
