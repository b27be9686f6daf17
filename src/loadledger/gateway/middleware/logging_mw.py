"""LoggingMiddleware -- 请求级日志与兜底错误

为每个 HTTP 请求生成 request_id，绑定到 structlog contextvars。
未被领域错误处理器接住的异常在此记录并转换为不含内部细节的 500。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from ulid import ULID


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件 -- 为每个请求生成 request_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        await log.ainfo("request_started")

        try:
            response = await call_next(request)
        except Exception as e:
            await log.aexception("unhandled_error", error_type=type(e).__name__)
            response = JSONResponse(
                status_code=500,
                content={
                    "ok": False,
                    "error": {"code": "INTERNAL_ERROR", "message": "Internal error"},
                },
            )

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
        )

        # 在响应头中返回 request_id
        response.headers["X-Request-ID"] = request_id
        return response
