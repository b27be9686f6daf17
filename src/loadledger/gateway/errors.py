"""领域错误 -> HTTP 响应映射

NOT_FOUND 404 / FORBIDDEN 403 / CONFLICT 409。
响应体：{"ok": false, "error": {"code": ..., "message": ...}}
"""

import structlog
from fastapi import FastAPI, Request
from loadledger.core.errors import ExecutionError
from loadledger.core.models.enums import ErrorKind
from starlette.responses import JSONResponse

log = structlog.get_logger()

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
}


def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content={
            "ok": False,
            "error": {"code": kind.value, "message": message},
        },
    )


async def execution_error_handler(request: Request, exc: ExecutionError) -> JSONResponse:
    await log.ainfo(
        "execution_error",
        kind=exc.kind.value,
        message=exc.message,
    )
    return error_response(exc.kind, exc.message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExecutionError, execution_error_handler)
