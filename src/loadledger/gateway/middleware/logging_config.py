"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出，异常堆栈展开为结构化字段
"""

import logging
import os

import structlog

SERVICE_NAME = "loadledger"


def add_service_name(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """为日志事件补充 service 字段（已有则保留）"""
    event_dict.setdefault("service", os.environ.get("LOADLEDGER_SERVICE_NAME", SERVICE_NAME))
    return event_dict


def build_processors(log_format: str) -> list[structlog.types.Processor]:
    """构造 structlog 与标准库 logging 共用的处理器链"""
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "json":
        # unhandled_error 的堆栈以 exception 字段输出，而不是多行文本
        processors.append(structlog.processors.dict_tracebacks)
    return processors


def setup_logging() -> None:
    """初始化 structlog 配置

    环境变量：
    - LOADLEDGER_LOG_FORMAT: "json" 结构化输出（生产环境）/ "dev"（默认）可读输出
    - LOADLEDGER_LOG_LEVEL: 日志级别，默认 INFO
    - LOADLEDGER_SERVICE_NAME: service 字段取值，默认 loadledger
    """
    log_format = os.environ.get("LOADLEDGER_LOG_FORMAT", "dev")
    log_level = os.environ.get("LOADLEDGER_LOG_LEVEL", "INFO")

    shared_processors = build_processors(log_format)

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
