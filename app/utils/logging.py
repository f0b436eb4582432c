"""구조화 로깅 설정 — structlog.

Structured logging configuration with structlog.
Called once from the application startup; modules then obtain loggers with
``structlog.get_logger()``.
"""

import logging

import structlog

from app.config import Settings


def setup_logging(settings: Settings) -> None:
    """structlog를 JSON 또는 콘솔 출력으로 설정합니다.

    Configure structlog for JSON or console output based on LOG_FORMAT.
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if settings.LOG_FORMAT == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # 루트 로그 레벨 — Root log level
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
