"""
Logging setup for safety-core.

loguru is the only sink. Records from the stdlib loggers used by uvicorn
and aiosqlite are forwarded into it, and every module binds a named
logger through get_logger().
"""

from __future__ import annotations
import logging
import sys
from loguru import logger

# stdlib 로거 중 loguru 로 흡수할 대상
FORWARDED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "aiosqlite", "asyncio")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> - "
    "<level>{message}</level>"
)

class InterceptHandler(logging.Handler):
    """stdlib LogRecord 를 호출 위치를 유지한 채 loguru 로 넘긴다."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )

def _forward_stdlib_logging(level: int) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=level, force=True)
    for name in FORWARDED_LOGGERS:
        std = logging.getLogger(name)
        std.handlers = [InterceptHandler()]
        std.propagate = False

def setup_logging(log_level: str = "INFO", *, json_output: bool = False) -> None:
    """
    loguru 를 초기화합니다.

    Args:
        log_level: 최소 로그 레벨
        json_output: True 면 한 줄 JSON (컨테이너 수집용), False 면 컬러 콘솔
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(extra={"name": "safety"})
    if json_output:
        logger.add(sys.stdout, level=level, serialize=True, backtrace=False, diagnose=False)
    else:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True,
                   backtrace=True, diagnose=False)
    std_level = getattr(logging, level, logging.INFO)
    _forward_stdlib_logging(std_level if isinstance(std_level, int) else logging.INFO)

def setup_logging_dev(log_level: str = "INFO") -> None:
    setup_logging(log_level, json_output=False)

def get_logger(name: str = "safety", **ctx):
    """이름과 선택적 컨텍스트(예: incident_id)를 바인딩한 logger."""
    return logger.bind(name=name, **ctx)

def with_context(**ctx):
    """블록 안의 모든 로그에 컨텍스트를 붙인다."""
    return logger.contextualize(**ctx)
