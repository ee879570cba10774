"""
loguru sinks for the movie booking service

Every record is patched with the process identity and, while a booking lock
is held, the inventory key being mutated ('-' otherwise), so all lines of one
admission can be grepped together. Lines written through @Logger.io carry the
decorated function as `target`; other lines fall back to module:function:line.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
import logging
import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


if TYPE_CHECKING:
    from loguru import Record


inventory_key_var: ContextVar[str] = ContextVar('inventory_key_var', default='-')
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)

LOG_FORMAT = (
    '<c>{extra[service]}</> | <lvl>{level:<8}</> | <m>{extra[inventory_key]}</> | '
    '<c>{extra[target]}</> | {message}'
)

# Quiet below INFO; these libraries log every statement / loop tick at DEBUG
_NOISY_LOGGERS = ('aiosqlite', 'asyncio', 'sqlalchemy.pool', 'multipart')


def _patch_record(record: 'Record') -> None:
    extra = record['extra']
    extra['service'] = get_service_context()
    extra['inventory_key'] = inventory_key_var.get()
    extra.setdefault('target', f'{record["name"]}:{record["function"]}:{record["line"]}')


class InterceptHandler(logging.Handler):
    """Route stdlib logging (uvicorn, sqlalchemy, opentelemetry) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < logging.INFO and record.name.startswith(_NOISY_LOGGERS):
            return
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _log_file_path() -> str:
    log_dir = os.environ.get('TEST_LOG_DIR') or str(LOG_DIR)
    prefix = 'test_movie_booking' if os.environ.get('TEST_LOG_DIR') else 'movie_booking'
    return f'{log_dir}/{prefix}_{datetime.now(timezone.utc):%Y-%m-%d}.log'


def configure_logging() -> None:
    level = 'DEBUG' if settings.DEBUG else 'INFO'
    loguru_logger.remove()
    loguru_logger.configure(patcher=_patch_record)
    loguru_logger.add(sys.stdout, format=LOG_FORMAT, level=level, enqueue=True)

    # Production ships stdout; files are for local debugging
    if settings.DEBUG:
        loguru_logger.add(
            _log_file_path(),
            format=LOG_FORMAT,
            level=level,
            rotation='1 day',
            retention='7 days',
            compression='gz',
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


configure_logging()
logger = loguru_logger
