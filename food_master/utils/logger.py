"""
Логирование пакета food_master.

Модули пишут через logging.getLogger(__name__), хендлеры висят только на
логгере пакета. Повторный вызов setup_logger() пересобирает хендлеры,
но не плодит фильтры.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from food_master.config import settings
from food_master.utils.secret_filter import apply_secret_filter_to_logger

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# На DEBUG пишут URL и заголовки запросов (в том числе x-goog-api-key)
NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_log_level() -> int:
    """DEBUG_MODE важнее LOG_LEVEL; неизвестное имя уровня → INFO."""
    if settings.DEBUG_MODE:
        return logging.DEBUG
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def _build_handlers(level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=settings.LOG_FILE,
                maxBytes=settings.LOG_MAX_BYTES,
                backupCount=settings.LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        )

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logger(name: str = "food_master") -> logging.Logger:
    """
    Настраивает логгер пакета: stdout, опционально ротируемый файл, маскирование секретов.

    Args:
        name: Имя логгера

    Returns:
        Настроенный logger
    """
    level = resolve_log_level()

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    for old_handler in list(logger.handlers):
        logger.removeHandler(old_handler)
        old_handler.close()
    for handler in _build_handlers(level):
        logger.addHandler(handler)

    apply_secret_filter_to_logger(logger)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


logger = setup_logger()
