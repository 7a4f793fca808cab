import logging
import os
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from typing import List

from webinar_bot.platform.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@lru_cache
def _shared_handlers() -> List[logging.Handler]:
    # One file handle for the whole app so rotation is not raced by per-module handlers
    log_dir = os.path.join(os.getcwd(), settings.LOG_DIR)
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, settings.LOG_FILE),
        maxBytes=10_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()

    handlers: List[logging.Handler] = [file_handler, console_handler]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def get_logger(name: str) -> logging.Logger:
    """
    Logger for `name` writing to the console and the rotating app log file.
    Chat flow, referral credits, storage fallbacks and the simulated SMS /
    broadcast all log through here.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL)
    for handler in _shared_handlers():
        logger.addHandler(handler)
    return logger
