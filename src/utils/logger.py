import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from src.utils.config import settings


def get_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(log_level or settings.LOG_LEVEL)

    if not logger.handlers:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(module)s %(funcName)s %(message)s"
        )
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


logger = get_logger("flashcards")
