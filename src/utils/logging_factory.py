# utils/logging_factory.py

import logging
import os

from minimal_api.config import settings


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(settings.LOG_LEVEL.upper())
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # File handler (opcional)
        if settings.LOG_DIR:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(settings.LOG_DIR, f"{name}.log"))
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
