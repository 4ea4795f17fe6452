# farmstore/logger.py
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings


def setup_logger(log_dir: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the "farmstore" logger shared by the service modules.

    - Console output always
    - Daily rotating log file when a log directory is configured
    - Safe to call more than once (handlers are only attached the first time)
    """
    logger = logging.getLogger("farmstore")
    logger.setLevel(level or settings.log_level)

    # Avoid duplicate handlers if setup_logger() is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = settings.log_dir if log_dir is None else log_dir
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=path / "farmstore.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logger initialized")
    return logger
