"""
Logging setup for the magic-square search modules.
"""
import logging
import sys
from typing import Optional

LOGGER_NAMES = ("magic_search", "magic_background", "magic_benchmark", "magic_cli")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Attach a stdout handler (and optionally a file handler) to every module logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Re-running setup must not stack handlers
        if logger.hasHandlers():
            logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("magic_cli").debug("Logging initialized.")
