import logging

import matplotlib

matplotlib.use("Agg")

import pytest

from logging_config import LOGGER_NAMES


@pytest.fixture(autouse=True)
def _reset_loggers():
    yield
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
