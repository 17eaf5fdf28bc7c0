"""Root logger configuration."""
import logging

import pytest

from utils.logging import NOISY_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    noisy = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, lvl in noisy.items():
        logging.getLogger(name).setLevel(lvl)


def test_info_level_quiets_third_party_loggers():
    setup_logging("info")

    assert logging.getLogger().level == logging.INFO
    assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)


def test_debug_level_lets_third_party_loggers_through():
    setup_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert all(logging.getLogger(name).level == logging.NOTSET for name in NOISY_LOGGERS)


def test_unknown_level_falls_back_to_info():
    setup_logging("chatty")

    assert logging.getLogger().level == logging.INFO
