import io
import logging

import pytest

import cartola.logging_setup as logging_setup
from cartola.logging_setup import configure_logging, get_logger


@pytest.fixture
def pkg_logger(monkeypatch: pytest.MonkeyPatch):
    """Hand out the package logger and put its original state back afterwards."""

    logger = logging.getLogger("cartola")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    third_party = {n: logging.getLogger(n).level for n in ("openai", "httpx", "httpcore")}
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    monkeypatch.delenv("CARTOLA_LOG_LEVEL", raising=False)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
    for name, level in third_party.items():
        logging.getLogger(name).setLevel(level)


def test_configure_logging_attaches_one_stream_handler(pkg_logger):
    stream = io.StringIO()

    configure_logging("info", fmt="%(name)s %(message)s", stream=stream)
    configure_logging("debug", stream=io.StringIO())
    get_logger("cartola.session").info("session:processed transactions=%d", 3)
    get_logger("cartola.session").debug("hidden")

    assert stream.getvalue() == "cartola.session session:processed transactions=3\n"
    assert len(pkg_logger.handlers) == 1
    assert pkg_logger.propagate is False
    assert logging.getLogger("httpx").level == logging.WARNING


def test_force_reconfigures_and_env_supplies_level(pkg_logger, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CARTOLA_LOG_LEVEL", "DEBUG")
    configure_logging(stream=io.StringIO())
    assert pkg_logger.level == logging.DEBUG
    assert logging.getLogger("openai").level == logging.DEBUG

    stream = io.StringIO()
    configure_logging("WARNING", stream=stream, force=True)

    assert len(pkg_logger.handlers) == 1
    assert pkg_logger.level == logging.WARNING
    assert logging.getLogger("openai").level == logging.WARNING


def test_unknown_level_name_falls_back_to_info(pkg_logger):
    configure_logging("loud", stream=io.StringIO())
    assert pkg_logger.level == logging.INFO
