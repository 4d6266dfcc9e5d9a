"""
Tests for the logging helpers.
"""

import logging

from rich.logging import RichHandler

from crawler_sim.core.constants import StatsMode
from crawler_sim.core.logging import format_context, get_logger, logger, setup_logging


def test_format_context_without_context():
    assert format_context("Search done", None) == "Search done"
    assert format_context("Search done", {}) == "Search done"


def test_format_context_renders_values():
    text = format_context(
        "Phase finished",
        {"win_rate": 0.123456, "mode": StatsMode.DODGE, "error": ValueError("bad")},
    )
    assert text == "Phase finished [win_rate=0.1235 mode=Dodge error=ValueError: bad]"


def test_get_logger_is_a_child():
    assert get_logger("gear").name == "crawler_sim.gear"
    assert get_logger("crawler_sim.workers").name == "crawler_sim.workers"


def test_setup_logging_replaces_its_handler():
    """Test that repeated setup keeps a single rich handler."""
    saved = list(logger.handlers), logger.level, logger.propagate
    try:
        setup_logging(logging.INFO)
        setup_logging(logging.DEBUG)
        rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert logger.level == logging.DEBUG
        assert not any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)
    finally:
        logger.handlers[:] = saved[0]
        logger.setLevel(saved[1])
        logger.propagate = saved[2]
