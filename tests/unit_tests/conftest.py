# file: tests/unit_tests/conftest.py
import pytest
import logging

from csvstream.scanner.scanner import Scanner

logger = logging.getLogger(__name__)


@pytest.fixture
def scanner():
    """A freshly reset scanner with default dialect settings."""
    s = Scanner()
    s.reset()
    logger.debug("Created scanner fixture %r", s)
    return s
