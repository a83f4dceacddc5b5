"""Test configuration for pytest."""

import logging
import os
import pytest


@pytest.fixture(autouse=True)
def configure_test_logging():
    """Configure logging for tests to be minimal."""
    os.environ['ARTCHECK_LOG_LEVEL'] = 'WARNING'

    logging.getLogger().setLevel(logging.WARNING)

    # Absorbed screenshot failures warn by design; keep them out of test output
    logging.getLogger('artcheck.screenshot.heuristics').setLevel(logging.ERROR)
