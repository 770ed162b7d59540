"""
Shared test fixtures and helpers for the Herald test suite.
"""

import pytest

from herald.config import get_default_config, set_default_config
from herald.testing import ResponseRecorder, make_test_request


@pytest.fixture(autouse=True)
def restore_default_config():
    """Undo set_default_config() calls made by a test."""
    config = get_default_config()
    yield
    set_default_config(config)


@pytest.fixture
def recorder():
    """Writer that records status, headers and body."""
    return ResponseRecorder()


@pytest.fixture
def http_request():
    """Plain GET / request."""
    return make_test_request()


@pytest.fixture
def cancelled_request():
    """Request whose cancel token already fired."""
    return make_test_request(cancelled=True)
