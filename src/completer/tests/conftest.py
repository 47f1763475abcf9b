"""
Pytest fixtures for jscomplete tests.
"""

import pytest

from jscomplete.cache import StaticCache
from jscomplete.store import TypeStore


@pytest.fixture
def store():
    """An empty symbol store."""
    return TypeStore()


@pytest.fixture
def cache():
    """A cache coordinator not shared with other tests."""
    return StaticCache()
