import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from board.db import DB_TABLES, KeyValueStore
from board.models import Photo
from board.result import Result
from board.storage import CollectionsManager
from hypothesis import settings
from tests.helpers.factories import make_quote, make_tracks

# Hypothesis configuration for property-based testing
# Register Hypothesis profiles
settings.register_profile("fast", max_examples=50, deadline=None)
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("fast")  # Default to fast profile


def pytest_collection_modifyitems(items):
    """Automatically order tests: unit tests first, then property tests."""
    for item in items:
        if hasattr(item, 'get_closest_marker') and item.get_closest_marker('order'):
            continue

        test_file = str(item.fspath)
        if 'test_unit_' in test_file:
            item.add_marker(pytest.mark.order(1))
        elif 'test_props_' in test_file:
            item.add_marker(pytest.mark.order(2))


@pytest.fixture
def store():
    """Create an in-memory key-value store for testing."""
    kv = KeyValueStore(":memory:", DB_TABLES)
    yield kv
    kv.close()


@pytest.fixture
def collections(store):
    return CollectionsManager(store)


@pytest.fixture
def quote():
    return make_quote()


@pytest.fixture
def photo():
    return Photo(
        id="p1",
        url="https://images.test/full.jpg",
        thumb="https://images.test/small.jpg",
        alt="Sunrise over mountains",
        photographer="Ansel",
        photographer_url="https://images.test/@ansel",
        color="#2C3E50",
    )


@pytest.fixture
def tracks():
    return make_tracks(3)


@pytest.fixture
def track_source(tracks):
    """Mock TrackSource returning the three test tracks."""
    source = Mock()
    source.fetch_tracks = AsyncMock(return_value=Result.success(tracks))
    return source
