"""
pytest configuration and fixtures for Quote Client tests
"""

import pytest
import sys
import tempfile
import shutil
from pathlib import Path

from aioresponses import aioresponses

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from api.client import QuoteApiClient
from utils.config_manager import ApiConfig
from tests.mocks import RecordingCache, RecordingNotifier, RecordingProgress

TEST_BASE_URL = "http://quotes.test/api/"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def api_config():
    """API configuration pointing at a fake host"""
    return ApiConfig(base_url=TEST_BASE_URL, timeout=5.0)


@pytest.fixture
async def api_client(api_config):
    """QuoteApiClient bound to the fake host"""
    client = QuoteApiClient(config=api_config)
    yield client
    await client.close()


@pytest.fixture
def http_mock():
    """Mock all aiohttp requests"""
    with aioresponses() as m:
        yield m


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def progress():
    return RecordingProgress()


@pytest.fixture
def cache():
    return RecordingCache()


@pytest.fixture
def naruto_input():
    """Valid create input used across scenarios"""
    return {
        "quote": "Believe it!",
        "category": "motivation",
        "anime": "Naruto",
        "character": "Naruto Uzumaki",
    }


# Pytest configuration
def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
