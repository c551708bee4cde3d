"""
kiotamock pytest plugin

Fixtures:
- kiota_mock_config: MockConfig built from KIOTAMOCK_* environment variables
- kiota_mock_adapter: fresh MockRequestAdapter per test, reset at teardown
"""

import pytest

from .mock import MockConfig, MockRequestAdapter


@pytest.fixture
def kiota_mock_config() -> MockConfig:
    return MockConfig.from_env()


@pytest.fixture
def kiota_mock_adapter(kiota_mock_config: MockConfig):
    adapter = MockRequestAdapter(kiota_mock_config)
    yield adapter
    adapter.reset()
