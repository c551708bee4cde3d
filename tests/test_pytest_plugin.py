"""
Tests for the kiotamock pytest plugin fixtures.

The plugin is registered through the pytest11 entry point once the package is
installed; the fixture tests are skipped when it is not.
"""

import asyncio

import pytest

from kiotamock import MockConfig, MockRequestAdapter, mock_get
from kiotamock import pytest_plugin
from fake_client import ApiClient


def plugin_fixture(request, name):
    if not request.config.pluginmanager.has_plugin('kiotamock'):
        pytest.skip("kiotamock plugin is not installed")
    return request.getfixturevalue(name)


class TestPluginModule:
    """Test the plugin functions directly."""

    def test_fixtures_defined(self):
        assert callable(pytest_plugin.kiota_mock_config)
        assert callable(pytest_plugin.kiota_mock_adapter)

    def test_config_from_environment(self, monkeypatch):
        monkeypatch.setenv('KIOTAMOCK_STRICT', '1')

        assert MockConfig.from_env().strict is True


class TestPluginFixtures:
    """Test the fixtures as a plugin user sees them."""

    def test_config_fixture(self, request, monkeypatch):
        monkeypatch.setenv('KIOTAMOCK_STRICT', 'true')

        config = plugin_fixture(request, 'kiota_mock_config')

        assert isinstance(config, MockConfig)
        assert config.strict is True

    def test_adapter_fixture(self, request):
        adapter = plugin_fixture(request, 'kiota_mock_adapter')

        assert isinstance(adapter, MockRequestAdapter)
        assert len(adapter.registry) == 0

    def test_adapter_drives_client(self, request):
        adapter = plugin_fixture(request, 'kiota_mock_adapter')
        client = ApiClient(adapter)
        mock_get(client.api.funds.by_fund_id('abc'), {'id': 'abc'})

        assert asyncio.run(client.api.funds.by_fund_id('abc').get()) == {'id': 'abc'}
        adapter.send_async.assert_awaited_once()
