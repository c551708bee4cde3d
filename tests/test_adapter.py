"""
Tests for kiotamock Mock Request Adapter

Tests the adapter including:
- MockConfig defaults, dict, YAML and environment loading
- Dispatch of responses and errors per entry point
- Strict and lenient handling of unmatched requests
- Request recording and reset
- AsyncMock call verification
"""

import asyncio
import json
import logging
import tempfile
from pathlib import Path

import pytest
import yaml

from kiotamock.common.errors import ApiError, UnmatchedRequestError
from kiotamock.mock.adapter import MockConfig, MockRequestAdapter
from kiotamock.mock.expectations import (
    KIND_COLLECTION,
    KIND_NO_CONTENT,
    KIND_OBJECT,
    KIND_PRIMITIVE,
    KIND_PRIMITIVE_COLLECTION,
    Expectation,
)
from kiotamock.mock.request import RequestDescriptor


def fund_request(fund_id='abc', method='GET'):
    return RequestDescriptor(
        method=method,
        url_template='{+baseurl}/api/funds/{fund%2Did}',
        path_parameters={'fund%2Did': fund_id, 'baseurl': ''}
    )


@pytest.fixture
def adapter():
    return MockRequestAdapter()


@pytest.fixture
def strict_adapter():
    return MockRequestAdapter(MockConfig(strict=True))


@pytest.fixture
def temp_config_file():
    """Create temporary YAML config file."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.safe_dump({
            'kiotamock': {
                'strict': True,
                'case_sensitive': True,
                'log_level': 'debug',
                'unknown_option': 42
            }
        }, f)
        temp_path = f.name

    yield temp_path

    Path(temp_path).unlink()


class TestMockConfig:
    """Test MockConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = MockConfig()

        assert config.matching_strategy == 'positional'
        assert config.strict is False
        assert config.case_sensitive is False
        assert config.record_requests is True
        assert config.default_response is None
        assert config.log_level == 'warning'

    def test_from_dict_ignores_unknown_keys(self):
        config = MockConfig.from_dict({'strict': True, 'port': 8080})

        assert config.strict is True
        assert not hasattr(config, 'port')

    def test_from_dict_none(self):
        assert MockConfig.from_dict(None) == MockConfig()

    def test_from_yaml(self, temp_config_file):
        """Test loading config from a YAML file with a kiotamock section."""
        config = MockConfig.from_yaml(temp_config_file)

        assert config.strict is True
        assert config.case_sensitive is True
        assert config.log_level == 'debug'

    def test_from_yaml_top_level(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text('strict: true\ndefault_response: fallback\n')

        config = MockConfig.from_yaml(str(config_file))

        assert config.strict is True
        assert config.default_response == 'fallback'

    def test_from_yaml_rejects_non_mapping(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text('- strict\n')

        with pytest.raises(ValueError, match='Expected a mapping'):
            MockConfig.from_yaml(str(config_file))

    def test_from_env(self):
        config = MockConfig.from_env({
            'KIOTAMOCK_STRICT': 'true',
            'KIOTAMOCK_CASE_SENSITIVE': '0',
            'KIOTAMOCK_RECORD_REQUESTS': 'no',
            'KIOTAMOCK_LOG_LEVEL': 'info',
            'UNRELATED': 'x'
        })

        assert config.strict is True
        assert config.case_sensitive is False
        assert config.record_requests is False
        assert config.log_level == 'info'

    def test_from_env_empty(self):
        assert MockConfig.from_env({}) == MockConfig()

    def test_from_env_config_file_overridden(self, temp_config_file):
        config = MockConfig.from_env({
            'KIOTAMOCK_CONFIG': temp_config_file,
            'KIOTAMOCK_STRICT': 'false'
        })

        assert config.strict is False
        assert config.case_sensitive is True

    def test_log_level_applies_to_shared_logger(self):
        MockRequestAdapter(MockConfig(log_level='debug'))
        assert logging.getLogger('kiotamock.adapter').level == logging.DEBUG

        MockRequestAdapter()
        assert logging.getLogger('kiotamock.adapter').level == logging.WARNING

    def test_deprecated_strategy_from_config(self):
        with pytest.warns(DeprecationWarning):
            adapter = MockRequestAdapter(MockConfig(matching_strategy='wildcard'))

        assert adapter.matcher.strategy == 'positional'


class TestDispatch:
    """Test answering requests from registered expectations."""

    def test_returns_registered_response(self, adapter):
        fund = {'id': 'abc'}
        adapter.register(Expectation('/api/funds/{fundId}', method='GET', response=fund))

        assert adapter.dispatch(fund_request(), KIND_OBJECT) is fund

    def test_raises_registered_error(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', method='GET', error=ApiError('Not found', 404)))

        with pytest.raises(ApiError) as exc_info:
            adapter.dispatch(fund_request(), KIND_OBJECT)

        assert exc_info.value.response_status_code == 404

    def test_kind_must_match_entry_point(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', method='GET', kind=KIND_COLLECTION, response=[1]))

        assert adapter.dispatch(fund_request(), KIND_OBJECT) is None
        assert adapter.dispatch(fund_request(), KIND_COLLECTION) == [1]

    def test_unmatched_returns_default_response(self):
        adapter = MockRequestAdapter(MockConfig(default_response='fallback'))

        assert adapter.dispatch(fund_request(), KIND_OBJECT) == 'fallback'

    def test_unmatched_no_content_returns_none(self):
        adapter = MockRequestAdapter(MockConfig(default_response='fallback'))

        assert adapter.dispatch(fund_request(method='DELETE'), KIND_NO_CONTENT) is None

    def test_unmatched_logs_warning(self, adapter, caplog):
        with caplog.at_level('WARNING', logger='kiotamock.adapter'):
            adapter.dispatch(fund_request(), KIND_OBJECT)

        assert 'No match found for GET {+baseurl}/api/funds/{fund%2Did}' in caplog.text

    def test_strict_raises_unmatched_error(self, strict_adapter):
        strict_adapter.register(Expectation(
            '/api/funds/{fundId}', method='GET',
            predicate=lambda req: req.get_path_parameter('fundId') == 'xyz'
        ))

        with pytest.raises(UnmatchedRequestError) as exc_info:
            strict_adapter.dispatch(fund_request(), KIND_OBJECT)

        message = str(exc_info.value)
        assert message.startswith('No mock rule matched request: GET {+baseurl}/api/funds/{fund%2Did} [object]')
        assert 'Normalized template: /api/funds/{pathParam1}' in message
        assert 'Rejected: GET /api/funds/{pathParam1}' in message
        assert 'Registered expectations: 1' in message

    def test_unmatched_error_is_assertion_error(self, strict_adapter):
        with pytest.raises(AssertionError):
            strict_adapter.dispatch(fund_request(), KIND_OBJECT)

    def test_accepts_request_information_objects(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', method='GET', response='ok'))
        request_info = type('RequestInformation', (), {
            'http_method': 'get',
            'url_template': '{+baseurl}/api/funds/{fund%2Did}',
            'path_parameters': {'fund%2Did': 'abc'}
        })()

        assert adapter.dispatch(request_info, KIND_OBJECT) == 'ok'


class TestRecording:
    """Test recording of received and unmatched requests."""

    def test_records_received_requests(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', response='ok'))

        adapter.dispatch(fund_request('abc'), KIND_OBJECT)
        adapter.dispatch(fund_request('xyz'), KIND_OBJECT)

        assert [r.path_parameters['fund%2Did'] for r in adapter.received_requests] == ['abc', 'xyz']
        assert adapter.unmatched_requests == []

    def test_records_unmatched_requests(self, adapter):
        adapter.dispatch(fund_request(), KIND_OBJECT)

        assert len(adapter.unmatched_requests) == 1
        request, result = adapter.unmatched_requests[0]
        assert request.method == 'GET'
        assert result.matched is False

    def test_recording_disabled(self):
        adapter = MockRequestAdapter(MockConfig(record_requests=False))

        adapter.dispatch(fund_request(), KIND_OBJECT)

        assert adapter.received_requests == []
        assert adapter.unmatched_requests == []

    def test_reset(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', response='ok'))
        asyncio.run(adapter.send_async(fund_request()))

        adapter.reset()

        assert len(adapter.registry) == 0
        assert adapter.received_requests == []
        adapter.send_async.assert_not_awaited()
        assert asyncio.run(adapter.send_async(fund_request())) is None


class TestAsyncEntryPoints:
    """Test the AsyncMock send_* entry points."""

    def test_send_async(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', method='GET', response={'id': 'abc'}))

        result = asyncio.run(adapter.send_async(fund_request(), 'Fund.create_from_discriminator_value', {}))

        assert result == {'id': 'abc'}
        adapter.send_async.assert_awaited_once()

    @pytest.mark.parametrize('sender,kind,response', [
        ('send_collection_async', KIND_COLLECTION, [{'id': 'abc'}]),
        ('send_primitive_async', KIND_PRIMITIVE, 'healthy'),
        ('send_collection_of_primitive_async', KIND_PRIMITIVE_COLLECTION, ['a', 'b']),
    ])
    def test_entry_points_use_their_kind(self, adapter, sender, kind, response):
        adapter.register(Expectation('/api/funds/{fundId}', kind=kind, response=response))

        result = asyncio.run(getattr(adapter, sender)(fund_request(), 'factory', {}))

        assert result == response

    def test_send_no_response_content_async(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', method='DELETE', kind=KIND_NO_CONTENT))

        result = asyncio.run(adapter.send_no_response_content_async(fund_request(method='DELETE'), {}))

        assert result is None
        adapter.send_no_response_content_async.assert_awaited_once()
        assert adapter.unmatched_requests == []

    def test_send_async_raises(self, adapter):
        adapter.register(Expectation('/api/funds/{fundId}', error=ApiError('Conflict', 409)))

        with pytest.raises(ApiError, match='Conflict'):
            asyncio.run(adapter.send_async(fund_request()))

    def test_await_args_expose_request(self, adapter):
        asyncio.run(adapter.send_async(fund_request('abc')))

        (request_info, *_), _ = adapter.send_async.await_args
        assert request_info.path_parameters['fund%2Did'] == 'abc'


class TestLoadExpectations:
    """Test registering expectations from fixture files."""

    def test_load_json(self, adapter, tmp_path):
        fixture = tmp_path / 'mocks.json'
        fixture.write_text(json.dumps({
            'expectations': [
                {
                    'method': 'GET',
                    'url_template': '/api/funds/{fundId}',
                    'path_parameters': {'fundId': 'abc'},
                    'response': {'id': 'abc'}
                }
            ]
        }))

        loaded = adapter.load_expectations(str(fixture))

        assert [e.sequence for e in loaded] == [0]
        assert adapter.dispatch(fund_request('abc'), KIND_OBJECT) == {'id': 'abc'}
        assert adapter.dispatch(fund_request('xyz'), KIND_OBJECT) is None
