"""
kiotamock Mock Module

Request interception and matching for generated API clients.

This module provides:
- Mock request adapter built on unittest.mock
- Expectation registry and request matching engine
- Composable request predicates
- Template-string and request-builder mocking API
- YAML/JSON fixture loading
"""

from .adapter import MockConfig, MockRequestAdapter
from .builder import SupportsUrlTemplate
from .client import (
    get_mock_adapter,
    get_mockable_client,
    get_url_template,
    mock_client_collection_response,
    mock_client_collection_response_exception,
    mock_client_no_content_response,
    mock_client_no_content_response_exception,
    mock_client_primitive_response,
    mock_client_primitive_response_exception,
    mock_client_response,
    mock_client_response_exception,
    mock_delete,
    mock_delete_collection,
    mock_delete_exception,
    mock_get,
    mock_get_collection,
    mock_get_collection_exception,
    mock_get_exception,
    mock_get_primitive,
    mock_patch,
    mock_post,
    mock_post_collection,
    mock_put,
)
from .expectations import Expectation, ExpectationRegistry
from .fixtures import ExpectationLoader
from .matcher import MatchResult, RequestMatcher
from .predicates import AndPredicate, RequestPredicate, and_
from .request import RequestDescriptor

__all__ = [
    # Adapter
    'MockConfig',
    'MockRequestAdapter',

    # Engine
    'Expectation',
    'ExpectationRegistry',
    'MatchResult',
    'RequestMatcher',
    'RequestDescriptor',
    'SupportsUrlTemplate',

    # Predicates
    'AndPredicate',
    'RequestPredicate',
    'and_',

    # Fixtures
    'ExpectationLoader',

    # Client API
    'get_mock_adapter',
    'get_mockable_client',
    'get_url_template',
    'mock_client_collection_response',
    'mock_client_collection_response_exception',
    'mock_client_no_content_response',
    'mock_client_no_content_response_exception',
    'mock_client_primitive_response',
    'mock_client_primitive_response_exception',
    'mock_client_response',
    'mock_client_response_exception',

    # Builder API
    'mock_delete',
    'mock_delete_collection',
    'mock_delete_exception',
    'mock_get',
    'mock_get_collection',
    'mock_get_collection_exception',
    'mock_get_exception',
    'mock_get_primitive',
    'mock_patch',
    'mock_post',
    'mock_post_collection',
    'mock_put',
]
