"""
kiotamock Mock Request Adapter

Stand-in for the generated client's request adapter. Every ``send_*`` entry
point is an ``unittest.mock.AsyncMock`` whose side effect consults the
expectation registry, so code under test gets the registered payload (or
error) and tests can still use ``assert_awaited_once()`` and friends.

Features:
- Expectation registry and matcher per adapter (one per mocked client)
- Strict mode that fails the test on unmatched requests
- Recording of received and unmatched requests for debugging
"""

from __future__ import annotations  # Enable forward references for type hints

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import yaml

from ..common.errors import UnmatchedRequestError
from .expectations import (
    KIND_COLLECTION,
    KIND_NO_CONTENT,
    KIND_OBJECT,
    KIND_PRIMITIVE,
    KIND_PRIMITIVE_COLLECTION,
    Expectation,
    ExpectationRegistry,
)
from .fixtures import ExpectationLoader
from .matcher import MatchResult, RequestMatcher, STRATEGY_POSITIONAL
from .request import RequestDescriptor

ENV_PREFIX = 'KIOTAMOCK_'


@dataclass
class MockConfig:
    """Configuration for mock adapter behavior."""

    # Matching
    matching_strategy: str = STRATEGY_POSITIONAL  # positional (suffix, wildcard deprecated)
    case_sensitive: bool = False

    # Unmatched requests
    strict: bool = False  # Raise UnmatchedRequestError instead of returning default_response
    default_response: Any = None

    # Recording
    record_requests: bool = True

    # Logging; sets the level of the shared "kiotamock.adapter" logger, so the
    # last adapter created decides it for the whole process
    log_level: str = "warning"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'MockConfig':
        """Load config from YAML file (top level or under a 'kiotamock' key)."""
        with open(yaml_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {yaml_path}, got {type(data).__name__}")

        return cls.from_dict(data.get('kiotamock', data))

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'MockConfig':
        """
        Create config from KIOTAMOCK_* environment variables.

        Example:
            KIOTAMOCK_STRICT=true KIOTAMOCK_LOG_LEVEL=debug pytest
        """
        environ = os.environ if environ is None else environ
        config = cls()

        if f'{ENV_PREFIX}CONFIG' in environ:
            config = cls.from_yaml(environ[f'{ENV_PREFIX}CONFIG'])

        if f'{ENV_PREFIX}MATCHING_STRATEGY' in environ:
            config.matching_strategy = environ[f'{ENV_PREFIX}MATCHING_STRATEGY']
        if f'{ENV_PREFIX}STRICT' in environ:
            config.strict = _parse_bool(environ[f'{ENV_PREFIX}STRICT'])
        if f'{ENV_PREFIX}CASE_SENSITIVE' in environ:
            config.case_sensitive = _parse_bool(environ[f'{ENV_PREFIX}CASE_SENSITIVE'])
        if f'{ENV_PREFIX}RECORD_REQUESTS' in environ:
            config.record_requests = _parse_bool(environ[f'{ENV_PREFIX}RECORD_REQUESTS'])
        if f'{ENV_PREFIX}LOG_LEVEL' in environ:
            config.log_level = environ[f'{ENV_PREFIX}LOG_LEVEL']

        return config


def _parse_bool(value: str) -> bool:
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


class MockRequestAdapter:
    """
    Request adapter that answers from registered expectations.

    Example:
        adapter = MockRequestAdapter()
        adapter.register(Expectation('/api/funds/{fundId}', method='GET', response=fund))

        client = ApiClient(adapter)
        result = await client.api.funds.by_fund_id('abc').get()

        adapter.send_async.assert_awaited_once()
    """

    def __init__(self, config: Optional[MockConfig] = None, base_url: str = ''):
        """
        Initialize mock adapter.

        Args:
            config: Optional MockConfig for adapter behavior
            base_url: Value reported as the adapter's base URL
        """
        self.config = config or MockConfig()
        self.base_url = base_url

        self.logger = logging.getLogger("kiotamock.adapter")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.registry = ExpectationRegistry(case_sensitive=self.config.case_sensitive)
        self.matcher = RequestMatcher(
            self.registry,
            strategy=self.config.matching_strategy,
            case_sensitive=self.config.case_sensitive
        )

        self.received_requests: List[RequestDescriptor] = []
        self.unmatched_requests: List[Tuple[RequestDescriptor, MatchResult]] = []

        self.send_async = AsyncMock(side_effect=self._responder(KIND_OBJECT))
        self.send_collection_async = AsyncMock(side_effect=self._responder(KIND_COLLECTION))
        self.send_primitive_async = AsyncMock(side_effect=self._responder(KIND_PRIMITIVE))
        self.send_collection_of_primitive_async = AsyncMock(
            side_effect=self._responder(KIND_PRIMITIVE_COLLECTION)
        )
        self.send_no_response_content_async = AsyncMock(side_effect=self._responder(KIND_NO_CONTENT))

        # Members of the adapter surface that the engine does not interpret
        self.get_serialization_writer_factory = MagicMock()
        self.enable_backing_store = MagicMock()
        self.convert_to_native_async = AsyncMock(return_value=None)

    def register(self, expectation: Expectation) -> Expectation:
        """Register an expectation; earlier registrations win on ties."""
        stored = self.registry.register(expectation)
        self.logger.debug(f"Registered #{stored.sequence}: {stored.describe()}")
        return stored

    def _responder(self, kind: str):
        def respond(request_info: Any, *args: Any, **kwargs: Any) -> Any:
            return self.dispatch(request_info, kind)
        return respond

    def dispatch(self, request_info: Any, kind: str) -> Any:
        """
        Answer a request from the registry.

        Args:
            request_info: RequestInformation-like object from the client
            kind: Adapter entry point that received the request

        Returns:
            The registered response, or the configured default

        Raises:
            The registered error for a matching error expectation, or
            UnmatchedRequestError in strict mode
        """
        request = RequestDescriptor.from_request_information(request_info)
        if self.config.record_requests:
            self.received_requests.append(request)

        result = self.matcher.find_match(request, kind=kind)

        if result.matched:
            expectation = result.expectation
            if expectation.raises:
                self.logger.debug(f"Raising {type(expectation.error).__name__} for {request.method} {request.url_template}")
                raise expectation.error
            return expectation.response

        self.logger.warning(f"No match found for {request.method} {request.url_template} ({result.reason})")
        if self.config.record_requests:
            self.unmatched_requests.append((request, result))

        if self.config.strict:
            raise UnmatchedRequestError(self._unmatched_message(request, kind, result))

        return None if kind == KIND_NO_CONTENT else self.config.default_response

    def _unmatched_message(self, request: RequestDescriptor, kind: str, result: MatchResult) -> str:
        lines = [
            f"No mock rule matched request: {request.method} {request.url_template} [{kind}]",
            f"  Normalized template: {result.normalized_template or '(none)'}",
            f"  Reason: {result.reason}",
        ]
        for rejected in result.rejected:
            lines.append(f"  Rejected: {rejected}")
        if len(self.registry):
            lines.append(f"  Registered expectations: {len(self.registry)}")
        return '\n'.join(lines)

    def load_expectations(self, path: str) -> List[Expectation]:
        """Register every expectation declared in a YAML or JSON fixture file."""
        loaded = ExpectationLoader(path).load()
        return [self.register(expectation) for expectation in loaded]

    def reset(self):
        """Forget expectations, recorded requests and mock call history."""
        self.registry.clear()
        self.received_requests.clear()
        self.unmatched_requests.clear()
        for sender in (
            self.send_async,
            self.send_collection_async,
            self.send_primitive_async,
            self.send_collection_of_primitive_async,
            self.send_no_response_content_async,
        ):
            sender.reset_mock()
