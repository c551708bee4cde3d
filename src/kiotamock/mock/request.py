"""
kiotamock Request Descriptor

Read-only snapshot of a simulated request, taken when the code under test
hands a request object to the mock adapter.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..common.naming import get_parameter, try_get_parameter
from ..common.url_utils import normalize_template


def _frozen(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


def method_name(method: Any) -> Optional[str]:
    """
    Normalize an HTTP method to an uppercase string.

    Accepts plain strings and enum members (uses ``.value`` then ``.name``).
    """
    if method is None:
        return None
    value = getattr(method, 'value', method)
    if not isinstance(value, str):
        value = getattr(method, 'name', str(method))
    return value.upper()


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable view of one simulated request."""

    method: Optional[str]
    url_template: Optional[str]
    path_parameters: Mapping[str, Any] = field(default_factory=dict)
    query_parameters: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, Any] = field(default_factory=dict)
    content: Any = None

    def __post_init__(self):
        object.__setattr__(self, 'method', method_name(self.method))
        object.__setattr__(self, 'path_parameters', _frozen(self.path_parameters))
        object.__setattr__(self, 'query_parameters', _frozen(self.query_parameters))
        object.__setattr__(self, 'headers', _frozen(self.headers))

    @classmethod
    def from_request_information(cls, request_info: Any) -> 'RequestDescriptor':
        """
        Snapshot a generator RequestInformation-like object.

        Missing attributes default to empty values, so partially populated
        request objects can still be matched.
        """
        if isinstance(request_info, RequestDescriptor):
            return request_info

        return cls(
            method=getattr(request_info, 'http_method', None),
            url_template=getattr(request_info, 'url_template', None),
            path_parameters=getattr(request_info, 'path_parameters', None),
            query_parameters=getattr(request_info, 'query_parameters', None),
            headers=_header_dict(getattr(request_info, 'headers', None)),
            content=getattr(request_info, 'content', None)
        )

    @property
    def normalized_template(self) -> str:
        """Normalized URL template, or an empty string when there is no template."""
        if not self.url_template:
            return ''
        return normalize_template(self.url_template)

    @property
    def has_content(self) -> bool:
        return self.content is not None

    def get_path_parameter(self, name: str) -> Any:
        """
        Get a path parameter by logical name, trying naming variations.

        Raises:
            ParameterNotFoundError: If no variation is present
        """
        return get_parameter(self.path_parameters, name, template=self.url_template)

    def try_get_path_parameter(self, name: str) -> Tuple[bool, Any]:
        return try_get_parameter(self.path_parameters, name)

    def get_query_parameter(self, name: str) -> Any:
        """
        Get a query parameter by logical name, trying OData and naming variations.

        Raises:
            ParameterNotFoundError: If no variation is present
        """
        return get_parameter(self.query_parameters, name, template=self.url_template, query=True)

    def try_get_query_parameter(self, name: str) -> Tuple[bool, Any]:
        return try_get_parameter(self.query_parameters, name, query=True)

    def has_header(self, name: str) -> bool:
        """Case-insensitive header presence check."""
        lowered = name.lower()
        return any(key.lower() == lowered for key in self.headers)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'method': self.method,
            'url_template': self.url_template,
            'normalized_template': self.normalized_template,
            'path_parameters': dict(self.path_parameters),
            'query_parameters': dict(self.query_parameters),
            'headers': dict(self.headers),
            'has_content': self.has_content
        }


def _header_dict(headers: Any) -> Dict[str, Any]:
    """Flatten a header container into a plain dict."""
    if headers is None:
        return {}
    if isinstance(headers, Mapping):
        return dict(headers)
    # Header collections that are not mappings but expose their items
    get_all = getattr(headers, 'get_all', None)
    if callable(get_all):
        return dict(get_all())
    items = getattr(headers, 'items', None)
    if callable(items):
        return dict(items())
    return {}
