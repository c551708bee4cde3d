"""
kiotamock Request Builder Access

Reads the URL template, path parameters and request adapter off generated
request builders. Builders are accessed through a small capability protocol:
each of ``url_template``, ``path_parameters`` and ``request_adapter`` may be a
plain attribute or a zero-argument method.
"""

from typing import Any, Dict, Protocol, runtime_checkable

from ..common.errors import BuilderIntrospectionError

BASE_URL_PARAMETER = 'baseurl'


@runtime_checkable
class SupportsUrlTemplate(Protocol):
    """Capability exposed by generated (or hand-written) request builders."""

    url_template: Any
    path_parameters: Any


def _read(builder: Any, name: str) -> Any:
    value = getattr(builder, name, None)
    if callable(value):
        value = value()
    return value


def get_builder_url_template(builder: Any) -> str:
    """
    Get the raw URL template of a request builder.

    Raises:
        BuilderIntrospectionError: If the builder has no non-empty template
    """
    template = _read(builder, 'url_template')
    if not isinstance(template, str) or not template:
        raise BuilderIntrospectionError(
            f"url_template is missing or empty for request builder of type {type(builder).__name__}. "
            f"Builders must expose 'url_template' as an attribute or method."
        )
    return template


def get_builder_path_parameters(builder: Any) -> Dict[str, Any]:
    """
    Get a copy of a request builder's path parameters.

    Raises:
        BuilderIntrospectionError: If the builder exposes no parameter mapping
    """
    parameters = _read(builder, 'path_parameters')
    if parameters is None or not hasattr(parameters, 'items'):
        raise BuilderIntrospectionError(
            f"path_parameters is missing for request builder of type {type(builder).__name__}. "
            f"Ensure the request builder was properly initialized."
        )
    return dict(parameters.items())


def get_builder_request_adapter(builder: Any) -> Any:
    """
    Get the request adapter a builder dispatches through.

    Raises:
        BuilderIntrospectionError: If the adapter is missing
    """
    adapter = getattr(builder, 'request_adapter', None)
    if adapter is None:
        raise BuilderIntrospectionError(
            f"request_adapter is None for request builder of type {type(builder).__name__}. "
            f"Ensure the client was created with get_mockable_client()."
        )
    return adapter
