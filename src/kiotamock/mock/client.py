"""
kiotamock Client Mocking API

Two ways to stub a generated client:

Template strings, registered on the client:

    client = get_mockable_client(ApiClient)
    mock_client_response(
        client,
        '/api/funds/{fundId}',
        fund,
        lambda req: req.get_path_parameter('fundId') == 'abc'
    )

Request builders, matched by exact builder template and path parameters:

    mock_get(client.api.funds.by_fund_id('abc'), fund)
    mock_delete(client.api.funds.by_fund_id('abc'), error=ApiError('Conflict', 409))
"""

import warnings
from typing import Any, Callable, Iterable, Optional, Type, TypeVar

from ..common.errors import BuilderIntrospectionError
from ..common.url_utils import normalize_template
from .adapter import MockConfig, MockRequestAdapter
from .builder import (
    get_builder_path_parameters,
    get_builder_request_adapter,
    get_builder_url_template,
)
from .expectations import (
    KIND_COLLECTION,
    KIND_NO_CONTENT,
    KIND_OBJECT,
    KIND_PRIMITIVE,
    Expectation,
)
from .predicates import PredicateLike

T = TypeVar('T')


def get_mockable_client(client_cls: Type[T], config: Optional[MockConfig] = None) -> T:
    """
    Create a generated client wired to a fresh MockRequestAdapter.

    Args:
        client_cls: Generated client class; its constructor takes a request adapter
        config: Optional MockConfig for the adapter

    Returns:
        Client instance
    """
    return client_cls(MockRequestAdapter(config))


def get_mock_adapter(builder: Any) -> MockRequestAdapter:
    """
    Get the MockRequestAdapter behind a client or request builder.

    Useful for verification:

        adapter = get_mock_adapter(client)
        adapter.send_async.assert_awaited_once()

    Raises:
        BuilderIntrospectionError: If the builder is not backed by a mock adapter
    """
    adapter = get_builder_request_adapter(builder)
    if not isinstance(adapter, MockRequestAdapter):
        raise BuilderIntrospectionError(
            f"Request adapter of {type(builder).__name__} is {type(adapter).__name__}, not a MockRequestAdapter. "
            f"Ensure the client was created with get_mockable_client()."
        )
    return adapter


def get_url_template(builder: Any) -> str:
    """
    Get the normalized URL template of a request builder.

    Example:
        get_url_template(client.api.funds.by_fund_id('abc'))
        # '/api/funds/{pathParam1}'
    """
    return normalize_template(get_builder_url_template(builder))


# Template-string API

def _register_template(
    client: Any,
    url_template: str,
    kind: str,
    response: Any = None,
    error: Optional[BaseException] = None,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    return get_mock_adapter(client).register(Expectation(
        url_template=url_template,
        method=method,
        kind=kind,
        response=response,
        error=error,
        predicate=predicate
    ))


def mock_client_response(
    client: Any,
    url_template: str,
    response: Any,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    """
    Return an object for requests whose template matches url_template.

    Args:
        client: Client created with get_mockable_client()
        url_template: Template to match; parameter names don't matter,
            "/api/funds/{fundId}" matches "{+baseurl}/api/funds/{fund%2Did}"
        response: Object to return
        predicate: Optional extra condition on the RequestDescriptor
        method: Optional HTTP method; any method matches when omitted

    Returns:
        The registered Expectation
    """
    return _register_template(client, url_template, KIND_OBJECT, response=response,
                              predicate=predicate, method=method)


def mock_client_collection_response(
    client: Any,
    url_template: str,
    response: Optional[Iterable[Any]],
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    """Return a collection for requests whose template matches url_template."""
    return _register_template(client, url_template, KIND_COLLECTION,
                              response=list(response) if response is not None else None,
                              predicate=predicate, method=method)


def mock_client_primitive_response(
    client: Any,
    url_template: str,
    response: Any,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    """Return a primitive value (e.g. a string) for matching requests."""
    return _register_template(client, url_template, KIND_PRIMITIVE, response=response,
                              predicate=predicate, method=method)


def mock_client_no_content_response(
    client: Any,
    url_template: str,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    """Complete no-content requests whose template matches url_template."""
    return _register_template(client, url_template, KIND_NO_CONTENT,
                              predicate=predicate, method=method)


def mock_client_response_exception(
    client: Any,
    url_template: str,
    error: BaseException,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    """Raise error for object requests whose template matches url_template."""
    return _register_template(client, url_template, KIND_OBJECT, error=error,
                              predicate=predicate, method=method)


def mock_client_collection_response_exception(
    client: Any,
    url_template: str,
    error: BaseException,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    return _register_template(client, url_template, KIND_COLLECTION, error=error,
                              predicate=predicate, method=method)


def mock_client_primitive_response_exception(
    client: Any,
    url_template: str,
    error: BaseException,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    return _register_template(client, url_template, KIND_PRIMITIVE, error=error,
                              predicate=predicate, method=method)


def mock_client_no_content_response_exception(
    client: Any,
    url_template: str,
    error: BaseException,
    predicate: Optional[PredicateLike] = None,
    method: Optional[str] = None
) -> Expectation:
    return _register_template(client, url_template, KIND_NO_CONTENT, error=error,
                              predicate=predicate, method=method)


# Request builder API

def _register_builder(
    builder: T,
    method: str,
    kind: str,
    response: Any = None,
    error: Optional[BaseException] = None,
    predicate: Optional[PredicateLike] = None
) -> T:
    # A response that is itself an exception means "raise it"
    if error is None and isinstance(response, BaseException):
        response, error = None, response

    url_template = get_builder_url_template(builder)
    get_mock_adapter(builder).register(Expectation(
        url_template=url_template,
        method=method,
        kind=kind,
        response=response,
        error=error,
        predicate=predicate,
        builder_template=url_template,
        builder_path_parameters=get_builder_path_parameters(builder)
    ))
    return builder


def mock_get(builder: T, response: Any = None, predicate: Optional[PredicateLike] = None,
             error: Optional[BaseException] = None) -> T:
    """
    Mock a GET returning a single object from this exact builder.

    Args:
        builder: Request builder, e.g. client.api.funds.by_fund_id(fund_id)
        response: Object to return (an exception instance is raised instead)
        predicate: Optional extra condition on the RequestDescriptor
        error: Exception to raise instead of returning a response

    Returns:
        The builder, for chaining
    """
    return _register_builder(builder, 'GET', KIND_OBJECT, response, error, predicate)


def mock_get_collection(builder: T, response: Optional[Iterable[Any]] = None,
                        predicate: Optional[PredicateLike] = None,
                        error: Optional[BaseException] = None) -> T:
    """Mock a GET returning a collection from this exact builder."""
    if response is not None and not isinstance(response, BaseException):
        response = list(response)
    return _register_builder(builder, 'GET', KIND_COLLECTION, response, error, predicate)


def mock_get_primitive(builder: T, response: Any = None, predicate: Optional[PredicateLike] = None,
                       error: Optional[BaseException] = None) -> T:
    """Mock a GET returning a primitive value (e.g. a string) from this exact builder."""
    return _register_builder(builder, 'GET', KIND_PRIMITIVE, response, error, predicate)


def mock_post(builder: T, response: Any = None, predicate: Optional[PredicateLike] = None,
              error: Optional[BaseException] = None) -> T:
    """Mock a POST returning a single object from this exact builder."""
    return _register_builder(builder, 'POST', KIND_OBJECT, response, error, predicate)


def mock_post_collection(builder: T, response: Optional[Iterable[Any]] = None,
                         predicate: Optional[PredicateLike] = None,
                         error: Optional[BaseException] = None) -> T:
    if response is not None and not isinstance(response, BaseException):
        response = list(response)
    return _register_builder(builder, 'POST', KIND_COLLECTION, response, error, predicate)


def mock_put(builder: T, response: Any = None, predicate: Optional[PredicateLike] = None,
             error: Optional[BaseException] = None) -> T:
    return _register_builder(builder, 'PUT', KIND_OBJECT, response, error, predicate)


def mock_patch(builder: T, response: Any = None, predicate: Optional[PredicateLike] = None,
               error: Optional[BaseException] = None) -> T:
    return _register_builder(builder, 'PATCH', KIND_OBJECT, response, error, predicate)


def mock_delete(builder: T, response: Any = None, predicate: Optional[PredicateLike] = None,
                error: Optional[BaseException] = None, returns_content: bool = False) -> T:
    """
    Mock a DELETE on this exact builder.

    Without a response the request is answered on the no-content entry
    point; with one, on the single-object entry point (some APIs return the
    deleted object).

    Args:
        builder: Request builder, e.g. client.api.funds.by_fund_id(fund_id)
        response: Object to return (an exception instance is raised instead)
        predicate: Optional extra condition on the RequestDescriptor
        error: Exception to raise instead of returning a response
        returns_content: Answer on the single-object entry point even without
            a response, for DELETE endpoints whose builder awaits send_async

    Returns:
        The builder, for chaining
    """
    if isinstance(response, BaseException) and error is None:
        response, error = None, response
    kind = KIND_OBJECT if response is not None or returns_content else KIND_NO_CONTENT
    return _register_builder(builder, 'DELETE', kind, response, error, predicate)


def mock_delete_collection(builder: T, response: Optional[Iterable[Any]] = None,
                           predicate: Optional[PredicateLike] = None,
                           error: Optional[BaseException] = None) -> T:
    if response is not None and not isinstance(response, BaseException):
        response = list(response)
    return _register_builder(builder, 'DELETE', KIND_COLLECTION, response, error, predicate)


def _deprecated(old: str, new: Callable) -> None:
    warnings.warn(
        f"{old}() is deprecated; use {new.__name__}(builder, error=...) instead. "
        f"It will be removed in a future version.",
        DeprecationWarning,
        stacklevel=3
    )


def mock_get_exception(builder: T, error: BaseException, predicate: Optional[PredicateLike] = None) -> T:
    _deprecated('mock_get_exception', mock_get)
    return mock_get(builder, predicate=predicate, error=error)


def mock_get_collection_exception(builder: T, error: BaseException,
                                  predicate: Optional[PredicateLike] = None) -> T:
    _deprecated('mock_get_collection_exception', mock_get_collection)
    return mock_get_collection(builder, predicate=predicate, error=error)


def mock_delete_exception(builder: T, error: BaseException, predicate: Optional[PredicateLike] = None) -> T:
    _deprecated('mock_delete_exception', mock_delete)
    return mock_delete(builder, predicate=predicate, error=error)
