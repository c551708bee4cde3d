"""
kiotamock Common Utilities

Template normalization, parameter naming variations and error types shared
across kiotamock modules.
"""

from .errors import (
    ApiError,
    BuilderIntrospectionError,
    KiotaMockError,
    ParameterNotFoundError,
    UnmatchedRequestError,
)
from .naming import (
    get_parameter,
    percent_encode,
    query_variations_for,
    to_kebab_case,
    to_pascal_case,
    try_get_parameter,
    variations_for,
)
from .url_utils import BASE_URL_MARKER, TemplateNormalizer, normalize_template

__all__ = [
    # Errors
    'ApiError',
    'BuilderIntrospectionError',
    'KiotaMockError',
    'ParameterNotFoundError',
    'UnmatchedRequestError',

    # Naming
    'get_parameter',
    'percent_encode',
    'query_variations_for',
    'to_kebab_case',
    'to_pascal_case',
    'try_get_parameter',
    'variations_for',

    # Templates
    'BASE_URL_MARKER',
    'TemplateNormalizer',
    'normalize_template',
]
