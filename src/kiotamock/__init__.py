"""
kiotamock - HTTP response stubbing for generated API clients

Register canned responses or errors for the endpoints of a generated client
and let the code under test call it without any network I/O.
"""

from .common import (
    ApiError,
    ParameterNotFoundError,
    UnmatchedRequestError,
    normalize_template,
    variations_for,
)
from .mock import *  # noqa: F401,F403
from .mock import __all__ as _mock_all

__all__ = [
    'ApiError',
    'ParameterNotFoundError',
    'UnmatchedRequestError',
    'normalize_template',
    'variations_for',
] + list(_mock_all)

__version__ = '1.0.0'
