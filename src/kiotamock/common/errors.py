"""
kiotamock Errors

Exception types raised by the mocking engine and its helpers.
"""

from typing import Any, List, Optional
from urllib.parse import unquote


class KiotaMockError(Exception):
    """Base class for kiotamock errors."""


class ParameterNotFoundError(KiotaMockError, LookupError):
    """
    Raised when no spelling of a logical parameter name exists in a request.

    The message lists every spelling that was tried together with the keys
    the generator actually used, so a test author can fix the lookup without
    opening the generated client.
    """

    def __init__(
        self,
        name: str,
        attempted: List[str],
        available_keys: List[str],
        template: Optional[str] = None,
        normalized_template: Optional[str] = None,
        kind: str = 'path'
    ):
        self.name = name
        self.attempted = list(attempted)
        self.available_keys = list(available_keys)
        self.template = template
        self.normalized_template = normalized_template
        self.kind = kind
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        lines = [
            f"{self.kind.capitalize()} parameter '{self.name}' not found.",
            f"  Tried: {', '.join(self.attempted)}",
        ]
        if self.template:
            lines.append(f"  URL template: {self.template}")
        if self.normalized_template:
            lines.append(f"  Normalized template: {self.normalized_template}")
        if self.available_keys:
            lines.append(f"  Available keys: {', '.join(describe_key(k) for k in self.available_keys)}")
        else:
            lines.append("  Available keys: (none)")
        return '\n'.join(lines)


class BuilderIntrospectionError(KiotaMockError, TypeError):
    """Raised when a request builder does not expose template, parameters or adapter."""


class UnmatchedRequestError(AssertionError):
    """Raised in strict mode when a request matches no registered expectation."""


class ApiError(Exception):
    """
    Generic API error for declaring error responses.

    Mirrors the shape of the generator's own API exception: a message and the
    HTTP status code that the real server would have returned.
    """

    def __init__(self, message: str = '', response_status_code: Optional[int] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        self.response_status_code = response_status_code
        self.extra = extra

    def __repr__(self) -> str:
        return f"ApiError({self.message!r}, response_status_code={self.response_status_code!r})"


def describe_key(key: str) -> str:
    """Render a parameter key, adding its decoded form when it is percent-encoded."""
    decoded = unquote(key)
    if decoded != key:
        return f"{key} ({decoded})"
    return key
