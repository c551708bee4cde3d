"""
kiotamock Naming Variations

Resolves a logical parameter name (as a test author writes it) to the key a
code generator actually used. Generators rename parameters to kebab-case,
percent-encode the hyphen, or prefix OData query options with ``$``, so a
lookup tries each spelling in a fixed order and the first hit wins.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ParameterNotFoundError
from .url_utils import normalize_template

_UPPER = re.compile(r'(?<!^)(?=[A-Z])')


def to_kebab_case(name: str) -> str:
    """
    Convert a camelCase or PascalCase name to kebab-case.

    Args:
        name: Parameter name (e.g. "fundId")

    Returns:
        Kebab-case name (e.g. "fund-id")
    """
    return _UPPER.sub('-', name).lower()


def to_pascal_case(name: str) -> str:
    """Uppercase the first character only."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def percent_encode(value: str) -> str:
    """
    Percent-encode every non-alphanumeric character with uppercase hex.

    Unlike ``urllib.parse.quote`` this also encodes ``-``, ``_``, ``.`` and
    ``~``, which is how generators embed hyphenated names in raw templates
    (``fund-id`` -> ``fund%2Did``).
    """
    encoded = []
    for char in value:
        if char.isascii() and char.isalnum():
            encoded.append(char)
        else:
            encoded.extend(f'%{byte:02X}' for byte in char.encode('utf-8'))
    return ''.join(encoded)


def _dedupe(names: List[str]) -> List[str]:
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


def variations_for(name: str) -> List[str]:
    """
    Candidate spellings of a path parameter name, in priority order.

    Order: original, kebab-case, percent-encoded kebab-case, PascalCase.

    Args:
        name: Logical parameter name

    Returns:
        Non-empty list starting with the original spelling

    Example:
        >>> variations_for("fundId")
        ['fundId', 'fund-id', 'fund%2Did', 'FundId']
    """
    kebab = to_kebab_case(name)
    return _dedupe([
        name,
        kebab,
        percent_encode(kebab),
        to_pascal_case(name),
    ])


def query_variations_for(name: str) -> List[str]:
    """
    Candidate spellings of a query parameter name, in priority order.

    Adds the OData ``$name`` prefix and its encoded form ``%24name`` right
    after the original spelling, since query templates commonly use
    ``$select``, ``$filter`` and friends.
    """
    kebab = to_kebab_case(name)
    return _dedupe([
        name,
        f'${name}',
        f'%24{name}',
        kebab,
        percent_encode(kebab),
        to_pascal_case(name),
    ])


def try_get_parameter(
    parameters: Optional[Mapping[str, Any]],
    name: str,
    query: bool = False
) -> Tuple[bool, Any]:
    """
    Look up a parameter by logical name, trying every naming variation.

    Args:
        parameters: Parameter map keyed by generator-chosen names
        name: Logical parameter name
        query: Use query parameter variations

    Returns:
        (found, value) tuple; value is None when not found
    """
    if not parameters:
        return False, None

    candidates = query_variations_for(name) if query else variations_for(name)
    for candidate in candidates:
        if candidate in parameters:
            return True, parameters[candidate]
    return False, None


def get_parameter(
    parameters: Optional[Mapping[str, Any]],
    name: str,
    template: Optional[str] = None,
    query: bool = False
) -> Any:
    """
    Look up a parameter by logical name or raise a descriptive error.

    Args:
        parameters: Parameter map keyed by generator-chosen names
        name: Logical parameter name
        template: URL template the parameters belong to (for the diagnostic)
        query: Use query parameter variations

    Returns:
        The parameter value

    Raises:
        ParameterNotFoundError: If no variation of the name is present
    """
    found, value = try_get_parameter(parameters, name, query=query)
    if found:
        return value

    available: Dict[str, Any] = dict(parameters or {})
    raise ParameterNotFoundError(
        name=name,
        attempted=query_variations_for(name) if query else variations_for(name),
        available_keys=list(available.keys()),
        template=template,
        normalized_template=normalize_template(template) if template else None,
        kind='query' if query else 'path'
    )
