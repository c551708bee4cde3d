"""
kiotamock URL Template Utilities

Shared URL template parsing, normalization, and matching utilities.
"""

import re
from typing import Optional, Tuple

BASE_URL_MARKER = '{+baseurl}'

# One placeholder per match: either a query fragment {?a,b} or a path placeholder {name}
_PLACEHOLDER = re.compile(r'\{\?([^{}]*)\}|\{([^{}?][^{}]*)\}')
_QUERY_FRAGMENT = re.compile(r'\{\?([^{}]*)\}')
_PATH_TOKEN = re.compile(r'\{pathParam\d+\}')
_QUERY_TOKEN = re.compile(r'queryParam\d+')


class TemplateNormalizer:
    """Handles URL template normalization and structural comparison."""

    @staticmethod
    def strip_base_url(template: str) -> str:
        """
        Remove exactly one leading base-URL marker.

        Args:
            template: Raw URL template

        Returns:
            Template without the {+baseurl} prefix
        """
        if template.startswith(BASE_URL_MARKER):
            return template[len(BASE_URL_MARKER):]
        return template

    @staticmethod
    def split_query_fragment(template: str) -> Tuple[str, Optional[str]]:
        """
        Split a template into its path part and the query parameter names.

        Args:
            template: URL template (with or without base URL marker)

        Returns:
            Tuple of (template without the query fragment, comma-joined names
            or None when there is no query fragment)
        """
        match = _QUERY_FRAGMENT.search(template)
        if not match:
            return template, None
        return template[:match.start()] + template[match.end():], match.group(1)

    @staticmethod
    def normalize(template: Optional[str]) -> str:
        """
        Normalize a generator URL template for structural comparison.

        Steps:
        1. Strip the {+baseurl} prefix
        2. Rename query fragment entries to queryParam1..N
        3. Rename every other placeholder to pathParam1..N, left to right
        4. Ensure a leading slash

        Parameter names are erased, so "{fundId}", "{fund-id}" and
        "{fund%2Did}" all normalize to "{pathParam1}". Malformed braces are
        left in place.

        Args:
            template: Raw URL template

        Returns:
            Normalized template

        Example:
            >>> TemplateNormalizer.normalize("{+baseurl}/api/funds/{fund%2Did}{?select,expand}")
            '/api/funds/{pathParam1}{?queryParam1,queryParam2}'
        """
        cleaned = TemplateNormalizer.strip_base_url(template or '')

        path_index = 0
        query_seen = False

        def replace(match: 're.Match[str]') -> str:
            nonlocal path_index, query_seen
            query_names = match.group(1)
            if query_names is not None and not query_seen:
                query_seen = True
                names = [name for name in query_names.split(',') if name.strip()]
                if not names:
                    return match.group(0)
                tokens = ','.join(f'queryParam{i}' for i in range(1, len(names) + 1))
                return f'{{?{tokens}}}'
            path_index += 1
            return f'{{pathParam{path_index}}}'

        cleaned = _PLACEHOLDER.sub(replace, cleaned)

        if not cleaned.startswith('/'):
            cleaned = '/' + cleaned

        return cleaned

    @staticmethod
    def count_tokens(normalized: str) -> Tuple[int, int]:
        """Count (path, query) positional tokens in a normalized template."""
        _, query = TemplateNormalizer.split_query_fragment(normalized)
        path_count = len(_PATH_TOKEN.findall(normalized))
        query_count = len(_QUERY_TOKEN.findall(query)) if query else 0
        return path_count, query_count

    @staticmethod
    def templates_match(template1: str, template2: str, case_sensitive: bool = False) -> bool:
        """
        Compare two URL templates structurally.

        Args:
            template1: First template (raw or normalized)
            template2: Second template (raw or normalized)
            case_sensitive: If False, literal segments compare case-insensitively

        Returns:
            True if both templates have the same literal segments and the
            same parameter counts in the same positions
        """
        norm1 = TemplateNormalizer.normalize(template1)
        norm2 = TemplateNormalizer.normalize(template2)

        if case_sensitive:
            return norm1 == norm2
        return norm1.casefold() == norm2.casefold()


normalize_template = TemplateNormalizer.normalize
