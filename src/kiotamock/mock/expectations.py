"""
kiotamock Expectations

An expectation is one registered rule: which request should receive which
canned response or error. The registry stores them in registration order,
indexed by (method, normalized template).
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional

from ..common.url_utils import normalize_template
from .predicates import RequestPredicate, as_predicate
from .request import method_name

# Adapter entry points an expectation can answer
KIND_OBJECT = 'object'
KIND_COLLECTION = 'collection'
KIND_PRIMITIVE = 'primitive'
KIND_PRIMITIVE_COLLECTION = 'primitive_collection'
KIND_NO_CONTENT = 'no_content'

KINDS = (
    KIND_OBJECT,
    KIND_COLLECTION,
    KIND_PRIMITIVE,
    KIND_PRIMITIVE_COLLECTION,
    KIND_NO_CONTENT,
)


@dataclass(frozen=True)
class Expectation:
    """A registered mock rule."""

    url_template: str
    method: Optional[str] = None  # None matches any method
    kind: str = KIND_OBJECT
    response: Any = None
    error: Optional[BaseException] = None
    predicate: Optional[RequestPredicate] = None

    # Builder snapshot for identity matching (None for template expectations)
    builder_template: Optional[str] = None
    builder_path_parameters: Optional[Dict[str, Any]] = None

    normalized_template: str = field(default='', init=False)
    sequence: int = -1

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown expectation kind '{self.kind}'. Expected one of: {', '.join(KINDS)}")
        object.__setattr__(self, 'method', method_name(self.method))
        object.__setattr__(self, 'normalized_template', normalize_template(self.url_template))
        if self.predicate is not None:
            object.__setattr__(self, 'predicate', as_predicate(self.predicate))

    @property
    def is_builder_bound(self) -> bool:
        return self.builder_template is not None

    @property
    def raises(self) -> bool:
        return self.error is not None

    def describe(self) -> str:
        method = self.method or '*'
        outcome = f"raise {type(self.error).__name__}" if self.raises else 'return response'
        extra = f" where {self.predicate.describe()}" if self.predicate else ''
        return f"{method} {self.normalized_template} [{self.kind}] -> {outcome}{extra}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'sequence': self.sequence,
            'method': self.method,
            'url_template': self.url_template,
            'normalized_template': self.normalized_template,
            'kind': self.kind,
            'raises': self.raises,
            'builder_bound': self.is_builder_bound,
            'predicate': self.predicate.describe() if self.predicate else None
        }


class ExpectationRegistry:
    """
    Append-only store of expectations.

    Lookups return every expectation sharing the (method, normalized
    template) key plus method-agnostic ones, in registration order. No
    uniqueness is enforced; when several expectations apply, the earliest
    registration wins.
    """

    def __init__(self, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self._expectations: List[Expectation] = []
        self._index: Dict[str, List[Expectation]] = {}

    def _key(self, method: Optional[str], normalized_template: str) -> str:
        template = normalized_template if self.case_sensitive else normalized_template.casefold()
        return f"{method or '*'}:{template}"

    def register(self, expectation: Expectation) -> Expectation:
        """
        Store an expectation and assign its sequence number.

        Returns:
            The stored expectation (a copy carrying its sequence number)
        """
        stored = replace(expectation, sequence=len(self._expectations))
        self._expectations.append(stored)
        key = self._key(stored.method, stored.normalized_template)
        self._index.setdefault(key, []).append(stored)
        return stored

    def candidates_for(self, method: Optional[str], normalized_template: str) -> List[Expectation]:
        """
        Get expectations registered for a method and normalized template.

        Args:
            method: HTTP method of the request
            normalized_template: Normalized request template

        Returns:
            Matching expectations in registration order
        """
        method = method_name(method)
        candidates = list(self._index.get(self._key(method, normalized_template), []))
        if method is not None:
            candidates.extend(self._index.get(self._key(None, normalized_template), []))
        candidates.sort(key=lambda e: e.sequence)
        return candidates

    def clear(self):
        self._expectations.clear()
        self._index.clear()

    def __len__(self) -> int:
        return len(self._expectations)

    def __iter__(self) -> Iterator[Expectation]:
        return iter(self._expectations)
