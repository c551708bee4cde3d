"""
kiotamock Request Matcher

Decides which registered expectation applies to an incoming (simulated)
request.

Checks, in order, short-circuiting on the first failure:
- HTTP method
- URL template: positional structural equality of normalized templates, or
  for builder-bound expectations the exact builder template plus equal
  path parameter values
- the caller's extra predicate
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .builder import BASE_URL_PARAMETER
from .expectations import Expectation, ExpectationRegistry
from .request import RequestDescriptor

logger = logging.getLogger("kiotamock.matcher")

STRATEGY_POSITIONAL = 'positional'

# Older matching strategies, kept as aliases of positional matching
DEPRECATED_STRATEGIES = {
    'suffix': "suffix matching lets short patterns match unrelated nested paths",
    'wildcard': "wildcard matching cannot tell parameter positions apart",
}


@dataclass
class MatchResult:
    """Result of matching a request."""

    matched: bool
    expectation: Optional[Expectation] = None
    reason: str = ""
    normalized_template: str = ""
    candidates_checked: int = 0
    rejected: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'matched': self.matched,
            'reason': self.reason,
            'normalized_template': self.normalized_template,
            'candidates_checked': self.candidates_checked,
            'expectation': self.expectation.describe() if self.expectation else None,
            'rejected': list(self.rejected)
        }


class RequestMatcher:
    """
    Matches requests against an expectation registry.

    Example:
        registry = ExpectationRegistry()
        registry.register(Expectation('/api/funds/{fundId}', method='GET', response=fund))

        matcher = RequestMatcher(registry)
        result = matcher.find_match(request)

        if result.matched:
            return result.expectation.response
    """

    def __init__(
        self,
        registry: ExpectationRegistry,
        strategy: str = STRATEGY_POSITIONAL,
        case_sensitive: bool = False
    ):
        """
        Initialize request matcher.

        Args:
            registry: Expectations to match against
            strategy: Matching strategy (positional; suffix and wildcard are
                deprecated aliases)
            case_sensitive: Compare template literals case-sensitively
        """
        self.registry = registry
        self.strategy = self._resolve_strategy(strategy)
        self.case_sensitive = case_sensitive

    @staticmethod
    def _resolve_strategy(strategy: str) -> str:
        if strategy == STRATEGY_POSITIONAL:
            return strategy
        if strategy in DEPRECATED_STRATEGIES:
            warnings.warn(
                f"Matching strategy '{strategy}' is deprecated ({DEPRECATED_STRATEGIES[strategy]}); "
                f"using '{STRATEGY_POSITIONAL}' instead.",
                DeprecationWarning,
                stacklevel=3
            )
            return STRATEGY_POSITIONAL
        raise ValueError(
            f"Unknown matching strategy '{strategy}'. "
            f"Expected '{STRATEGY_POSITIONAL}' or one of the deprecated aliases: "
            f"{', '.join(DEPRECATED_STRATEGIES)}"
        )

    def _same_text(self, left: str, right: str) -> bool:
        if self.case_sensitive:
            return left == right
        return left.casefold() == right.casefold()

    def method_matches(self, expectation: Expectation, request: RequestDescriptor) -> bool:
        return expectation.method is None or expectation.method == request.method

    def template_matches(self, expectation: Expectation, request: RequestDescriptor) -> bool:
        """
        Compare the request template with the expectation's.

        Builder-bound expectations require the literal builder template and
        equal path parameter values under the same keys. Both sides come
        from the same generator, so keys are compared directly.
        """
        if not request.url_template:
            return False

        if expectation.is_builder_bound:
            if not self._same_text(request.url_template, expectation.builder_template):
                return False
            for key, expected in (expectation.builder_path_parameters or {}).items():
                if key == BASE_URL_PARAMETER:
                    continue
                if key not in request.path_parameters:
                    return False
                if _as_text(expected) != _as_text(request.path_parameters[key]):
                    return False
            return True

        return self._same_text(request.normalized_template, expectation.normalized_template)

    def matches(self, expectation: Expectation, request: Any) -> bool:
        """
        Decide whether an expectation applies to a request.

        Args:
            expectation: Registered expectation
            request: RequestDescriptor or RequestInformation-like object

        Returns:
            True if method, template and extra predicate all match
        """
        request = RequestDescriptor.from_request_information(request)
        return (
            self.method_matches(expectation, request)
            and self.template_matches(expectation, request)
            and (expectation.predicate is None or expectation.predicate(request))
        )

    def find_match(self, request: Any, kind: Optional[str] = None) -> MatchResult:
        """
        Find the first registered expectation that applies to a request.

        Args:
            request: RequestDescriptor or RequestInformation-like object
            kind: Only consider expectations answering this adapter entry point

        Returns:
            MatchResult with the matching expectation or a no-match reason
        """
        request = RequestDescriptor.from_request_information(request)
        normalized = request.normalized_template

        if not request.url_template:
            return MatchResult(
                matched=False,
                reason="Request has no URL template",
                normalized_template=normalized
            )

        candidates = [
            e for e in self.registry.candidates_for(request.method, normalized)
            if kind is None or e.kind == kind
        ]
        # Builder-bound expectations are keyed by their own template, which
        # normalizes the same way, so they are already among the candidates.

        rejected = []
        for expectation in candidates:
            if self.matches(expectation, request):
                logger.debug(f"Matched: {request.method} {request.url_template} -> {expectation.describe()}")
                return MatchResult(
                    matched=True,
                    expectation=expectation,
                    reason=f"Matched expectation #{expectation.sequence}",
                    normalized_template=normalized,
                    candidates_checked=len(candidates)
                )
            rejected.append(expectation.describe())

        if candidates:
            reason = f"{len(candidates)} expectation(s) share the template but none matched the request"
        else:
            reason = f"No expectation registered for {request.method} {normalized}"

        return MatchResult(
            matched=False,
            reason=reason,
            normalized_template=normalized,
            candidates_checked=len(candidates),
            rejected=rejected
        )


def _as_text(value: Any) -> str:
    return '' if value is None else str(value)
