"""
kiotamock Request Predicates

Composable, inspectable predicates over request descriptors.

A predicate can be invoked directly, combined with ``&`` (or ``and_``) into a
conjunction node that keeps its operands visible, and compiled back into a
plain callable for mocking backends that only accept closures.
"""

from typing import Any, Callable, List, Optional, Tuple, Union

PredicateLike = Union['RequestPredicate', Callable[[Any], bool]]


class RequestPredicate:
    """
    A named boolean test over a request.

    Example:
        has_auth = RequestPredicate(
            lambda req: 'Authorization' in req.headers,
            description='has Authorization header'
        )
        is_get = RequestPredicate(lambda req: req.method == 'GET', 'is GET')

        combined = has_auth & is_get
        combined(request)          # evaluates left to right
        combined.describe()        # "(has Authorization header AND is GET)"
    """

    def __init__(self, func: Callable[[Any], bool], description: Optional[str] = None):
        self.func = func
        self.description = description or getattr(func, '__name__', repr(func))

    def __call__(self, request: Any) -> bool:
        return bool(self.func(request))

    def __and__(self, other: PredicateLike) -> 'RequestPredicate':
        return and_(self, other)

    def __rand__(self, other: PredicateLike) -> 'RequestPredicate':
        return and_(other, self)

    def describe(self) -> str:
        return self.description

    def compile(self) -> Callable[[Any], bool]:
        """Return a plain callable equivalent to this predicate."""
        func = self.func

        def predicate(request: Any) -> bool:
            return bool(func(request))

        return predicate

    def __repr__(self) -> str:
        return f"RequestPredicate({self.describe()!r})"


class AndPredicate(RequestPredicate):
    """Conjunction node; operands are evaluated left to right and short-circuit."""

    def __init__(self, operands: List[RequestPredicate]):
        self.operands: Tuple[RequestPredicate, ...] = tuple(operands)
        super().__init__(self._evaluate, description=None)

    def _evaluate(self, request: Any) -> bool:
        return all(operand(request) for operand in self.operands)

    def describe(self) -> str:
        return '(' + ' AND '.join(operand.describe() for operand in self.operands) + ')'

    def compile(self) -> Callable[[Any], bool]:
        compiled = [operand.compile() for operand in self.operands]

        def conjunction(request: Any) -> bool:
            return all(func(request) for func in compiled)

        return conjunction

    def __repr__(self) -> str:
        return f"AndPredicate({self.describe()!r})"


def as_predicate(predicate: PredicateLike) -> RequestPredicate:
    """Wrap a plain callable into a RequestPredicate (no-op for predicates)."""
    if isinstance(predicate, RequestPredicate):
        return predicate
    if not callable(predicate):
        raise TypeError(f"Predicate must be callable, got {type(predicate).__name__}")
    return RequestPredicate(predicate)


def and_(*predicates: Optional[PredicateLike]) -> Optional[RequestPredicate]:
    """
    Combine predicates into a single conjunction.

    Nested conjunctions are flattened so that ``and_(and_(a, b), c)`` and
    ``and_(a, and_(b, c))`` have the same operands. ``None`` operands are
    dropped, which lets callers pass an optional extra predicate straight
    through.

    Args:
        *predicates: Predicates or plain callables, in evaluation order

    Returns:
        The single remaining predicate, an AndPredicate, or None when no
        predicate was given
    """
    operands: List[RequestPredicate] = []
    for predicate in predicates:
        if predicate is None:
            continue
        wrapped = as_predicate(predicate)
        if isinstance(wrapped, AndPredicate):
            operands.extend(wrapped.operands)
        else:
            operands.append(wrapped)

    if not operands:
        return None
    if len(operands) == 1:
        return operands[0]
    return AndPredicate(operands)
