"""Comparator classes and the argument matching rules built on them.

A constraint declared with :meth:`~prospect.expectations.Expectation.with_args`
is either a *literal*, matched by equality, or a *predicate*, called with the
actual argument. Comparator instances and plain functions are predicates;
every other value, classes and callable objects included, is a literal. Wrap
a callable object in :class:`Predicate` to use it as a predicate.
"""

from __future__ import annotations

import dataclasses as dc
import functools
import re
import types
import typing as t

_PREDICATE_TYPES: tuple[type, ...] = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
    types.MethodDescriptorType,
    functools.partial,
)


class Comparator:
    """Base class for callables returning ``True`` when a value matches."""

    __slots__ = ()

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` if *value* satisfies the comparison."""
        raise NotImplementedError


@dc.dataclass(frozen=True, slots=True)
class Any(Comparator):
    """Match any value."""

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` for any input."""
        return True


@dc.dataclass(frozen=True, slots=True)
class IsA(Comparator):
    """Match instances of ``typ``."""

    typ: type | tuple[type, ...]

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` when ``value`` is an instance of ``typ``."""
        return isinstance(value, self.typ)


@dc.dataclass(frozen=True, slots=True)
class Regex(Comparator):
    """Match if *value* matches ``pattern``."""

    pattern: str
    _compiled: re.Pattern[str] = dc.field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` if the regex matches *value*."""
        return bool(self._compiled.search(value))


@dc.dataclass(frozen=True, slots=True)
class Contains(Comparator):
    """Match if ``item`` is found in *value*."""

    item: t.Any

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` if ``item`` is in *value*."""
        return self.item in value


@dc.dataclass(frozen=True, slots=True)
class StartsWith(Comparator):
    """Match if *value* begins with ``prefix``."""

    prefix: str

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` if *value* starts with ``prefix``."""
        startswith = getattr(value, "startswith", None)
        return callable(startswith) and bool(startswith(self.prefix))


@dc.dataclass(frozen=True, slots=True)
class Predicate(Comparator):
    """Use a custom ``func`` to determine a match."""

    func: t.Callable[[t.Any], t.Any]

    def __call__(self, value: t.Any) -> bool:
        """Return ``True`` if ``func(value)`` is truthy."""
        return bool(self.func(value))


def is_predicate(constraint: t.Any) -> bool:
    """Return ``True`` when *constraint* is evaluated by calling it."""
    return isinstance(constraint, (Comparator, *_PREDICATE_TYPES))


def matches(constraint: t.Any, value: t.Any) -> bool:
    """Return ``True`` if *value* satisfies a single *constraint*.

    Exceptions raised by a predicate propagate unchanged.
    """
    if is_predicate(constraint):
        return bool(constraint(value))
    return value is constraint or bool(value == constraint)


@dc.dataclass(frozen=True, slots=True, eq=False, repr=False)
class Mismatch:
    """Where a call's arguments fell short of an expectation's constraints.

    The offending values are only rendered when the mismatch is converted
    with :func:`str`.
    """

    expected: int
    actual: int
    index: int | None = None
    argument: t.Any = None
    constraint: t.Any = None

    def __str__(self) -> str:
        if self.index is None:
            return f"expected {self.expected} argument(s), got {self.actual}"
        op = "failed" if is_predicate(self.constraint) else "!="
        return f"arg[{self.index}]={self.argument!r} {op} {self.constraint!r}"


def explain_mismatch(
    constraints: t.Sequence[t.Any], arguments: t.Sequence[t.Any]
) -> Mismatch | None:
    """Return where *arguments* fail *constraints*, or ``None`` if they match.

    The arity check comes first and short-circuits, so no predicate sees a
    call of the wrong shape. Positions are then checked in order and the
    first failing one is reported.
    """
    expected, actual = len(constraints), len(arguments)
    if expected != actual:
        return Mismatch(expected, actual)
    for index, (constraint, arg) in enumerate(
        zip(constraints, arguments, strict=True)
    ):
        if not matches(constraint, arg):
            return Mismatch(expected, actual, index, arg, constraint)
    return None


def constraints_match(
    constraints: t.Sequence[t.Any], arguments: t.Sequence[t.Any]
) -> bool:
    """Return ``True`` if every position of *arguments* matches."""
    return explain_mismatch(constraints, arguments) is None


__all__ = [
    "Any",
    "Comparator",
    "Contains",
    "IsA",
    "Mismatch",
    "Predicate",
    "Regex",
    "StartsWith",
    "constraints_match",
    "explain_mismatch",
    "is_predicate",
    "matches",
]
