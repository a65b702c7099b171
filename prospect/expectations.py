"""Expectation records and the fluent builder used to declare them."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from ._render import render_arguments
from ._validators import validate_call_count, validate_exception
from .comparators import constraints_match, explain_mismatch

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .comparators import Mismatch
    from .registry import MockIdentity


@dc.dataclass(frozen=True, slots=True)
class Outcome:
    """What a consumed expectation produces: a value or an exception."""

    return_value: t.Any = None
    exception: BaseException | type[BaseException] | None = None

    def produce(self) -> t.Any:
        """Return the canned value or raise the canned exception."""
        if self.exception is not None:
            raise self.exception
        return self.return_value


@dc.dataclass(slots=True, eq=False)
class Expectation:
    """A declared rule for calls to one method of one stand-in.

    ``consumed_calls`` never exceeds ``required_calls``; once they are equal
    the expectation is exhausted and no longer accepts calls.
    """

    mock_identity: MockIdentity
    method_name: str
    constraints: tuple[t.Any, ...] = ()
    required_calls: int = 1
    consumed_calls: int = 0
    outcome: Outcome = dc.field(default_factory=Outcome)

    def with_args(self, *constraints: t.Any) -> Expectation:
        """Require positional arguments matching ``constraints``."""
        self.constraints = constraints
        return self

    def times(self, count: int) -> Expectation:
        """Set the required invocation count to ``count``.

        The count cannot drop below the calls already consumed.
        """
        validate_call_count(count, consumed=self.consumed_calls)
        self.required_calls = count
        return self

    def times_called(self, count: int) -> Expectation:
        """Alias for :meth:`times`."""
        return self.times(count)

    def returns(self, value: t.Any = None) -> Expectation:
        """Return ``value`` from matching calls."""
        self.outcome = Outcome(return_value=value)
        return self

    def raises(self, exc: BaseException | type[BaseException]) -> Expectation:
        """Raise ``exc`` from matching calls."""
        validate_exception(exc)
        self.outcome = Outcome(exception=exc)
        return self

    @property
    def exhausted(self) -> bool:
        return self.consumed_calls >= self.required_calls

    @property
    def remaining(self) -> int:
        return self.required_calls - self.consumed_calls

    @property
    def satisfied(self) -> bool:
        return self.consumed_calls == self.required_calls

    def matches(self, arguments: t.Sequence[t.Any]) -> bool:
        """Return ``True`` if *arguments* satisfy the declared constraints."""
        return constraints_match(self.constraints, arguments)

    def rejection(self, arguments: t.Sequence[t.Any]) -> Mismatch | str | None:
        """Return why a call with *arguments* is refused, or ``None``.

        Constraints are evaluated at most once per call, and not at all once
        the expectation is exhausted.
        """
        if self.exhausted:
            return f"exhausted after {self.consumed_calls} call(s)"
        return explain_mismatch(self.constraints, arguments)

    def consume(self) -> None:
        """Record one matching call."""
        if self.exhausted:
            msg = f"expectation for {self.method_name!r} is already exhausted"
            raise RuntimeError(msg)
        self.consumed_calls += 1

    def describe(self) -> str:
        """Return a short human readable representation."""
        return (
            f"{self.mock_identity.capability_name}::{self.method_name}"
            f"({render_arguments(self.constraints)}) "
            f"[{self.consumed_calls}/{self.required_calls}]"
        )
