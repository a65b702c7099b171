"""Shared validation helpers."""

from __future__ import annotations

import typing as t

from .errors import ConfigurationError


def validate_call_count(count: int, *, consumed: int = 0) -> None:
    """Ensure *count* is usable as a required invocation count.

    *consumed* is the number of calls an expectation has already answered.
    """
    if isinstance(count, bool) or not isinstance(count, int):
        msg = f"call count must be an integer, got {type(count).__name__}"
        raise ConfigurationError(msg)

    if count < 1:
        msg = f"call count must be >= 1, got {count}"
        raise ConfigurationError(msg)

    if count < consumed:
        msg = f"call count {count} is below the {consumed} call(s) already consumed"
        raise ConfigurationError(msg)


def validate_exception(exc: t.Any) -> None:
    """Ensure *exc* can be raised by a stand-in."""
    if isinstance(exc, BaseException):
        return
    if isinstance(exc, type) and issubclass(exc, BaseException):
        return
    msg = f"raises() expects an exception instance or class, got {exc!r}"
    raise ConfigurationError(msg)
