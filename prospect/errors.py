"""Exception hierarchy raised by prospect."""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .expectations import Expectation
    from .registry import MockIdentity


class ProspectError(Exception):
    """Base class for all prospect errors."""


class ConfigurationError(ProspectError, ValueError):
    """Raised when an expectation or stand-in is declared incorrectly."""


class VerificationError(ProspectError, AssertionError):
    """Base class for failures reported against the test under execution."""


class UnexpectedCallError(VerificationError):
    """Raised when a stand-in receives a call no expectation accepts."""

    def __init__(
        self,
        message: str,
        *,
        identity: MockIdentity | None = None,
        method_name: str | None = None,
        arguments: tuple[t.Any, ...] = (),
    ) -> None:
        super().__init__(message)
        self.identity = identity
        self.method_name = method_name
        self.arguments = arguments


class MissingCallError(VerificationError):
    """Raised when a declared expectation was not fully consumed."""

    def __init__(self, message: str, *, expectation: Expectation | None = None) -> None:
        super().__init__(message)
        self.expectation = expectation


__all__ = [
    "ConfigurationError",
    "MissingCallError",
    "ProspectError",
    "UnexpectedCallError",
    "VerificationError",
]
