"""Strict mocks for Python classes with ordered expectations.

Declare what each method of a stand-in should receive and produce, exercise
the code under test, then verify that every expectation was consumed::

    sample = mock(SampleInterface)
    prospect(sample, "fetch").with_args(42).times(2).returns("ok")
    ...
    tear_down()
"""

from __future__ import annotations

import typing as t

from .comparators import Any, Contains, IsA, Predicate, Regex, StartsWith
from .controller import Prospector, default_prospector
from .errors import (
    ConfigurationError,
    MissingCallError,
    ProspectError,
    UnexpectedCallError,
    VerificationError,
)
from .expectations import Expectation, Outcome
from .pytest_plugin import prospector as prospector_fixture
from .registry import MockIdentity, Registry

T = t.TypeVar("T")


def mock(capability: type[T]) -> T:
    """Create a stand-in for *capability* on the default prospector."""
    return default_prospector().mock(capability)


def prospect(stand_in: object, method_name: str) -> Expectation:
    """Declare an expectation on the default prospector."""
    return default_prospector().prospect(stand_in, method_name)


def tear_down() -> None:
    """Verify and clear the default prospector."""
    default_prospector().verify()


def reset() -> None:
    """Clear the default prospector without verifying."""
    default_prospector().reset()


__all__ = [
    "Any",
    "ConfigurationError",
    "Contains",
    "Expectation",
    "IsA",
    "MissingCallError",
    "MockIdentity",
    "Outcome",
    "Predicate",
    "ProspectError",
    "Prospector",
    "Regex",
    "Registry",
    "StartsWith",
    "UnexpectedCallError",
    "VerificationError",
    "default_prospector",
    "mock",
    "prospect",
    "prospector_fixture",
    "reset",
    "tear_down",
]
