"""Verification helpers for :class:`~prospect.controller.Prospector`."""

from __future__ import annotations

import logging
import typing as t

from ._render import render_arguments
from .errors import MissingCallError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .expectations import Expectation
    from .registry import Registry

logger = logging.getLogger(__name__)

MISSING_CALL_TEMPLATE = "Expected method call `{method}` with parameters `{args}`"


def format_missing_call(exp: Expectation) -> str:
    """Build the failure message for an unconsumed expectation."""
    return MISSING_CALL_TEMPLATE.format(
        method=exp.method_name,
        args=render_arguments(exp.constraints),
    )


class ConsumptionVerifier:
    """Check that each expectation was consumed the required number of times."""

    def verify(self, registry: Registry) -> None:
        """Raise for the first expectation in *registry* left unsatisfied.

        Only the first violation is reported; the remaining expectations are
        not inspected.
        """
        for exp in registry:
            if exp.satisfied:
                continue
            err = MissingCallError(format_missing_call(exp), expectation=exp)
            err.add_note(
                f"{exp.describe()}: observed {exp.consumed_calls} of "
                f"{exp.required_calls} call(s)"
            )
            logger.debug("Unfulfilled expectation %s", exp.describe())
            raise err
