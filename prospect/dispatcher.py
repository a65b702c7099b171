"""Route intercepted calls to the expectation that should answer them."""

from __future__ import annotations

import logging
import typing as t

from ._render import render_arguments
from .errors import UnexpectedCallError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .comparators import Mismatch
    from .expectations import Expectation
    from .registry import MockIdentity, Registry

logger = logging.getLogger(__name__)

UNEXPECTED_CALL_TEMPLATE = (
    "No expectation defined for `{capability}::{method}` with parameter `{args}`"
)


def format_unexpected_call(
    identity: MockIdentity, method_name: str, arguments: t.Sequence[t.Any]
) -> str:
    """Build the mismatch message for a call nothing accepted."""
    return UNEXPECTED_CALL_TEMPLATE.format(
        capability=identity.capability_name,
        method=method_name,
        args=render_arguments(arguments),
    )


class CallDispatcher:
    """Select, consume and answer expectations for intercepted calls."""

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def resolve(
        self,
        identity: MockIdentity,
        method_name: str,
        arguments: t.Sequence[t.Any],
    ) -> Expectation:
        """Consume and return the first live expectation accepting the call.

        Expectations are scanned in declaration order, so several
        declarations for the same method are used up like a queue.

        Raises
        ------
        UnexpectedCallError
            When no expectation accepts the call.
        """
        rejections: list[tuple[Expectation, Mismatch | str]] = []
        for expectation in self._registry.lookup(identity, method_name):
            reason = expectation.rejection(arguments)
            if reason is not None:
                rejections.append((expectation, reason))
                continue
            expectation.consume()
            logger.debug("Call matched %s", expectation.describe())
            return expectation
        raise self._unexpected(identity, method_name, arguments, rejections)

    def dispatch(
        self,
        identity: MockIdentity,
        method_name: str,
        arguments: t.Sequence[t.Any],
    ) -> t.Any:
        """Answer one intercepted call with the selected expectation's outcome."""
        return self.resolve(identity, method_name, arguments).outcome.produce()

    @staticmethod
    def _unexpected(
        identity: MockIdentity,
        method_name: str,
        arguments: t.Sequence[t.Any],
        rejections: list[tuple[Expectation, Mismatch | str]],
    ) -> UnexpectedCallError:
        args = tuple(arguments)
        err = UnexpectedCallError(
            format_unexpected_call(identity, method_name, args),
            identity=identity,
            method_name=method_name,
            arguments=args,
        )
        if not rejections:
            err.add_note(f"no expectations declared for {method_name!r}")
        for index, (expectation, reason) in enumerate(rejections, start=1):
            err.add_note(f"candidate {index}: {expectation.describe()}: {reason}")
        logger.debug("%s\n%s", err, "\n".join(err.__notes__))
        return err
