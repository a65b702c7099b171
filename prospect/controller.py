"""Prospector controller tying stand-ins, expectations and verification."""

from __future__ import annotations

import logging
import types  # noqa: TC003
import typing as t

from .dispatcher import CallDispatcher
from .errors import ConfigurationError
from .registry import Registry
from .standin import create_stand_in, forwarded_methods, identity_of
from .verifiers import ConsumptionVerifier

if t.TYPE_CHECKING:
    from .expectations import Expectation
    from .registry import MockIdentity

logger = logging.getLogger(__name__)

T = t.TypeVar("T")


class Prospector:
    """Per-test context object owning one expectation registry.

    Create one per test, declare expectations with :meth:`prospect`, exercise
    the stand-ins returned by :meth:`mock`, then call :meth:`verify`. Used as
    a context manager, verification happens on exit.
    """

    def __init__(
        self,
        *,
        verify_on_exit: bool = True,
        registry: Registry | None = None,
    ) -> None:
        """Create a new controller.

        Parameters
        ----------
        verify_on_exit:
            When ``True`` (the default), :meth:`__exit__` calls :meth:`verify`.
            If the ``with`` body raised, a verification failure is logged
            instead so the original error propagates; the registry is cleared
            either way.
        registry:
            Optional :class:`Registry` to store expectations in. A fresh one
            is created when omitted.
        """
        self.registry = registry if registry is not None else Registry()
        self._dispatcher = CallDispatcher(self.registry)
        self._verify_on_exit = verify_on_exit

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> Prospector:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Exit context, optionally verifying, and always clear the registry."""
        if not self._verify_on_exit:
            self.registry.clear()
            return
        if exc_type is None:
            self.verify()
            return
        try:
            self.verify()
        except Exception:
            logger.exception(
                "Verification failed while handling %s", exc_type.__name__
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def mock(self, capability: type[T]) -> T:
        """Return a new stand-in implementing *capability*'s methods."""
        identity = self.registry.new_identity(capability)
        stand_in = create_stand_in(capability, identity, self._dispatcher)
        logger.debug("Created stand-in %r", identity)
        return t.cast("T", stand_in)

    def identity(self, stand_in: object) -> MockIdentity:
        """Return the identity of a stand-in created by this controller."""
        identity = identity_of(stand_in)
        if identity is None:
            msg = f"{stand_in!r} is not a stand-in"
            raise ConfigurationError(msg)
        if not self.registry.owns(identity):
            msg = f"{stand_in!r} was created by a different Prospector"
            raise ConfigurationError(msg)
        return identity

    def prospect(self, stand_in: object, method_name: str) -> Expectation:
        """Declare an expectation for *method_name* on *stand_in*.

        The expectation is registered immediately with ``times(1)``, no
        arguments and a ``None`` return value; refine it with the returned
        builder.
        """
        identity = self.identity(stand_in)
        if method_name not in forwarded_methods(stand_in):
            msg = f"{identity.capability_name} has no method {method_name!r}"
            raise ConfigurationError(msg)
        return self.registry.declare(identity, method_name)

    def verify(self) -> None:
        """Check every expectation was consumed, then clear the registry."""
        try:
            ConsumptionVerifier().verify(self.registry)
        finally:
            self.registry.clear()

    tear_down = verify

    def reset(self) -> None:
        """Clear the registry without verifying."""
        pending = self.registry.pending()
        if pending:
            logger.warning(
                "Discarding %d unconsumed expectation(s): %s",
                len(pending),
                ", ".join(exp.describe() for exp in pending),
            )
        self.registry.clear()


_default: Prospector | None = None


def default_prospector() -> Prospector:
    """Return the process-wide prospector behind the module-level API.

    Tests sharing it must run sequentially; the pytest plugin resets it after
    every test.
    """
    global _default
    if _default is None:
        _default = Prospector(verify_on_exit=False)
    return _default
