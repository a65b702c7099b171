"""Ordered storage for declared expectations."""

from __future__ import annotations

import dataclasses as dc
import itertools
import logging
import typing as t
import weakref

from .expectations import Expectation

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True, weakref_slot=True)
class MockIdentity:
    """Opaque token naming one stand-in instance.

    Serials come from one process-wide counter, so no two registries ever
    issue equal identities.
    """

    serial: int
    capability: type = dc.field(compare=False)

    @property
    def capability_name(self) -> str:
        return self.capability.__name__

    def __repr__(self) -> str:
        return f"MockIdentity({self.capability_name}#{self.serial})"


_RegistryKey: t.TypeAlias = tuple[MockIdentity, str]

_serials = itertools.count(1)


class Registry:
    """Map ``(identity, method name)`` to expectations in declaration order.

    Declaration order matters: the dispatcher consumes expectations for the
    same method first-declared, first-satisfied. A registry belongs to a
    single sequentially executing test; concurrent tests need their own.
    """

    def __init__(self) -> None:
        # Identities drop out once their stand-in and expectations are gone.
        self._issued: weakref.WeakSet[MockIdentity] = weakref.WeakSet()
        self._expectations: dict[_RegistryKey, list[Expectation]] = {}

    def new_identity(self, capability: type) -> MockIdentity:
        """Allocate an identity for a new stand-in of *capability*."""
        identity = MockIdentity(next(_serials), capability)
        self._issued.add(identity)
        return identity

    def owns(self, identity: MockIdentity) -> bool:
        """Return ``True`` if *identity* was issued by this registry."""
        return identity in self._issued

    def declare(self, identity: MockIdentity, method_name: str) -> Expectation:
        """Append and return a new expectation with default settings."""
        expectation = Expectation(mock_identity=identity, method_name=method_name)
        self._expectations.setdefault((identity, method_name), []).append(
            expectation
        )
        logger.debug("Declared expectation %s", expectation.describe())
        return expectation

    def lookup(self, identity: MockIdentity, method_name: str) -> list[Expectation]:
        """Return expectations for *method_name* on *identity* (may be empty)."""
        return self._expectations.get((identity, method_name), [])

    def __iter__(self) -> t.Iterator[Expectation]:
        for expectations in self._expectations.values():
            yield from expectations

    def __len__(self) -> int:
        return sum(len(exps) for exps in self._expectations.values())

    def pending(self) -> list[Expectation]:
        """Return every expectation not yet fully consumed."""
        return [exp for exp in self if not exp.satisfied]

    def clear(self) -> None:
        """Drop every declared expectation."""
        if self._expectations:
            logger.debug("Clearing %d expectation(s)", len(self))
        self._expectations.clear()
