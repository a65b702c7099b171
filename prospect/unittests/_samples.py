"""Capabilities shared by the unit tests."""

from __future__ import annotations

import abc
import typing as t


class SampleInterface(abc.ABC):
    """Abstract capability covering the common method shapes."""

    @abc.abstractmethod
    def no_params_and_void(self) -> None: ...

    @abc.abstractmethod
    def no_params_but_returns_string(self) -> str: ...

    @abc.abstractmethod
    def basic_param_validation(
        self, number: int, text: str, ratio: float, obj: object
    ) -> None: ...

    @abc.abstractmethod
    def param_validation_with_closure(self, value: str) -> None: ...

    @property
    @abc.abstractmethod
    def name(self) -> str: ...


class SampleProtocol(t.Protocol):
    """Structural capability."""

    def fetch(self, key: str, default: int = 0, *, strict: bool = False) -> int: ...

    def collect(self, *items: int) -> list[int]: ...

    def configure(self, name: str, **options: t.Any) -> None: ...

    async def load(self, key: str) -> str: ...


class SampleBaseClass:
    """Concrete base class whose constructor must not run for stand-ins."""

    def __init__(self, required: int) -> None:
        msg = "constructor should not be called"
        raise AssertionError(msg)

    def int_param_and_returns_int(self, value: int) -> int:
        return value

    @staticmethod
    def helper(value: int) -> int:
        return value

    @classmethod
    def build(cls, value: int) -> SampleBaseClass:
        return cls(value)

    def _internal(self) -> None:
        pass

    def __len__(self) -> int:
        return 0


class ObjType:
    """Plain object passed as an argument."""
