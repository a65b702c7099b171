"""Render call arguments for failure messages."""

from __future__ import annotations

import typing as t

_SCALAR_TYPES: tuple[type, ...] = (type(None), bool, int, float, complex, str)


def render_argument(value: t.Any) -> str:
    """Return the message form of *value*.

    Scalars use their natural string form; every other object is shown by
    its runtime type name.
    """
    if isinstance(value, _SCALAR_TYPES):
        return str(value)
    return type(value).__name__


def render_arguments(values: t.Iterable[t.Any]) -> str:
    # Joined without escaping; a comma inside a rendered value is kept as-is.
    return ",".join(render_argument(value) for value in values)
