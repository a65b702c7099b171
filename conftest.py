"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from prospect.controller import default_prospector

pytest_plugins = ("pytester", "prospect.pytest_plugin")


@pytest.fixture(autouse=True)
def reset_default_prospector_state() -> t.Generator[None, None, None]:
    """Start every test with an empty default registry."""
    default_prospector().registry.clear()
    yield
    default_prospector().registry.clear()
