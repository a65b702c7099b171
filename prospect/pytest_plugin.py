"""Pytest plugin providing the ``prospector`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .controller import Prospector, default_prospector

logger = logging.getLogger(__name__)

_SETTING = "prospect_auto_verify"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Expose the auto-verify switch on the command line and in ini files."""
    group = parser.getgroup("prospect", "strict stand-ins and expectations")
    group.addoption(
        "--prospect-auto-verify",
        action="store_true",
        dest=_SETTING,
        default=None,
        help="fail tests whose prospector still holds unconsumed expectations",
    )
    group.addoption(
        "--no-prospect-auto-verify",
        action="store_false",
        dest=_SETTING,
        default=None,
        help="leave unconsumed prospector expectations unchecked at teardown",
    )
    parser.addini(
        _SETTING,
        "check for unconsumed expectations when the prospector fixture ends",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Declare the ``prospect`` marker."""
    config.addinivalue_line(
        "markers",
        "prospect(auto_verify=True): per-test switch for checking the "
        "prospector fixture's expectations at teardown",
    )


class _ProspectItem(t.Protocol):
    """Test item holding a verification failure for its teardown report."""

    _prospect_verify_error: Exception | None


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Remember each phase's report on the item as ``rep_<when>``."""
    del call
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
    if rep.when == "teardown":
        _apply_deferred_verify_failure(item, rep)


def _auto_verify_enabled(request: pytest.FixtureRequest) -> bool:
    """Decide whether the fixture checks its expectations at teardown.

    The ``prospect`` marker beats an indirect fixture parameter, which beats
    the command-line flags, which beat the ini setting.
    """
    for override in (_marker_override, _param_override, _option_override):
        value = override(request)
        if value is not None:
            return value
    return bool(request.config.getini(_SETTING))


def _marker_override(request: pytest.FixtureRequest) -> bool | None:
    marker = request.node.get_closest_marker("prospect")
    if marker is None:
        return None
    value = marker.kwargs.get("auto_verify")
    return None if value is None else bool(value)


def _option_override(request: pytest.FixtureRequest) -> bool | None:
    value = request.config.getoption(_SETTING)
    return None if value is None else bool(value)


def _param_override(request: pytest.FixtureRequest) -> bool | None:
    """Read ``True``, ``False`` or ``{"auto_verify": ...}`` from the param."""
    param = getattr(request, "param", None)
    if param is None or isinstance(param, bool):
        return param
    if not isinstance(param, dict):
        msg = (
            "prospector param must be True, False or {'auto_verify': bool}, "
            f"got {type(param).__name__}"
        )
        raise TypeError(msg)
    if "auto_verify" not in param:
        msg = f"prospector param dict needs an 'auto_verify' entry, got {list(param)}"
        raise TypeError(msg)
    return bool(param["auto_verify"])


def _apply_deferred_verify_failure(
    item: pytest.Item, report: pytest.TestReport
) -> None:
    """Attach a verification failure held back because the test failed first."""
    err: Exception | None = getattr(item, "_prospect_verify_error", None)
    if err is None:
        return
    delattr(item, "_prospect_verify_error")
    report.sections.append(("prospect verification", f"{type(err).__name__}: {err}"))


def _call_stage_failed(item: pytest.Item) -> bool:
    """Return ``True`` if the call phase of *item* failed."""
    rep_call = getattr(item, "rep_call", None)
    return bool(rep_call and rep_call.failed)


@pytest.fixture
def prospector(
    request: pytest.FixtureRequest,
) -> t.Generator[Prospector, None, None]:
    """Yield a per-test :class:`Prospector` checked at teardown."""
    controller = Prospector(verify_on_exit=False)
    auto_verify = _auto_verify_enabled(request)
    try:
        yield controller
    finally:
        _teardown_prospector(request.node, controller, auto_verify=auto_verify)


def _teardown_prospector(
    item: pytest.Item, controller: Prospector, *, auto_verify: bool
) -> None:
    """Check or discard what the fixture's prospector still holds."""
    if not auto_verify:
        controller.reset()
        return
    try:
        controller.verify()
    except Exception as err:
        if not _call_stage_failed(item):
            raise
        logger.exception("prospector verification failed after test failure")
        t.cast("_ProspectItem", item)._prospect_verify_error = err


@pytest.fixture(autouse=True)
def _prospect_reset_default() -> t.Generator[None, None, None]:
    """Keep the module-level API from leaking expectations between tests."""
    yield
    default_prospector().reset()
