"""End-to-end tests of the module-level API against sample capabilities."""

from __future__ import annotations

import abc

import pytest

from prospect import (
    MissingCallError,
    UnexpectedCallError,
    mock,
    prospect,
    tear_down,
)
from tests.helpers.capabilities import ObjType


class SampleInterface(abc.ABC):
    """Interface covering the return and parameter shapes under test."""

    @abc.abstractmethod
    def no_params_and_void(self) -> None: ...

    @abc.abstractmethod
    def no_params_and_void_but_throws(self) -> None: ...

    @abc.abstractmethod
    def no_params_but_returns_int(self) -> int: ...

    @abc.abstractmethod
    def no_params_but_returns_string(self) -> str: ...

    @abc.abstractmethod
    def no_params_but_returns_sample_interface_instance(
        self,
    ) -> SampleInterface: ...

    @abc.abstractmethod
    def basic_param_validation(
        self, number: int, text: str, ratio: float, obj: object
    ) -> None: ...

    @abc.abstractmethod
    def param_validation_with_closure(self, value: str) -> None: ...


class SampleBaseClass:
    """Concrete class mocked without running its constructor."""

    def __init__(self) -> None:
        self.calls = 0

    def no_params_and_void(self) -> None:
        self.calls += 1

    def int_param_and_returns_int(self, value: int) -> int:
        return value


NUMBER = 1234
TEXT = "string"
RATIO = 1.23


def test_no_params_and_void() -> None:
    """A void method is consumed once."""
    sample = mock(SampleInterface)
    prospect(sample, "no_params_and_void").times(1)

    sample.no_params_and_void()

    tear_down()


def test_no_params_and_void_but_throws() -> None:
    """A canned exception is raised from the call."""
    sample = mock(SampleInterface)
    prospect(sample, "no_params_and_void_but_throws").times(1).raises(
        RuntimeError("some-throwable-message")
    )

    with pytest.raises(RuntimeError, match="some-throwable-message"):
        sample.no_params_and_void_but_throws()

    tear_down()


def test_no_params_but_returns_int() -> None:
    """The canned integer is returned."""
    sample = mock(SampleInterface)
    prospect(sample, "no_params_but_returns_int").times(1).returns(666)

    assert sample.no_params_but_returns_int() == 666

    tear_down()


def test_no_params_but_returns_string() -> None:
    """The canned string is returned as the same object."""
    value = "some-return-value"
    sample = mock(SampleInterface)
    prospect(sample, "no_params_but_returns_string").times(1).returns(value)

    assert sample.no_params_but_returns_string() is value

    tear_down()


def test_no_params_but_returns_sample_interface_instance() -> None:
    """A stand-in can be the canned return value of another stand-in."""
    sample = mock(SampleInterface)
    prospect(sample, "no_params_but_returns_sample_interface_instance").times(
        1
    ).returns(mock(SampleInterface))

    result = sample.no_params_but_returns_sample_interface_instance()

    assert isinstance(result, SampleInterface)
    tear_down()


def test_params_validation_succeeds() -> None:
    """Matching literal arguments are accepted."""
    obj = ObjType()
    sample = mock(SampleInterface)
    prospect(sample, "basic_param_validation").with_args(
        NUMBER, TEXT, RATIO, obj
    ).times(1).returns(None)

    assert sample.basic_param_validation(NUMBER, TEXT, RATIO, obj) is None

    tear_down()


def test_params_validation_succeeds_two_times_in_row() -> None:
    """Two identical expectations accept two identical calls."""
    obj = ObjType()
    sample = mock(SampleInterface)
    for _ in range(2):
        prospect(sample, "basic_param_validation").with_args(
            NUMBER, TEXT, RATIO, obj
        ).times(1)

    sample.basic_param_validation(NUMBER, TEXT, RATIO, obj)
    sample.basic_param_validation(NUMBER, TEXT, RATIO, obj)

    tear_down()


def test_params_validation_succeeds_with_different_call_counts() -> None:
    """An expectation for two calls followed by one for a single call."""
    obj = ObjType()
    sample = mock(SampleInterface)
    prospect(sample, "basic_param_validation").with_args(
        NUMBER, TEXT, RATIO, obj
    ).times(2)
    prospect(sample, "basic_param_validation").with_args(
        NUMBER, TEXT, RATIO, obj
    ).times(1)

    for _ in range(3):
        sample.basic_param_validation(NUMBER, TEXT, RATIO, obj)

    tear_down()


def test_params_validation_fails_with_one_wrong_parameter() -> None:
    """The third call carries a wrong ratio and is rejected."""
    obj = ObjType()
    sample = mock(SampleInterface)
    prospect(sample, "basic_param_validation").with_args(
        NUMBER, TEXT, RATIO, obj
    ).times(2)
    prospect(sample, "basic_param_validation").with_args(
        NUMBER, TEXT, RATIO, obj
    ).times(1)

    sample.basic_param_validation(NUMBER, TEXT, RATIO, obj)
    sample.basic_param_validation(NUMBER, TEXT, RATIO, obj)
    with pytest.raises(UnexpectedCallError) as excinfo:
        sample.basic_param_validation(NUMBER, TEXT, 6.66, obj)

    assert str(excinfo.value) == (
        "No expectation defined for `SampleInterface::basic_param_validation` "
        "with parameter `1234,string,6.66,ObjType`"
    )
    with pytest.raises(MissingCallError):
        tear_down()


def test_parameter_validation_with_closure() -> None:
    """A plain function is used as a predicate."""
    sample = mock(SampleInterface)
    prospect(sample, "param_validation_with_closure").with_args(
        lambda value: value == "some-string"
    ).times(1)

    assert sample.param_validation_with_closure("some-string") is None

    tear_down()


def test_params_validation_fails() -> None:
    """Every argument is rendered in the mismatch message."""
    sample = mock(SampleInterface)
    prospect(sample, "basic_param_validation").with_args(NUMBER, TEXT, 6.66)

    with pytest.raises(UnexpectedCallError) as excinfo:
        sample.basic_param_validation(5678, "nostring", 4.2, ObjType())

    assert str(excinfo.value) == (
        "No expectation defined for `SampleInterface::basic_param_validation` "
        "with parameter `5678,nostring,4.2,ObjType`"
    )
    with pytest.raises(MissingCallError):
        tear_down()


def test_missing_method_call() -> None:
    """tear_down() reports the uncalled method."""
    sample = mock(SampleInterface)
    prospect(sample, "no_params_but_returns_string").times(1).returns("value")

    with pytest.raises(MissingCallError) as excinfo:
        tear_down()

    assert str(excinfo.value) == (
        "Expected method call `no_params_but_returns_string` with parameters ``"
    )


def test_having_more_calls_than_expectations() -> None:
    """The second call has nothing left to consume."""
    sample = mock(SampleInterface)
    prospect(sample, "no_params_but_returns_string").times(1).returns("value")

    sample.no_params_but_returns_string()
    with pytest.raises(UnexpectedCallError):
        sample.no_params_but_returns_string()

    tear_down()


def test_no_params_and_void_on_base_class() -> None:
    """Concrete classes are mocked without running their methods."""
    sample = mock(SampleBaseClass)
    prospect(sample, "no_params_and_void").times(1)

    sample.no_params_and_void()

    assert not hasattr(sample, "calls")
    tear_down()


def test_int_param_and_int_return_value_on_base_class() -> None:
    """The canned value replaces the real implementation."""
    sample = mock(SampleBaseClass)
    prospect(sample, "int_param_and_returns_int").with_args(666).times(1).returns(777)

    assert sample.int_param_and_returns_int(666) == 777

    tear_down()
