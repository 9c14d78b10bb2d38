"""Tests for switchyard.errors — exception hierarchy and error messages."""

import pytest

from switchyard.errors import (
    ConfigurationError,
    InvalidArgumentValue,
    InvalidMethodName,
    InvalidNumberOfArguments,
    InvalidReturnValue,
    MethodAlreadyDefined,
    RouterError,
    UnsupportedMethod,
    shape_name,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [
            ConfigurationError,
            InvalidArgumentValue,
            InvalidMethodName,
            InvalidNumberOfArguments,
            InvalidReturnValue,
            MethodAlreadyDefined,
            UnsupportedMethod,
        ],
    )
    def test_is_router_error(self, error_type: type) -> None:
        assert issubclass(error_type, RouterError)

    def test_router_error_is_exception(self) -> None:
        assert issubclass(RouterError, Exception)


class TestDiscoveryErrors:
    def test_method_already_defined(self) -> None:
        err = MethodAlreadyDefined("transfer")
        assert err.name == "transfer"
        assert str(err) == "method already defined: 'transfer'"

    def test_invalid_method_name(self) -> None:
        err = InvalidMethodName("tx_")
        assert err.method_name == "tx_"
        assert "tx_" in str(err)


class TestCallErrors:
    def test_unsupported_method(self) -> None:
        err = UnsupportedMethod("nope")
        assert err.name == "nope"
        assert str(err) == "unsupported method: 'nope'"

    def test_invalid_number_of_arguments(self) -> None:
        err = InvalidNumberOfArguments("deposit", 2, 1)
        assert err.method == "deposit"
        assert err.expected == 2
        assert err.received == 1
        assert str(err) == "invalid number of arguments: found 1 but expected 2: deposit"

    def test_invalid_return_value(self) -> None:
        err = InvalidReturnValue("lookup", "expected 2 values, got int")
        assert err.method == "lookup"
        assert err.detail == "expected 2 values, got int"
        assert str(err) == "invalid return value: lookup: expected 2 values, got int"


class TestInvalidArgumentValue:
    def test_unbound(self) -> None:
        err = InvalidArgumentValue("abc", int)
        assert err.method is None
        assert err.index is None
        assert str(err) == "invalid argument value: 'abc': for type 'int'"

    def test_with_reason(self) -> None:
        err = InvalidArgumentValue("abc", int, reason="not a number")
        assert str(err).endswith(": not a number")

    def test_bytes_value_rendered_as_text(self) -> None:
        err = InvalidArgumentValue(b"abc", int)
        assert "'abc'" in str(err)

    def test_for_argument_copies(self) -> None:
        err = InvalidArgumentValue("abc", int, reason="nope")
        bound = err.for_argument("deposit", 1)

        assert bound is not err
        assert err.method is None
        assert bound.method == "deposit"
        assert bound.index == 1
        assert bound.reason == "nope"
        assert bound.value == "abc"
        assert bound.shape is int
        assert str(bound).endswith(": deposit, argument 1")


class TestShapeName:
    def test_class(self) -> None:
        assert shape_name(int) == "int"

    def test_nested_class(self) -> None:
        class Inner:
            pass

        assert shape_name(Inner).endswith("Inner")

    def test_generic_alias(self) -> None:
        assert shape_name(list[int]) == "list[int]"
