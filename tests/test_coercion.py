"""Tests for switchyard.coercion — ordered multi-strategy argument decoding."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID

import pytest
from pydantic import BaseModel
from pydantic_core import to_json

from switchyard.coercion import (
    DEFAULT_STRATEGIES,
    Miss,
    TypeCoercer,
    coerce,
    decode_string,
    decode_structured,
    decode_text,
    is_described_message,
    is_json,
    string_shape,
)
from switchyard.errors import InvalidArgumentValue

# =============================================================================
# Shapes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Point:
    x: int
    y: int


class Address(BaseModel):
    base58: str
    industrial: bool = False


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Ticker:
    """Text capability only; pydantic has no schema for it."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol

    @classmethod
    def from_text(cls, text: str) -> "Ticker":
        if not text.isupper():
            raise ValueError("tickers are upper case")
        return cls(text)


@dataclass(frozen=True, slots=True)
class Version:
    """Structured shape that also parses ``"major.minor"`` text."""

    major: int
    minor: int

    @classmethod
    def from_text(cls, text: str) -> "Version":
        major, minor = text.split(".")
        return cls(int(major), int(minor))


@dataclass(frozen=True, slots=True)
class Blob:
    data: bytes

    @classmethod
    def from_binary(cls, data: bytes) -> "Blob":
        return cls(data)


class Packet(BaseModel):
    seq: int

    @classmethod
    def from_wire(cls, data: bytes) -> "Packet":
        return cls(seq=int.from_bytes(data, "big"))

    @classmethod
    def from_binary(cls, data: bytes) -> "Packet":
        return cls(seq=-1)


# =============================================================================
# Helpers
# =============================================================================


class TestStringShape:
    def test_plain(self) -> None:
        assert string_shape(str) is str
        assert string_shape(bytes) is bytes

    def test_optional(self) -> None:
        assert string_shape(str | None) is str
        assert string_shape(Optional[str]) is str  # noqa: UP007
        assert string_shape(bytes | None) is bytes

    def test_not_string(self) -> None:
        assert string_shape(int) is None
        assert string_shape(str | int) is None
        assert string_shape(list[str]) is None


class TestIsJson:
    def test_scalars_are_json(self) -> None:
        assert is_json("123")
        assert is_json("true")
        assert is_json("null")
        assert is_json('"text"')

    def test_documents(self) -> None:
        assert is_json('{"a": [1, 2]}')
        assert is_json(b"[1, 2]")

    def test_not_json(self) -> None:
        assert not is_json("hello")
        assert not is_json("2024-05-01T10:00:00Z")
        assert not is_json(b"\xff")
        assert not is_json("")

    def test_deep_nesting_is_not_json(self) -> None:
        assert not is_json("[" * 200_000 + "]" * 200_000)


class TestIsDescribedMessage:
    def test_model(self) -> None:
        assert is_described_message(Address) is True

    def test_others(self) -> None:
        assert is_described_message(Point) is False
        assert is_described_message(Address(base58="x")) is False
        assert is_described_message(list[int]) is False


# =============================================================================
# Strategy order
# =============================================================================


class TestStringFastPath:
    def test_numeric_string_stays_literal(self) -> None:
        assert coerce("123", str) == "123"

    def test_boolean_string_stays_literal(self) -> None:
        assert coerce("true", str) == "true"

    def test_json_string_not_unquoted(self) -> None:
        assert coerce('"quoted"', str) == '"quoted"'

    def test_optional_string(self) -> None:
        assert coerce("null", str | None) == "null"

    def test_bytes_target(self) -> None:
        assert coerce("abc", bytes) == b"abc"
        assert coerce(b"\x00\x01", bytes) == b"\x00\x01"

    def test_bytes_payload_to_string(self) -> None:
        assert coerce("héllo".encode(), str) == "héllo"

    def test_invalid_utf8_misses(self) -> None:
        result = decode_string(b"\xff", str)
        assert isinstance(result, Miss)

    def test_string_path_must_run_first(self) -> None:
        """Without the fast path, "123" is a JSON number, not a str."""
        structured_only = TypeCoercer(strategies=(decode_structured,))
        with pytest.raises(InvalidArgumentValue):
            structured_only.coerce("123", str)


class TestStructured:
    def test_int(self) -> None:
        assert coerce("123", int) == 123

    def test_bool(self) -> None:
        assert coerce("true", bool) is True

    def test_float(self) -> None:
        assert coerce("1234.5678", float) == 1234.5678

    def test_list(self) -> None:
        assert coerce("[1234.5678, 2]", list[float]) == [1234.5678, 2.0]

    def test_dataclass(self) -> None:
        assert coerce('{"x": 1, "y": 2}', Point) == Point(1, 2)

    def test_described_message(self) -> None:
        address = coerce('{"base58": "3Qx", "industrial": true}', Address)
        assert address == Address(base58="3Qx", industrial=True)

    def test_bytes_payload(self) -> None:
        assert coerce(b'{"x": 3, "y": 4}', Point) == Point(3, 4)

    def test_structured_miss_is_not_an_exception(self) -> None:
        result = decode_structured('"abc"', int)
        assert isinstance(result, Miss)
        assert "validation error" in result.reason

    def test_non_json_not_applicable(self) -> None:
        result = decode_structured("abc", int)
        assert isinstance(result, Miss)
        assert result.reason == ""

    @pytest.mark.parametrize(
        ("value", "shape"),
        [
            (Point(5, -3), Point),
            (Address(base58="1Ab"), Address),
            ([0.5, 2.25], list[float]),
            ({"a": 1, "b": 2}, dict[str, int]),
            (42, int),
        ],
    )
    def test_round_trip(self, value: Any, shape: Any) -> None:
        assert coerce(to_json(value), shape) == value


class TestFallThrough:
    def test_valid_json_failing_structured_falls_to_text(self) -> None:
        """The payload 1.2 is a JSON number but not a Version object."""
        assert coerce("1.2", Version) == Version(1, 2)

    def test_structured_still_wins_when_it_succeeds(self) -> None:
        assert coerce('{"major": 3, "minor": 0}', Version) == Version(3, 0)

    def test_valid_json_falls_to_binary(self) -> None:
        assert coerce("[1, 2]", Blob) == Blob(b"[1, 2]")

    def test_text_capability_without_schema(self) -> None:
        ticker = coerce("ACME", Ticker)
        assert isinstance(ticker, Ticker)
        assert ticker.symbol == "ACME"

    def test_text_decoder_error_is_a_miss(self) -> None:
        result = decode_text("acme", Ticker)
        assert isinstance(result, Miss)
        assert "upper case" in result.reason

    def test_wire_tried_before_generic_binary(self) -> None:
        assert coerce(b"\x00\x07", Packet) == Packet(seq=7)


class TestTextNative:
    def test_datetime(self) -> None:
        value = coerce("2024-05-01T10:00:00Z", datetime)
        assert value == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    def test_uuid(self) -> None:
        raw = "12345678-1234-5678-1234-567812345678"
        assert coerce(raw, UUID) == UUID(raw)

    def test_enum(self) -> None:
        assert coerce("green", Color) is Color.GREEN

    def test_decimal_from_json_number(self) -> None:
        assert coerce("12.5", Decimal) == Decimal("12.5")


class TestFailure:
    def test_raises_invalid_argument_value(self) -> None:
        with pytest.raises(InvalidArgumentValue) as exc_info:
            coerce("abc", int)
        err = exc_info.value
        assert err.value == "abc"
        assert err.shape is int
        assert err.method is None
        assert err.index is None
        assert "'abc'" in str(err)
        assert "'int'" in str(err)

    def test_reason_from_highest_precedence_strategy(self) -> None:
        with pytest.raises(InvalidArgumentValue) as exc_info:
            coerce('"abc"', int)
        assert "validation error" in exc_info.value.reason

    def test_no_capability_no_schema(self) -> None:
        with pytest.raises(InvalidArgumentValue):
            coerce("lower", Ticker)

    def test_deeply_nested_payload(self) -> None:
        with pytest.raises(InvalidArgumentValue):
            coerce("[" * 200_000 + "]" * 200_000, list[int])


class TestTypeCoercer:
    def test_default_strategies(self) -> None:
        assert TypeCoercer().strategies == DEFAULT_STRATEGIES

    def test_custom_order(self) -> None:
        def always_seven(raw: str | bytes, shape: Any) -> Any:
            return 7

        coercer = TypeCoercer(strategies=(always_seven, *DEFAULT_STRATEGIES))
        assert coercer.coerce("123", str) == 7

    def test_deterministic(self) -> None:
        coercer = TypeCoercer()
        assert coercer.coerce("1.2", Version) == coercer.coerce("1.2", Version)
