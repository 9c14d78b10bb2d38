"""Argument coercion: raw text/bytes payloads to annotated shapes.

A ``TypeCoercer`` runs an ordered tuple of strategies and returns the
first success. Each strategy is a plain function ``(raw, shape) -> value``
that returns a ``Miss`` instead of raising when it cannot decode.

Default order (fixed; it decides which strategy wins for payloads that
more than one strategy accepts):

1. ``decode_string``     ``str``/``bytes`` shapes, optionally ``| None``,
   take the payload verbatim. Runs first so ``"123"`` or ``"true"``
   never get parsed as JSON for a string parameter.
2. ``decode_structured`` payloads that are valid JSON. Pydantic models
   use ``model_validate_json``; every other shape goes through a cached
   ``TypeAdapter``.
3. ``decode_text``       ``TextDecodable`` shapes, and scalars pydantic
   parses from strings (datetime, Decimal, UUID, enums, ...).
4. ``decode_wire``       pydantic models that provide ``from_wire``.
5. ``decode_binary``     ``BinaryDecodable`` shapes.

When every strategy misses, ``coerce`` raises ``InvalidArgumentValue``.
"""

import logging
import types
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, TypeAlias, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import from_json

from switchyard.capabilities import BinaryDecodable, TextDecodable, WireMessage, provides
from switchyard.errors import InvalidArgumentValue, shape_name

logger = logging.getLogger("switchyard.coercion")


@dataclass(frozen=True, slots=True)
class Miss:
    """A strategy could not decode the payload. Not an error by itself."""

    reason: str = ""


NOT_APPLICABLE = Miss()

Strategy: TypeAlias = Callable[[str | bytes, Any], Any]

# Scalars pydantic knows how to parse from plain strings
_TEXT_NATIVE: tuple[type, ...] = (date, time, timedelta, Decimal, UUID, Enum)


# -- Shape helpers --


def string_shape(shape: Any) -> type | None:
    """Return ``str`` or ``bytes`` if *shape* is string-like, else None.

    ``X | None`` and ``Optional[X]`` unwrap to ``X``.
    """
    if shape is str or shape is bytes:
        return shape
    origin = get_origin(shape)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(shape) if a is not type(None)]
        if len(args) == 1 and (args[0] is str or args[0] is bytes):
            return args[0]
    return None


def is_described_message(shape: Any) -> bool:
    """True if *shape* is a pydantic model class."""
    return isinstance(shape, type) and issubclass(shape, BaseModel)


@lru_cache(maxsize=512)
def _cached_adapter(shape: Any) -> TypeAdapter[Any] | None:
    return _build_adapter(shape)


def _build_adapter(shape: Any) -> TypeAdapter[Any] | None:
    try:
        return TypeAdapter(shape)
    except PydanticSchemaGenerationError:
        # Arbitrary classes pydantic has no schema for
        return None


def adapter_for(shape: Any) -> TypeAdapter[Any] | None:
    """Return a (cached) ``TypeAdapter`` for *shape*, or None if pydantic can't build one."""
    try:
        return _cached_adapter(shape)
    except TypeError:
        # Unhashable shape (e.g. Annotated metadata); build uncached
        return _build_adapter(shape)


def _as_bytes(raw: str | bytes) -> bytes:
    return raw if isinstance(raw, bytes) else raw.encode("utf-8")


def _as_text(raw: str | bytes) -> str | None:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def is_json(raw: str | bytes) -> bool:
    """True if *raw* is syntactically valid JSON (scalars included).

    Nesting deeper than the parser's recursion limit counts as invalid.
    """
    try:
        from_json(raw)
    except ValueError:
        return False
    return True


def _validation_reason(exc: ValidationError) -> str:
    first = exc.errors()[0]
    return f"{exc.error_count()} validation error(s), first: {first.get('msg', '')}"


# -- Strategies --


def decode_string(raw: str | bytes, shape: Any) -> Any:
    """Assign the payload verbatim to string-like shapes."""
    target = string_shape(shape)
    if target is bytes:
        return _as_bytes(raw)
    if target is str:
        text = _as_text(raw)
        if text is None:
            return Miss("payload is not valid UTF-8")
        return text
    return NOT_APPLICABLE


def decode_structured(raw: str | bytes, shape: Any) -> Any:
    """Decode a JSON payload, schema-aware for pydantic models."""
    if not is_json(raw):
        return NOT_APPLICABLE
    try:
        if is_described_message(shape):
            return shape.model_validate_json(raw)
        adapter = adapter_for(shape)
        if adapter is None:
            return Miss(f"no JSON schema for {shape_name(shape)}")
        return adapter.validate_json(raw)
    except ValidationError as exc:
        return Miss(_validation_reason(exc))


def decode_text(raw: str | bytes, shape: Any) -> Any:
    """Decode through ``from_text`` or pydantic's string parsing for scalars."""
    if provides(shape, TextDecodable):
        text = _as_text(raw)
        if text is None:
            return Miss("payload is not valid UTF-8")
        try:
            return shape.from_text(text)
        except Exception as exc:  # noqa: BLE001
            return Miss(f"from_text: {exc}")

    if isinstance(shape, type) and issubclass(shape, _TEXT_NATIVE):
        text = _as_text(raw)
        adapter = adapter_for(shape)
        if text is None or adapter is None:
            return NOT_APPLICABLE
        try:
            return adapter.validate_strings(text)
        except ValidationError as exc:
            return Miss(_validation_reason(exc))

    return NOT_APPLICABLE


def decode_wire(raw: str | bytes, shape: Any) -> Any:
    """Decode a pydantic model from its own binary wire form."""
    if not (is_described_message(shape) and provides(shape, WireMessage)):
        return NOT_APPLICABLE
    try:
        return shape.from_wire(_as_bytes(raw))
    except Exception as exc:  # noqa: BLE001
        return Miss(f"from_wire: {exc}")


def decode_binary(raw: str | bytes, shape: Any) -> Any:
    """Decode through the generic ``from_binary`` capability."""
    if not provides(shape, BinaryDecodable):
        return NOT_APPLICABLE
    try:
        return shape.from_binary(_as_bytes(raw))
    except Exception as exc:  # noqa: BLE001
        return Miss(f"from_binary: {exc}")


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    decode_string,
    decode_structured,
    decode_text,
    decode_wire,
    decode_binary,
)


class TypeCoercer:
    """Converts one raw payload into one value of a target shape.

    Stateless after construction and safe to share between threads.

    Usage::

        coercer = TypeCoercer()
        coercer.coerce("123", int)      # 123
        coercer.coerce("123", str)      # "123"
        coercer.coerce('{"a": 1}', Model)
    """

    __slots__ = ("_strategies",)

    def __init__(self, strategies: tuple[Strategy, ...] = DEFAULT_STRATEGIES) -> None:
        self._strategies = strategies

    @property
    def strategies(self) -> tuple[Strategy, ...]:
        return self._strategies

    def coerce(self, raw: str | bytes, shape: Any) -> Any:
        """Return *raw* decoded as *shape*.

        Raises ``InvalidArgumentValue`` naming the payload and shape when
        no strategy succeeds. The reason reported is the one from the
        highest-precedence strategy that tried and failed.
        """
        reason = ""
        for strategy in self._strategies:
            result = strategy(raw, shape)
            if not isinstance(result, Miss):
                return result
            if result.reason and not reason:
                reason = result.reason

        logger.debug("no strategy decoded %r as %s", raw, shape_name(shape))
        raise InvalidArgumentValue(raw, shape, reason=reason)


_default = TypeCoercer()


def coerce(raw: str | bytes, shape: Any) -> Any:
    """Coerce with the default strategy order."""
    return _default.coerce(raw, shape)
