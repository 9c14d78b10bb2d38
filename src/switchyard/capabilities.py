"""Optional argument and result capabilities.

The routers probe for these shapes and never require them. No base
class is needed; the router checks the shape, not the lineage::

    @dataclass(frozen=True, slots=True)
    class Amount:
        value: int

        @classmethod
        def from_text(cls, text: str) -> "Amount":
            return cls(int(text))

        def check(self) -> None:
            if self.value <= 0:
                raise ValueError("amount must be positive")

Decoders are classmethods that build a new value. Validators raise any
exception to reject a value; returning normally accepts it.
"""

from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class SelfValidating(Protocol):
    """A decoded argument that can validate itself."""

    def check(self) -> None: ...


@runtime_checkable
class StateValidating(Protocol):
    """A decoded argument that validates itself against external state.

    Only invoked when the router was configured with a state accessor.
    """

    def check_with_state(self, state: Any) -> None: ...


@runtime_checkable
class BytesEncoder(Protocol):
    """A result that encodes itself; its bytes are returned verbatim."""

    def encode_to_bytes(self) -> bytes: ...


@runtime_checkable
class StateBytesEncoder(Protocol):
    """A result that needs the state accessor to encode itself."""

    def encode_to_bytes_with_state(self, state: Any) -> bytes: ...


@runtime_checkable
class TextDecodable(Protocol):
    """A shape that parses itself from UTF-8 text."""

    @classmethod
    def from_text(cls, text: str) -> Self: ...


@runtime_checkable
class BinaryDecodable(Protocol):
    """A shape that parses itself from raw bytes."""

    @classmethod
    def from_binary(cls, data: bytes) -> Self: ...


@runtime_checkable
class WireMessage(Protocol):
    """A described message (pydantic model) with a compact binary form.

    Tried before the generic :class:`BinaryDecodable` capability.
    """

    @classmethod
    def from_wire(cls, data: bytes) -> Self: ...


def provides(shape: Any, capability: type) -> bool:
    """Return True if the class *shape* offers *capability*.

    Generic aliases such as ``list[int]`` and other non-class shapes
    never provide a capability.
    """
    return isinstance(shape, type) and issubclass(shape, capability)
