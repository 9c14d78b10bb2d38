"""Caller identity and per-call context.

``Sender`` is the marker type for authenticated operations. A
convention-discovered method whose first parameter is annotated as
``Sender`` requires auth, and receives the caller identity there::

    class Token:
        def tx_transfer(self, sender: Sender, to: str, amount: int) -> None: ...

Schema-service handlers receive a ``CallContext`` instead, which carries
the sender (``None`` for unauthenticated methods) and the router's state
accessor::

    class BalanceService:
        def AddBalance(self, request: AddBalanceRequest, ctx: CallContext) -> Empty: ...

Both are created fresh for each call and never shared between calls.
The identity is verified by the dispatcher before it reaches the router.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Sender:
    """The caller identity of an authenticated call."""

    address: str

    def __str__(self) -> str:
        return self.address

    @property
    def raw(self) -> bytes:
        """The identity as bytes, exactly as the dispatcher passed it."""
        return self.address.encode("utf-8", "surrogateescape")


@dataclass(frozen=True, slots=True)
class CallContext:
    """Explicit per-call values handed to schema-service handlers."""

    sender: Sender | None = None
    state: Any = None

    @property
    def authenticated(self) -> bool:
        """True when the call carried a caller identity."""
        return self.sender is not None
