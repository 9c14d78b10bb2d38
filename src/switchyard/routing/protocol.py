"""Router protocol.

A router is anything with this shape. No base class required; the
multiplexer and the schema router's fallback check the shape, not the
lineage.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from switchyard.routing.endpoint import Endpoint


@runtime_checkable
class Router(Protocol):
    """Dispatch surface consumed by an external dispatcher.

    ``check`` decodes and validates without calling the operation.
    ``invoke`` decodes, calls, and encodes the result.
    ``methods`` returns every endpoint the router answers for, keyed by
    external name.
    """

    def check(self, method: str, *args: str | bytes) -> None: ...

    def invoke(self, method: str, *args: str | bytes) -> bytes: ...

    def methods(self) -> Mapping[str, Endpoint]: ...
