"""Multiplexer: several routers behind one dispatch surface.

Each external name is owned by exactly one member router. A name defined
by two members is a construction error, so a multiplexer never exists
with an ambiguous table.
"""

from collections.abc import Mapping
from types import MappingProxyType

from switchyard.errors import ConfigurationError, MethodAlreadyDefined, UnsupportedMethod
from switchyard.routing.endpoint import Endpoint
from switchyard.routing.protocol import Router


class MultiplexRouter:
    """Forwards each call to the member router that owns the name.

    Usage::

        router = MultiplexRouter(ConventionRouter(token), SchemaRouter([...]))
        router.invoke("balanceOf", '"alice"')
    """

    __slots__ = ("_methods", "_owners", "_routers")

    def __init__(self, *routers: Router) -> None:
        owners: dict[str, Router] = {}
        methods: dict[str, Endpoint] = {}
        for router in routers:
            for name, endpoint in router.methods().items():
                if name in owners:
                    raise MethodAlreadyDefined(name)
                owners[name] = router
                methods[name] = endpoint

        self._routers = routers
        self._owners: Mapping[str, Router] = MappingProxyType(owners)
        self._methods: Mapping[str, Endpoint] = MappingProxyType(methods)

    @property
    def routers(self) -> tuple[Router, ...]:
        return self._routers

    def router_for(self, method: str) -> Router | None:
        """The member router owning *method*. Returns ``None`` if not found."""
        return self._owners.get(method)

    def check(self, method: str, *args: str | bytes) -> None:
        router = self._owners.get(method)
        if router is None:
            raise UnsupportedMethod(method)
        router.check(method, *args)

    def invoke(self, method: str, *args: str | bytes) -> bytes:
        router = self._owners.get(method)
        if router is None:
            raise UnsupportedMethod(method)
        return router.invoke(method, *args)

    def methods(self) -> Mapping[str, Endpoint]:
        """The union of every member's endpoints."""
        return self._methods

    def endpoint(self, method: str) -> Endpoint | None:
        return self._methods.get(method)

    def __len__(self) -> int:
        return len(self._methods)

    def __contains__(self, method: object) -> bool:
        return method in self._methods


def compose(*routers: Router) -> Router:
    """Return a single router serving every name of *routers*.

    One router is returned unchanged; several are multiplexed.
    """
    if not routers:
        msg = "compose() needs at least one router"
        raise ConfigurationError(msg)
    if len(routers) == 1:
        return routers[0]
    return MultiplexRouter(*routers)
