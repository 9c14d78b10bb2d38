"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from switchyard.coercion import TypeCoercer

if TYPE_CHECKING:
    from switchyard.routing.protocol import Router


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have defaults. Override what you need::

        config = RouterConfig(fallback=ConventionRouter(token), use_names=True)
        router = SchemaRouter([ServiceBinding(schema, token)], config=config)
    """

    # Opaque state accessor, handed to StateValidating / StateBytesEncoder
    # capabilities and to schema handlers through CallContext.state
    state: Any = None

    # Router consulted for names this router does not define
    fallback: "Router | None" = None

    # Schema routers only: "addBalance" instead of "/pkg.Service/AddBalance"
    use_names: bool = False

    coercer: TypeCoercer = field(default_factory=TypeCoercer)
