"""Schema discovery: endpoints from explicit service schemas.

Each ``ServiceBinding`` pairs a ``ServiceSchema`` with the object that
implements it. Handlers follow the gRPC servicer shape, one method per
descriptor, named exactly as in the schema::

    class BalanceService:
        def AddBalance(self, request: AddBalanceRequest, ctx: CallContext) -> Empty:
            if not ctx.authenticated:
                raise PermissionError("unauthorized")
            ...

    router = SchemaRouter(
        [ServiceBinding(BALANCE_SERVICE, BalanceService())],
        config=RouterConfig(fallback=ConventionRouter(token)),
    )

Naming, per method:

1. ``MethodOptions.external_name`` when set
2. ``"addBalance"`` (first character lower-cased) with ``use_names=True``
3. ``"/token.v1.BalanceService/AddBalance"`` otherwise

Category defaults to ``BATCHED``; auth defaults to ``True`` for batched
methods and ``False`` otherwise. Every endpoint takes one payload
argument, preceded by the sender when auth is required.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from switchyard.config import RouterConfig
from switchyard.context import CallContext, Sender
from switchyard.errors import ConfigurationError
from switchyard.routing.convention import ConventionRouter
from switchyard.routing.endpoint import Category, Endpoint, default_auth, lower_first
from switchyard.routing.pipeline import Binding, BindingRouter, Caller
from switchyard.routing.service import MethodDescriptor, ServiceSchema, full_name_to_url
from switchyard.routing.signature import operation_signature

logger = logging.getLogger("switchyard.routing")


@dataclass(frozen=True, slots=True)
class ServiceBinding:
    """A service schema and the object implementing its methods."""

    schema: ServiceSchema
    impl: object


def external_name(schema: ServiceSchema, method: MethodDescriptor, *, use_names: bool) -> str:
    """Resolve the external name of *method*."""
    if method.options.external_name:
        return method.options.external_name
    if use_names:
        return lower_first(method.name)
    return full_name_to_url(schema.method_full_name(method))


def _caller(handler: Callable[..., Any], state: Any) -> Caller:
    def call(sender: Sender | None, values: list[Any]) -> Any:
        return handler(values[0], CallContext(sender=sender, state=state))

    return call


def bind_service(service: ServiceBinding, config: RouterConfig) -> list[Binding]:
    """Build one binding per method of *service*.

    Raises ``ConfigurationError`` for streaming methods, for methods
    the implementation does not provide, and for handlers that do not
    take exactly ``(request, ctx)``.
    """
    schema = service.schema
    bindings: list[Binding] = []

    for method in schema.methods:
        if method.is_streaming:
            msg = f"{schema.method_full_name(method)}: stream methods are not supported"
            raise ConfigurationError(msg)

        handler = getattr(service.impl, method.name, None)
        if not callable(handler):
            msg = (
                f"{type(service.impl).__name__} does not implement "
                f"{schema.method_full_name(method)}"
            )
            raise ConfigurationError(msg)

        options = method.options
        category = options.category if options.category is not None else Category.BATCHED
        auth_required = (
            options.auth_required if options.auth_required is not None else default_auth(category)
        )
        sig = operation_signature(handler)
        if sig.arg_count != 2:
            msg = (
                f"{type(service.impl).__name__}.{method.name} must take (request, ctx), "
                f"takes {sig.arg_count} positional argument(s)"
            )
            raise ConfigurationError(msg)

        endpoint = Endpoint(
            external_name=external_name(schema, method, use_names=config.use_names),
            category=category,
            auth_required=auth_required,
            arg_count=2 if auth_required else 1,
            returns_error=sig.returns_error,
            method_name=method.name,
        )
        bindings.append(
            Binding(
                endpoint=endpoint,
                call=_caller(handler, config.state),
                arg_shapes=(method.input_type,),
                result_arity=sig.result_arity,
            )
        )
        logger.debug(
            "registered %s -> %s (%s, auth=%s)",
            endpoint.external_name,
            schema.method_full_name(method),
            category.value,
            auth_required,
        )

    return bindings


class SchemaRouter(BindingRouter):
    """Routes calls to service implementations described by schemas.

    The fallback router (``RouterConfig.fallback``) answers every name
    the schemas do not define, and its endpoints appear in ``methods()``.
    """

    __slots__ = ("_services",)

    def __init__(
        self,
        services: Sequence[ServiceBinding],
        *,
        config: RouterConfig | None = None,
    ) -> None:
        config = config or RouterConfig()
        bindings: list[Binding] = []
        for service in services:
            bindings.extend(bind_service(service, config))
        super().__init__(bindings, config)
        self._services = tuple(services)

    @property
    def services(self) -> tuple[ServiceBinding, ...]:
        return self._services


def convention_fallback(contract: object) -> RouterConfig:
    """Config whose fallback serves *contract*'s prefixed methods.

    Discovery errors in *contract* raise here, before any schema router
    is built::

        router = SchemaRouter(services, config=convention_fallback(token))
    """
    return RouterConfig(fallback=ConventionRouter(contract))
