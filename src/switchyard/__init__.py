"""Switchyard: expose an object's operations as string-named endpoints.

Two discovery strategies produce endpoints of the same shape, and a
multiplexer composes them.

Convention discovery::

    from switchyard import ConventionRouter, Sender

    class Token:
        def tx_transfer(self, sender: Sender, to: str, amount: int) -> None: ...
        def query_balance(self, owner: str) -> int: ...

    router = ConventionRouter(Token())
    router.invoke("balance", "alice")        # b"42"

Schema discovery::

    from switchyard import SchemaRouter, ServiceBinding

    router = SchemaRouter([ServiceBinding(BALANCE_SERVICE, BalanceService())])
    router.invoke("/token.v1.BalanceService/AddBalance", identity, '{"amount": 5}')

Composition::

    from switchyard import compose

    router = compose(convention_router, schema_router)
"""

__version__ = "0.1.0"
__all__ = [
    "CallContext",
    "Category",
    "ConfigurationError",
    "ConventionRouter",
    "Endpoint",
    "InvalidArgumentValue",
    "InvalidMethodName",
    "InvalidNumberOfArguments",
    "InvalidReturnValue",
    "MethodAlreadyDefined",
    "MethodDescriptor",
    "MethodOptions",
    "MultiplexRouter",
    "Router",
    "RouterConfig",
    "RouterError",
    "SchemaRouter",
    "Sender",
    "ServiceBinding",
    "ServiceSchema",
    "TypeCoercer",
    "UnsupportedMethod",
    "compose",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` cheap; pydantic loads on first use.
    """
    if name in (
        "Category",
        "ConventionRouter",
        "Endpoint",
        "MethodDescriptor",
        "MethodOptions",
        "MultiplexRouter",
        "Router",
        "SchemaRouter",
        "ServiceBinding",
        "ServiceSchema",
        "compose",
    ):
        from switchyard import routing as _routing

        return getattr(_routing, name)

    if name == "RouterConfig":
        from switchyard.config import RouterConfig

        return RouterConfig

    if name == "TypeCoercer":
        from switchyard.coercion import TypeCoercer

        return TypeCoercer

    if name in ("CallContext", "Sender"):
        from switchyard import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ConfigurationError",
        "InvalidArgumentValue",
        "InvalidMethodName",
        "InvalidNumberOfArguments",
        "InvalidReturnValue",
        "MethodAlreadyDefined",
        "RouterError",
        "UnsupportedMethod",
    ):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
