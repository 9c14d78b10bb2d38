"""Shared check/invoke pipeline.

Both concrete routers reduce every discovered operation to a ``Binding``
and hand it here, so argument handling is identical no matter how the
endpoint was discovered:

    check:  arity -> drop sender -> decode -> validate
    invoke: arity -> split sender -> decode -> call -> split error -> encode

Nothing in this module keeps state between calls.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeAlias

from switchyard.capabilities import SelfValidating, StateValidating
from switchyard.coercion import TypeCoercer
from switchyard.config import RouterConfig
from switchyard.context import Sender
from switchyard.encoding import encode_results
from switchyard.errors import (
    InvalidArgumentValue,
    InvalidNumberOfArguments,
    InvalidReturnValue,
    MethodAlreadyDefined,
    UnsupportedMethod,
)
from switchyard.routing.endpoint import Endpoint

# Calls the wrapped operation with the sender (None without auth)
# and the decoded, non-sender arguments
Caller: TypeAlias = Callable[[Sender | None, list[Any]], Any]


@dataclass(frozen=True, slots=True)
class Binding:
    """An endpoint bound to its operation. Built at discovery time."""

    endpoint: Endpoint
    call: Caller
    arg_shapes: tuple[Any, ...]  # excludes the sender slot
    result_arity: int | None = None


def check_arity(endpoint: Endpoint, args: Sequence[str | bytes]) -> None:
    if len(args) != endpoint.arg_count:
        raise InvalidNumberOfArguments(endpoint.external_name, endpoint.arg_count, len(args))


def split_sender(
    endpoint: Endpoint,
    args: Sequence[str | bytes],
) -> tuple[Sender | None, Sequence[str | bytes]]:
    """Separate the caller identity from the payload arguments.

    The identity is wrapped, never decoded: it was verified by the
    dispatcher and its format belongs to the dispatcher. Byte identities
    become text with ``surrogateescape`` so ``Sender.raw`` gives back
    the exact bytes.
    """
    if not endpoint.auth_required:
        return None, args
    identity = args[0]
    if isinstance(identity, bytes):
        identity = identity.decode("utf-8", "surrogateescape")
    return Sender(identity), args[1:]


def decode_arguments(
    coercer: TypeCoercer,
    binding: Binding,
    args: Sequence[str | bytes],
) -> list[Any]:
    """Coerce each payload argument to its declared shape.

    Reported indexes are positions in the caller's argument list, so the
    sender slot counts.
    """
    offset = 1 if binding.endpoint.auth_required else 0
    values: list[Any] = []
    for i, (raw, shape) in enumerate(zip(args, binding.arg_shapes, strict=True)):
        try:
            values.append(coercer.coerce(raw, shape))
        except InvalidArgumentValue as exc:
            raise exc.for_argument(binding.endpoint.external_name, i + offset) from exc
    return values


def validate_arguments(
    binding: Binding,
    args: Sequence[str | bytes],
    values: Sequence[Any],
    state: Any,
) -> None:
    """Run the self-validation capabilities of decoded arguments."""
    offset = 1 if binding.endpoint.auth_required else 0
    for i, (raw, shape, value) in enumerate(zip(args, binding.arg_shapes, values, strict=True)):
        try:
            if isinstance(value, SelfValidating):
                value.check()
            if state is not None and isinstance(value, StateValidating):
                value.check_with_state(state)
        except Exception as exc:
            raise InvalidArgumentValue(
                raw,
                shape,
                reason=f"validation failed: {exc}",
                method=binding.endpoint.external_name,
                index=i + offset,
            ) from exc


def split_results(binding: Binding, returned: Any) -> list[Any]:
    """Unpack the return value and strip a trailing error.

    A non-None trailing error is raised as-is. A return value that does
    not match the annotated shape raises ``InvalidReturnValue``.
    """
    name = binding.endpoint.external_name
    arity = binding.result_arity
    if arity is None:
        results = [returned]
    elif arity == 0:
        results = []
    else:
        if not isinstance(returned, tuple | list) or len(returned) != arity:
            detail = f"expected {arity} values, got {type(returned).__name__}"
            raise InvalidReturnValue(name, detail)
        results = list(returned)

    if binding.endpoint.returns_error and results:
        error = results.pop()
        if isinstance(error, BaseException):
            raise error
        if error is not None:
            raise InvalidReturnValue(name, f"trailing value is not an exception: {error!r}")

    return results


def run_check(binding: Binding, args: Sequence[str | bytes], config: RouterConfig) -> None:
    check_arity(binding.endpoint, args)
    _, payload = split_sender(binding.endpoint, args)
    values = decode_arguments(config.coercer, binding, payload)
    validate_arguments(binding, payload, values, config.state)


def run_invoke(binding: Binding, args: Sequence[str | bytes], config: RouterConfig) -> bytes:
    check_arity(binding.endpoint, args)
    sender, payload = split_sender(binding.endpoint, args)
    values = decode_arguments(config.coercer, binding, payload)
    returned = binding.call(sender, values)
    return encode_results(split_results(binding, returned), config.state)


class BindingRouter:
    """Frozen binding table with the shared check/invoke surface.

    Subclasses run discovery and pass the resulting bindings up. The
    fallback's endpoints are merged in first, so any name this router
    defines that the fallback also defines raises ``MethodAlreadyDefined``
    before the router exists.

    Free-threading safety:
        - Binding and Endpoint are frozen dataclasses
        - both tables are read-only mapping proxies built here, never mutated
    """

    __slots__ = ("_bindings", "_config", "_methods")

    def __init__(self, bindings: Sequence[Binding], config: RouterConfig) -> None:
        methods: dict[str, Endpoint] = {}
        if config.fallback is not None:
            methods.update(config.fallback.methods())

        table: dict[str, Binding] = {}
        for binding in bindings:
            name = binding.endpoint.external_name
            if name in methods:
                raise MethodAlreadyDefined(name)
            methods[name] = binding.endpoint
            table[name] = binding

        self._bindings: Mapping[str, Binding] = MappingProxyType(table)
        self._methods: Mapping[str, Endpoint] = MappingProxyType(methods)
        self._config = config

    @property
    def config(self) -> RouterConfig:
        return self._config

    def check(self, method: str, *args: str | bytes) -> None:
        """Decode and validate *args* for *method* without calling it."""
        binding = self._bindings.get(method)
        if binding is None:
            if self._config.fallback is not None:
                return self._config.fallback.check(method, *args)
            raise UnsupportedMethod(method)
        run_check(binding, args, self._config)
        return None

    def invoke(self, method: str, *args: str | bytes) -> bytes:
        """Call *method* with decoded *args* and return the encoded result.

        Errors raised or returned by the operation propagate unwrapped.
        """
        binding = self._bindings.get(method)
        if binding is None:
            if self._config.fallback is not None:
                return self._config.fallback.invoke(method, *args)
            raise UnsupportedMethod(method)
        return run_invoke(binding, args, self._config)

    def methods(self) -> Mapping[str, Endpoint]:
        """All endpoints, the fallback's included, keyed by external name."""
        return self._methods

    def endpoint(self, method: str) -> Endpoint | None:
        """Look up an endpoint by external name. Returns ``None`` if not found."""
        return self._methods.get(method)

    def __len__(self) -> int:
        return len(self._methods)

    def __contains__(self, method: object) -> bool:
        return method in self._methods
