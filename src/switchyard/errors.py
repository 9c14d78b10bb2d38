"""Switchyard exception hierarchy.

Shared across the coercer, the routers, and the multiplexer so every
module raises and catches the same types.

Discovery errors (``MethodAlreadyDefined``, ``InvalidMethodName``,
``ConfigurationError``) are raised from router constructors, so a router
that fails discovery never exists. Per-call errors (``UnsupportedMethod``,
``InvalidNumberOfArguments``, ``InvalidArgumentValue``) are raised from
``check()`` and ``invoke()``. ``InvalidReturnValue`` is raised from
``invoke()`` when an operation breaks its own return annotation.
"""

from typing import Any


class RouterError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(RouterError):
    """Raised when a service schema or an operation signature is unusable.

    Always raised at construction time, never during dispatch.
    """


class MethodAlreadyDefined(RouterError):  # noqa: N818
    """Two endpoints resolved to the same external name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"method already defined: {name!r}")


class InvalidMethodName(RouterError):  # noqa: N818
    """A prefixed method left an empty external name after stripping."""

    def __init__(self, method_name: str) -> None:
        self.method_name = method_name
        super().__init__(f"invalid method name: {method_name!r}")


class UnsupportedMethod(RouterError):  # noqa: N818
    """No endpoint is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unsupported method: {name!r}")


class InvalidNumberOfArguments(RouterError):  # noqa: N818
    """The caller passed more or fewer arguments than the endpoint takes."""

    def __init__(self, method: str, expected: int, received: int) -> None:
        self.method = method
        self.expected = expected
        self.received = received
        super().__init__(
            f"invalid number of arguments: found {received} but expected {expected}: {method}"
        )


class InvalidReturnValue(RouterError):  # noqa: N818
    """An operation returned something its annotation does not allow."""

    def __init__(self, method: str, detail: str) -> None:
        self.method = method
        self.detail = detail
        super().__init__(f"invalid return value: {method}: {detail}")


class InvalidArgumentValue(RouterError):  # noqa: N818
    """An argument could not be coerced to its shape or failed validation.

    Raised by the coercer with only ``value`` and ``shape`` set. The
    routers re-raise it through :meth:`for_argument` so the error that
    reaches the caller always names the method and argument index.
    """

    def __init__(
        self,
        value: str | bytes,
        shape: Any,
        *,
        reason: str = "",
        method: str | None = None,
        index: int | None = None,
    ) -> None:
        self.value = value
        self.shape = shape
        self.reason = reason
        self.method = method
        self.index = index
        super().__init__(self._message())

    def for_argument(self, method: str, index: int) -> "InvalidArgumentValue":
        """Return a copy of this error bound to *method* and argument *index*."""
        return InvalidArgumentValue(
            self.value,
            self.shape,
            reason=self.reason,
            method=method,
            index=index,
        )

    def _message(self) -> str:
        value = self.value.decode("utf-8", "replace") if isinstance(self.value, bytes) else self.value
        msg = f"invalid argument value: {value!r}: for type {shape_name(self.shape)!r}"
        if self.reason:
            msg += f": {self.reason}"
        if self.method is not None:
            msg += f": {self.method}, argument {self.index}"
        return msg


def shape_name(shape: Any) -> str:
    """Readable name for a parameter shape in error messages."""
    if isinstance(shape, type):
        return shape.__qualname__
    return repr(shape)
