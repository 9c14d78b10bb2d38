"""Operation signature introspection.

Inspects a callable's parameters and type hints once, at discovery time,
and produces the facts the dispatch pipeline needs: parameter shapes,
whether the first parameter is the ``Sender`` marker, how many values
the operation returns, and whether the last of them is an error.

Return annotations map to result arity:

- ``-> None``                         zero values
- ``-> tuple[A, B]``                  two values (fixed-length tuples only)
- ``-> Exception | None``             one value, which is the error
- ``-> tuple[A, ValueError | None]``  two values, the last is the error
- anything else, or no annotation     one value

Unannotated parameters are coerced as ``str``.
"""

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

from switchyard.context import Sender
from switchyard.errors import ConfigurationError

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class OperationSignature:
    """What dispatch needs to know about one operation."""

    param_shapes: tuple[Any, ...]
    takes_sender: bool
    returns_error: bool
    # None: the return value is a single value; N: a tuple of N values
    result_arity: int | None

    @property
    def arg_count(self) -> int:
        return len(self.param_shapes)


def operation_signature(func: Callable[..., Any]) -> OperationSignature:
    """Describe *func* (usually a bound method).

    Raises ``ConfigurationError`` for variadic or required keyword-only
    parameters and for annotations that cannot be resolved.
    """
    name = getattr(func, "__qualname__", repr(func))
    try:
        sig = inspect.signature(func)
        hints = get_type_hints(getattr(func, "__func__", func))
    except (NameError, TypeError, ValueError) as exc:
        msg = f"Cannot introspect {name}: {exc}"
        raise ConfigurationError(msg) from exc

    shapes: list[Any] = []
    for param in sig.parameters.values():
        if param.kind in _POSITIONAL:
            shapes.append(hints.get(param.name, str))
            continue
        if param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is not param.empty:
            continue
        msg = f"{name}: parameter {param.name!r} cannot be passed positionally"
        raise ConfigurationError(msg)

    takes_sender = bool(shapes) and is_sender_shape(shapes[0])
    arity, returns_error = _describe_return(hints.get("return", inspect.Parameter.empty))

    return OperationSignature(
        param_shapes=tuple(shapes),
        takes_sender=takes_sender,
        returns_error=returns_error,
        result_arity=arity,
    )


def is_sender_shape(shape: Any) -> bool:
    return isinstance(shape, type) and issubclass(shape, Sender)


def is_error_shape(shape: Any) -> bool:
    """True for exception types and unions of exception types with None."""
    if isinstance(shape, type):
        return issubclass(shape, BaseException)
    origin = get_origin(shape)
    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(shape) if a is not type(None)]
        return bool(members) and all(
            isinstance(a, type) and issubclass(a, BaseException) for a in members
        )
    return False


def _describe_return(annotation: Any) -> tuple[int | None, bool]:
    if annotation is inspect.Parameter.empty:
        return None, False
    if annotation is None or annotation is type(None):
        return 0, False

    if get_origin(annotation) is tuple:
        args = get_args(annotation)
        if Ellipsis not in args:
            # tuple[()] has no args on recent interpreters
            members = () if args == ((),) else args
            return len(members), bool(members) and is_error_shape(members[-1])

    return None, is_error_shape(annotation)
