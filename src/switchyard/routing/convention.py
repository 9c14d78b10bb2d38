"""Convention discovery: endpoints from method-name prefixes.

Public methods of the contract object are classified by prefix:

=========  =====================  ==============
prefix     category               auth default
=========  =====================  ==============
``tx_``    ``Category.BATCHED``   from signature
``nbtx_``  ``Category.IMMEDIATE`` from signature
``query_`` ``Category.READ_ONLY`` from signature
=========  =====================  ==============

The prefix is stripped and the first character of the remainder
lower-cased to form the external name, so ``query_balanceOf`` becomes
``balanceOf``. Methods without a recognised prefix are ignored. A method
requires auth when its first parameter is annotated ``Sender``::

    class Token:
        def tx_transfer(self, sender: Sender, to: str, amount: int) -> ValueError | None: ...
        def query_total_supply(self) -> int: ...

    router = ConventionRouter(Token())
    router.methods()["transfer"].arg_count  # 3 (sender, to, amount)
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from switchyard.config import RouterConfig
from switchyard.context import Sender
from switchyard.errors import InvalidMethodName
from switchyard.routing.endpoint import Category, Endpoint, lower_first
from switchyard.routing.pipeline import Binding, BindingRouter, Caller
from switchyard.routing.signature import operation_signature

logger = logging.getLogger("switchyard.routing")

PREFIXES: tuple[tuple[str, Category], ...] = (
    ("tx_", Category.BATCHED),
    ("nbtx_", Category.IMMEDIATE),
    ("query_", Category.READ_ONLY),
)


def public_methods(contract: object) -> list[str]:
    """Names of the public methods of *contract*, sorted.

    Looks attributes up statically first so properties and other
    computed attributes are never evaluated.
    """
    names: list[str] = []
    for name in sorted(dir(contract)):
        if name.startswith("_"):
            continue
        try:
            attr = inspect.getattr_static(contract, name)
        except AttributeError:
            continue
        if inspect.isroutine(attr):
            names.append(name)
    return names


def classify(method_name: str) -> tuple[Category, str] | None:
    """Return ``(category, external_name)``, or None for unprefixed names.

    Raises ``InvalidMethodName`` when nothing is left after the prefix.
    """
    for prefix, category in PREFIXES:
        if method_name.startswith(prefix):
            remainder = method_name[len(prefix):]
            if not remainder:
                raise InvalidMethodName(method_name)
            return category, lower_first(remainder)
    return None


def _caller(func: Callable[..., Any], takes_sender: bool) -> Caller:
    if takes_sender:
        def call(sender: Sender | None, values: list[Any]) -> Any:
            return func(sender, *values)
    else:
        def call(sender: Sender | None, values: list[Any]) -> Any:
            return func(*values)
    return call


def discover(contract: object) -> list[Binding]:
    """Build one binding per prefixed public method of *contract*.

    Duplicate names are left for ``BindingRouter`` to reject.
    """
    bindings: list[Binding] = []
    for method_name in public_methods(contract):
        classified = classify(method_name)
        if classified is None:
            logger.debug("skipping %s: no endpoint prefix", method_name)
            continue
        category, external_name = classified

        func = getattr(contract, method_name)
        sig = operation_signature(func)
        endpoint = Endpoint(
            external_name=external_name,
            category=category,
            auth_required=sig.takes_sender,
            arg_count=sig.arg_count,
            returns_error=sig.returns_error,
            method_name=method_name,
        )
        bindings.append(
            Binding(
                endpoint=endpoint,
                call=_caller(func, sig.takes_sender),
                arg_shapes=sig.param_shapes[1:] if sig.takes_sender else sig.param_shapes,
                result_arity=sig.result_arity,
            )
        )
        logger.debug(
            "registered %s -> %s (%s, auth=%s, args=%d)",
            external_name,
            method_name,
            category.value,
            endpoint.auth_required,
            endpoint.arg_count,
        )
    return bindings


class ConventionRouter(BindingRouter):
    """Routes calls to a contract's prefixed methods.

    Discovery runs once, in the constructor; any failure raises before
    the router exists. Afterwards the table is read-only.
    """

    __slots__ = ("_contract",)

    def __init__(self, contract: object, *, config: RouterConfig | None = None) -> None:
        super().__init__(discover(contract), config or RouterConfig())
        self._contract = contract

    @property
    def contract(self) -> object:
        return self._contract
