"""Service schema: structural description of an RPC-style service.

A ``ServiceSchema`` plays the role of a protobuf service descriptor:
a fully qualified service name plus an ordered list of methods, each with
a request type and optional per-method options::

    BALANCE_SERVICE = ServiceSchema(
        full_name="token.v1.BalanceService",
        methods=(
            MethodDescriptor("AddBalance", AddBalanceRequest, Empty),
            MethodDescriptor(
                "GetBalance",
                BalanceRequest,
                Balance,
                options=MethodOptions(category=Category.READ_ONLY),
            ),
        ),
    )

All descriptor types are frozen and hashable.
"""

from dataclasses import dataclass
from typing import Any

from switchyard.errors import ConfigurationError
from switchyard.routing.endpoint import Category


@dataclass(frozen=True, slots=True)
class MethodOptions:
    """Per-method overrides. ``None`` means "use the default"."""

    external_name: str | None = None
    category: Category | None = None
    auth_required: bool | None = None


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """One unary method of a service."""

    name: str
    input_type: Any
    output_type: Any = None
    options: MethodOptions = MethodOptions()
    client_streaming: bool = False
    server_streaming: bool = False

    @property
    def is_streaming(self) -> bool:
        return self.client_streaming or self.server_streaming


@dataclass(frozen=True, slots=True)
class ServiceSchema:
    """A fully qualified service and its methods, in declaration order."""

    full_name: str
    methods: tuple[MethodDescriptor, ...] = ()

    @property
    def name(self) -> str:
        """``"token.v1.BalanceService"`` -> ``"BalanceService"``."""
        return self.full_name.rsplit(".", 1)[-1]

    @property
    def package(self) -> str:
        """``"token.v1.BalanceService"`` -> ``"token.v1"``."""
        return self.full_name.rpartition(".")[0]

    def method_full_name(self, method: MethodDescriptor) -> str:
        return f"{self.full_name}.{method.name}"

    def method(self, name: str) -> MethodDescriptor | None:
        """Look up a method descriptor by name. Returns ``None`` if not found."""
        for method in self.methods:
            if method.name == name:
                return method
        return None


def full_name_to_url(full_method_name: str) -> str:
    """Transform ``"pkg.Service.Method"`` into ``"/pkg.Service/Method"``.

    Raises ``ConfigurationError`` when the name lacks a package or service
    part.
    """
    parts = full_method_name.split(".")
    if len(parts) < 3 or not all(parts):
        msg = f"Cannot build a URL from {full_method_name!r}: expected 'package.Service.Method'"
        raise ConfigurationError(msg)

    method_name = parts[-1]
    service_name = parts[-2]
    package_name = ".".join(parts[:-2])
    return f"/{package_name}.{service_name}/{method_name}"


def url_to_service_and_method(url: str) -> tuple[str, str] | None:
    """Split ``"/pkg.Service/Method"`` into ``("pkg.Service", "Method")``.

    Returns ``None`` for anything that is not a method URL.
    """
    if not url.startswith("/"):
        return None
    parts = url[1:].split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]
