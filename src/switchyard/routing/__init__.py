"""Routers: convention discovery, schema discovery, and multiplexing."""

from switchyard.routing.convention import ConventionRouter
from switchyard.routing.endpoint import Category, Endpoint
from switchyard.routing.multiplex import MultiplexRouter, compose
from switchyard.routing.protocol import Router
from switchyard.routing.schema_router import (
    SchemaRouter,
    ServiceBinding,
    convention_fallback,
)
from switchyard.routing.service import (
    MethodDescriptor,
    MethodOptions,
    ServiceSchema,
    full_name_to_url,
    url_to_service_and_method,
)

__all__ = [
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
    "convention_fallback",
    "full_name_to_url",
    "url_to_service_and_method",
]
