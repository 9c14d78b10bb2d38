"""Endpoint and Category frozen types."""

from dataclasses import dataclass
from enum import Enum


class Category(Enum):
    """How the dispatcher should execute an endpoint."""

    BATCHED = "batched"  # state-changing, executed through the batch pipeline
    IMMEDIATE = "immediate"  # state-changing, executed directly
    READ_ONLY = "read_only"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """One externally callable operation.

    Created during discovery, immutable afterwards. The dispatcher reads
    ``auth_required`` and ``arg_count`` to build its calling convention,
    e.g. prepending a verified identity before the raw arguments.
    """

    external_name: str
    category: Category
    auth_required: bool
    arg_count: int
    returns_error: bool = False
    method_name: str = ""

    @property
    def is_batched(self) -> bool:
        return self.category is Category.BATCHED

    @property
    def is_immediate(self) -> bool:
        return self.category is Category.IMMEDIATE

    @property
    def is_read_only(self) -> bool:
        return self.category is Category.READ_ONLY


def default_auth(category: Category) -> bool:
    """Batched endpoints require auth unless told otherwise."""
    return category is Category.BATCHED


def lower_first(name: str) -> str:
    """``"AddBalance"`` -> ``"addBalance"``."""
    if not name:
        return ""
    return name[0].lower() + name[1:]
