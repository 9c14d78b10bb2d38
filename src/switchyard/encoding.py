"""Result encoding for ``invoke()``.

The values an operation returns (after any trailing error has been split
off) are encoded as:

- no values: ``null``
- one ``BytesEncoder`` / ``StateBytesEncoder``: its own bytes, verbatim
- one plain value: JSON
- several values: a JSON array, in return order

JSON is produced by ``pydantic_core.to_json``, which handles pydantic
models, dataclasses, datetimes, UUIDs, and the builtin containers.
"""

from collections.abc import Sequence
from typing import Any

from pydantic_core import to_json

from switchyard.capabilities import BytesEncoder, StateBytesEncoder

NULL = b"null"


def encode_results(results: Sequence[Any], state: Any = None) -> bytes:
    """Encode an operation's return values as a single payload."""
    if not results:
        return NULL

    if len(results) == 1:
        value = results[0]
        if isinstance(value, BytesEncoder):
            return bytes(value.encode_to_bytes())
        if isinstance(value, StateBytesEncoder):
            return bytes(value.encode_to_bytes_with_state(state))
        return to_json(value)

    return to_json(list(results))
