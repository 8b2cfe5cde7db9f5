from __future__ import annotations

from collections.abc import Generator, Sequence

from solind.core.errors import ConfigurationError
from solind.core.models import Address, Batch


def iter_batches(addresses: Sequence[Address], size: int) -> Generator[Batch, None, None]:
    """Yield consecutive batches of at most `size` addresses, in order."""
    if size < 1:
        raise ConfigurationError(f"batch size must be >= 1, got {size}")
    for start in range(0, len(addresses), size):
        yield tuple(addresses[start : start + size])


def partition(addresses: Sequence[Address], size: int) -> list[Batch]:
    """Split `addresses` into order-preserving batches.

    Every batch has exactly `size` elements except possibly the last, and
    concatenating the batches gives back `addresses`.
    """
    return list(iter_batches(addresses, size))
