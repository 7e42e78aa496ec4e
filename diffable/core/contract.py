"""
The Diffable contract.

A value takes part in comparisons through its *item*: the object that is
actually handed to an algorithm. Built-in sequences, strings, sets and
images are their own item. Other types expose one by implementing
``diff_item()``, for example a wrapper returning its inner buffer.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from diffable.core.diff import Default, DiffAlgorithm


@runtime_checkable
class SupportsDiffItem(Protocol):
    """Anything that names the item it is compared by."""

    def diff_item(self) -> Any:
        ...


def diff_item(value: Any) -> Any:
    """The item ``value`` is compared by."""
    if isinstance(value, SupportsDiffItem):
        return value.diff_item()
    return value


class Diffable:
    """
    Mixin giving a class a ``diff`` method.

    Subclasses override ``diff_item`` when they should be compared by
    something other than themselves.
    """

    def diff_item(self) -> Any:
        return self

    def diff(self, other: Any, algorithm: type[DiffAlgorithm] = Default) -> Any:
        """Compare with ``other`` using ``algorithm``."""
        return algorithm.diff(diff_item(self), diff_item(other))


def diff(
    left: Any,
    right: Any,
    algorithm: Optional[type[DiffAlgorithm]] = None
) -> Any:
    """
    Compare two values.

    Args:
        left: Left/original value
        right: Right/modified value
        algorithm: Algorithm token; ``Default`` when omitted

    Returns:
        Whatever the (algorithm, item type) pairing produces

    Raises:
        UnsupportedDiffError: The pairing does not exist
    """
    algorithm = algorithm or Default
    return algorithm.diff(diff_item(left), diff_item(right))
