"""
Plain-text rendering of diff results.

Every formatter yields output lines without terminators, one per
result, prefixed with ``-`` (left only), `` `` (both) or ``+`` (right
only).
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from diffable.core.models import DiffResult, DiffTag


def _display_side(result: DiffResult) -> Any:
    """Content shown for a result: the left view unless right-only."""
    if result.tag == DiffTag.RIGHT:
        return result.right_side
    return result.left_side


def format_lines(results: Iterable[DiffResult[str]]) -> Iterator[str]:
    """Format per-line text results."""
    for result in results:
        line = _display_side(result).rstrip('\r\n')
        yield f"{result.prefix}{line}"


def format_slice(results: Iterable[DiffResult], separator: str = " ") -> Iterator[str]:
    """Format sequence runs, showing the ``repr`` of each element."""
    for result in results:
        items = separator.join(repr(item) for item in _display_side(result))
        yield f"{result.prefix}{items}"


def format_bytes(results: Iterable[DiffResult[bytes]], separator: str = " ") -> Iterator[str]:
    """Format byte runs as two-digit uppercase hex."""
    for result in results:
        items = separator.join(f"{byte:02X}" for byte in _display_side(result))
        yield f"{result.prefix}{items}"


def format_set(results: Iterable[DiffResult]) -> Iterator[str]:
    """Format set results, one element per line in a stable order."""
    rendered = [f"{result.prefix}{_display_side(result)!r}" for result in results]
    yield from sorted(rendered, key=lambda line: (line[1:], line[0]))
