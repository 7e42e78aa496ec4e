"""
Sequence, text and set comparison.

Provides the longest-common-subsequence strategy for:
- Generic sequences (lists, tuples, bytes): coalesced runs
- Text: one result per line
- Sets: one result per distinct element
"""

from __future__ import annotations

import logging
from collections.abc import Sequence, Set
from itertools import chain
from typing import Any, Iterable, Optional

from diffable.core.diff.algorithms import DiffAlgorithm, Default
from diffable.core.diff.alignment import (
    AlignmentAlgorithm,
    LineCompareOptions,
    classify,
    classify_lines,
)
from diffable.core.diff.coalesce import coalesce
from diffable.core.exceptions import PatchMismatchError
from diffable.core.models import Both, DiffResult, DiffTag, Left, Right


class LcsDiff(DiffAlgorithm, name="lcs"):
    """Diff based on the longest common subsequence of two inputs."""


# =============================================================================
# Sequences
# =============================================================================

def diff_sequences(
    left: Sequence[Any],
    right: Sequence[Any],
    algorithm: AlignmentAlgorithm = AlignmentAlgorithm.MYERS
) -> list[DiffResult]:
    """
    Compare two sequences element by element.

    Returns:
        Maximal runs, each a slice of the inputs
    """
    runs = coalesce(left, right, classify(left, right, algorithm=algorithm))
    logging.debug(
        f"LcsDiff - {len(left)}/{len(right)} elements coalesced into {len(runs)} runs"
    )
    return runs


@LcsDiff.register(Sequence)
def _lcs_sequence(left: Sequence[Any], right: Sequence[Any]) -> list[DiffResult]:
    return diff_sequences(left, right)


@LcsDiff.register_patch(Sequence)
def _apply_sequence(left: Sequence[Any], diff: list[DiffResult]) -> Sequence[Any]:
    """Concatenate the right-hand runs after checking the left-hand ones."""
    rebuilt = _concat(left, _sides(diff, left_side=True))
    if list(rebuilt) != list(left):
        raise PatchMismatchError("Diff left runs do not rebuild the given sequence")
    return _concat(left, _sides(diff, left_side=False))


def _concat(template: Sequence[Any], parts: list[Sequence[Any]]) -> Sequence[Any]:
    """Join runs into a sequence of the same kind as ``template``."""
    if isinstance(template, (bytes, bytearray)):
        return type(template)(b''.join(parts))
    if isinstance(template, tuple):
        return tuple(chain.from_iterable(parts))
    return list(chain.from_iterable(parts))


def _sides(diff: Iterable[DiffResult], left_side: bool) -> list[Any]:
    if left_side:
        return [d.left_side for d in diff if d.tag != DiffTag.RIGHT]
    return [d.right_side for d in diff if d.tag != DiffTag.LEFT]


# =============================================================================
# Text
# =============================================================================

def diff_lines(
    left: str,
    right: str,
    options: Optional[LineCompareOptions] = None
) -> list[DiffResult[str]]:
    """
    Compare two texts line by line.

    Each line is its own result and keeps its terminator. ``Both`` lines
    may differ in whatever the options tell the comparison to ignore.
    """
    return list(classify_lines(left, right, options))


@LcsDiff.register(str)
def _lcs_text(left: str, right: str) -> list[DiffResult[str]]:
    return diff_lines(left, right)


@LcsDiff.register_patch(str)
def _apply_text(left: str, diff: list[DiffResult[str]]) -> str:
    if ''.join(_sides(diff, left_side=True)) != left:
        raise PatchMismatchError("Diff left lines do not rebuild the given text")
    return ''.join(_sides(diff, left_side=False))


# =============================================================================
# Sets
# =============================================================================

@LcsDiff.register(Set)
def _lcs_set(left: Set, right: Set) -> set[DiffResult]:
    """
    Compare two sets.

    Every distinct element of either set appears in exactly one result.
    Order is not meaningful.
    """
    originals = {item: item for item in left}
    out: set[DiffResult] = {Left(item) for item in left}
    for item in right:
        if Left(item) in out:
            out.remove(Left(item))
            out.add(Both(originals[item], item))
        else:
            out.add(Right(item))
    return out


@LcsDiff.register_patch(Set)
def _apply_set(left: Set, diff: set[DiffResult]) -> Set:
    """Rebuild the right set as every ``Both`` and ``Right`` element."""
    if set(_sides(diff, left_side=True)) != set(left):
        raise PatchMismatchError("Diff left elements do not match the given set")
    right = _sides(diff, left_side=False)
    return frozenset(right) if isinstance(left, frozenset) else set(right)


# =============================================================================
# Default
# =============================================================================

@Default.register(Sequence)
def _default_sequence(left: Sequence[Any], right: Sequence[Any]) -> list[DiffResult]:
    return LcsDiff.diff(left, right)


@Default.register(str)
def _default_text(left: str, right: str) -> list[DiffResult[str]]:
    return LcsDiff.diff(left, right)
