"""
Core data models for the diff library.

This module defines the structures shared by every comparison strategy:
- The three-way diff result (Left / Both / Right)
- The classification tag used while aligning sequences
- The transient run boundary record used by the coalescer
- Summary statistics over a result sequence

All models are:
- Independent of the compared type (lines, slices, sets, pixels)
- Immutable where practical
- Hashable whenever their payload is hashable
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Iterable, NamedTuple, Optional, TypeVar


T = TypeVar('T')


# =============================================================================
# Enumerations
# =============================================================================

class DiffTag(Enum):
    """Which input(s) a piece of content belongs to."""
    LEFT = auto()   # Only in the left/old input
    BOTH = auto()   # In both inputs
    RIGHT = auto()  # Only in the right/new input


# =============================================================================
# Diff Results
# =============================================================================

@dataclass(frozen=True)
class DiffResult(Generic[T]):
    """
    Base class of a single diff result.

    Concrete results are one of ``Left``, ``Both`` or ``Right``. For
    sequence inputs the payload is a run (a slice of the input); for
    line and set comparisons it is a single element.
    """

    @property
    def tag(self) -> DiffTag:
        raise NotImplementedError

    @property
    def left_side(self) -> Optional[T]:
        """Content this result contributes to the left input, if any."""
        return None

    @property
    def right_side(self) -> Optional[T]:
        """Content this result contributes to the right input, if any."""
        return None

    @property
    def prefix(self) -> str:
        """Unified diff prefix character."""
        return _PREFIXES[self.tag]


@dataclass(frozen=True)
class Left(DiffResult[T]):
    """Content present only in the left input."""
    value: T

    @property
    def tag(self) -> DiffTag:
        return DiffTag.LEFT

    @property
    def left_side(self) -> Optional[T]:
        return self.value


@dataclass(frozen=True)
class Both(DiffResult[T]):
    """
    Content present in both inputs.

    The left and right views are kept separately: they compare equal
    under the comparison key but may differ byte for byte (for example
    in line endings or whitespace).
    """
    left: T
    right: T

    @property
    def tag(self) -> DiffTag:
        return DiffTag.BOTH

    @property
    def left_side(self) -> Optional[T]:
        return self.left

    @property
    def right_side(self) -> Optional[T]:
        return self.right


@dataclass(frozen=True)
class Right(DiffResult[T]):
    """Content present only in the right input."""
    value: T

    @property
    def tag(self) -> DiffTag:
        return DiffTag.RIGHT

    @property
    def right_side(self) -> Optional[T]:
        return self.value


_PREFIXES = {
    DiffTag.LEFT: '-',
    DiffTag.BOTH: ' ',
    DiffTag.RIGHT: '+',
}


def make_result(tag: DiffTag, left: T, right: T) -> DiffResult[T]:
    """Build the result variant for ``tag`` from left and right content."""
    if tag == DiffTag.LEFT:
        return Left(left)
    if tag == DiffTag.RIGHT:
        return Right(right)
    return Both(left, right)


class RunBoundary(NamedTuple):
    """
    Point in a classification stream where the tag changes.

    Cursors count the elements consumed from each input before the
    change; ``was`` is the tag of the run that ends here and ``now`` the
    tag of the run that starts.
    """
    left_cursor: int
    right_cursor: int
    was: DiffTag
    now: DiffTag


# =============================================================================
# Statistics
# =============================================================================

@dataclass
class DiffStatistics:
    """Element counts for a diff result sequence."""
    left_only: int = 0
    right_only: int = 0
    in_both: int = 0
    result_count: int = 0

    @classmethod
    def from_results(cls, results: Iterable[DiffResult]) -> 'DiffStatistics':
        """
        Count elements per tag.

        Run payloads count their length; any other payload counts as a
        single element.
        """
        stats = cls()
        for result in results:
            stats.result_count += 1
            if result.tag == DiffTag.LEFT:
                stats.left_only += _element_count(result.left_side)
            elif result.tag == DiffTag.RIGHT:
                stats.right_only += _element_count(result.right_side)
            else:
                stats.in_both += _element_count(result.left_side)
        return stats

    @property
    def total_left(self) -> int:
        return self.left_only + self.in_both

    @property
    def total_right(self) -> int:
        return self.right_only + self.in_both

    @property
    def is_identical(self) -> bool:
        return self.left_only == 0 and self.right_only == 0

    @property
    def similarity_ratio(self) -> float:
        """
        Calculate similarity ratio (0.0 to 1.0).

        1.0 means identical, 0.0 means nothing in common.
        """
        total = max(self.total_left, self.total_right)
        if total == 0:
            return 1.0
        return self.in_both / total

    def __str__(self) -> str:
        return f"+{self.right_only} -{self.left_only} ={self.in_both}"


def _element_count(payload) -> int:
    if isinstance(payload, (list, tuple, bytes, bytearray, memoryview, range)):
        return len(payload)
    return 1
