"""
Sequence alignment.

Classifies every element of two sequences as belonging to the left
input only, the right input only, or both, using longest common
subsequence style matching:
- Multiple alignment algorithms
- Comparison keys (compare normalised values, report originals)
- Line-aware mode for text with whitespace and case options
"""

from __future__ import annotations

import difflib
import logging
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Iterator, Optional, Sequence

from diffable.core.models import Both, DiffResult, Left, Right


Opcode = tuple[str, int, int, int, int]


class AlignmentAlgorithm(Enum):
    """Available alignment algorithms."""
    MYERS = auto()          # difflib SequenceMatcher, no popularity heuristic
    MINIMAL = auto()        # Exact LCS table, quadratic in time and memory
    PATIENCE = auto()       # Patience diff - anchors on unique elements


class WhitespaceMode(Enum):
    """Whitespace handling modes."""
    EXACT = auto()            # Compare whitespace exactly
    IGNORE_TRAILING = auto()  # Ignore trailing whitespace
    IGNORE_LEADING = auto()   # Ignore leading whitespace
    IGNORE_ALL = auto()       # Ignore all whitespace
    NORMALIZE = auto()        # Collapse runs of whitespace to a single space


@dataclass
class LineCompareOptions:
    """Options for line-aware comparison."""
    algorithm: AlignmentAlgorithm = AlignmentAlgorithm.MYERS
    ignore_case: bool = False
    whitespace_mode: WhitespaceMode = WhitespaceMode.EXACT
    ignore_line_endings: bool = True

    def normalize_line(self, line: str) -> str:
        """Normalize a line according to options."""
        result = line

        if self.ignore_line_endings:
            result = result.rstrip('\r\n')

        if self.whitespace_mode == WhitespaceMode.IGNORE_TRAILING:
            result = result.rstrip()
        elif self.whitespace_mode == WhitespaceMode.IGNORE_LEADING:
            result = result.lstrip()
        elif self.whitespace_mode == WhitespaceMode.IGNORE_ALL:
            result = ''.join(result.split())
        elif self.whitespace_mode == WhitespaceMode.NORMALIZE:
            result = ' '.join(result.split())

        if self.ignore_case:
            result = result.lower()

        return result


def split_lines(text: str) -> list[str]:
    """
    Split text into lines, keeping each line's terminator.

    Lines end at ``\\n`` (a preceding ``\\r`` stays with its line). A
    trailing terminator does not start an extra empty line.
    """
    pieces = text.split('\n')
    lines = [piece + '\n' for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def classify(
    left: Sequence[Any],
    right: Sequence[Any],
    algorithm: AlignmentAlgorithm = AlignmentAlgorithm.MYERS,
    key: Optional[Callable[[Any], Any]] = None
) -> Iterator[DiffResult]:
    """
    Classify each element of two sequences.

    Yields one result per element, in order: ``Left(x)`` for elements
    only in ``left``, ``Right(y)`` for elements only in ``right`` and
    ``Both(x, y)`` for matched pairs. Within a changed region all left
    elements are yielded before the right ones.

    Args:
        left: Left/original sequence
        right: Right/modified sequence
        algorithm: Alignment algorithm to use
        key: Maps an element to the value actually compared. Yielded
            results always carry the original elements.
    """
    if key is not None:
        left_keys = [key(item) for item in left]
        right_keys = [key(item) for item in right]
    else:
        left_keys = left
        right_keys = right

    for tag, i1, i2, j1, j2 in get_opcodes(left_keys, right_keys, algorithm):
        if tag == 'equal':
            for offset in range(i2 - i1):
                yield Both(left[i1 + offset], right[j1 + offset])
        else:
            for i in range(i1, i2):
                yield Left(left[i])
            for j in range(j1, j2):
                yield Right(right[j])


def classify_lines(
    left: str,
    right: str,
    options: Optional[LineCompareOptions] = None
) -> Iterator[DiffResult[str]]:
    """Classify whole lines of two texts."""
    options = options or LineCompareOptions()
    return classify(
        split_lines(left),
        split_lines(right),
        algorithm=options.algorithm,
        key=options.normalize_line,
    )


def get_opcodes(
    left: Sequence[Any],
    right: Sequence[Any],
    algorithm: AlignmentAlgorithm = AlignmentAlgorithm.MYERS
) -> list[Opcode]:
    """Get difflib-style opcodes using the requested algorithm."""
    if not (_all_hashable(left) and _all_hashable(right)):
        logging.warning(
            f"Alignment - Unhashable elements, falling back to quadratic LCS "
            f"({len(left)} x {len(right)})"
        )
        return _lcs_opcodes(left, right)

    if algorithm == AlignmentAlgorithm.PATIENCE:
        return _patience_opcodes(left, right)
    elif algorithm == AlignmentAlgorithm.MINIMAL:
        return _lcs_opcodes(left, right)
    else:  # MYERS (default)
        return _matcher_opcodes(left, right)


def _matcher_opcodes(left: Sequence[Any], right: Sequence[Any]) -> list[Opcode]:
    # Frequent elements must still anchor matches in long inputs
    matcher = difflib.SequenceMatcher(None, left, right, autojunk=False)
    return matcher.get_opcodes()


def _all_hashable(items: Sequence[Any]) -> bool:
    try:
        for item in items:
            hash(item)
    except TypeError:
        return False
    return True


def _lcs_opcodes(left: Sequence[Any], right: Sequence[Any]) -> list[Opcode]:
    """Opcodes from a full LCS table; needs only ``==`` on elements."""
    n, m = len(left), len(right)

    # table[i][j] = LCS length of left[i:] and right[j:]
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        for j in range(m - 1, -1, -1):
            if left[i] == right[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])

    opcodes: list[Opcode] = []

    def push(tag: str, i1: int, i2: int, j1: int, j2: int) -> None:
        if opcodes and opcodes[-1][0] == tag:
            previous = opcodes[-1]
            opcodes[-1] = (tag, previous[1], i2, previous[3], j2)
        else:
            opcodes.append((tag, i1, i2, j1, j2))

    i = j = 0
    while i < n and j < m:
        if left[i] == right[j]:
            push('equal', i, i + 1, j, j + 1)
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            push('delete', i, i + 1, j, j)
            i += 1
        else:
            push('insert', i, i, j, j + 1)
            j += 1
    if i < n:
        push('delete', i, n, j, j)
    if j < m:
        push('insert', n, n, j, m)

    return opcodes


def _patience_opcodes(left: Sequence[Any], right: Sequence[Any]) -> list[Opcode]:
    """
    Patience diff.

    Anchors on elements that occur exactly once on each side, keeps the
    longest run of anchors that is increasing on both sides and aligns
    the gaps between anchors with SequenceMatcher.
    """
    left_unique: dict[Any, Optional[int]] = {}
    right_unique: dict[Any, Optional[int]] = {}

    for i, item in enumerate(left):
        left_unique[item] = None if item in left_unique else i

    for i, item in enumerate(right):
        right_unique[item] = None if item in right_unique else i

    common = []
    for item, left_idx in left_unique.items():
        if left_idx is not None and right_unique.get(item) is not None:
            common.append((left_idx, right_unique[item]))

    common.sort()

    if common:
        lis = _find_lis([c[1] for c in common])
        anchors = [common[i] for i in lis]
    else:
        anchors = []

    return _build_opcodes_from_anchors(left, right, anchors)


def _find_lis(sequence: list[int]) -> list[int]:
    """
    Positions of one longest strictly increasing subsequence.

    Patience sorting: each pile keeps the smallest value that ends an
    increasing run of that length, and every element remembers the top
    of the pile to its left.
    """
    tops: list[int] = []
    top_positions: list[int] = []
    previous: dict[int, int] = {}

    for pos, value in enumerate(sequence):
        pile = bisect_left(tops, value)
        if pile == len(tops):
            tops.append(value)
            top_positions.append(pos)
        else:
            tops[pile] = value
            top_positions[pile] = pos
        if pile:
            previous[pos] = top_positions[pile - 1]

    chain: list[int] = []
    pos = top_positions[-1] if top_positions else None
    while pos is not None:
        chain.append(pos)
        pos = previous.get(pos)
    chain.reverse()
    return chain


def _build_opcodes_from_anchors(
    left: Sequence[Any],
    right: Sequence[Any],
    anchors: list[tuple[int, int]]
) -> list[Opcode]:
    """Build opcodes using anchor points."""
    opcodes: list[Opcode] = []

    left_pos = 0
    right_pos = 0

    for left_idx, right_idx in anchors:
        opcodes.extend(_gap_opcodes(left, right, left_pos, left_idx, right_pos, right_idx))
        opcodes.append(('equal', left_idx, left_idx + 1, right_idx, right_idx + 1))
        left_pos = left_idx + 1
        right_pos = right_idx + 1

    opcodes.extend(_gap_opcodes(left, right, left_pos, len(left), right_pos, len(right)))
    return opcodes


def _gap_opcodes(
    left: Sequence[Any],
    right: Sequence[Any],
    i1: int,
    i2: int,
    j1: int,
    j2: int
) -> list[Opcode]:
    """Align the region between two anchors."""
    if i1 < i2 and j1 < j2:
        return [
            (tag, i1 + a1, i1 + a2, j1 + b1, j1 + b2)
            for tag, a1, a2, b1, b2 in _matcher_opcodes(left[i1:i2], right[j1:j2])
        ]
    elif i1 < i2:
        return [('delete', i1, i2, j1, j1)]
    elif j1 < j2:
        return [('insert', i1, i1, j1, j2)]
    return []
