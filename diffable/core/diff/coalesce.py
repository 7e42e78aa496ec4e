"""
Run coalescing.

Turns a per-element classification stream into the minimal ordered list
of maximal runs. Each run is a slice of the original inputs, so the
concatenated left sides rebuild the left input and the concatenated
right sides rebuild the right input.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from diffable.core.models import DiffResult, DiffTag, RunBoundary, make_result


def find_boundaries(
    stream: Iterable[DiffResult]
) -> tuple[list[RunBoundary], DiffTag, int, int]:
    """
    Record every point where the classification tag changes.

    Returns:
        Tuple of (boundaries, last_tag, left_consumed, right_consumed)
    """
    last = DiffTag.BOTH
    boundaries: list[RunBoundary] = []
    left_idx = 0
    right_idx = 0

    for entry in stream:
        tag = entry.tag
        if tag != last:
            boundaries.append(RunBoundary(left_idx, right_idx, last, tag))
            last = tag
        if tag == DiffTag.LEFT:
            left_idx += 1
        elif tag == DiffTag.RIGHT:
            right_idx += 1
        else:
            left_idx += 1
            right_idx += 1

    return boundaries, last, left_idx, right_idx


def coalesce(
    left: Sequence[Any],
    right: Sequence[Any],
    stream: Iterable[DiffResult]
) -> list[DiffResult]:
    """
    Group a classification stream over ``left`` and ``right`` into runs.

    Consecutive elements with the same tag form one result; a new result
    starts exactly where the tag changes. Empty runs are dropped and
    whatever follows the last boundary is flushed as a final run.

    Args:
        left: Left/original sequence
        right: Right/modified sequence
        stream: One classification per consumed element, in order

    Returns:
        Results whose payloads are slices of ``left`` and ``right``
    """
    boundaries, _, left_consumed, right_consumed = find_boundaries(stream)
    left_len = len(left)
    right_len = len(right)

    if left_consumed > left_len or right_consumed > right_len:
        logging.debug(
            f"Coalescer - Stream consumed {left_consumed}/{right_consumed} "
            f"elements of {left_len}/{right_len}, clamping"
        )

    last_left = 0
    last_right = 0
    trailing = DiffTag.BOTH
    runs: list[DiffResult] = []

    for left_idx, right_idx, was, now in boundaries:
        trailing = now
        left_run = left[last_left:min(left_idx, left_len)]
        right_run = right[last_right:min(right_idx, right_len)]
        last_left = left_idx
        last_right = right_idx
        if not left_run and not right_run:
            continue
        runs.append(make_result(was, left_run, right_run))

    if last_left < left_len or last_right < right_len:
        left_run = left[min(last_left, left_len):]
        right_run = right[min(last_right, right_len):]
        runs.append(make_result(trailing, left_run, right_run))

    return runs
