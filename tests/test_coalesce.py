"""Tests for run coalescing."""

import random

import pytest

from diffable import Both, DiffStatistics, DiffTag, Left, Right
from diffable.core.diff import AlignmentAlgorithm, LcsDiff, classify, coalesce, diff_sequences
from diffable.core.diff.coalesce import find_boundaries
from diffable.core.models import RunBoundary


PAIRS = [
    ([1, 2, 3, 4, 5, 6, 7, 8], [1, 3, 4, 5, 2, 6, 7]),
    ([1, 2, 3, 4, 5], [0, 1, 2, 3, 4, 5, 6, 7, 8]),
    ([], []),
    ([], [1, 2]),
    ([1, 2], []),
    ([1, 2, 3], [4, 5, 6]),
    (list("the quick brown fox"), list("the quack brown fix!")),
    ([1, 1, 1, 2, 2, 2], [2, 2, 1, 1]),
]


def _concat(runs, side):
    out = []
    for run in runs:
        part = run.left_side if side == 'left' else run.right_side
        if part is not None:
            out.extend(part)
    return out


class TestExamples:
    def test_interleaved_changes(self):
        a = [1, 2, 3, 4, 5, 6, 7, 8]
        b = [1, 3, 4, 5, 2, 6, 7]

        assert LcsDiff.diff(a, b) == [
            Both([1], [1]),
            Left([2]),
            Both([3, 4, 5], [3, 4, 5]),
            Right([2]),
            Both([6, 7], [6, 7]),
            Left([8]),
        ]

    def test_additions_at_both_ends(self):
        a = [1, 2, 3, 4, 5]
        b = [0, 1, 2, 3, 4, 5, 6, 7, 8]

        assert LcsDiff.diff(a, b) == [
            Right([0]),
            Both([1, 2, 3, 4, 5], [1, 2, 3, 4, 5]),
            Right([6, 7, 8]),
        ]


class TestProperties:
    @pytest.mark.parametrize("left,right", PAIRS)
    def test_reconstruction(self, left, right):
        runs = LcsDiff.diff(left, right)

        assert _concat(runs, 'left') == left
        assert _concat(runs, 'right') == right

    @pytest.mark.parametrize("left,right", PAIRS)
    def test_adjacent_runs_differ_in_tag(self, left, right):
        runs = LcsDiff.diff(left, right)

        for first, second in zip(runs, runs[1:]):
            assert first.tag != second.tag

    @pytest.mark.parametrize("left,right", PAIRS)
    def test_no_empty_runs(self, left, right):
        for run in LcsDiff.diff(left, right):
            side = run.right_side if run.tag == DiffTag.RIGHT else run.left_side
            assert len(side) > 0

    def test_identity(self):
        data = [3, 1, 4, 1, 5, 9, 2, 6]
        assert LcsDiff.diff(data, data) == [Both(data, data)]

    def test_empty_inputs(self):
        assert LcsDiff.diff([], []) == []

    def test_empty_left(self):
        assert LcsDiff.diff([], [1, 2, 3]) == [Right([1, 2, 3])]

    def test_empty_right(self):
        assert LcsDiff.diff([1, 2, 3], []) == [Left([1, 2, 3])]

    def test_disjoint(self):
        runs = LcsDiff.diff([1, 2, 3], [4, 5])

        assert runs == [Left([1, 2, 3]), Right([4, 5])]
        assert all(run.tag != DiffTag.BOTH for run in runs)


class TestCoalesce:
    def test_runs_keep_input_type(self):
        runs = coalesce((1, 2, 3), (1, 3), classify((1, 2, 3), (1, 3)))
        assert runs == [Both((1,), (1,)), Left((2,)), Both((3,), (3,))]

        runs = coalesce(b"abc", b"abd", classify(b"abc", b"abd"))
        assert runs == [Both(b"ab", b"ab"), Left(b"c"), Right(b"d")]

    def test_runs_share_elements(self):
        marker = object()
        left = [marker, 1]
        right = [marker, 2]

        runs = coalesce(left, right, classify(left, right))

        assert runs[0].left[0] is marker
        assert runs[0].right[0] is marker

    def test_leading_change_skips_empty_run(self):
        stream = [Right(0), Both(1, 1)]
        assert coalesce([1], [0, 1], stream) == [Right([0]), Both([1], [1])]

    def test_stream_overreporting_is_clamped(self):
        stream = [Left(1), Left(2), Right(3), Right(99)]
        assert coalesce([1, 2], [3], stream) == [Left([1, 2]), Right([3])]

    def test_empty_stream_flushes_as_both(self):
        assert coalesce([1], [1], []) == [Both([1], [1])]


class TestFindBoundaries:
    def test_records_tag_changes(self):
        stream = [Both(1, 1), Left(2), Left(3), Right(4), Both(5, 5)]

        boundaries, last, left_count, right_count = find_boundaries(stream)

        assert boundaries == [
            RunBoundary(1, 1, DiffTag.BOTH, DiffTag.LEFT),
            RunBoundary(3, 1, DiffTag.LEFT, DiffTag.RIGHT),
            RunBoundary(3, 2, DiffTag.RIGHT, DiffTag.BOTH),
        ]
        assert last == DiffTag.BOTH
        assert (left_count, right_count) == (4, 3)

    def test_empty_stream(self):
        assert find_boundaries([]) == ([], DiffTag.BOTH, 0, 0)


LONG_INPUTS = [
    b"abc" * 100,
    bytes(random.Random(7).choices(b"abc", k=300)),
]


class TestLongInputs:
    @pytest.mark.parametrize("algorithm", list(AlignmentAlgorithm))
    @pytest.mark.parametrize("left", LONG_INPUTS)
    def test_single_insertion_in_repetitive_bytes(self, left, algorithm):
        right = left[:150] + b"Z" + left[150:]

        runs = diff_sequences(left, right, algorithm)

        assert runs == [
            Both(left[:150], left[:150]),
            Right(b"Z"),
            Both(left[150:], left[150:]),
        ]

    def test_default_on_long_input(self):
        left = LONG_INPUTS[1]
        right = left[:150] + b"Z" + left[150:]

        assert LcsDiff.diff(left, right)[1] == Right(b"Z")

    def test_single_inserted_line_in_long_text(self):
        lines = [f"{chr(c)}\n" for c in LONG_INPUTS[1]]
        left = "".join(lines)
        right = "".join(lines[:150] + ["Z\n"] + lines[150:])

        stats = DiffStatistics.from_results(LcsDiff.diff(left, right))

        assert (stats.left_only, stats.right_only, stats.in_both) == (0, 1, 300)
