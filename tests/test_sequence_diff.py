"""Tests for sequence, text and set comparison."""

import pytest

from diffable import (
    Both,
    Default,
    Left,
    LcsDiff,
    PatchMismatchError,
    Right,
    UnsupportedDiffError,
    diff,
)
from diffable.core.diff import (
    AlignmentAlgorithm,
    LineCompareOptions,
    WhitespaceMode,
    diff_lines,
    diff_sequences,
)


class TestSequences:
    def test_default_forwards_to_lcs(self):
        a = [1, 2, 3, 4, 5, 6, 7, 8]
        b = [1, 3, 4, 5, 2, 6, 7]

        assert diff(a, b) == LcsDiff.diff(a, b)

    def test_bytes(self):
        assert LcsDiff.diff(b"\x00\x01\x02", b"\x00\x02\x03") == [
            Both(b"\x00", b"\x00"),
            Left(b"\x01"),
            Both(b"\x02", b"\x02"),
            Right(b"\x03"),
        ]

    def test_alignment_choice(self):
        runs = diff_sequences(list("abcd"), list("abxd"), AlignmentAlgorithm.PATIENCE)

        assert runs == [
            Both(['a', 'b'], ['a', 'b']),
            Left(['c']),
            Right(['x']),
            Both(['d'], ['d']),
        ]

    def test_patch_rebuilds_right(self):
        left = [1, 2, 3, 4, 5]
        right = [0, 1, 3, 4, 6]

        result = LcsDiff.diff(left, right)

        assert LcsDiff.apply_patch(left, result) == right

    def test_patch_keeps_sequence_kind(self):
        left = b"hello world"
        right = b"help, world!"

        patched = LcsDiff.apply_patch(left, LcsDiff.diff(left, right))

        assert patched == right
        assert isinstance(patched, bytes)
        assert LcsDiff.apply_patch((1, 2), LcsDiff.diff((1, 2), (2, 3))) == (2, 3)

    def test_patch_on_wrong_base(self):
        result = LcsDiff.diff([1, 2, 3], [1, 3])

        with pytest.raises(PatchMismatchError):
            LcsDiff.apply_patch([9, 9, 9], result)


class TestText:
    def test_one_result_per_line(self):
        assert LcsDiff.diff("a\nb\nc\n", "a\nc\nd\n") == [
            Both("a\n", "a\n"),
            Left("b\n"),
            Both("c\n", "c\n"),
            Right("d\n"),
        ]

    def test_both_keeps_each_side(self):
        options = LineCompareOptions(whitespace_mode=WhitespaceMode.IGNORE_TRAILING)

        results = diff_lines("x = 1   \n", "x = 1\n", options)

        assert results == [Both("x = 1   \n", "x = 1\n")]

    def test_text_patch(self):
        left = "one\ntwo\nthree"
        right = "one\n2\nthree\nfour\n"

        assert LcsDiff.apply_patch(left, LcsDiff.diff(left, right)) == right

    def test_text_patch_on_wrong_base(self):
        result = LcsDiff.diff("a\n", "b\n")

        with pytest.raises(PatchMismatchError):
            LcsDiff.apply_patch("c\n", result)

    def test_text_and_list_do_not_mix(self):
        with pytest.raises(UnsupportedDiffError):
            LcsDiff.diff("abc", ['a', 'b', 'c'])


class TestSets:
    def test_every_element_appears_once(self):
        result = LcsDiff.diff({1, 2, 3}, {2, 3, 4})

        assert result == {Left(1), Both(2, 2), Both(3, 3), Right(4)}

    def test_empty_sets(self):
        assert LcsDiff.diff(set(), set()) == set()
        assert LcsDiff.diff(set(), {1}) == {Right(1)}

    def test_frozenset(self):
        result = LcsDiff.diff(frozenset("ab"), frozenset("bc"))

        assert result == {Left('a'), Both('b', 'b'), Right('c')}

    def test_both_pairs_left_and_right_originals(self):
        # 1 and 1.0 are equal and hash alike but are distinct objects
        result = LcsDiff.diff({1}, {1.0})

        (only,) = result
        assert isinstance(only, Both)
        assert type(only.left) is int
        assert type(only.right) is float

    def test_set_patch(self):
        left = {'a', 'b'}
        right = {'b', 'c'}

        assert LcsDiff.apply_patch(left, LcsDiff.diff(left, right)) == right
        assert isinstance(
            LcsDiff.apply_patch(frozenset(left), LcsDiff.diff(frozenset(left), right)),
            frozenset,
        )

    def test_set_patch_on_wrong_base(self):
        result = LcsDiff.diff({1}, {2})

        with pytest.raises(PatchMismatchError):
            LcsDiff.apply_patch({3}, result)

    def test_default_does_not_cover_sets(self):
        assert not Default.supports(set)
        with pytest.raises(UnsupportedDiffError):
            diff({1}, {2})
