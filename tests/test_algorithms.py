"""Tests for algorithm tokens, dispatch and the Diffable contract."""

from collections.abc import Sequence

import pytest
from PIL import Image

from diffable import (
    Both,
    ColorSub,
    Default,
    Diffable,
    DiffAlgorithm,
    Heatmap,
    LcsDiff,
    Left,
    PixelPatch,
    RedGreen,
    Right,
    SupportsDiffItem,
    UnsupportedDiffError,
    diff,
    diff_item,
)
from diffable.core.diff import available_algorithms, get_algorithm


class TestTokens:
    @pytest.mark.parametrize("token", [Default, LcsDiff, ColorSub, Heatmap, RedGreen, PixelPatch])
    def test_tokens_cannot_be_instantiated(self, token):
        with pytest.raises(TypeError):
            token()

    @pytest.mark.parametrize("name,token", [
        ("default", Default),
        ("lcs", LcsDiff),
        ("colorsub", ColorSub),
        ("heatmap", Heatmap),
        ("redgreen", RedGreen),
        ("pixelpatch", PixelPatch),
    ])
    def test_lookup_by_name(self, name, token):
        assert get_algorithm(name) is token
        assert get_algorithm(name.upper()) is token
        assert name in available_algorithms()

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown algorithm"):
            get_algorithm("nope")

    def test_support_matrix(self):
        assert LcsDiff.supports(list)
        assert LcsDiff.supports(str)
        assert LcsDiff.supports(frozenset)
        assert not LcsDiff.supports(Image.Image)
        assert ColorSub.supports(Image.Image)
        assert not ColorSub.supports(list)

    def test_patch_capability(self):
        assert LcsDiff.is_patch_capable(list)
        assert LcsDiff.is_patch_capable(set)
        assert PixelPatch.is_patch_capable(Image.Image)
        assert not RedGreen.is_patch_capable(Image.Image)
        assert not Default.is_patch_capable(list)

    def test_unsupported_pairing(self):
        with pytest.raises(UnsupportedDiffError) as excinfo:
            ColorSub.diff([1], [2])

        assert excinfo.value.algorithm == "ColorSub"
        assert excinfo.value.item_type is list
        assert isinstance(excinfo.value, TypeError)

    def test_apply_patch_without_reverse(self, make_image):
        img = make_image('RGB', (1, 1))

        with pytest.raises(UnsupportedDiffError, match="not patch-capable"):
            Heatmap.apply_patch(img, Heatmap.diff(img, img))


class TestCustomAlgorithm:
    def test_subclass_gets_its_own_table(self):
        class Reverse(DiffAlgorithm):
            pass

        @Reverse.register(Sequence)
        def _reverse(left, right):
            return LcsDiff.diff(left[::-1], right[::-1])

        assert Reverse.name == "reverse"
        assert Reverse.diff([1, 2], [2]) == [Both([2], [2]), Left([1])]
        assert not Reverse.supports(set)
        # other tokens are untouched
        assert not ColorSub.supports(list)

    def test_explicit_name(self):
        class Shouty(DiffAlgorithm, name="Shouty-Diff"):
            pass

        assert Shouty.name == "Shouty-Diff"
        assert get_algorithm("shouty-diff") is Shouty


class Document(Diffable):
    """Compared by its lines."""

    def __init__(self, text):
        self.text = text

    def diff_item(self):
        return self.text.splitlines()


class Point(Diffable, tuple):
    pass


class TestContract:
    def test_wrapper_compares_its_item(self):
        result = Document("a\nb").diff(Document("a\nc"))

        assert result == [Both(['a'], ['a']), Left(['b']), Right(['c'])]

    def test_mixin_default_item_is_self(self):
        left = Point((1, 2))
        right = Point((1, 3))

        assert left.diff(right) == [Both((1,), (1,)), Left((2,)), Right((3,))]

    def test_diff_item(self):
        doc = Document("x")

        assert isinstance(doc, SupportsDiffItem)
        assert diff_item(doc) == ["x"]
        assert diff_item([1]) == [1]

    def test_diff_unwraps_both_sides(self):
        assert diff(Document("a"), ["a", "b"]) == [Both(['a'], ['a']), Right(['b'])]

    def test_diff_with_explicit_algorithm(self):
        assert diff({1}, {1}, LcsDiff) == {Both(1, 1)}
