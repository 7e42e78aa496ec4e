"""
diffable - human-readable differences between pairs of values.

Compares lines of text, generic sequences, sets and images through a
single pluggable algorithm abstraction:

    >>> from diffable import diff
    >>> diff([1, 2, 3], [1, 3, 4])
    [Both(left=[1], right=[1]), Left(value=[2]), Both(left=[3], right=[3]), Right(value=[4])]
"""

__version__ = "0.3.0"

from diffable.core import (
    Both,
    DiffError,
    DiffResult,
    DiffStatistics,
    DiffTag,
    Diffable,
    Left,
    PatchMismatchError,
    PixelFormatError,
    Right,
    SupportsDiffItem,
    UnsupportedDiffError,
    diff,
    diff_item,
)
from diffable.core.diff import (
    ColorSub,
    Default,
    DiffAlgorithm,
    Heatmap,
    LcsDiff,
    PixelPatch,
    RedGreen,
)

__all__ = [
    '__version__',
    'diff',
    'diff_item',
    'Diffable',
    'SupportsDiffItem',
    # Results
    'DiffResult',
    'DiffTag',
    'Left',
    'Both',
    'Right',
    'DiffStatistics',
    # Algorithms
    'DiffAlgorithm',
    'Default',
    'LcsDiff',
    'ColorSub',
    'Heatmap',
    'RedGreen',
    'PixelPatch',
    # Errors
    'DiffError',
    'UnsupportedDiffError',
    'PixelFormatError',
    'PatchMismatchError',
]
