"""
Diff module with pluggable algorithms.

Provides:
- Sequence alignment and run coalescing
- Longest common subsequence diffs for sequences, text and sets
- Pixel diffs for images
- Plain-text formatters for results

Importing this package registers every built-in (algorithm, type)
pairing.
"""

from diffable.core.diff.algorithms import (
    DiffAlgorithm,
    Default,
    available_algorithms,
    get_algorithm,
)
from diffable.core.diff.alignment import (
    AlignmentAlgorithm,
    LineCompareOptions,
    WhitespaceMode,
    classify,
    classify_lines,
    split_lines,
)
from diffable.core.diff.coalesce import coalesce
from diffable.core.diff.sequence_diff import (
    LcsDiff,
    diff_lines,
    diff_sequences,
)
from diffable.core.diff.image_diff import (
    ColorSub,
    Heatmap,
    RedGreen,
    PixelPatch,
    PixelPatchResult,
    PIXEL_FORMATS,
    PATCH_DTYPES,
)
from diffable.core.diff.formatters import (
    format_bytes,
    format_lines,
    format_set,
    format_slice,
)

__all__ = [
    # Algorithms
    'DiffAlgorithm',
    'Default',
    'LcsDiff',
    'ColorSub',
    'Heatmap',
    'RedGreen',
    'PixelPatch',
    'available_algorithms',
    'get_algorithm',
    # Alignment
    'AlignmentAlgorithm',
    'LineCompareOptions',
    'WhitespaceMode',
    'classify',
    'classify_lines',
    'split_lines',
    'coalesce',
    # Sequences
    'diff_lines',
    'diff_sequences',
    # Images
    'PixelPatchResult',
    'PIXEL_FORMATS',
    'PATCH_DTYPES',
    # Formatting
    'format_bytes',
    'format_lines',
    'format_set',
    'format_slice',
]
