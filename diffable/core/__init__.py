"""
Core comparison logic: models, algorithms and the Diffable contract.
"""

from diffable.core.models import (
    Both,
    DiffResult,
    DiffStatistics,
    DiffTag,
    Left,
    Right,
    RunBoundary,
)
from diffable.core.exceptions import (
    DiffError,
    PatchMismatchError,
    PixelFormatError,
    UnsupportedDiffError,
)
from diffable.core.contract import (
    Diffable,
    SupportsDiffItem,
    diff,
    diff_item,
)

__all__ = [
    'Both',
    'DiffResult',
    'DiffStatistics',
    'DiffTag',
    'Left',
    'Right',
    'RunBoundary',
    'DiffError',
    'PatchMismatchError',
    'PixelFormatError',
    'UnsupportedDiffError',
    'Diffable',
    'SupportsDiffItem',
    'diff',
    'diff_item',
]
