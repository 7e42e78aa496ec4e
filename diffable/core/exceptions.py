"""
Exceptions raised at the dispatch boundary.

Comparisons themselves are total over their input domain; these errors
signal that a comparison was requested for a combination that has no
implementation, before any comparison work starts.
"""


class DiffError(Exception):
    """Base class for all diffable errors."""


class UnsupportedDiffError(DiffError, TypeError):
    """No implementation exists for the requested (algorithm, type) pairing."""

    def __init__(self, algorithm: str, item_type: type, reason: str = ""):
        self.algorithm = algorithm
        self.item_type = item_type
        message = f"{algorithm} has no implementation for {item_type.__name__}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PixelFormatError(DiffError, ValueError):
    """Pixel layouts of two images are mismatched or unsupported."""


class PatchMismatchError(DiffError, ValueError):
    """A patch was applied to a base it was not computed from."""
