"""
Pluggable diff algorithms.

An algorithm is a stateless token class. Each token owns a dispatch
table keyed by the compared item type, so one token can serve several
unrelated types and each (algorithm, type) pairing is implemented
separately:

    @LcsDiff.register(collections.abc.Sequence)
    def _diff_sequence(left, right):
        ...

A pairing becomes patch-capable when a reverse operation is registered
for it with ``register_patch``; the reverse operation rebuilds the right
input from the left input and the diff.
"""

from __future__ import annotations

import logging
from functools import singledispatch
from typing import Any, Callable, ClassVar, Optional

from diffable.core.exceptions import UnsupportedDiffError


_ALGORITHMS: dict[str, type['DiffAlgorithm']] = {}


class DiffAlgorithm:
    """
    Base class for algorithm tokens.

    Tokens are used as classes and never instantiated. Results depend on
    the pairing: a list of runs for sequences, a set of results for sets,
    a new image for pixel strategies and so on.
    """

    name: ClassVar[str] = ""
    _diff_impl: ClassVar[Callable[..., Any]]
    _patch_impl: ClassVar[Callable[..., Any]]

    def __init_subclass__(cls, name: Optional[str] = None, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls.name = name or cls.__name__.lower()
        cls._diff_impl = singledispatch(_unsupported(cls, "no diff implementation"))
        cls._patch_impl = singledispatch(_unsupported(cls, "not patch-capable"))
        _ALGORITHMS[cls.name.lower()] = cls

    def __new__(cls, *args: Any, **kwargs: Any):
        raise TypeError(f"{cls.__name__} is an algorithm token and cannot be instantiated")

    @classmethod
    def register(cls, item_type: type) -> Callable:
        """Decorator registering the diff implementation for ``item_type``."""
        def decorator(func: Callable) -> Callable:
            cls._diff_impl.register(item_type, func)
            return func
        return decorator

    @classmethod
    def register_patch(cls, item_type: type) -> Callable:
        """
        Decorator registering the reverse operation for ``item_type``.

        The function takes ``(left, diff)`` and returns the right input.
        """
        def decorator(func: Callable) -> Callable:
            cls._patch_impl.register(item_type, func)
            return func
        return decorator

    @classmethod
    def supports(cls, item_type: type) -> bool:
        """Check whether a diff implementation exists for ``item_type``."""
        return cls._diff_impl.dispatch(item_type) is not cls._diff_impl.registry[object]

    @classmethod
    def is_patch_capable(cls, item_type: type) -> bool:
        """Check whether diffs of ``item_type`` can be applied back."""
        return cls._patch_impl.dispatch(item_type) is not cls._patch_impl.registry[object]

    @classmethod
    def diff(cls, left: Any, right: Any) -> Any:
        """
        Compare two items.

        Raises:
            UnsupportedDiffError: No implementation for the item type, or
                left and right resolve to different implementations
        """
        impl = cls._diff_impl.dispatch(type(left))
        if cls._diff_impl.dispatch(type(right)) is not impl:
            raise UnsupportedDiffError(
                cls.__name__, type(left),
                f"cannot compare with {type(right).__name__}"
            )
        logging.debug(f"{cls.__name__} - Comparing {type(left).__name__} items")
        return impl(left, right)

    @classmethod
    def apply_patch(cls, left: Any, diff: Any) -> Any:
        """Rebuild the right input from ``left`` and a diff of this algorithm."""
        return cls._patch_impl.dispatch(type(left))(left, diff)


def _unsupported(algorithm: type, reason: str) -> Callable:
    def unsupported(left: Any, *args: Any) -> Any:
        raise UnsupportedDiffError(algorithm.__name__, type(left), reason)
    return unsupported


class Default(DiffAlgorithm):
    """
    Algorithm used when the caller does not pick one.

    Sequences and text forward to ``LcsDiff``, images to ``RedGreen``.
    """


def get_algorithm(name: str) -> type[DiffAlgorithm]:
    """Look up an algorithm token by name (case-insensitive)."""
    try:
        return _ALGORITHMS[name.lower()]
    except KeyError:
        known = ', '.join(sorted(_ALGORITHMS))
        raise ValueError(f"Unknown algorithm '{name}' (known: {known})") from None


def available_algorithms() -> list[str]:
    """Names of all registered algorithm tokens."""
    return sorted(_ALGORITHMS)
