"""
Image diff algorithms.

Provides per-pixel comparison of two images with:
- Colour subtraction (absolute channel difference)
- Changed/unchanged heat marking
- Alpha-aware red/green/blue change coding
- Lossless per-channel patches that can be applied and reverted

Images of different sizes are compared over the union of both sizes;
pixels outside an image count as fully zeroed (alpha included).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import numpy as np
from PIL import Image

from diffable.core.diff.algorithms import DiffAlgorithm, Default
from diffable.core.exceptions import PatchMismatchError, PixelFormatError


Size = tuple[int, int]


@dataclass(frozen=True)
class PixelFormat:
    """Channel layout of a Pillow image mode."""
    mode: str
    channels: int
    has_alpha: bool
    dtype: np.dtype
    max_value: Union[int, float]

    @property
    def color_channels(self) -> int:
        """Number of non-alpha channels."""
        return self.channels - 1 if self.has_alpha else self.channels

    @property
    def is_float(self) -> bool:
        return np.issubdtype(self.dtype, np.floating)


PIXEL_FORMATS: dict[str, PixelFormat] = {
    'L': PixelFormat('L', 1, False, np.dtype(np.uint8), 255),
    'LA': PixelFormat('LA', 2, True, np.dtype(np.uint8), 255),
    'RGB': PixelFormat('RGB', 3, False, np.dtype(np.uint8), 255),
    'RGBA': PixelFormat('RGBA', 4, True, np.dtype(np.uint8), 255),
    'I;16': PixelFormat('I;16', 1, False, np.dtype(np.uint16), 65535),
    'I': PixelFormat('I', 1, False, np.dtype(np.int32), 2 ** 31 - 1),
    'F': PixelFormat('F', 1, False, np.dtype(np.float32), 1.0),
}

# Channel type -> signed type wide enough for any difference of two channels.
# Float channels are patched in representable steps, see _channel_keys.
PATCH_DTYPES: dict[np.dtype, np.dtype] = {
    np.dtype(np.uint8): np.dtype(np.int16),
    np.dtype(np.int8): np.dtype(np.int16),
    np.dtype(np.uint16): np.dtype(np.int32),
    np.dtype(np.int16): np.dtype(np.int32),
    np.dtype(np.uint32): np.dtype(np.int64),
    np.dtype(np.int32): np.dtype(np.int64),
    np.dtype(np.float32): np.dtype(np.int64),
}

RED = 0
GREEN = 1
BLUE = 2


class ColorSub(DiffAlgorithm):
    """Absolute per-channel difference; alpha is the larger input alpha."""


class Heatmap(DiffAlgorithm):
    """Marks every changed pixel with a single marker colour."""


class RedGreen(DiffAlgorithm):
    """Green for added opacity, red for lost opacity, blue for recoloured pixels."""


class PixelPatch(DiffAlgorithm):
    """Lossless signed per-channel delta from left to right."""


# =============================================================================
# Grid helpers
# =============================================================================

def get_pixel_format(left: Image.Image, right: Image.Image) -> PixelFormat:
    """
    Check that two images can be compared pixel by pixel.

    Raises:
        PixelFormatError: The modes differ or are not supported
    """
    if left.mode != right.mode:
        raise PixelFormatError(
            f"Cannot compare {left.mode} image with {right.mode} image"
        )
    try:
        return PIXEL_FORMATS[left.mode]
    except KeyError:
        supported = ', '.join(PIXEL_FORMATS)
        raise PixelFormatError(
            f"Unsupported image mode {left.mode} (supported: {supported})"
        ) from None


def union_size(left: Image.Image, right: Image.Image) -> Size:
    """Elementwise maximum of both image sizes."""
    return (max(left.width, right.width), max(left.height, right.height))


def to_grid(img: Image.Image, size: Size, fmt: PixelFormat) -> np.ndarray:
    """
    Pixel array of shape (height, width, channels) for ``img``.

    The image is anchored at the top-left corner of a zero-filled canvas
    of ``size``.
    """
    if img.size != size:
        canvas = Image.new(img.mode, size)
        canvas.paste(img, (0, 0))
        img = canvas
    grid = np.asarray(img, dtype=fmt.dtype)
    return grid.reshape(size[1], size[0], fmt.channels)


def from_grid(grid: np.ndarray, fmt: PixelFormat) -> Image.Image:
    """Build an image of ``fmt`` from a (height, width, channels) array."""
    data = grid.astype(fmt.dtype)
    if fmt.channels == 1:
        data = data[:, :, 0]
    return Image.fromarray(np.ascontiguousarray(data))


def _prepare(
    left: Image.Image,
    right: Image.Image
) -> tuple[PixelFormat, np.ndarray, np.ndarray]:
    fmt = get_pixel_format(left, right)
    size = union_size(left, right)
    logging.debug(
        f"ImageDiff - Comparing {fmt.mode} images {left.size} and {right.size} over {size}"
    )
    return fmt, to_grid(left, size, fmt), to_grid(right, size, fmt)


def _alphas(grid: np.ndarray, fmt: PixelFormat) -> np.ndarray:
    """Alpha plane; images without alpha are fully opaque."""
    if fmt.has_alpha:
        return grid[..., -1]
    return np.full(grid.shape[:2], fmt.max_value, dtype=fmt.dtype)


def _same_color(left: np.ndarray, right: np.ndarray, fmt: PixelFormat) -> np.ndarray:
    color = slice(0, fmt.color_channels)
    return np.all(left[..., color] == right[..., color], axis=-1)


def _solid(fmt: PixelFormat, channel: int) -> np.ndarray:
    """
    Pixel with one colour channel at full intensity.

    Luma formats have a single colour channel, which then carries every
    marker.
    """
    pixel = np.zeros(fmt.channels, dtype=fmt.dtype)
    pixel[min(channel, fmt.color_channels - 1)] = fmt.max_value
    if fmt.has_alpha:
        pixel[-1] = fmt.max_value
    return pixel


# =============================================================================
# Algorithms
# =============================================================================

@ColorSub.register(Image.Image)
def _color_sub(left: Image.Image, right: Image.Image) -> Image.Image:
    """
    Absolute difference of every colour channel.

    Integer channels are computed wide and saturated to the channel
    range, so they never wrap.
    """
    fmt, lgrid, rgrid = _prepare(left, right)

    if fmt.is_float:
        out = np.abs(lgrid.astype(np.float64) - rgrid.astype(np.float64))
    else:
        info = np.iinfo(fmt.dtype)
        out = np.abs(lgrid.astype(np.int64) - rgrid.astype(np.int64))
        out = np.clip(out, 0, info.max)

    if fmt.has_alpha:
        out[..., -1] = np.maximum(lgrid[..., -1], rgrid[..., -1])

    return from_grid(out, fmt)


@Heatmap.register(Image.Image)
def _heatmap(left: Image.Image, right: Image.Image) -> Image.Image:
    """
    Copy unchanged pixels from the left image, mark changed ones.

    A pixel is unchanged when its colour channels are equal or when both
    sides are fully transparent. Changed pixels get the first channel at
    full intensity, other colour channels zero and the larger alpha.
    """
    fmt, lgrid, rgrid = _prepare(left, right)

    unchanged = _same_color(lgrid, rgrid, fmt)
    if fmt.has_alpha:
        unchanged |= (lgrid[..., -1] == 0) & (rgrid[..., -1] == 0)

    # TODO: scale the marker by how different the pixels are
    marker = np.zeros_like(lgrid)
    marker[..., 0] = fmt.max_value
    if fmt.has_alpha:
        marker[..., -1] = np.maximum(lgrid[..., -1], rgrid[..., -1])

    out = np.where(unchanged[..., np.newaxis], lgrid, marker)
    return from_grid(out, fmt)


@RedGreen.register(Image.Image)
def _red_green(left: Image.Image, right: Image.Image) -> Image.Image:
    """
    Code each pixel by what happened to it.

    Alpha is compared first: gaining opacity is green, losing it is red.
    With equal alpha, transparent or unchanged pixels are copied from the
    left image and recoloured ones are blue.

    Luma images (L, LA, I;16, I, F) have a single colour channel, so all
    three markers come out as the same full-intensity value there: the
    output shows which pixels changed but not how. Use ``PixelPatch`` to
    tell additions from removals in such images.
    """
    fmt, lgrid, rgrid = _prepare(left, right)

    left_alpha = _alphas(lgrid, fmt)
    right_alpha = _alphas(rgrid, fmt)
    same_alpha = left_alpha == right_alpha
    unchanged = same_alpha & ((left_alpha == 0) | _same_color(lgrid, rgrid, fmt))

    out = lgrid.copy()
    out[left_alpha < right_alpha] = _solid(fmt, GREEN)
    out[left_alpha > right_alpha] = _solid(fmt, RED)
    out[same_alpha & ~unchanged] = _solid(fmt, BLUE)

    return from_grid(out, fmt)


def _channel_keys(grid: np.ndarray, fmt: PixelFormat) -> np.ndarray:
    """
    Channel values as integers of the patch type.

    Float32 values map to an order-preserving integer key: neighbouring
    floats get neighbouring keys and -0.0 sits one step below +0.0.
    """
    wide = PATCH_DTYPES[fmt.dtype]
    if not fmt.is_float:
        return grid.astype(wide)
    bits = np.ascontiguousarray(grid, dtype=np.float32).view(np.int32).astype(wide)
    return np.where(bits >= 0, bits, -1 - (bits & 0x7FFFFFFF))


def _from_channel_keys(keys: np.ndarray, fmt: PixelFormat) -> np.ndarray:
    if not fmt.is_float:
        return keys
    bits = np.where(keys >= 0, keys, -1 - keys - 2 ** 31)
    return bits.astype(np.int32).view(np.float32)


@dataclass
class PixelPatchResult:
    """
    Signed per-channel difference between two images.

    ``deltas`` has shape (height, width, channels) over the union size,
    in a type wide enough to hold any difference, so that
    ``left + deltas == right`` holds for every channel. For float images
    a delta counts representable float32 steps rather than a value.
    """
    mode: str
    left_size: Size
    right_size: Size
    deltas: np.ndarray

    @property
    def size(self) -> Size:
        return (self.deltas.shape[1], self.deltas.shape[0])

    @property
    def changed_pixels(self) -> int:
        return int(np.count_nonzero(np.any(self.deltas != 0, axis=-1)))

    @property
    def is_identical(self) -> bool:
        return self.left_size == self.right_size and self.changed_pixels == 0

    def apply(self, left: Image.Image) -> Image.Image:
        """Rebuild the right image from the left one."""
        return self._rebuild(left, self.left_size, self.right_size, 1)

    def revert(self, right: Image.Image) -> Image.Image:
        """Rebuild the left image from the right one."""
        return self._rebuild(right, self.right_size, self.left_size, -1)

    def _rebuild(self, base: Image.Image, base_size: Size, target_size: Size, sign: int) -> Image.Image:
        if base.mode != self.mode or base.size != base_size:
            raise PatchMismatchError(
                f"Patch expects a {self.mode} image of size {base_size}, "
                f"got {base.mode} {base.size}"
            )
        fmt = PIXEL_FORMATS[self.mode]
        keys = _channel_keys(to_grid(base, self.size, fmt), fmt) + sign * self.deltas
        width, height = target_size
        return from_grid(_from_channel_keys(keys, fmt)[:height, :width], fmt)


@PixelPatch.register(Image.Image)
def _pixel_patch(left: Image.Image, right: Image.Image) -> PixelPatchResult:
    """Per-channel ``right - left`` in the widened channel type."""
    fmt, lgrid, rgrid = _prepare(left, right)
    deltas = _channel_keys(rgrid, fmt) - _channel_keys(lgrid, fmt)
    return PixelPatchResult(
        mode=fmt.mode,
        left_size=left.size,
        right_size=right.size,
        deltas=deltas,
    )


@PixelPatch.register_patch(Image.Image)
def _apply_pixel_patch(left: Image.Image, diff: PixelPatchResult) -> Image.Image:
    return diff.apply(left)


@Default.register(Image.Image)
def _default_image(left: Image.Image, right: Image.Image) -> Image.Image:
    return RedGreen.diff(left, right)
