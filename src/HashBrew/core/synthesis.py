"""Inverse cosine synthesis of a BlurHash coefficient grid into pixels."""

import logging

import numpy as np

from .colorspace import linear_to_srgb_array
from .components import CoefficientSet

logger = logging.getLogger("hashbrew")


def _cosine_table(size: int, components: int) -> np.ndarray:
    """Return ``cos(pi * n * k / size)`` as a ``(size, components)`` float32 table."""
    n = np.arange(size, dtype=np.float32)[:, None]
    k = np.arange(components, dtype=np.float32)[None, :]
    return np.cos(np.float32(np.pi) * n * k / np.float32(size)).astype(np.float32, copy=False)


def synthesize(coefficients: CoefficientSet, width: int, height: int,
               channels: int = 3, linear: bool = False) -> np.ndarray:
    """Render ``coefficients`` into a ``(height, width, channels)`` raster.

    The 2-D basis is separable, so the sum over ``(i, j)`` is evaluated as a
    contraction of a row table, a column table and the coefficient grid.
    Returns ``uint8`` sRGB samples, or float32 linear-light samples when
    ``linear`` is set. A fourth channel, when requested, is opaque.
    """
    if width < 1 or height < 1:
        raise ValueError(f"width and height must be >= 1, got {width}x{height}")
    if channels not in (3, 4):
        raise ValueError(f"channels must be 3 or 4, got {channels}")

    grid = np.asarray(coefficients.colors, dtype=np.float32).reshape(
        coefficients.num_y, coefficients.num_x, 3
    )
    cos_x = _cosine_table(width, coefficients.num_x)
    cos_y = _cosine_table(height, coefficients.num_y)

    # pixel[y, x, c] = sum_j sum_i cos_y[y, j] * cos_x[x, i] * grid[j, i, c]
    rows = np.einsum("yj,jic->yic", cos_y, grid)
    samples = np.einsum("xi,yic->yxc", cos_x, rows).astype(np.float32, copy=False)
    logger.debug(
        "Synthesized %dx%d raster from %dx%d components",
        width, height, coefficients.num_x, coefficients.num_y,
    )

    if linear:
        if channels == 4:
            alpha = np.ones((height, width, 1), dtype=np.float32)
            samples = np.concatenate([samples, alpha], axis=-1)
        return samples

    rgb = linear_to_srgb_array(samples)
    if channels == 4:
        alpha = np.full((height, width, 1), 255, dtype=np.uint8)
        rgb = np.concatenate([rgb, alpha], axis=-1)
    return np.ascontiguousarray(rgb)
