"""sRGB / linear-light conversions and BlurHash coefficient dequantization."""

import logging
import math
from typing import Tuple

import numpy as np

logger = logging.getLogger("hashbrew")

Color = Tuple[float, float, float]


def srgb_to_linear(value: int) -> float:
    """Convert an 8-bit sRGB channel value to linear light."""
    v = float(value) / 255.0
    if v <= 0.04045:
        return v / 12.92
    return math.pow((v + 0.055) / 1.055, 2.4)


def linear_to_srgb(value: float) -> int:
    """Convert a linear-light value to an 8-bit sRGB channel value.

    Input is clamped to [0, 1]; the result is truncated after adding 0.5.
    """
    v = max(0.0, min(1.0, value))
    if v <= 0.0031308:
        return int(v * 12.92 * 255 + 0.5)
    return int((1.055 * math.pow(v, 1 / 2.4) - 0.055) * 255 + 0.5)


def sign_pow(value: float, exp: float) -> float:
    """Raise ``|value|`` to ``exp`` and restore the sign of ``value``."""
    return math.copysign(math.pow(abs(value), exp), value)


def decode_dc(value: int) -> Color:
    """Split a 24-bit packed sRGB integer into a linear (r, g, b) triple."""
    return (
        srgb_to_linear(value >> 16),
        srgb_to_linear((value >> 8) & 255),
        srgb_to_linear(value & 255),
    )


def decode_ac(value: int, maximum_value: float) -> Color:
    """Dequantize a base-19 packed AC triple scaled by ``maximum_value``."""
    quant_r = value // (19 * 19)
    quant_g = (value // 19) % 19
    quant_b = value % 19
    return (
        sign_pow((quant_r - 9) / 9.0, 2.0) * maximum_value,
        sign_pow((quant_g - 9) / 9.0, 2.0) * maximum_value,
        sign_pow((quant_b - 9) / 9.0, 2.0) * maximum_value,
    )


def linear_to_srgb_array(arr: np.ndarray) -> np.ndarray:
    """Vectorized :func:`linear_to_srgb` returning a ``uint8`` array."""
    if np.isnan(arr).any():
        logger.warning("NaN detected in linear_to_srgb_array input; replacing with 0.0")
        arr = np.nan_to_num(arr, nan=0.0)
    arr = np.clip(arr, 0.0, 1.0).astype(np.float32, copy=False)
    encoded = np.where(
        arr <= 0.0031308,
        arr * 12.92,
        1.055 * np.power(arr, 1.0 / 2.4) - 0.055,
    )
    return np.floor(encoded * 255.0 + 0.5).astype(np.uint8)
