"""Decode BlurHash strings into raster buffers.

`decode` never raises for malformed hashes: it logs the failure and returns
a 1x1 fully transparent fallback image. `decode_strict` propagates
:class:`BlurHashError` for callers that need to report the failure.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .components import BlurHashError, parse_blurhash
from .synthesis import synthesize

logger = logging.getLogger("hashbrew")

DEFAULT_SIZE = 32
DEFAULT_PUNCH = 1.0


@dataclass
class DecodedImage:
    """Row-major 8-bit RGB(A) pixels produced from a BlurHash."""

    width: int
    height: int
    channels: int
    pixels: bytes
    blurhash: str = ""
    is_fallback: bool = False

    @property
    def mode(self) -> str:
        return "RGBA" if self.channels == 4 else "RGB"

    def to_array(self) -> np.ndarray:
        """Return the pixels as a ``(height, width, channels)`` uint8 array."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, self.channels
        )

    def to_pil(self):
        """Wrap the pixels in a Pillow image."""
        from .io import to_pil_image
        return to_pil_image(self)


def fallback_image(blurhash: str = "") -> DecodedImage:
    """Return the 1x1 fully transparent placeholder used for bad input."""
    return DecodedImage(
        width=1,
        height=1,
        channels=4,
        pixels=bytes(4),
        blurhash=blurhash,
        is_fallback=True,
    )


def _check_arguments(width: int, height: int, punch: float, channels: int):
    if int(width) < 1 or int(height) < 1:
        raise ValueError(f"width and height must be >= 1, got {width}x{height}")
    if not punch > 0:
        raise ValueError(f"punch must be > 0, got {punch}")
    if channels not in (3, 4):
        raise ValueError(f"channels must be 3 or 4, got {channels}")


def decode_strict(blurhash: str, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE,
                  punch: float = DEFAULT_PUNCH, channels: int = 3) -> DecodedImage:
    """Decode ``blurhash`` into a ``width`` x ``height`` image.

    Raises:
        BlurHashError: ``blurhash`` is too short or its length does not match
            the grid it declares.
        ValueError: an output argument is out of range.
    """
    _check_arguments(width, height, punch, channels)
    width, height = int(width), int(height)
    coefficients = parse_blurhash(blurhash, punch=float(punch))
    raster = synthesize(coefficients, width, height, channels=channels)
    return DecodedImage(
        width=width,
        height=height,
        channels=channels,
        pixels=raster.tobytes(),
        blurhash=blurhash,
    )


def decode(blurhash: str, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE,
           punch: float = DEFAULT_PUNCH, channels: int = 3) -> DecodedImage:
    """Decode ``blurhash``, falling back to a transparent 1x1 image on bad input."""
    try:
        return decode_strict(blurhash, width, height, punch=punch, channels=channels)
    except BlurHashError as exc:
        logger.warning("Failed to decode BlurHash %r: %s", blurhash, exc)
        return fallback_image(blurhash)


def decode_to_array(blurhash: str, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE,
                    punch: float = DEFAULT_PUNCH, linear: bool = False) -> np.ndarray:
    """Decode straight to a ``(height, width, 3)`` array.

    With ``linear`` the float32 linear-light samples are returned unencoded.
    Propagates :class:`BlurHashError`.
    """
    _check_arguments(width, height, punch, 3)
    coefficients = parse_blurhash(blurhash, punch=float(punch))
    return synthesize(coefficients, int(width), int(height), linear=linear)
