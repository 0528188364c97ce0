"""BlurHash structure validation and coefficient extraction."""

import logging
from dataclasses import dataclass
from typing import Tuple

from .base83 import decode_base83
from .colorspace import Color, decode_ac, decode_dc

logger = logging.getLogger("hashbrew")

MIN_LENGTH = 6


class BlurHashError(ValueError):
    """Raised when a BlurHash string cannot be decoded."""

    def __init__(self, message: str, blurhash: str = ""):
        super().__init__(message)
        self.blurhash = blurhash


class TooShortError(BlurHashError):
    """The string is shorter than the minimum BlurHash length."""


class LengthMismatchError(BlurHashError):
    """The string length disagrees with its declared component grid."""


@dataclass(frozen=True)
class CoefficientSet:
    """Decoded DC/AC coefficients of one BlurHash.

    ``colors[0]`` is the DC term; ``colors[i + j * num_x]`` is the term for
    horizontal frequency ``i`` and vertical frequency ``j``. All values are
    linear light, AC terms already scaled by ``maximum_value``.
    """

    num_x: int
    num_y: int
    maximum_value: float
    colors: Tuple[Color, ...]

    @property
    def dc(self) -> Color:
        return self.colors[0]

    @property
    def ac(self) -> Tuple[Color, ...]:
        return self.colors[1:]


def expected_length(num_x: int, num_y: int) -> int:
    """Return the string length implied by a component grid."""
    return 4 + 2 * num_x * num_y


def blurhash_components(blurhash: str) -> Tuple[int, int]:
    """Return ``(num_x, num_y)`` declared by the first character."""
    if len(blurhash) < MIN_LENGTH:
        raise TooShortError(
            f"BlurHash must be at least {MIN_LENGTH} characters long, "
            f"got {len(blurhash)}: {blurhash!r}",
            blurhash,
        )
    size_flag = decode_base83(blurhash[0])
    num_y = size_flag // 9 + 1
    num_x = size_flag % 9 + 1
    return num_x, num_y


def parse_blurhash(blurhash: str, punch: float = 1.0) -> CoefficientSet:
    """Validate ``blurhash`` and extract its coefficient set.

    ``punch`` multiplies the AC maximum bound and leaves the DC term alone.
    Raises :class:`TooShortError` or :class:`LengthMismatchError`.
    """
    num_x, num_y = blurhash_components(blurhash)
    expected = expected_length(num_x, num_y)
    if len(blurhash) != expected:
        raise LengthMismatchError(
            f"BlurHash declares a {num_x}x{num_y} grid and must be {expected} "
            f"characters long, got {len(blurhash)}: {blurhash!r}",
            blurhash,
        )

    quantized_max = decode_base83(blurhash[1])
    maximum_value = (quantized_max + 1) / 166.0 * punch

    colors = [decode_dc(decode_base83(blurhash[2:6]))]
    for index in range(1, num_x * num_y):
        start = 4 + index * 2
        colors.append(decode_ac(decode_base83(blurhash[start:start + 2]), maximum_value))

    logger.debug(
        "Parsed BlurHash %r: grid=%dx%d max=%.5f", blurhash, num_x, num_y, maximum_value
    )
    return CoefficientSet(
        num_x=num_x,
        num_y=num_y,
        maximum_value=maximum_value,
        colors=tuple(colors),
    )
