"""Core utilities -- re-exports all public symbols for convenience."""

from .base83 import ALPHABET, decode_base83, is_base83
from .colorspace import (
    srgb_to_linear,
    linear_to_srgb,
    linear_to_srgb_array,
    sign_pow,
    decode_dc,
    decode_ac,
)
from .components import (
    BlurHashError,
    TooShortError,
    LengthMismatchError,
    CoefficientSet,
    blurhash_components,
    parse_blurhash,
)
from .synthesis import synthesize
from .decoder import (
    DecodedImage,
    decode,
    decode_strict,
    decode_to_array,
    fallback_image,
)
from .io import (
    to_pil_image,
    load_from_blurhash,
    load_from_thumbhash,
    image_format_for,
    save_image,
)
from .manifest import PlaceholderRecord, load_manifest, get_output_path
from .logging import setup_logging

__all__ = [
    "ALPHABET", "decode_base83", "is_base83",
    "srgb_to_linear", "linear_to_srgb", "linear_to_srgb_array",
    "sign_pow", "decode_dc", "decode_ac",
    "BlurHashError", "TooShortError", "LengthMismatchError",
    "CoefficientSet", "blurhash_components", "parse_blurhash",
    "synthesize",
    "DecodedImage", "decode", "decode_strict", "decode_to_array", "fallback_image",
    "to_pil_image", "load_from_blurhash", "load_from_thumbhash",
    "image_format_for", "save_image",
    "PlaceholderRecord", "load_manifest", "get_output_path",
    "setup_logging",
]
