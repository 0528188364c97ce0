"""Pillow adapters: wrap decoded placeholder buffers as images and save them."""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Tuple, Union

import numpy as np
from PIL import Image

from .base83 import is_base83
from .components import BlurHashError
from .decoder import DEFAULT_PUNCH, DEFAULT_SIZE, DecodedImage, decode_strict

logger = logging.getLogger("hashbrew")

ThumbHashDecoder = Callable[[bytes], Tuple[int, int, bytes]]


def to_pil_image(decoded: DecodedImage) -> Image.Image:
    """Build an ``RGB``/``RGBA`` Pillow image from a decoded buffer."""
    expected = decoded.width * decoded.height * decoded.channels
    if len(decoded.pixels) != expected:
        raise ValueError(
            f"Pixel buffer has {len(decoded.pixels)} bytes, expected {expected} "
            f"for {decoded.width}x{decoded.height}x{decoded.channels}"
        )
    return Image.frombytes(decoded.mode, (decoded.width, decoded.height), decoded.pixels)


def load_from_blurhash(blurhash: str, width: int = DEFAULT_SIZE, height: int = DEFAULT_SIZE,
                       punch: float = DEFAULT_PUNCH, alpha: bool = False) -> Image.Image:
    """Decode ``blurhash`` into a Pillow image.

    Unlike :func:`HashBrew.core.decoder.decode` this does not fall back: a
    malformed string raises :class:`BlurHashError` naming the string.
    """
    try:
        decoded = decode_strict(blurhash, width, height, punch=punch,
                                channels=4 if alpha else 3)
    except BlurHashError as exc:
        logger.error("Failed to decode BlurHash: %s", blurhash)
        if not is_base83(blurhash):
            logger.error("BlurHash %r contains characters outside the base-83 alphabet", blurhash)
        raise BlurHashError(f"Failed to decode BlurHash: {blurhash}", blurhash) from exc
    return to_pil_image(decoded)


def load_from_thumbhash(data: bytes, decoder: ThumbHashDecoder) -> Image.Image:
    """Wrap the output of an external ThumbHash ``decoder`` as an RGBA image.

    ``decoder`` takes the raw hash bytes and returns ``(width, height, rgba)``
    with ``rgba`` row-major, 4 bytes per pixel.
    """
    width, height, rgba = decoder(bytes(data))
    width, height = int(width), int(height)
    if width < 1 or height < 1:
        raise ValueError(f"ThumbHash decoder returned invalid size {width}x{height}")
    rgba = bytes(rgba)
    if len(rgba) != width * height * 4:
        raise ValueError(
            f"ThumbHash decoder returned {len(rgba)} bytes for {width}x{height}, "
            f"expected {width * height * 4}"
        )
    logger.debug("Wrapped %dx%d ThumbHash raster", width, height)
    return Image.frombytes("RGBA", (width, height), rgba)


def image_format_for(path: str) -> str:
    """Return the Pillow format name for ``path``'s extension.

    Raises ``ValueError`` when the extension is missing or Pillow cannot
    write it.
    """
    ext = Path(path).suffix.lower()
    if not ext:
        raise ValueError(f"Output path has no file extension: {path}")
    fmt = Image.registered_extensions().get(ext)
    if fmt is None or fmt not in Image.SAVE:
        raise ValueError(f"Unsupported image extension '{ext}' for output: {path}")
    return fmt


def save_image(image: Union[Image.Image, DecodedImage, np.ndarray], path: str,
               quality: int = 95):
    """Save a placeholder image, inferring the format from the extension.

    Accepts a Pillow image, a :class:`DecodedImage` or a uint8 ``HxWxC``
    array. Writes to a temp file and ``os.replace``-s it into place so a
    crash never leaves a truncated file. JPEG output drops alpha.
    """
    fmt = image_format_for(path)
    if isinstance(image, DecodedImage):
        image = to_pil_image(image)
    elif isinstance(image, np.ndarray):
        if image.size == 0 or image.ndim not in (2, 3):
            raise ValueError(f"Cannot save degenerate array (shape={image.shape}) to {path}")
        image = Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8))

    parent_dir = os.path.dirname(path) or "."
    os.makedirs(parent_dir, exist_ok=True)

    tmp_path = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
    try:
        if fmt == "JPEG":
            with image.convert("RGB") as converted:
                converted.save(tmp_path, format=fmt, quality=quality)
        elif fmt == "PNG":
            image.save(tmp_path, format=fmt, optimize=True)
        else:
            image.save(tmp_path, format=fmt)
        os.replace(tmp_path, path)
        logger.debug("Saved: %s (%dx%d %s, %s)", path, image.width, image.height, image.mode, fmt)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError as exc:
                logger.debug("Could not remove temp file %s: %s", tmp_path, exc)
