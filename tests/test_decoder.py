"""Tests for the decode entry points and the fallback contract."""

import unittest

import numpy as np
import pytest

from HashBrew.core.components import LengthMismatchError, TooShortError
from HashBrew.core.decoder import (
    DecodedImage,
    decode,
    decode_strict,
    decode_to_array,
    fallback_image,
)

from conftest import SAMPLE_HASH, SOLID_HASH, random_blurhash


class TestDecode(unittest.TestCase):
    def test_sample_hash_default_size(self):
        image = decode(SAMPLE_HASH)
        self.assertIsInstance(image, DecodedImage)
        self.assertFalse(image.is_fallback)
        self.assertEqual((image.width, image.height, image.channels), (32, 32, 3))
        self.assertEqual(len(image.pixels), 32 * 32 * 3)
        self.assertEqual(image.blurhash, SAMPLE_HASH)

    def test_sample_hash_is_not_degenerate(self):
        arr = decode(SAMPLE_HASH, 32, 32).to_array()
        colors = {tuple(px) for px in arr.reshape(-1, 3).tolist()}
        self.assertGreaterEqual(len(colors), 2)

    def test_decode_is_deterministic(self):
        first = decode(SAMPLE_HASH, 20, 12, punch=1.3)
        second = decode(SAMPLE_HASH, 20, 12, punch=1.3)
        self.assertEqual(first.pixels, second.pixels)

    def test_rgba_output(self):
        image = decode(SAMPLE_HASH, 10, 6, channels=4)
        self.assertEqual(image.mode, "RGBA")
        arr = image.to_array()
        self.assertEqual(arr.shape, (6, 10, 4))
        self.assertTrue((arr[:, :, 3] == 255).all())

    def test_punch_does_not_change_solid_color(self):
        low = decode(SOLID_HASH, 4, 4, punch=0.1)
        high = decode(SOLID_HASH, 4, 4, punch=10.0)
        self.assertEqual(low.pixels, high.pixels)

    def test_punch_changes_contrast(self):
        low = decode(SAMPLE_HASH, 16, 16, punch=0.25).to_array().astype(float)
        high = decode(SAMPLE_HASH, 16, 16, punch=2.0).to_array().astype(float)
        self.assertGreater(high.std(), low.std())

    def test_out_of_alphabet_characters_are_tolerated(self):
        patched = SAMPLE_HASH[:7] + " " + SAMPLE_HASH[8:]
        self.assertEqual(len(patched), len(SAMPLE_HASH))
        image = decode(patched, 8, 8)
        self.assertFalse(image.is_fallback)
        self.assertEqual(len(image.pixels), 8 * 8 * 3)


class TestFallback(unittest.TestCase):
    def _assert_fallback(self, image, blurhash):
        self.assertTrue(image.is_fallback)
        self.assertEqual((image.width, image.height, image.channels), (1, 1, 4))
        self.assertEqual(image.pixels, b"\x00\x00\x00\x00")
        self.assertEqual(image.blurhash, blurhash)

    def test_empty_string(self):
        with self.assertLogs("hashbrew", level="WARNING") as cm:
            image = decode("")
        self._assert_fallback(image, "")
        self.assertTrue(any("Failed to decode BlurHash" in msg for msg in cm.output))

    def test_five_character_string(self):
        with self.assertLogs("hashbrew", level="WARNING"):
            image = decode("LEHV6")
        self._assert_fallback(image, "LEHV6")

    def test_length_mismatch(self):
        truncated = SAMPLE_HASH[:20]
        with self.assertLogs("hashbrew", level="WARNING") as cm:
            image = decode(truncated, 64, 64)
        self._assert_fallback(image, truncated)
        self.assertTrue(any(truncated in msg for msg in cm.output))

    def test_fallback_to_array(self):
        arr = fallback_image().to_array()
        self.assertEqual(arr.shape, (1, 1, 4))
        self.assertEqual(int(arr.sum()), 0)


class TestStrict(unittest.TestCase):
    def test_strict_raises_too_short(self):
        with self.assertRaises(TooShortError):
            decode_strict("abc")

    def test_strict_raises_length_mismatch(self):
        with self.assertRaises(LengthMismatchError):
            decode_strict(SAMPLE_HASH[:20])

    def test_strict_matches_lenient_on_valid_input(self):
        self.assertEqual(decode_strict(SAMPLE_HASH, 9, 7).pixels, decode(SAMPLE_HASH, 9, 7).pixels)

    def test_invalid_arguments_are_not_swallowed(self):
        with self.assertRaises(ValueError):
            decode(SAMPLE_HASH, 0, 32)
        with self.assertRaises(ValueError):
            decode(SAMPLE_HASH, 32, 32, punch=0.0)
        with self.assertRaises(ValueError):
            decode(SAMPLE_HASH, 32, 32, punch=float("nan"))
        with self.assertRaises(ValueError):
            decode(SAMPLE_HASH, channels=1)


class TestDecodeToArray(unittest.TestCase):
    def test_srgb_array(self):
        arr = decode_to_array(SAMPLE_HASH, 6, 5)
        self.assertEqual(arr.dtype, np.uint8)
        np.testing.assert_array_equal(arr, decode(SAMPLE_HASH, 6, 5).to_array())

    def test_linear_array(self):
        arr = decode_to_array(SAMPLE_HASH, 6, 5, linear=True)
        self.assertEqual(arr.dtype, np.float32)
        self.assertEqual(arr.shape, (5, 6, 3))

    def test_propagates_parse_errors(self):
        with self.assertRaises(TooShortError):
            decode_to_array("")


@pytest.mark.parametrize("num_x", range(1, 10))
@pytest.mark.parametrize("num_y", range(1, 10))
def test_every_grid_yields_exact_buffer(num_x, num_y):
    blurhash = random_blurhash(num_x, num_y, seed=7)
    for channels in (3, 4):
        image = decode(blurhash, 7, 5, channels=channels)
        assert not image.is_fallback
        assert len(image.pixels) == 7 * 5 * channels
