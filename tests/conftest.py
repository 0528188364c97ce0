"""Shared test fixtures."""

import random
import shutil
import tempfile

import pytest

from HashBrew.core import ALPHABET

# Canonical example hash: 4x3 components.
SAMPLE_HASH = "LEHV6nWB2yk8pyo0adR*.7kCMdnj"
# 1x1 grid, DC packs sRGB (151, 150, 149).
SOLID_HASH = "00HV6n"


def random_blurhash(num_x: int, num_y: int, seed: int = 0) -> str:
    """Build a structurally valid hash for the given grid from random digits."""
    rng = random.Random(seed * 100 + num_x * 10 + num_y)
    size_flag = ALPHABET[(num_x - 1) + (num_y - 1) * 9]
    body = "".join(rng.choice(ALPHABET) for _ in range(1 + 4 + 2 * (num_x * num_y - 1)))
    return size_flag + body


def write_manifest(path, rows, header=("name", "blurhash", "width", "height", "punch")):
    """Write a CSV manifest with the given header and row tuples."""
    lines = [",".join(header)]
    lines.extend(",".join(str(c) for c in row) for row in rows)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write("\n".join(lines) + "\n")
    return path


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def sample_hash():
    return SAMPLE_HASH
