"""CSV manifests of named BlurHashes for batch decoding."""

import csv
import logging
import os
import posixpath
import re
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("hashbrew")

REQUIRED_COLUMNS = ("name", "blurhash")

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


def normalize_name(name: str) -> str:
    """Return ``name`` as a relative POSIX path that stays under its root.

    Dots are kept as part of the name: ``hero.v1`` and ``hero.v2`` are
    different records.
    """
    raw = str(name).strip().replace("\\", "/")
    if raw.startswith("/") or _DRIVE_PREFIX.match(raw):
        raise ValueError(f"Placeholder name must be relative, got: {name}")
    normalized = posixpath.normpath(raw) if raw else "."
    if normalized == ".":
        raise ValueError(f"Placeholder name is empty after normalization: {name!r}")
    if normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"Placeholder name escapes the output directory: {name}")
    return normalized


@dataclass
class PlaceholderRecord:
    """Single manifest row: an output name and the hash to decode."""

    name: str
    blurhash: str
    width: Optional[int] = None
    height: Optional[int] = None
    punch: Optional[float] = None

    def __post_init__(self) -> None:
        self.name = normalize_name(self.name)
        self.blurhash = str(self.blurhash).strip()


def get_output_path(name: str, output_dir: str, ext: str = ".png") -> str:
    """Return ``<output_dir>/<name><ext>``; ``ext`` is appended, never substituted."""
    return os.path.join(output_dir, *normalize_name(name).split("/")) + ext


def load_manifest(path: str) -> List[PlaceholderRecord]:
    """Load placeholder records from a CSV manifest file.

    Required columns are ``name`` and ``blurhash``; ``width``, ``height`` and
    ``punch`` are optional and may be left blank per row.
    """
    records = []
    first_row = {}

    def _optional(row: dict, key: str, cast, row_idx: int):
        text = (row.get(key) or "").strip()
        if not text:
            return None
        try:
            value = cast(text)
        except ValueError as exc:
            raise ValueError(
                f"field '{key}' has invalid value '{text}' at row {row_idx}"
            ) from exc
        if value <= 0:
            raise ValueError(f"field '{key}' must be > 0 at row {row_idx}, got {text}")
        return value

    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(
                f"Manifest '{path}' is missing required columns: {', '.join(missing)}"
            )
        for row_idx, row in enumerate(reader, start=2):
            name = (row.get("name") or "").strip()
            if not name:
                raise ValueError(f"Manifest '{path}' has an empty name at row {row_idx}")
            try:
                records.append(PlaceholderRecord(
                    name=name,
                    blurhash=row.get("blurhash") or "",
                    width=_optional(row, "width", int, row_idx),
                    height=_optional(row, "height", int, row_idx),
                    punch=_optional(row, "punch", float, row_idx),
                ))
            except ValueError as exc:
                raise ValueError(f"Manifest '{path}' row {row_idx}: {exc}") from exc
            record_name = records[-1].name
            if record_name in first_row:
                raise ValueError(
                    f"Manifest '{path}' row {row_idx}: name '{record_name}' duplicates "
                    f"row {first_row[record_name]}"
                )
            first_row[record_name] = row_idx

    logger.info("Manifest loaded: %s (%d entries)", path, len(records))
    return records
