"""Define typed configuration models for placeholder decoding.

Use `HashBrewConfig` to load, validate, and persist runtime settings.
"""

import dataclasses
import logging
import os
import tempfile
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger("hashbrew.config")

_SUPPORTED_CONFIG_VERSION = 1
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_IMAGE_FORMATS = {"png", "jpg", "jpeg", "bmp", "webp", "tiff"}


@dataclass
class DecodeConfig:
    """Store default output geometry and contrast for decoding."""

    width: int = 32
    height: int = 32
    punch: float = 1.0
    channels: int = 3  # 3 = RGB, 4 = RGBA with opaque alpha
    strict: bool = False  # raise on malformed hashes instead of falling back


@dataclass
class OutputConfig:
    """Store settings for writing decoded placeholders to disk."""

    output_dir: str = "./placeholders"
    image_format: str = "png"
    jpeg_quality: int = 90
    overwrite: bool = True


@dataclass
class HashBrewConfig:
    """Master configuration."""

    config_version: int = 1
    log_level: str = "INFO"
    log_file: str = ""

    decode: DecodeConfig = field(default_factory=DecodeConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "HashBrewConfig":
        """Load configuration from YAML or return defaults."""
        if not os.path.exists(path):
            logger.info("Config file '%s' not found. Using defaults.", path)
            config = cls()
            config.validate()
            return config
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(
                f"Failed to parse YAML config '{path}': {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file '{path}' must contain a YAML mapping, "
                f"got {type(data).__name__}"
            )
        yaml_version = data.get("config_version", 1)
        if isinstance(yaml_version, int) and yaml_version > _SUPPORTED_CONFIG_VERSION:
            logger.warning(
                "Config file '%s' has config_version=%d, but this build only "
                "supports up to version %d. Some settings may be ignored.",
                path, yaml_version, _SUPPORTED_CONFIG_VERSION,
            )
        config = cls()
        _apply_overrides(config, data)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        return config

    def to_yaml(self, path: str):
        """Write configuration to ``path`` as YAML, replacing it atomically."""
        text = (
            f"# HashBrew configuration (config_version {self.config_version})\n"
            + yaml.safe_dump(dataclasses.asdict(self), default_flow_style=False, sort_keys=False)
        )
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".hashbrew-", suffix=".yaml", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    @property
    def image_extension(self) -> str:
        fmt = self.output.image_format.lower().lstrip(".")
        return f".{fmt}"

    def validate(self):
        """Validate configuration values. Raises ValueError on invalid config."""
        errors = []

        if str(self.log_level).upper() not in _VALID_LOG_LEVELS:
            errors.append(
                f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}, "
                f"got '{self.log_level}'"
            )

        dec = self.decode
        if dec.width < 1 or dec.height < 1:
            errors.append(
                f"decode.width and decode.height must be >= 1, got {dec.width}x{dec.height}"
            )
        if dec.width * dec.height > 4096 * 4096:
            errors.append(
                f"decode.width * decode.height must not exceed {4096 * 4096} pixels"
            )
        if not dec.punch > 0:
            errors.append(f"decode.punch must be > 0, got {dec.punch}")
        if dec.channels not in (3, 4):
            errors.append(f"decode.channels must be 3 or 4, got {dec.channels}")

        out = self.output
        fmt = out.image_format.lower().lstrip(".")
        if fmt not in _VALID_IMAGE_FORMATS:
            errors.append(
                f"output.image_format must be one of {sorted(_VALID_IMAGE_FORMATS)}, "
                f"got '{out.image_format}'"
            )
        elif fmt in ("jpg", "jpeg") and dec.channels == 4:
            logger.warning(
                "output.image_format is '%s' but decode.channels is 4; "
                "alpha will be dropped on save.", fmt,
            )
        if not 1 <= out.jpeg_quality <= 100:
            errors.append(f"output.jpeg_quality must be in [1, 100], got {out.jpeg_quality}")

        if errors:
            raise ValueError(
                "Configuration validation failed:\n" +
                "\n".join(f"  - {e}" for e in errors)
            )


_MISSING = object()


def _coerce(value, default, key: str):
    """Return ``value`` converted to the type of ``default``, or ``_MISSING``.

    Integers widen to float and integral floats narrow to int; bools are
    never accepted as numbers.
    """
    if value is None:
        logger.warning("Config key '%s' is null. Using default value.", key)
        return _MISSING
    target = type(default)
    if isinstance(value, bool) == (target is bool):
        if isinstance(value, target):
            return value
        if target is float and isinstance(value, int):
            return float(value)
        if target is int and isinstance(value, float) and value.is_integer():
            return int(value)
    logger.warning(
        "Config type mismatch for '%s': expected %s, got %s (%r). Using default value.",
        key, target.__name__, type(value).__name__, value,
    )
    return _MISSING


def _apply_overrides(section, data: dict, prefix: str = ""):
    """Copy recognised keys from a parsed YAML mapping onto ``section``."""
    known = {f.name for f in dataclasses.fields(section)}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if key not in known:
            logger.warning("Unknown config key ignored: '%s'", full_key)
            continue
        current = getattr(section, key)
        if dataclasses.is_dataclass(current):
            if isinstance(value, dict):
                _apply_overrides(current, value, f"{full_key}.")
            else:
                logger.warning("Config section '%s' must be a mapping; ignored.", full_key)
            continue
        coerced = _coerce(value, current, full_key)
        if coerced is not _MISSING:
            setattr(section, key, coerced)
