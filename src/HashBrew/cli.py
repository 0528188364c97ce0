"""Command-line interface for decoding BlurHash placeholders."""

import argparse
import logging
import os
import sys

from tqdm import tqdm

from .config import HashBrewConfig
from .core import (
    BlurHashError,
    decode,
    decode_strict,
    get_output_path,
    image_format_for,
    load_manifest,
    save_image,
    setup_logging,
)

logger = logging.getLogger("hashbrew")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hashbrew",
        description="Decode BlurHash strings into placeholder images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hashbrew "LEHV6nWB2yk8pyo0adR*.7kCMdnj" -o placeholder.png
  hashbrew "LEHV6nWB2yk8pyo0adR*.7kCMdnj" --width 64 --height 48 --punch 1.5
  hashbrew --manifest hashes.csv --output-dir ./placeholders
  hashbrew --config hashbrew.yaml --manifest hashes.csv
  hashbrew --generate-config
  hashbrew -o out.png -- "$HASH"

Hashes may start with '-'; put them after '--' so they are not read as options.
        """
    )
    parser.add_argument("hashes", nargs="*", metavar="HASH",
                        help="BlurHash strings to decode (place after '--' if one starts with '-')")
    parser.add_argument("--output", "-o",
                        help="Output file (single hash only; defaults to <output-dir>/placeholder_N)")
    parser.add_argument("--output-dir", "-d", help="Output directory")
    parser.add_argument("--manifest", "-m", help="CSV manifest with name,blurhash columns")
    parser.add_argument("--config", "-c", help="Path to config YAML")
    parser.add_argument("--width", type=int, help="Output width in pixels")
    parser.add_argument("--height", type=int, help="Output height in pixels")
    parser.add_argument("--punch", type=float, help="AC contrast multiplier")
    parser.add_argument("--alpha", action="store_true", help="Write RGBA instead of RGB")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on malformed hashes instead of writing a fallback")
    parser.add_argument("--format", dest="image_format", help="png | jpg | bmp | webp | tiff")
    parser.add_argument("--generate-config", action="store_true",
                        help="Generate default hashbrew.yaml")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def _load_config(args) -> HashBrewConfig:
    if args.config:
        if not os.path.exists(args.config):
            logger.error("Config file not found: %s", args.config)
            print(f"Error: Config file not found: {args.config}")
            sys.exit(1)
        try:
            config = HashBrewConfig.from_yaml(args.config)
        except ValueError as e:
            logger.error("Invalid config file '%s': %s", args.config, e)
            print(f"Error: Invalid config: {e}")
            sys.exit(1)
    else:
        config = HashBrewConfig()

    # CLI overrides
    if args.width is not None:
        config.decode.width = args.width
    if args.height is not None:
        config.decode.height = args.height
    if args.punch is not None:
        config.decode.punch = args.punch
    if args.alpha:
        config.decode.channels = 4
    if args.strict:
        config.decode.strict = True
    if args.image_format:
        config.output.image_format = args.image_format
    if args.output_dir:
        config.output.output_dir = args.output_dir
    if args.log_level:
        config.log_level = args.log_level
    return config


def _decode_one(config: HashBrewConfig, blurhash: str, path: str,
                width=None, height=None, punch=None) -> bool:
    """Decode and save one hash. Return False when the fallback was written."""
    dec = config.decode
    decoder = decode_strict if dec.strict else decode
    image = decoder(
        blurhash,
        width or dec.width,
        height or dec.height,
        punch=punch or dec.punch,
        channels=dec.channels,
    )
    if os.path.exists(path) and not config.output.overwrite:
        logger.info("Skipping existing output: %s", path)
        return not image.is_fallback
    save_image(image, path, quality=config.output.jpeg_quality)
    if image.is_fallback:
        logger.warning("Wrote fallback placeholder for %r to %s", blurhash, path)
    else:
        logger.info("Decoded %r -> %s (%dx%d)", blurhash, path, image.width, image.height)
    return not image.is_fallback


def main():
    """Parse CLI arguments and decode the requested hashes."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.generate_config:
        config = HashBrewConfig()
        dest = args.config or "hashbrew.yaml"
        if os.path.isdir(dest):
            dest = os.path.join(dest, "hashbrew.yaml")
        config.to_yaml(dest)
        logger.info("Generated default %s", dest)
        print(f"Generated default {dest}")
        return

    # Ensure early validation warnings from from_yaml() are visible on stderr
    # before the full logging is configured.
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    config = _load_config(args)
    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(config.log_level, config.log_file or None)

    if not args.hashes and not args.manifest:
        parser.print_usage()
        print("Error: give at least one HASH or --manifest")
        sys.exit(1)
    if args.output and (len(args.hashes) != 1 or args.manifest):
        print("Error: --output requires exactly one HASH and no --manifest")
        sys.exit(1)

    output = args.output
    if output:
        if not os.path.splitext(output)[1]:
            output += config.image_extension
        try:
            image_format_for(output)
        except ValueError as e:
            logger.error("Invalid --output path: %s", e)
            print(f"Error: {e}")
            sys.exit(1)

    jobs = []
    ext = config.image_extension
    for idx, blurhash in enumerate(args.hashes):
        path = output or os.path.join(
            config.output.output_dir, f"placeholder_{idx}{ext}"
        )
        jobs.append((blurhash, path, None, None, None))

    if args.manifest:
        try:
            records = load_manifest(args.manifest)
        except (OSError, ValueError) as e:
            logger.error("Cannot read manifest '%s': %s", args.manifest, e)
            print(f"Error: Cannot read manifest: {e}")
            sys.exit(1)
        for record in records:
            path = get_output_path(record.name, config.output.output_dir, ext)
            jobs.append((record.blurhash, path, record.width, record.height, record.punch))

    failed = 0
    try:
        for blurhash, path, width, height, punch in tqdm(
            jobs, desc="Decoding", unit="hash", disable=len(jobs) < 2,
        ):
            if not _decode_one(config, blurhash, path, width, height, punch):
                failed += 1
    except BlurHashError as e:
        logger.error("Aborting on malformed BlurHash: %s", e)
        print(f"Error: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error("Failed to write placeholder: %s", e)
        print(f"Error: Failed to write placeholder: {e}")
        sys.exit(1)

    if failed:
        logger.warning("%d of %d hashes could not be decoded", failed, len(jobs))
        sys.exit(1)


if __name__ == "__main__":
    main()
