"""Entrypoint for `python -m HashBrew`.

Usage:
  - Single hash:  `python -m HashBrew "LEHV6nWB2yk8pyo0adR*.7kCMdnj" -o out.png`
  - Manifest:     `python -m HashBrew --manifest hashes.csv --output-dir out/`
"""
import logging

logger = logging.getLogger("hashbrew")


def _run_cli():
    from .cli import main as cli_main
    logger.debug("Dispatching to CLI entrypoint.")
    cli_main()


if __name__ == "__main__":
    _run_cli()
