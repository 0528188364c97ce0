"""Provide package metadata for `HashBrew`."""

import logging as _logging

__version__ = "0.3.0"
_logger = _logging.getLogger("hashbrew")

__all__ = ["__version__"]
