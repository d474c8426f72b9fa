# lgbdl/installer/__init__.py
from __future__ import annotations

import logging
import os

_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=_LOG_LEVEL,
    format="%(asctime)s | %(levelname)8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)

from .errors import CommandError, InstallError, PatchError
from .lightgbm import InstallResult, install

__all__ = [
    "install",
    "InstallResult",
    "InstallError",
    "CommandError",
    "PatchError",
]
