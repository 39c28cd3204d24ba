"""Locating and reading pkdwire.toml.

The file only tunes codec limits (``[codec] max_message_bytes``); every
setting has a default, so running without one is normal.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pkdwire.config.models import PkdConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pkdwire.toml"
CONFIG_ENV_VAR = "PKDWIRE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Nearest pkdwire.toml at or above *start* (default: cwd).

    ``PKDWIRE_CONFIG`` short-circuits the search; if it names a missing file
    the result is None and a warning is logged.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        if path.is_file():
            return path
        logger.warning("%s names no file: %s", CONFIG_ENV_VAR, path)
        return None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> PkdConfig:
    path = path if path is not None else find_config(cwd)
    if path is None:
        return PkdConfig()
    logger.debug("Loading codec settings from %s", path)
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return PkdConfig.model_validate(data)
