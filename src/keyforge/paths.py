"""Filesystem path helpers."""
from __future__ import annotations

import sys
from pathlib import Path

from platformdirs import PlatformDirs

_APP_NAME = "keyforge"


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    roaming = sys.platform in ("win32", "darwin")
    dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=roaming)
    return Path(dirs.user_config_path)


def default_config_path() -> Path:
    return runtime_config_dir() / "config.yaml"


__all__ = ["default_config_path", "runtime_config_dir"]
