"""State directory resolution."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

APP_DIR_NAME = "z-methoxy"
HISTORY_FILE_NAME = "history"
TMP_SUFFIX = "-tmp"


def state_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the z-methoxy state directory.

    Resolution order:
        1. $Z_METHOXY_STATE_DIR  (explicit override)
        2. $XDG_DATA_HOME/z-methoxy  (XDG standard)
        3. ~/.local/share/z-methoxy  (default)
    """
    env = os.environ if environ is None else environ
    if override := env.get("Z_METHOXY_STATE_DIR"):
        return Path(override)
    xdg = env.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".local" / "share" / APP_DIR_NAME
