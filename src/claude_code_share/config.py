"""Path resolution and server defaults."""

import os
from pathlib import Path

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3333


def get_log_dir() -> Path:
    """Return the path to Claude Code's projects directory."""
    env = os.environ.get("CLAUDE_CODE_SHARE_LOG_DIR")
    if env:
        return Path(env).expanduser()

    return Path.home() / ".claude" / "projects"
