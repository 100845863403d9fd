"""Location of the external media tools vsplit drives."""

import logging
import shutil
from pathlib import Path

from vsplit.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

# Install hints shown when a tool cannot be found
TOOL_HINTS: dict[str, str] = {
    "ffmpeg": "Install ffmpeg (e.g. 'apt install ffmpeg' or 'brew install ffmpeg').",
    "ffprobe": "ffprobe ships with ffmpeg; install ffmpeg.",
}


def resolve_tool(name: str, configured: str | Path | None = None) -> Path | None:
    """Find a tool executable.

    A configured path wins when it points to an existing file. Otherwise
    the tool is looked up on PATH.

    Args:
        name: Tool name, e.g. "ffmpeg".
        configured: Explicit path from configuration, if any.

    Returns:
        Path to the executable, or None if it cannot be found.
    """
    if configured:
        path = Path(configured).expanduser()
        if path.is_file():
            return path
        logger.warning("Configured %s path does not exist: %s", name, path)

    found = shutil.which(name)
    if found is None:
        logger.debug("%s not found on PATH", name)
        return None
    return Path(found)


def require_tool(name: str, configured: str | Path | None = None) -> Path:
    """Find a tool executable, raising if it is unavailable.

    Raises:
        ToolNotFoundError: If the tool cannot be found.
    """
    path = resolve_tool(name, configured)
    if path is None:
        hint = TOOL_HINTS.get(name, "")
        raise ToolNotFoundError(f"Required tool not available: {name}. {hint}".strip())
    return path
