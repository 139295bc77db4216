"""
Shell profile edits — the only persistent state the installer writes.

Each edit is an idempotent "apply configuration line": if the marker
substring is already in the file the content is not written again.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def profile_contains(path: Path, marker: str) -> bool:
    """Whether ``marker`` occurs anywhere in the file.

    A missing or unreadable file counts as "not present".
    """
    try:
        return marker in path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError, UnicodeDecodeError):
        return False


def apply_config_line(path: Path, marker: str, content: str) -> bool:
    """Append ``content`` to ``path`` unless ``marker`` is already there.

    Args:
        path: Profile file; created (with parents) if missing.
        marker: Substring whose presence means the edit is done.
        content: One or more lines to append.

    Returns:
        True if the file was changed.
    """
    if profile_contains(path, marker):
        logger.debug("%s already contains %r", path, marker)
        return False

    block = content if content.endswith("\n") else content + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)

    # Keep the appended block on its own line
    prefix = ""
    if path.is_file():
        existing = path.read_text(encoding="utf-8")
        if existing and not existing.endswith("\n"):
            prefix = "\n"

    with path.open("a", encoding="utf-8") as fh:
        fh.write(prefix + block)

    logger.info("Appended %r block to %s", marker, path)
    return True
