"""Locate `story.yaml` descriptors inside a Quarto project tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

STORY_FILENAME = "story.yaml"
EXCLUDED_FRAGMENTS: tuple[str, ...] = (
    "node_modules",
    "_site",
    ".git",
    ".quarto",
    "_extensions",
    ".mol-view-stories-repo",
)


def is_excluded(relative_path: str) -> bool:
    """Return True when a root-relative path contains an excluded directory fragment."""
    normalized = relative_path.replace("\\", "/")
    return any(fragment in normalized for fragment in EXCLUDED_FRAGMENTS)


def _log_walk_error(error: OSError) -> None:
    logger.warning("discovery.walk_error path=%s error=%s", error.filename, error)


def find_story_files(root: Path) -> list[Path]:
    """Return absolute paths of every descriptor under `root`, sorted by path.

    Excluded directories are pruned before descent. Traversal errors on a
    subtree are logged and skipped; whatever was collected is still returned.
    """
    root = root.resolve()
    story_files: list[Path] = []
    for current, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        current_path = Path(current)
        relative = current_path.relative_to(root).as_posix()
        dirnames[:] = [
            name for name in dirnames if not is_excluded(f"{relative}/{name}")
        ]
        if STORY_FILENAME not in filenames:
            continue
        if is_excluded(f"{relative}/{STORY_FILENAME}"):
            continue
        story_files.append(current_path / STORY_FILENAME)
    story_files.sort()
    logger.info("discovery.done root=%s found=%s", root, len(story_files))
    return story_files
