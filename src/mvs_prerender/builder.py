"""Run `mvs build` for one story and wrap the result for Quarto."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

from mvs_prerender.results import StoryBuildResult
from mvs_prerender.wrapper import ARTIFACT_FILENAME, printable, write_wrapper

logger = logging.getLogger(__name__)

DEFAULT_BUILDER = "mvs"
OUTPUT_FORMAT = "html"


def build_mvs_command(story_dir: Path, output_path: Path, *, builder: str = DEFAULT_BUILDER) -> list[str]:
    """Return the argument list for rendering `story_dir` into `output_path`."""
    if output_path.parent != story_dir:
        raise ValueError(f"Output path {output_path} must be inside story directory {story_dir}")
    return [
        builder,
        "build",
        str(story_dir),
        "-f",
        OUTPUT_FORMAT,
        "-o",
        str(output_path),
    ]


def run_story_build(
    story_path: Path,
    *,
    builder: str = DEFAULT_BUILDER,
    timeout_seconds: float | None = None,
) -> StoryBuildResult:
    """Build one descriptor; the wrapper is written only after a zero exit code."""
    story_dir = story_path.parent
    output_path = story_dir / ARTIFACT_FILENAME
    command = build_mvs_command(story_dir, output_path, builder=builder)

    print(f"\n[build] story: {printable(story_path)}")
    print(f"[build] output: {printable(output_path)}")

    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.error("build.dispatch_error story=%s error=%s", printable(story_path), exc)
        return StoryBuildResult(
            story_path=story_path,
            story_dir=story_dir,
            output_path=output_path,
            success=False,
            stage="dispatch",
            error=str(exc),
        )

    if completed.stdout:
        print(completed.stdout.rstrip("\n"))

    if completed.returncode != 0:
        logger.error("build.failed story=%s returncode=%s", printable(story_path), completed.returncode)
        if completed.stderr:
            print(completed.stderr.rstrip("\n"), file=sys.stderr)
        return StoryBuildResult(
            story_path=story_path,
            story_dir=story_dir,
            output_path=output_path,
            success=False,
            stage="build",
            returncode=completed.returncode,
            error=completed.stderr.strip() or None,
        )

    try:
        wrapper_path = write_wrapper(story_dir)
    except (OSError, UnicodeError) as exc:
        logger.error("build.wrapper_error story=%s error=%s", printable(story_path), exc)
        return StoryBuildResult(
            story_path=story_path,
            story_dir=story_dir,
            output_path=output_path,
            success=False,
            stage="wrapper",
            returncode=completed.returncode,
            error=str(exc),
        )

    print(f"[build] wrapper: {printable(wrapper_path)}")
    print(f"[build] built {printable(story_path)}")
    return StoryBuildResult(
        story_path=story_path,
        story_dir=story_dir,
        output_path=output_path,
        success=True,
        stage="done",
        returncode=completed.returncode,
        wrapper_path=wrapper_path,
    )
