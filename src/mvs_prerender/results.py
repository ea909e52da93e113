"""Typed result objects returned by the pre-render pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

BuildStage = Literal["build", "wrapper", "dispatch", "done"]


@dataclass(frozen=True)
class StoryBuildResult:
    """Outcome of building one `story.yaml` descriptor."""

    story_path: Path
    story_dir: Path
    output_path: Path
    success: bool
    stage: BuildStage
    returncode: int | None = None
    wrapper_path: Path | None = None
    error: str | None = None


@dataclass(frozen=True)
class PrerenderSummary:
    """Aggregated counts for one pre-render run."""

    root: Path
    results: tuple[StoryBuildResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
