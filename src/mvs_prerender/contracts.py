"""Machine-readable report of a pre-render run."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from mvs_prerender.results import PrerenderSummary, StoryBuildResult
from mvs_prerender.wrapper import printable

REPORT_SCHEMA_VERSION = "mvs_prerender_report.v1"


class _ReportModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class StoryReport(_ReportModel):
    """Outcome of one descriptor build."""

    story_path: str = Field(min_length=1)
    story_dir: str = Field(min_length=1)
    output_path: str = Field(min_length=1)
    success: bool
    stage: Literal["build", "wrapper", "dispatch", "done"]
    returncode: int | None = None
    error: str | None = None


class PrerenderReport(_ReportModel):
    """Run-level counts plus one entry per discovered descriptor."""

    report_schema_version: str = REPORT_SCHEMA_VERSION
    root: str = Field(min_length=1)
    builder: str = Field(min_length=1)
    successful: int = Field(ge=0)
    failed: int = Field(ge=0)
    total: int = Field(ge=0)
    exit_code: int = Field(ge=0, le=1)
    stories: list[StoryReport] = Field(default_factory=list)


def _story_report(result: StoryBuildResult) -> StoryReport:
    return StoryReport(
        story_path=printable(result.story_path),
        story_dir=printable(result.story_dir),
        output_path=printable(result.output_path),
        success=result.success,
        stage=result.stage,
        returncode=result.returncode,
        error=result.error,
    )


def report_from_summary(summary: PrerenderSummary, *, builder: str) -> PrerenderReport:
    return PrerenderReport(
        root=printable(summary.root),
        builder=builder,
        successful=summary.successful,
        failed=summary.failed,
        total=summary.total,
        exit_code=summary.exit_code,
        stories=[_story_report(result) for result in summary.results],
    )


def write_report(path: Path, report: PrerenderReport) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2) + "\n", encoding="utf-8")
    return path
