"""Discover every story in a Quarto project and build them one at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from mvs_prerender.builder import DEFAULT_BUILDER, run_story_build
from mvs_prerender.contracts import report_from_summary, write_report
from mvs_prerender.discovery import find_story_files
from mvs_prerender.results import PrerenderSummary, StoryBuildResult
from mvs_prerender.wrapper import printable

logger = logging.getLogger(__name__)

SUMMARY_RULE = "=" * 50


@dataclass(frozen=True)
class PrerenderArgs:
    root: Path
    builder: str = DEFAULT_BUILDER
    timeout_seconds: float | None = None
    report_json: Path | None = None


def print_summary(summary: PrerenderSummary) -> None:
    print(f"\n{SUMMARY_RULE}")
    print("Build summary")
    print(
        f"Successful: {summary.successful}, Failed: {summary.failed}, Total: {summary.total}"
    )
    print(f"{SUMMARY_RULE}\n")


def run_prerender(args: PrerenderArgs) -> PrerenderSummary:
    """Build every discovered story sequentially and return the tally.

    Each build, including its wrapper write, finishes before the next starts.
    An empty project is a successful run with no builds and no writes.
    """
    root = args.root.resolve()
    print("Searching for story.yaml files in Quarto project...")
    print(f"Project root: {printable(root)}")

    story_files = find_story_files(root)
    if not story_files:
        print("\nNo story.yaml files found in project")
        summary = PrerenderSummary(root=root, results=())
        _maybe_write_report(args, summary)
        return summary

    print(f"\nFound {len(story_files)} story file(s):")
    for index, story_file in enumerate(story_files, start=1):
        print(f"  {index}. {printable(story_file)}")

    results: list[StoryBuildResult] = []
    for story_file in story_files:
        results.append(
            run_story_build(
                story_file,
                builder=args.builder,
                timeout_seconds=args.timeout_seconds,
            )
        )

    summary = PrerenderSummary(root=root, results=tuple(results))
    logger.info(
        "prerender.done root=%s successful=%s failed=%s total=%s",
        root,
        summary.successful,
        summary.failed,
        summary.total,
    )
    print_summary(summary)
    _maybe_write_report(args, summary)
    return summary


def _maybe_write_report(args: PrerenderArgs, summary: PrerenderSummary) -> None:
    if args.report_json is None:
        return
    report = report_from_summary(summary, builder=args.builder)
    try:
        path = write_report(args.report_json, report)
    except OSError as exc:
        logger.error("prerender.report_error path=%s error=%s", printable(args.report_json), exc)
        return
    print(f"Report: {printable(path)}")
