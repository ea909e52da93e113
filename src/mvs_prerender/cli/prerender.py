"""CLI for the Quarto pre-render story build step."""

from __future__ import annotations

import argparse
from pathlib import Path

from mvs_prerender.adapters.observability import configure_runtime_logging
from mvs_prerender.builder import DEFAULT_BUILDER
from mvs_prerender.prerender import PrerenderArgs, run_prerender


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build every story.yaml in a Quarto project with `mvs build` and wrap it in a page.",
    )
    parser.add_argument("--root", default="", help="Project root (defaults to the current directory).")
    parser.add_argument("--builder", default=DEFAULT_BUILDER)
    parser.add_argument("--timeout-seconds", type=float, default=0.0)
    parser.add_argument("--report-json", default="")
    return parser


def _args_from_namespace(namespace: argparse.Namespace) -> PrerenderArgs:
    root = str(namespace.root).strip()
    timeout = float(namespace.timeout_seconds)
    report_json = str(namespace.report_json).strip()
    return PrerenderArgs(
        root=Path(root) if root else Path.cwd(),
        builder=str(namespace.builder).strip() or DEFAULT_BUILDER,
        timeout_seconds=timeout if timeout > 0 else None,
        report_json=Path(report_json) if report_json else None,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    configure_runtime_logging()
    summary = run_prerender(_args_from_namespace(parsed))
    raise SystemExit(summary.exit_code)


if __name__ == "__main__":
    main()
