"""
Route Review CLI - Run a pull request review from CI, or scan local files
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from models.review import RunReport
from services.config_manager import ConfigManager, ReviewConfig
from services.errors import ReadError, ReviewError
from services.github_client import GitHubClient
from services.review_runner import ReviewRunner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-review",
        description="Annotate pull requests that change route declarations",
    )
    parser.add_argument("--config", default=None, help="JSON config file (default: $ROUTE_REVIEW_CONFIG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Review a pull request on GitHub")
    run_parser.add_argument("--pull", type=int, default=None, help="Pull request number (default: from event payload)")
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Plan annotations without creating them",
    )

    scan_parser = subparsers.add_parser("scan", help="Scan a local file for route blocks")
    scan_parser.add_argument("file", help="Source file to scan")
    scan_parser.add_argument("--diff", default=None, help="Zero-context unified diff for the file")
    scan_parser.add_argument("--parent", default=None, help="Parent revision of the file, to detect removed routes")
    return parser


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ReadError(str(e), path) from e


async def _run(config: ReviewConfig, pull_number: int, dry_run: bool) -> RunReport:
    async with GitHubClient(config) as client:
        return await ReviewRunner(config, client).run(pull_number, dry_run=dry_run)


def run_review(args: argparse.Namespace, config: ReviewConfig) -> int:
    if config.pull_number is None:
        print("error: no pull request number (use --pull or GITHUB_EVENT_PATH)", file=sys.stderr)
        return 1

    report = asyncio.run(_run(config, config.pull_number, args.dry_run))
    planned = sum(len(file_report.planned) for file_report in report.files)
    print(
        f"[route-review] {report.files_considered} route files, {planned} planned, "
        f"{report.annotations_created} created" + (" (dry run)" if report.dry_run else "")
    )
    for error in report.errors:
        print(f"error: {error.kind} error in {error.file_path}: {error.message}", file=sys.stderr)
    return 0 if report.succeeded else 1


def run_scan(args: argparse.Namespace, config: ReviewConfig) -> int:
    runner = ReviewRunner(config)
    content = _read_text(args.file)
    parent_content = _read_text(args.parent) if args.parent else None

    if args.diff is None:
        for block in runner.scanner.scan_text(content, args.file):
            print(f"{args.file}:{block.start_line}-{block.end_line} [{block.kind.value}]")
        return 0

    file_report = runner.preview_file(args.file, content, _read_text(args.diff), parent_content=parent_content)
    print(file_report.model_dump_json(indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        overrides = {"pull_number": getattr(args, "pull", None)}
        config = ConfigManager(config_file=args.config).load(**overrides)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "run":
            return run_review(args, config)
        return run_scan(args, config)
    except (ReviewError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
