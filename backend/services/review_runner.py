"""
Review Runner - Drive the scan/match/reconcile pipeline across a pull request
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import PurePosixPath

from models.annotation import Annotation, Side
from models.review import FileError, FileReport, RunReport
from models.route import CandidatePair

from .block_scanner import BlockScanner
from .config_manager import ReviewConfig
from .diff_parser import DiffRangeExtractor
from .errors import ParseError, ReadError
from .matcher import find_removed_blocks, match_blocks
from .providers import ReviewBackend
from .reconciler import AnnotationReconciler


def is_route_file(path: str, config: ReviewConfig) -> bool:
    """Under the root prefix, inside a routes directory, with the source suffix"""
    if not (path.startswith(config.root_path) and path.endswith(config.file_suffix)):
        return False
    directories = PurePosixPath(path).parts[:-1]
    if config.routes_marker not in directories:
        return False
    return not any(segment in directories for segment in config.excluded_segments)


class ReviewRunner:
    """Sequential review of every route file in one change"""

    def __init__(self, config: ReviewConfig, backend: ReviewBackend | None = None):
        self.config = config
        self.backend = backend
        self.scanner = BlockScanner(config.declaration_pattern)
        self.extractor = DiffRangeExtractor()
        self.body = config.comment_body()
        self.reconciler = AnnotationReconciler(self.body, config.request_delay_seconds)

    def preview_file(
        self,
        file_path: str,
        content: str | None,
        diff_text: str,
        existing: Iterable[Annotation] = (),
        parent_content: str | None = None,
    ) -> FileReport:
        """Scan, match and plan one file entirely in memory"""
        file_diff = self.extractor.extract(diff_text, file_path)
        blocks = self.scanner.scan_text(content, file_path)
        candidates = match_blocks(blocks, file_diff.changed_lines)

        existing = list(existing)
        planned, skipped = self.reconciler.plan(file_path, candidates, file_diff.hunks, existing)

        removed: list[CandidatePair] = []
        if parent_content is not None:
            parent_blocks = self.scanner.scan_text(parent_content, file_path)
            removed = find_removed_blocks(parent_blocks, file_diff.removed_lines)
            removed_planned, removed_skipped = self.reconciler.plan(
                file_path, removed, file_diff.hunks, existing, side=Side.LEFT
            )
            planned.extend(removed_planned)
            skipped += removed_skipped

        return FileReport(
            file_path=file_path,
            blocks=blocks,
            candidates=candidates,
            removed_candidates=removed,
            planned=planned,
            skipped_duplicates=skipped,
        )

    async def run(self, change_id: int, dry_run: bool = False) -> RunReport:
        """Review every matching file of ``change_id``.

        Read and parse failures skip the file (or abort with ``fail_fast``);
        API failures always abort.
        """
        if self.backend is None:
            raise RuntimeError("ReviewRunner.run requires a backend")
        backend = self.backend
        report = RunReport(change_id=change_id, dry_run=dry_run)

        revisions = await backend.get_revisions(change_id)
        changed_files = await backend.list_changed_files(change_id)
        existing = [
            annotation
            for annotation in await backend.list_annotations(change_id)
            if annotation.author == self.config.annotation_author
        ]
        print(
            f"[ReviewRunner] #{change_id}: {len(changed_files)} changed files, "
            f"{len(existing)} existing annotations"
        )

        for file_path in changed_files:
            if not is_route_file(file_path, self.config):
                continue
            report.files_considered += 1

            try:
                diff_text = await backend.diff(file_path, revisions)
                content = await backend.read_file(file_path, revisions[1])
                parent_content = None
                if self.config.check_removed_routes:
                    parent_content = await self._read_parent(file_path, revisions[0])
                file_report = self.preview_file(file_path, content, diff_text, existing, parent_content)
            except (ReadError, ParseError) as e:
                e.file_path = e.file_path or file_path
                print(f"[ReviewRunner] {e}", file=sys.stderr)
                if self.config.fail_fast:
                    raise
                report.errors.append(FileError(file_path=file_path, kind=e.kind, message=e.message))
                continue

            print(
                f"[ReviewRunner] {file_path}: {len(file_report.blocks)} routes, "
                f"{len(file_report.planned)} to annotate, {file_report.skipped_duplicates} already annotated"
            )
            if not dry_run and file_report.planned:
                file_report.created_ids = await self.reconciler.apply(backend, change_id, file_report.planned)
                report.annotations_created += len(file_report.created_ids)
            report.files.append(file_report)

        if report.annotations_created and not dry_run:
            await backend.request_changes(change_id, self.body)
            await backend.ensure_label(change_id, self.config.label)
            report.escalated = True

        return report

    async def _read_parent(self, file_path: str, base_ref: str) -> str:
        try:
            return await self.backend.read_file(file_path, base_ref)
        except ReadError:
            return ""  # added in this change
