"""
Diff Range Extractor - Turn zero-context unified diffs into line sets
"""

from __future__ import annotations

import re

from models.diff import DiffHunk, FileDiff

from .errors import ParseError

HUNK_MARKER = "@@"
HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def parse_hunk_header(line: str, file_path: str | None = None) -> DiffHunk:
    """Parse ``@@ -O[,Oc] +N[,Nc] @@``; omitted counts default to 1"""
    match = HUNK_HEADER_RE.match(line)
    if not match:
        raise ParseError(f"malformed hunk header: {line!r}", file_path)
    original_start, original_count, new_start, new_count = match.groups()
    return DiffHunk(
        original_start=int(original_start),
        original_count=int(original_count) if original_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
    )


class DiffRangeExtractor:
    """Extract hunk tables and changed/removed line sets from diff text"""

    def extract(self, diff_text: str, file_path: str = "") -> FileDiff:
        hunks: list[DiffHunk] = []
        changed: set[int] = set()
        removed: set[int] = set()

        for line in diff_text.split("\n"):
            if not line.startswith(HUNK_MARKER):
                continue
            hunk = parse_hunk_header(line, file_path)
            hunks.append(hunk)
            changed.update(range(hunk.new_start, hunk.new_start + hunk.new_count))
            removed.update(range(hunk.original_start, hunk.original_start + hunk.original_count))

        return FileDiff(
            file_path=file_path,
            hunks=hunks,
            changed_lines=changed,
            removed_lines=removed,
        )


def to_original_line(hunks: list[DiffHunk], new_line: int) -> int | None:
    """Map a head-revision line through the hunk offset table.

    Uses the last hunk starting at or before ``new_line``; returns None when
    the line precedes every hunk.
    """
    anchor = None
    for hunk in hunks:
        if hunk.new_start <= new_line:
            anchor = hunk
        else:
            break
    if anchor is None:
        return None
    return new_line - anchor.new_start + anchor.original_start
