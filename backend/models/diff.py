"""Diff-related data models"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DiffHunk(BaseModel):
    """A single change hunk in a unified diff header"""

    model_config = ConfigDict(frozen=True)

    original_start: int  # 1-indexed, parent revision
    new_start: int  # 1-indexed, head revision
    original_count: int = 1
    new_count: int = 1


class FileDiff(BaseModel):
    """Hunks and expanded line sets for one file"""

    file_path: str
    hunks: list[DiffHunk] = []
    changed_lines: set[int] = set()  # head revision coordinates
    removed_lines: set[int] = set()  # parent revision coordinates
