"""Review annotation data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Side(str, Enum):
    """Diff side an annotation is anchored to"""

    LEFT = "LEFT"  # parent revision
    RIGHT = "RIGHT"  # head revision


class Annotation(BaseModel):
    """An inline comment that already exists on the change"""

    file_path: str
    line: int | None = None
    body: str = ""
    author: str | None = None
    side: Side = Side.RIGHT
    id: int | None = None


class AnnotationRequest(BaseModel):
    """One annotation the reconciler wants created"""

    file_path: str
    line: int  # posted line, in the coordinates of ``side``
    body: str
    side: Side = Side.RIGHT
    original_line: int | None = None  # parent-side position, used for deduplication

    def key(self) -> tuple[str, int, Side]:
        return (self.file_path, self.line if self.original_line is None else self.original_line, self.side)
