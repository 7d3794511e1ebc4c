"""Review run request/response models"""

from __future__ import annotations

from pydantic import BaseModel

from .annotation import Annotation, AnnotationRequest
from .route import CandidatePair, RouteBlock


class FileError(BaseModel):
    """A file the run could not process"""

    file_path: str
    kind: str  # "read", "parse"
    message: str


class FileReport(BaseModel):
    """Outcome of processing a single file"""

    file_path: str
    blocks: list[RouteBlock] = []
    candidates: list[CandidatePair] = []
    removed_candidates: list[CandidatePair] = []
    planned: list[AnnotationRequest] = []
    skipped_duplicates: int = 0
    created_ids: list[int] = []


class RunReport(BaseModel):
    """Outcome of a complete review run"""

    change_id: int
    dry_run: bool = False
    files_considered: int = 0
    files: list[FileReport] = []
    errors: list[FileError] = []
    annotations_created: int = 0
    escalated: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.errors


class PreviewRequest(BaseModel):
    """Request to preview annotations for a file without touching the network"""

    file_path: str
    content: str
    diff: str
    parent_content: str | None = None
    existing: list[Annotation] = []


class RunRequest(BaseModel):
    """Request to run a review against a pull request"""

    pull_number: int | None = None
    dry_run: bool = False
