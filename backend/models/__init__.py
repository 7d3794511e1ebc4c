"""Models module - Pydantic data models"""

from .annotation import Annotation, AnnotationRequest, Side
from .diff import DiffHunk, FileDiff
from .review import FileError, FileReport, PreviewRequest, RunReport, RunRequest
from .route import BlockKind, CandidatePair, RouteBlock

__all__ = [
    # Route models
    "BlockKind",
    "RouteBlock",
    "CandidatePair",
    # Diff models
    "DiffHunk",
    "FileDiff",
    # Annotation models
    "Annotation",
    "AnnotationRequest",
    "Side",
    # Run models
    "FileError",
    "FileReport",
    "PreviewRequest",
    "RunReport",
    "RunRequest",
]
