"""Collaborator interfaces consumed by the review pipeline"""

from __future__ import annotations

from typing import Protocol

from models.annotation import Annotation, AnnotationRequest


class ChangeListingProvider(Protocol):
    async def list_changed_files(self, change_id: int) -> list[str]: ...


class ContentProvider(Protocol):
    async def read_file(self, path: str, ref: str) -> str: ...


class DiffProvider(Protocol):
    async def diff(self, path: str, revisions: tuple[str, str]) -> str: ...


class ReviewAnnotationService(Protocol):
    async def list_annotations(self, change_id: int) -> list[Annotation]: ...

    async def create_annotation(self, change_id: int, request: AnnotationRequest) -> int: ...


class StatusEscalationService(Protocol):
    async def request_changes(self, change_id: int, body: str) -> None: ...

    async def ensure_label(self, change_id: int, name: str) -> None: ...


class ReviewBackend(
    ChangeListingProvider,
    ContentProvider,
    DiffProvider,
    ReviewAnnotationService,
    StatusEscalationService,
    Protocol,
):
    """Everything a full review run talks to"""

    async def get_revisions(self, change_id: int) -> tuple[str, str]: ...
