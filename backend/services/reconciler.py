"""
Annotation Reconciler - Plan and create annotations without duplicating
the ones a previous run already left on the change
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

from models.annotation import Annotation, AnnotationRequest, Side
from models.diff import DiffHunk
from models.route import CandidatePair

from .diff_parser import to_original_line
from .providers import ReviewAnnotationService


def anchor_line(hunks: Sequence[DiffHunk], selected_line: int) -> int:
    """Parent-side position of a head line, used to recognise existing annotations"""
    mapped = to_original_line(list(hunks), selected_line)
    if mapped is None or mapped < 1:
        return selected_line
    return mapped


class AnnotationReconciler:
    """Deduplicate candidate lines against existing annotations"""

    def __init__(self, body: str, request_delay_seconds: float = 1.0):
        self.body = body
        self.request_delay_seconds = request_delay_seconds

    def plan(
        self,
        file_path: str,
        candidates: Iterable[CandidatePair],
        hunks: Sequence[DiffHunk],
        existing: Iterable[Annotation],
        side: Side = Side.RIGHT,
    ) -> tuple[list[AnnotationRequest], int]:
        """Return (requests to create, number of skipped duplicates).

        Requests are posted at the candidate's own line. Duplicates are
        detected on the parent side: head-side lines of both candidates and
        existing annotations are mapped through ``hunks`` before comparing.
        """
        seen = {
            (file_path, self._original_line(hunks, annotation.line, annotation.side), annotation.side)
            for annotation in existing
            if annotation.file_path == file_path and annotation.line is not None
        }
        requests: list[AnnotationRequest] = []
        skipped = 0

        for candidate in candidates:
            request = AnnotationRequest(
                file_path=file_path,
                line=candidate.selected_line,
                body=self.body,
                side=side,
                original_line=self._original_line(hunks, candidate.selected_line, side),
            )
            if request.key() in seen:
                skipped += 1
                continue
            seen.add(request.key())
            requests.append(request)

        return requests, skipped

    @staticmethod
    def _original_line(hunks: Sequence[DiffHunk], line: int, side: Side) -> int:
        # LEFT-side lines are already in parent coordinates
        if side == Side.LEFT:
            return line
        return anchor_line(hunks, line)

    async def apply(
        self,
        service: ReviewAnnotationService,
        change_id: int,
        requests: Sequence[AnnotationRequest],
    ) -> list[int]:
        """Create the planned annotations one at a time.

        Consecutive requests for the same file are paced by
        ``request_delay_seconds``. Failures propagate without retry.
        """
        created: list[int] = []
        previous_path = None
        for request in requests:
            if previous_path == request.file_path and self.request_delay_seconds > 0:
                await asyncio.sleep(self.request_delay_seconds)
            annotation_id = await service.create_annotation(change_id, request)
            print(f"[Reconciler] Created annotation {annotation_id} on {request.file_path}:{request.line}")
            created.append(annotation_id)
            previous_path = request.file_path
        return created
