"""In-memory collaborators for review tests"""

from __future__ import annotations

from models.annotation import Annotation, AnnotationRequest
from services.diff_generator import DiffGenerator
from services.errors import ApiError, ReadError

BASE_REF = "base-sha"
HEAD_REF = "head-sha"
BOT = "github-actions[bot]"


class FakeBackend:
    """Pull request backed by dicts of file contents"""

    def __init__(self, files, annotations=None, fail_create_after=None):
        # files: path -> (base content or None, head content)
        self.files = files
        self.annotations: list[Annotation] = list(annotations or [])
        self.created: list[AnnotationRequest] = []
        self.reviews: list[str] = []
        self.labels: list[str] = []
        self.diff_overrides: dict[str, str] = {}
        self.fail_create_after = fail_create_after

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def get_revisions(self, change_id):
        return BASE_REF, HEAD_REF

    async def list_changed_files(self, change_id):
        return list(self.files)

    async def read_file(self, path, ref):
        base, head = self.files.get(path, (None, None))
        content = base if ref == BASE_REF else head
        if content is None:
            raise ReadError(f"not found at {ref}", path)
        return content

    async def diff(self, path, revisions):
        if path in self.diff_overrides:
            return self.diff_overrides[path]
        base, head = self.files[path]
        return DiffGenerator().generate_diff(base or "", head, path)

    async def list_annotations(self, change_id):
        return list(self.annotations)

    async def create_annotation(self, change_id, request):
        if self.fail_create_after is not None and len(self.created) >= self.fail_create_after:
            raise ApiError("GitHub API error (422): Validation Failed", status=422, file_path=request.file_path)
        self.created.append(request)
        annotation_id = len(self.annotations) + 1
        self.annotations.append(
            Annotation(
                id=annotation_id,
                file_path=request.file_path,
                line=request.line,
                body=request.body,
                author=BOT,
                side=request.side,
            )
        )
        return annotation_id

    async def request_changes(self, change_id, body):
        self.reviews.append(body)

    async def ensure_label(self, change_id, name):
        if name not in self.labels:
            self.labels.append(name)


ROUTE_FILE = "service/users/routes/index.js"

BASE = """const express = require('express');
const router = express.Router();

router.get('/users', listUsers);
router.delete('/users/:id', removeUser);

module.exports = router;
"""

HEAD = """const express = require('express');
const router = express.Router();

router.get('/users', listUsers);
router.post('/users', createUser);
router.delete('/users/:id', removeUser);

module.exports = router;
"""
