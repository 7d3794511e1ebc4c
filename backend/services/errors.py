"""Error taxonomy for review runs"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for errors raised while reviewing a change"""

    kind = "review"

    def __init__(self, message: str, file_path: str | None = None):
        super().__init__(message)
        self.message = message
        self.file_path = file_path

    def __str__(self) -> str:
        if self.file_path:
            return f"{self.kind} error in {self.file_path}: {self.message}"
        return f"{self.kind} error: {self.message}"


class ReadError(ReviewError):
    """File or parent-revision content is unavailable"""

    kind = "read"


class ParseError(ReviewError):
    """A diff hunk header could not be parsed"""

    kind = "parse"


class ApiError(ReviewError):
    """An external collaborator call failed"""

    kind = "api"

    def __init__(self, message: str, status: int | None = None, file_path: str | None = None):
        super().__init__(message, file_path)
        self.status = status
