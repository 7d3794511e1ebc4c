"""
GitHub Client - Pull request collaborators backed by the GitHub REST API
"""

from __future__ import annotations

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote

import aiohttp

from models.annotation import Annotation, AnnotationRequest, Side

from .config_manager import ReviewConfig
from .diff_generator import DiffGenerator
from .errors import ApiError, ReadError

RETRYABLE_STATUSES = (429, 503)
PER_PAGE = 100
LABEL_COLOR = "d93f0b"


def parse_annotation(data: dict[str, Any]) -> Annotation:
    """Convert a pull request review comment payload to an Annotation"""
    user = data.get("user") or {}
    line = data.get("line")
    if line is None:
        line = data.get("original_line")
    return Annotation(
        id=data.get("id"),
        file_path=data.get("path", ""),
        line=line,
        body=data.get("body") or "",
        author=user.get("login"),
        side=Side(data.get("side") or "RIGHT"),
    )


class GitHubClient:
    """Every review collaborator for one repository, over a single aiohttp session"""

    def __init__(self, config: ReviewConfig, session: aiohttp.ClientSession | None = None):
        if not config.repository:
            raise ValueError("GitHub repository not configured")
        self.config = config
        self.base_url = config.api_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._diff_generator = DiffGenerator()
        self._content_cache: dict[tuple[str, str], str] = {}
        self._revisions: dict[int, tuple[str, str]] = {}

    async def __aenter__(self) -> "GitHubClient":
        if self._session is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self.config.github_token:
                headers["Authorization"] = f"Bearer {self.config.github_token}"
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(headers=headers, timeout=timeout)
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ========== Request Helpers ==========

    def _repo_path(self, path: str) -> str:
        return f"{self.base_url}/repos/{self.config.repository}/{path.lstrip('/')}"

    @asynccontextmanager
    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        """HTTP request that raises ApiError on any non-2xx status"""
        if self._session is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")
        async with self._session.request(method, url, params=params, json=payload, headers=headers) as response:
            if response.status >= 300:
                error_text = await response.text()
                print(f"[GitHubClient] {method} {url} failed ({response.status}): {error_text}", file=sys.stderr)
                raise ApiError(f"GitHub API error ({response.status}): {error_text}", status=response.status)
            yield response

    async def _retry_with_backoff(self, operation):
        """Retry read operations on rate limits, overload and network errors"""
        max_retries = max(1, self.config.max_retries)
        for attempt in range(max_retries):
            try:
                return await operation()
            except ApiError as e:
                if e.status not in RETRYABLE_STATUSES or attempt == max_retries - 1:
                    raise
                wait_time = (2**attempt) * 5
                print(
                    f"[GitHubClient] HTTP {e.status}. Retrying in {wait_time}s... "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(wait_time)
            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                if attempt == max_retries - 1:
                    raise ApiError(f"Request failed after {max_retries} attempts: {e}") from e
                wait_time = (2**attempt) * 2
                print(
                    f"[GitHubClient] Network error: {e}. Retrying in {wait_time}s... "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(wait_time)

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        async def _execute_request():
            async with self._request("GET", url, params=params) as response:
                return await response.json()

        return await self._retry_with_backoff(_execute_request)

    async def _get_paginated(self, url: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = await self._get_json(url, params={"per_page": PER_PAGE, "page": page})
            items.extend(batch)
            if len(batch) < PER_PAGE:
                return items
            page += 1

    async def _post_json(self, url: str, payload: dict[str, Any]) -> Any:
        """POST without retry; failures are fatal to the run"""
        try:
            async with self._request("POST", url, payload=payload) as response:
                return await response.json()
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            raise ApiError(f"POST {url} failed: {e}") from e

    # ========== Change Listing / Content / Diff ==========

    async def get_revisions(self, change_id: int) -> tuple[str, str]:
        """(base SHA, head SHA) of a pull request"""
        if change_id not in self._revisions:
            data = await self._get_json(self._repo_path(f"pulls/{change_id}"))
            self._revisions[change_id] = (data["base"]["sha"], data["head"]["sha"])
        return self._revisions[change_id]

    async def list_changed_files(self, change_id: int) -> list[str]:
        """Changed file paths in listing order; removed files have no head content and are left out"""
        files = await self._get_paginated(self._repo_path(f"pulls/{change_id}/files"))
        return [item["filename"] for item in files if item.get("status") != "removed"]

    async def read_file(self, path: str, ref: str) -> str:
        key = (path, ref)
        if key in self._content_cache:
            return self._content_cache[key]

        url = self._repo_path(f"contents/{quote(path)}")

        async def _execute_request():
            headers = {"Accept": "application/vnd.github.raw+json"}
            async with self._request("GET", url, params={"ref": ref}, headers=headers) as response:
                return await response.text()

        try:
            content = await self._retry_with_backoff(_execute_request)
        except ApiError as e:
            if e.status == 404:
                raise ReadError(f"not found at {ref}", path) from e
            raise
        self._content_cache[key] = content
        return content

    async def diff(self, path: str, revisions: tuple[str, str]) -> str:
        """Zero-context diff of ``path`` between two revisions"""
        base_ref, head_ref = revisions
        try:
            original = await self.read_file(path, base_ref)
        except ReadError:
            original = ""  # added in this change
        new = await self.read_file(path, head_ref)
        return self._diff_generator.generate_diff(original, new, path, context_lines=0)

    # ========== Annotations ==========

    async def list_annotations(self, change_id: int) -> list[Annotation]:
        comments = await self._get_paginated(self._repo_path(f"pulls/{change_id}/comments"))
        return [parse_annotation(comment) for comment in comments]

    async def create_annotation(self, change_id: int, request: AnnotationRequest) -> int:
        _, head_sha = await self.get_revisions(change_id)
        payload = {
            "body": request.body,
            "commit_id": head_sha,
            "path": request.file_path,
            "line": request.line,
            "side": request.side.value,
        }
        try:
            data = await self._post_json(self._repo_path(f"pulls/{change_id}/comments"), payload)
        except ApiError as e:
            e.file_path = request.file_path
            raise
        return data["id"]

    # ========== Status Escalation ==========

    async def request_changes(self, change_id: int, body: str) -> None:
        await self._post_json(
            self._repo_path(f"pulls/{change_id}/reviews"),
            {"body": body, "event": "REQUEST_CHANGES"},
        )
        print(f"[GitHubClient] Requested changes on #{change_id}")

    async def ensure_label(self, change_id: int, name: str) -> None:
        try:
            await self._get_json(self._repo_path(f"labels/{quote(name, safe='')}"))
        except ApiError as e:
            if e.status != 404:
                raise
            await self._post_json(self._repo_path("labels"), {"name": name, "color": LABEL_COLOR})
            print(f"[GitHubClient] Created label '{name}'")
        await self._post_json(self._repo_path(f"issues/{change_id}/labels"), {"labels": [name]})
