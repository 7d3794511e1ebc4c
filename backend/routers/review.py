"""Review API endpoints"""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from models.review import FileReport, PreviewRequest, RunReport, RunRequest
from services.config_manager import ConfigManager, ReviewConfig
from services.errors import ApiError, ReviewError
from services.github_client import GitHubClient
from services.review_runner import ReviewRunner

router = APIRouter()


def get_review_config() -> ReviewConfig:
    """Configuration for requests served by this process"""
    try:
        return ConfigManager.get_instance().load()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_backend_factory() -> Callable[[ReviewConfig], GitHubClient]:
    """Factory for the collaborator backend used by /run"""
    return GitHubClient


@router.post("/preview", response_model=FileReport)
async def preview(
    request: PreviewRequest,
    config: ReviewConfig = Depends(get_review_config),
) -> FileReport:
    """Plan annotations for one file without contacting GitHub"""
    runner = ReviewRunner(config)
    try:
        return runner.preview_file(
            request.file_path,
            request.content,
            request.diff,
            request.existing,
            request.parent_content,
        )
    except ReviewError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/run", response_model=RunReport)
async def run_review(
    request: RunRequest,
    config: ReviewConfig = Depends(get_review_config),
    backend_factory: Callable[[ReviewConfig], GitHubClient] = Depends(get_backend_factory),
) -> RunReport:
    """Review a pull request and create annotations for changed routes"""
    pull_number = request.pull_number or config.pull_number
    if pull_number is None:
        raise HTTPException(status_code=400, detail="Pull request number is required")

    try:
        async with backend_factory(config) as backend:
            runner = ReviewRunner(config, backend)
            return await runner.run(pull_number, dry_run=request.dry_run)
    except ApiError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ReviewError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
