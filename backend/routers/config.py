"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from services.config_manager import ConfigManager

router = APIRouter()


class ConfigUpdateRequest(BaseModel):
    """Request to update persisted configuration"""

    repository: str | None = None
    api_url: str | None = None
    annotation_author: str | None = None
    comment_body_path: str | None = None
    default_comment_body: str | None = None
    label: str | None = None
    request_delay_seconds: float | None = None
    root_path: str | None = None
    routes_marker: str | None = None
    file_suffix: str | None = None
    excluded_segments: list[str] | None = None
    declaration_pattern: str | None = None
    check_removed_routes: bool | None = None
    fail_fast: bool | None = None


def mask_key(key: str) -> str:
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


@router.get("")
async def get_config() -> dict[str, Any]:
    """Get current configuration"""
    try:
        config = ConfigManager.get_instance().load()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))

    data = config.model_dump(mode="json")
    # Mask token for security
    data["github_token"] = mask_key(config.github_token)
    return data


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration"""
    config_manager = ConfigManager.get_instance()

    # Update only provided fields
    overrides = request.model_dump(exclude_none=True)
    try:
        config_manager.save_config(overrides)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": "Configuration updated"}
