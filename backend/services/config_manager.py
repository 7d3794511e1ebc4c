"""
Configuration Manager - Build the run configuration once at process start

Sources, lowest to highest precedence: built-in defaults, the JSON config
file, environment variables, and the GitHub Actions event payload.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError

from .block_scanner import DEFAULT_DECLARATION_PATTERN

ENV_PREFIX = "ROUTE_REVIEW_"

DEFAULT_COMMENT_BODY = (
    "Route change detected. Please confirm that API documentation, "
    "permissions and clients are updated for this route."
)


class ReviewConfig(BaseModel):
    """Immutable settings for one review run"""

    model_config = ConfigDict(frozen=True)

    # GitHub
    github_token: str = ""
    repository: str = ""  # owner/repo
    api_url: str = "https://api.github.com"
    pull_number: int | None = None
    annotation_author: str = "github-actions[bot]"
    timeout_seconds: int = 30
    max_retries: int = 3

    # Annotations
    comment_body_path: str | None = None
    default_comment_body: str = DEFAULT_COMMENT_BODY
    label: str = "route-change"
    request_delay_seconds: float = 1.0

    # File selection
    root_path: str = "service"
    routes_marker: str = "routes"
    file_suffix: str = ".js"
    excluded_segments: tuple[str, ...] = ("lambda",)

    # Scanning
    declaration_pattern: str = DEFAULT_DECLARATION_PATTERN
    check_removed_routes: bool = False
    fail_fast: bool = False

    def comment_body(self) -> str:
        """Body read from ``comment_body_path``, or the default when unreadable"""
        if not self.comment_body_path:
            return self.default_comment_body
        try:
            body = Path(self.comment_body_path).read_text(encoding="utf-8").strip()
        except OSError as e:
            print(f"[Config] Cannot read comment body {self.comment_body_path}: {e}", file=sys.stderr)
            return self.default_comment_body
        return body or self.default_comment_body


class ConfigManager:
    """Load and persist review configuration"""

    _instance = None

    def __init__(self, config_file: str | Path | None = None, environ: Mapping[str, str] | None = None):
        self._environ = os.environ if environ is None else environ

        # explicit path, then environment, then home directory
        if config_file is None:
            config_file = self._environ.get(f"{ENV_PREFIX}CONFIG") or os.path.expanduser(
                "~/.route_review/config.json"
            )
        self._config_file = Path(config_file)

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get process-wide instance (HTTP layer only)"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @property
    def config_file(self) -> Path:
        return self._config_file

    def load(self, **overrides: Any) -> ReviewConfig:
        """Merge every source into a validated ReviewConfig"""
        values: dict[str, Any] = {}
        values.update(self._load_file())
        values.update(self._load_environment())
        if values.get("pull_number") is None:
            pull_number = self._load_event_pull_number()
            if pull_number is not None:
                values["pull_number"] = pull_number
        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return ReviewConfig.model_validate(values)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def _load_file(self) -> dict[str, Any]:
        """Load overrides from the JSON config file"""
        if not self._config_file.exists():
            return {}

        try:
            with open(self._config_file, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"[Config] Error loading {self._config_file}: {e}", file=sys.stderr)
            return {}

        if not isinstance(data, dict):
            print(f"[Config] Ignoring {self._config_file}: expected a JSON object", file=sys.stderr)
            return {}
        return {key: value for key, value in data.items() if key in ReviewConfig.model_fields}

    def _load_environment(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for env_name, field in (
            ("GITHUB_TOKEN", "github_token"),
            ("GITHUB_REPOSITORY", "repository"),
            ("GITHUB_API_URL", "api_url"),
        ):
            if self._environ.get(env_name):
                values[field] = self._environ[env_name]

        for field in ReviewConfig.model_fields:
            raw = self._environ.get(f"{ENV_PREFIX}{field.upper()}")
            if raw is None:
                continue
            if field == "excluded_segments":
                values[field] = tuple(part.strip() for part in raw.split(",") if part.strip())
            else:
                values[field] = raw
        return values

    def _load_event_pull_number(self) -> int | None:
        """Pull request number from the Actions event payload, if any"""
        event_path = self._environ.get("GITHUB_EVENT_PATH")
        if not event_path:
            return None
        try:
            with open(event_path, encoding="utf-8") as f:
                event = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"[Config] Cannot read event payload {event_path}: {e}", file=sys.stderr)
            return None
        pull_request = event.get("pull_request") or {}
        return pull_request.get("number")

    def save_config(self, overrides: dict[str, Any]) -> dict[str, Any]:
        """Merge overrides into the JSON config file and return its new content"""
        unknown = sorted(set(overrides) - set(ReviewConfig.model_fields))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        data = self._load_file()
        data.update(overrides)
        ReviewConfig.model_validate(data)

        self._config_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self._config_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")
        return data
