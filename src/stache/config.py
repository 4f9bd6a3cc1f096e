"""Settings for stache.

Settings come from the environment and can be overridden by a YAML file:

    partial_dir: templates/partials
    partial_extensions: [".mustache", ".stache", ".html"]
    escape: true
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from stache.exceptions import StacheError

DEFAULT_EXTENSIONS = [".mustache", ".stache"]


def _default_partial_dir() -> str | None:
    return os.environ.get("STACHE_PARTIAL_DIR") or os.environ.get("CWD") or None


class StacheSettings(BaseModel):
    """Parser and renderer settings."""

    model_config = {"extra": "forbid"}

    partial_dir: str | None = Field(
        default_factory=_default_partial_dir,
        description="Base directory for partials of templates parsed from strings",
    )
    partial_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Suffixes tried after the bare partial name",
    )
    escape: bool = Field(
        default=True, description="HTML-escape {{name}} substitutions"
    )

    @field_validator("partial_extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        """Make sure every extension starts with a dot."""
        return [ext if ext.startswith(".") else f".{ext}" for ext in value if ext]


def load_settings(path: Path | None = None) -> StacheSettings:
    """Load settings from the environment, overridden by ``path`` if given."""
    if path is None:
        return StacheSettings()

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise StacheError(f"Invalid config {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise StacheError(
            f"Invalid config {path}: expected a mapping, got {type(data).__name__}"
        )

    return StacheSettings(**data)
