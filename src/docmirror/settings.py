"""Settings for docmirror runs.

Values come from (lowest to highest precedence) field defaults, a ``.env``
file, ``DOCMIRROR_*`` environment variables, and explicit keyword
arguments (the CLI passes its options this way).

Examples:
    >>> settings = DocMirrorSettings(source_suffix=".pyi")
    >>> settings.output_suffix
    '.html'
    >>> settings = DocMirrorSettings.from_yaml(Path("docmirror.yaml"))

Tags:
    settings, configuration, pydantic, environment, docmirror
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SKIP_PATTERNS = ["__pycache__", ".git", ".venv", "venv", "node_modules"]


class DocMirrorSettings(BaseSettings):
    """Configuration for one documentation run.

    Fields
    ──────
    source_suffix        : Suffix of documentable source files
    output_suffix        : Suffix substituted on generated pages
    skip_patterns        : fnmatch patterns; matching path parts are not walked
    include_private      : Document ``_private`` names when no ``__all__`` exists
    attribute_docstrings : Read the string literal after an assignment as its comment
    log_level            : Structlog log level
    json_logs            : JSON logs (True), console (False), auto-detect (None)
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCMIRROR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Files ────────────────────────────────────────────────────
    source_suffix: str = ".py"
    output_suffix: str = ".html"
    skip_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_PATTERNS))

    # ── Extraction ───────────────────────────────────────────────
    include_private: bool = False
    attribute_docstrings: bool = True

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("source_suffix", "output_suffix")
    @classmethod
    def _dotted_suffix(cls, value: str) -> str:
        if not value:
            raise ValueError("suffix must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return value

    @classmethod
    def from_yaml(cls, yaml_path: Path, **overrides: Any) -> "DocMirrorSettings":
        """Load settings from a YAML file.

        Args:
            yaml_path: Path to YAML configuration file
            **overrides: Values taking precedence over the file

        Returns:
            DocMirrorSettings instance
        """
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        data.update(overrides)
        return cls(**data)
