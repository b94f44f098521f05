"""Configuration for the skills loader, the chat model and MCP tool servers.

Settings are read from an optional JSON file with ``Skills``, ``Model`` and
``McpServers`` sections, then overridden by ``SKILL_DISCLOSURE_*``
environment variables.
"""

from __future__ import annotations

import json
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError


ENV_PREFIX = "SKILL_DISCLOSURE_"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


class ConfigError(ValueError):
    """Raised when a settings file or environment override is invalid."""


class SkillsConfig(BaseModel):
    """Where skills live and how the loader discovers and caches them."""

    base_path: str = "skills"
    skill_file_name: str = "SKILL.md"

    templates_directory: str = "templates"
    references_directory: str = "references"
    scripts_directory: str = "scripts"
    assets_directory: str = "assets"

    template_pattern: str = "*.template.*"
    reference_pattern: str = "*.md"
    script_pattern: str = "*.*"
    asset_pattern: str = "*.*"

    cache_duration_minutes: float = Field(default=5, ge=0)
    # Reads every resource inside load(); keep off unless skills are small.
    eager_load_resources: bool = False

    @property
    def cache_duration(self) -> timedelta:
        return timedelta(minutes=self.cache_duration_minutes)

    def resolve_base_path(self, root: Optional[Path] = None) -> Path:
        """Return the absolute skills directory.

        Relative paths are resolved against ``root`` (default: cwd).
        """
        base = Path(self.base_path).expanduser()
        if not base.is_absolute():
            base = (root or Path.cwd()) / base
        return base.resolve()


class ModelConfig(BaseModel):
    """Chat model connection settings."""

    model: str = "gpt-4o"
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class McpServerEntry(BaseModel):
    """One stdio MCP server to launch and connect to."""

    name: str
    command: str
    args: List[str] = Field(default_factory=list)
    env: Dict[str, str] = Field(default_factory=dict)
    enabled: bool = True


class AppConfig(BaseModel):
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    mcp_servers: List[McpServerEntry] = Field(default_factory=list)


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    overrides: Dict[str, Dict[str, Any]] = {"skills": {}, "model": {}}

    skills_keys = {
        "SKILLS_PATH": "base_path",
        "SKILL_FILE_NAME": "skill_file_name",
        "CACHE_MINUTES": "cache_duration_minutes",
    }
    for suffix, key in skills_keys.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value:
            overrides["skills"][key] = value

    eager = environ.get(ENV_PREFIX + "EAGER_LOAD")
    if eager:
        overrides["skills"]["eager_load_resources"] = eager.strip().lower() in _TRUE_VALUES

    model_keys = {
        "MODEL": "model",
        "BASE_URL": "base_url",
        "API_KEY": "api_key",
        "MAX_TOKENS": "max_tokens",
        "TEMPERATURE": "temperature",
    }
    for suffix, key in model_keys.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value:
            overrides["model"][key] = value

    return overrides


def load_config(path: Optional[str | Path] = None, environ: Optional[Dict[str, str]] = None) -> AppConfig:
    """Load settings from a JSON file and the environment.

    Args:
        path: Optional JSON settings file. A missing file means defaults.
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Validated AppConfig

    Raises:
        ConfigError: If the file is not valid JSON or a value fails validation
    """
    environ = dict(os.environ) if environ is None else environ

    data: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path).expanduser()
        if config_path.exists():
            try:
                data = json.loads(config_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Settings file {config_path} must contain a JSON object")

    skills = dict(data.get("Skills") or {})
    model = dict(data.get("Model") or {})
    servers_section = data.get("McpServers") or {}
    if isinstance(servers_section, dict):
        servers = servers_section.get("Servers", [])
    else:
        servers = servers_section

    overrides = _env_overrides(environ)
    skills.update(overrides["skills"])
    model.update(overrides["model"])

    try:
        return AppConfig(
            skills=SkillsConfig(**skills),
            model=ModelConfig(**model),
            mcp_servers=[McpServerEntry(**s) for s in servers],
        )
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
