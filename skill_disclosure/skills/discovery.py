"""Skill discovery module for finding SKILL.md files and bundled resources.

Only filesystem metadata is gathered here (paths, sizes, mtimes); resource
contents are never read during discovery.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from skill_disclosure.config import SkillsConfig
from skill_disclosure.skills.models import ResourceType, SkillDefinition, SkillResource


@dataclass(frozen=True)
class ResourceCategory:
    """A standard skill subfolder and the files it contributes."""

    resource_type: ResourceType
    folder: str
    pattern: str
    recursive: bool = False


def categories_from_config(config: SkillsConfig) -> List[ResourceCategory]:
    """Build the four resource categories in Template, Reference, Script, Asset order.

    Assets are searched recursively to support nested groupings such as
    ``assets/brand/``; the other folders are searched one level deep.
    """
    return [
        ResourceCategory(ResourceType.TEMPLATE, config.templates_directory, config.template_pattern),
        ResourceCategory(ResourceType.REFERENCE, config.references_directory, config.reference_pattern),
        ResourceCategory(ResourceType.SCRIPT, config.scripts_directory, config.script_pattern),
        ResourceCategory(ResourceType.ASSET, config.assets_directory, config.asset_pattern, recursive=True),
    ]


def find_skill_files(base_path: Path, skill_file_name: str = "SKILL.md") -> List[Path]:
    """Recursively find skill definition files under base_path.

    Args:
        base_path: Skills root directory
        skill_file_name: Definition file name to look for

    Returns:
        Sorted list of absolute paths; empty if base_path does not exist
    """
    if not base_path.is_dir():
        return []
    return sorted(p.resolve() for p in base_path.rglob(skill_file_name) if p.is_file())


def list_category_files(base_directory: Path, category: ResourceCategory) -> List[Path]:
    """List files of one category, sorted by path relative to the skill."""
    folder = base_directory / category.folder
    if not folder.is_dir():
        return []

    matches = folder.rglob(category.pattern) if category.recursive else folder.glob(category.pattern)
    files = [p for p in matches if p.is_file()]
    files.sort(key=lambda p: p.relative_to(base_directory).as_posix())
    return files


def make_resource(base_directory: Path, file_path: Path, resource_type: ResourceType) -> SkillResource:
    """Create an unloaded handle, capturing size and mtime via stat()."""
    stat = file_path.stat()
    return SkillResource(
        file_name=file_path.name,
        file_path=file_path,
        relative_path=file_path.relative_to(base_directory).as_posix(),
        resource_type=resource_type,
        file_size=stat.st_size,
        last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


def discover_resources(skill: SkillDefinition, categories: List[ResourceCategory]) -> None:
    """Populate the four resource collections of a skill.

    Existing collections are replaced, so every pass yields fresh unloaded
    handles. A missing category folder gives an empty collection.

    Args:
        skill: Skill whose ``base_directory`` is scanned
        categories: Category definitions, usually from categories_from_config()
    """
    found: Dict[ResourceType, List[SkillResource]] = {t: [] for t in ResourceType}

    for category in categories:
        for file_path in list_category_files(skill.base_directory, category):
            found[category.resource_type].append(
                make_resource(skill.base_directory, file_path, category.resource_type)
            )

    skill.templates = found[ResourceType.TEMPLATE]
    skill.references = found[ResourceType.REFERENCE]
    skill.scripts = found[ResourceType.SCRIPT]
    skill.assets = found[ResourceType.ASSET]
