"""Data model for skill packages and their bundled resources.

Skills follow a progressive disclosure pattern:
1. Discovery: only frontmatter metadata and the resource inventory are loaded
2. Full load: the markdown instructions body is loaded as well
3. Resource load: individual resource contents are read on demand
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from itertools import chain
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


class ResourceType(str, Enum):
    """Category of a bundled file, derived from its containing folder."""

    TEMPLATE = "template"
    REFERENCE = "reference"
    SCRIPT = "script"
    ASSET = "asset"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(eq=False)
class SkillResource:
    """A file bundled with a skill.

    File metadata is captured during discovery; ``content`` stays ``None``
    until the loader reads it. The content slot is written at most once.
    """

    file_name: str
    file_path: Path
    relative_path: str
    resource_type: ResourceType
    file_size: int = 0
    last_modified: datetime = _EPOCH
    content: Optional[str] = None
    is_loaded: bool = False
    load_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    def set_content(self, content: str) -> str:
        """Fill the content slot once; later calls keep the first value."""
        if self.is_loaded:
            return self.content
        self.content = content
        self.is_loaded = True
        return content

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SkillResource):
            return NotImplemented
        return self.file_path == other.file_path

    def __hash__(self) -> int:
        return hash(self.file_path)

    def __str__(self) -> str:
        return f"{self.resource_type.label}: {self.relative_path}"


@dataclass
class SkillDefinition:
    """In-memory representation of one skill package (one SKILL.md)."""

    id: str
    name: str
    description: str
    file_path: Path
    base_directory: Path
    instructions: Optional[str] = None
    version: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_modified: datetime = _EPOCH
    templates: List[SkillResource] = field(default_factory=list)
    references: List[SkillResource] = field(default_factory=list)
    scripts: List[SkillResource] = field(default_factory=list)
    assets: List[SkillResource] = field(default_factory=list)
    is_fully_loaded: bool = False
    # Frontmatter fields not mapped to a named attribute
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_templates(self) -> bool:
        return len(self.templates) > 0

    @property
    def has_references(self) -> bool:
        return len(self.references) > 0

    @property
    def has_scripts(self) -> bool:
        return len(self.scripts) > 0

    @property
    def has_assets(self) -> bool:
        return len(self.assets) > 0

    @property
    def total_resource_count(self) -> int:
        return len(self.templates) + len(self.references) + len(self.scripts) + len(self.assets)

    @property
    def all_resources(self) -> Iterator[SkillResource]:
        """All resources in Template, Reference, Script, Asset order."""
        return chain(self.templates, self.references, self.scripts, self.assets)

    def resources_of(self, resource_type: ResourceType) -> List[SkillResource]:
        return {
            ResourceType.TEMPLATE: self.templates,
            ResourceType.REFERENCE: self.references,
            ResourceType.SCRIPT: self.scripts,
            ResourceType.ASSET: self.assets,
        }[resource_type]

    def has_tag(self, tag: str) -> bool:
        """Case-insensitive exact tag membership."""
        needle = tag.casefold()
        return any(t.casefold() == needle for t in self.tags)

    def find_resource(self, relative_path: str) -> Optional[SkillResource]:
        """Look up a resource by its path relative to the skill directory.

        Backslashes are treated as separators and the comparison ignores case.
        """
        wanted = relative_path.replace("\\", "/").casefold()
        for resource in self.all_resources:
            if resource.relative_path.replace("\\", "/").casefold() == wanted:
                return resource
        return None

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - {self.total_resource_count} resources"
