"""Skills package: skill records, frontmatter parsing, discovery and the loader."""

from skill_disclosure.skills.models import (
    ResourceType,
    SkillResource,
    SkillDefinition,
)
from skill_disclosure.skills.parser import (
    SkillParseError,
    ParseOutcome,
    parse_frontmatter,
    build_skill_definition,
    try_parse_skill,
)
from skill_disclosure.skills.discovery import (
    ResourceCategory,
    categories_from_config,
    find_skill_files,
    discover_resources,
)
from skill_disclosure.skills.loader import SkillLoader

__all__ = [
    "ResourceType",
    "SkillResource",
    "SkillDefinition",
    "SkillParseError",
    "ParseOutcome",
    "parse_frontmatter",
    "build_skill_definition",
    "try_parse_skill",
    "ResourceCategory",
    "categories_from_config",
    "find_skill_files",
    "discover_resources",
    "SkillLoader",
]
