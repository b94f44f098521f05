"""Skill parser module for extracting YAML frontmatter and content from SKILL.md files.

Parsing is done via `python-frontmatter` (import name: `frontmatter`) with its
YAML handler only: the document must open with a bare ``---`` line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from frontmatter.default_handlers import YAMLHandler

from skill_disclosure.skills.models import SkillDefinition


# Frontmatter keys mapped onto SkillDefinition attributes
MAPPED_FIELDS = {"name", "description", "version", "author", "category", "tags"}

# Exactly three dashes; the stock handler also takes "----" and longer runs.
_yaml_handler = YAMLHandler(fm_boundary=re.compile(r"^---[ \t]*\r?$", re.MULTILINE))


class SkillParseError(ValueError):
    """Raised when a skill definition has no valid frontmatter block."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


@dataclass
class ParseOutcome:
    """Result of parsing one skill file: exactly one of skill/error is set."""

    skill: Optional[SkillDefinition] = None
    error: Optional[SkillParseError] = None

    @property
    def ok(self) -> bool:
        return self.skill is not None


def parse_frontmatter(text: str, path: Optional[Path] = None) -> Tuple[Dict[str, Any], str]:
    """Split a skill document into its metadata mapping and body.

    Args:
        text: Full text of the skill definition
        path: Source file, only used in error messages

    Returns:
        Tuple of (metadata, body) where body is the text after the closing
        delimiter with surrounding whitespace stripped

    Raises:
        SkillParseError: If the opening or closing delimiter is missing, the
            YAML is malformed, or it is not a non-empty mapping
    """
    # detect() is anchored at offset 0; frontmatter.loads() would strip first.
    if not _yaml_handler.detect(text):
        raise SkillParseError("missing opening '---' frontmatter delimiter", path)

    try:
        raw_metadata, body = _yaml_handler.split(text)
    except ValueError as e:
        raise SkillParseError("missing closing '---' frontmatter delimiter", path) from e

    try:
        metadata = _yaml_handler.load(raw_metadata)
    except yaml.YAMLError as e:
        raise SkillParseError(f"malformed YAML frontmatter: {e}", path) from e

    if not isinstance(metadata, dict) or not metadata:
        raise SkillParseError("frontmatter must be a non-empty mapping", path)

    return {str(k): v for k, v in metadata.items()}, body.strip()


def _scalar(metadata: Dict[str, Any], key: str) -> Optional[str]:
    value = metadata.get(key)
    if value is None:
        return None
    return str(value)


def _string_list(metadata: Dict[str, Any], key: str) -> List[str]:
    value = metadata.get(key)
    if isinstance(value, list):
        items = [str(item) for item in value if item is not None]
    elif isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    else:
        return []
    return [item for item in items if item]


def _utc_mtime(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)


def build_skill_definition(skill_file: Path, text: str, *, full: bool) -> SkillDefinition:
    """Create a SkillDefinition from the text of a SKILL.md file.

    Args:
        skill_file: Absolute path of the definition file
        text: File contents
        full: Populate ``instructions`` and mark the record fully loaded
            (Level 2). When False only metadata is kept (Level 1).

    Returns:
        A new SkillDefinition without resources

    Raises:
        SkillParseError: If the frontmatter cannot be parsed
        OSError: If the file cannot be stat'ed
    """
    metadata, body = parse_frontmatter(text, skill_file)

    base_directory = skill_file.parent
    skill_id = base_directory.name

    return SkillDefinition(
        id=skill_id,
        name=_scalar(metadata, "name") or skill_id,
        description=_scalar(metadata, "description") or "",
        instructions=body if full else None,
        version=_scalar(metadata, "version"),
        author=_scalar(metadata, "author"),
        category=_scalar(metadata, "category"),
        tags=_string_list(metadata, "tags"),
        file_path=skill_file,
        base_directory=base_directory,
        last_modified=_utc_mtime(skill_file),
        is_fully_loaded=full,
        metadata={k: v for k, v in metadata.items() if k not in MAPPED_FIELDS},
    )


def try_parse_skill(skill_file: Path, text: str, *, full: bool) -> ParseOutcome:
    """Like build_skill_definition() but returns the error instead of raising."""
    try:
        return ParseOutcome(skill=build_skill_definition(skill_file, text, full=full))
    except SkillParseError as e:
        return ParseOutcome(error=e)
    except OSError as e:
        return ParseOutcome(error=SkillParseError(f"cannot stat file: {e}", skill_file))

