"""Skill loader module for managing skill lifecycle and progressive disclosure.

The loader is the skill catalog for a process: construct one and pass it to
every consumer. It owns two caches keyed by skill id:

- metadata cache: Level 1 records from the last discovery pass
- full cache: Level 2 records produced by load()

Both are time-boxed by ``SkillsConfig.cache_duration``, counted from the last
completed discovery pass. Changes on disk inside that window are not seen
until it expires or invalidate_cache() is called.
"""
from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import aiofiles
import aiofiles.os

from skill_disclosure.config import SkillsConfig
from skill_disclosure.skills.discovery import (
    categories_from_config,
    discover_resources,
    find_skill_files,
)
from skill_disclosure.skills.models import SkillDefinition, SkillResource
from skill_disclosure.skills.parser import ParseOutcome, SkillParseError, try_parse_skill


logger = logging.getLogger(__name__)


class SkillLoader:
    """Discovers skills, promotes them to fully loaded, and reads resources lazily.

    Progressive disclosure levels:
    1. discover() - metadata and resource inventory, no instructions
    2. load() - instructions body and a fresh resource inventory
    3. load_resource_content() - one resource file's text

    Parse and I/O failures never escape these methods; they surface as
    ``None`` or as a skill missing from the catalog, and are logged.

    Example:
        ```python
        loader = SkillLoader(SkillsConfig(base_path="./skills"))
        skills = await loader.discover()
        skill = await loader.load(skills[0].id)
        template = skill.templates[0]
        text = await loader.load_resource_content(template)
        ```
    """

    def __init__(
        self,
        config: Optional[SkillsConfig] = None,
        root: Optional[Path] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize skill loader.

        Args:
            config: Loader settings (defaults to SkillsConfig())
            root: Directory a relative ``base_path`` is resolved against
                (default: current working directory)
            clock: Monotonic seconds source used for cache expiry
        """
        self.config = config or SkillsConfig()
        self.base_path = self.config.resolve_base_path(root)
        self._categories = categories_from_config(self.config)
        self._clock = clock

        self._metadata_cache: Dict[str, SkillDefinition] = {}
        self._full_cache: Dict[str, SkillDefinition] = {}
        # None means discovery has never completed
        self._last_discovery: Optional[float] = None

        self._discovery_lock = asyncio.Lock()
        self._load_locks: Dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Level 1: discovery
    # ------------------------------------------------------------------

    async def discover(self) -> List[SkillDefinition]:
        """Discover all skills, loading only their metadata.

        Returns the cached catalog while it is still valid. Otherwise a single
        discovery pass runs under an exclusive lock; callers that were waiting
        on the lock reuse its result. The new catalog is built separately and
        swapped in at the end, so a cancelled pass leaves the previous caches
        untouched.

        Returns:
            Metadata-only skill records in skill file path order; empty if
            the base directory does not exist
        """
        if self.is_cache_valid() and self._metadata_cache:
            return list(self._metadata_cache.values())

        async with self._discovery_lock:
            if self.is_cache_valid() and self._metadata_cache:
                logger.debug("Discovery already completed by a concurrent caller")
                return list(self._metadata_cache.values())

            catalog = await self._scan_catalog()

            self._metadata_cache = catalog
            self._full_cache = {}
            self._load_locks = {k: v for k, v in self._load_locks.items() if k in catalog}
            self._last_discovery = self._clock()

            logger.debug("Discovered %d skill(s) under %s", len(catalog), self.base_path)
            return list(catalog.values())

    async def _scan_catalog(self) -> Dict[str, SkillDefinition]:
        if not await aiofiles.os.path.isdir(self.base_path):
            logger.info("Skills directory not found: %s", self.base_path)
            return {}

        skill_files = await asyncio.to_thread(
            find_skill_files, self.base_path, self.config.skill_file_name
        )

        catalog: Dict[str, SkillDefinition] = {}
        for skill_file in skill_files:
            outcome = await self._read_skill(skill_file, full=False)
            if not outcome.ok:
                logger.warning("Skipping skill: %s", outcome.error)
                continue

            skill = outcome.skill
            if skill.id in catalog:
                logger.warning(
                    "Skipping skill at %s: id '%s' already provided by %s",
                    skill_file,
                    skill.id,
                    catalog[skill.id].file_path,
                )
                continue
            catalog[skill.id] = skill

        return catalog

    # ------------------------------------------------------------------
    # Level 2: full load
    # ------------------------------------------------------------------

    async def load(self, skill_id: str) -> Optional[SkillDefinition]:
        """Load a skill fully, including instructions and resource inventory.

        Args:
            skill_id: Skill id (its folder name)

        Returns:
            Fully loaded skill, or None if the id is unknown or its
            definition no longer parses
        """
        cached = self._full_cache.get(skill_id)
        if cached is not None and self.is_cache_valid():
            return cached

        await self.discover()
        if skill_id not in self._metadata_cache:
            logger.debug("Unknown skill id: %s", skill_id)
            return None

        # Locks exist only for catalog ids; discovery prunes the rest.
        lock = self._load_locks.setdefault(skill_id, asyncio.Lock())
        async with lock:
            cached = self._full_cache.get(skill_id)
            if cached is not None and self.is_cache_valid():
                return cached

            metadata = self._metadata_cache.get(skill_id)
            if metadata is None:
                logger.debug("Skill '%s' disappeared during rediscovery", skill_id)
                return None

            outcome = await self._read_skill(metadata.file_path, full=True)
            if not outcome.ok:
                logger.warning("Could not fully load skill '%s': %s", skill_id, outcome.error)
                return None

            skill = outcome.skill
            if self.config.eager_load_resources:
                for resource in list(skill.all_resources):
                    await self.load_resource_content(resource)

            self._full_cache[skill_id] = skill
            return skill

    # ------------------------------------------------------------------
    # Level 3: resource content
    # ------------------------------------------------------------------

    async def load_resource_content(self, resource: SkillResource) -> Optional[str]:
        """Read a resource's content on demand.

        The content is stored on the handle itself, so every holder of the
        same handle sees it. Once loaded, the file is not touched again.

        Args:
            resource: Resource handle from a loaded skill

        Returns:
            The file text, or None if the file is gone or unreadable
        """
        if resource.is_loaded:
            return resource.content

        async with resource.load_lock:
            if resource.is_loaded:
                return resource.content

            if not await aiofiles.os.path.isfile(resource.file_path):
                logger.warning("Resource file not found: %s", resource.file_path)
                return None

            try:
                async with aiofiles.open(resource.file_path, mode="r", encoding="utf-8-sig") as f:
                    content = await f.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read resource %s: %s", resource.file_path, e)
                return None

            return resource.set_content(content)

    # ------------------------------------------------------------------
    # Lookups and cache control
    # ------------------------------------------------------------------

    async def get_skill_metadata(self, skill_id: str) -> Optional[SkillDefinition]:
        """Get a skill without forcing a full load.

        Prefers the fully loaded record, then the metadata record, and only
        runs discovery when neither cache knows the id.
        """
        if skill_id in self._full_cache:
            return self._full_cache[skill_id]
        if skill_id in self._metadata_cache:
            return self._metadata_cache[skill_id]

        await self.discover()
        return self._metadata_cache.get(skill_id)

    async def find_skills_by_tag(self, tag: str) -> List[SkillDefinition]:
        """Discovered skills carrying ``tag`` (case-insensitive exact match)."""
        skills = await self.discover()
        return [skill for skill in skills if skill.has_tag(tag)]

    def invalidate_cache(self) -> None:
        """Drop both caches so the next discover() rescans the filesystem."""
        self._metadata_cache = {}
        self._full_cache = {}
        self._last_discovery = None
        self._load_locks = {}

    def is_cache_valid(self) -> bool:
        if self._last_discovery is None:
            return False
        elapsed = self._clock() - self._last_discovery
        return elapsed < self.config.cache_duration.total_seconds()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _read_skill(self, skill_file: Path, *, full: bool) -> ParseOutcome:
        """Parse a skill file and discover its resources."""
        try:
            async with aiofiles.open(skill_file, mode="r", encoding="utf-8-sig") as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            return ParseOutcome(error=SkillParseError(f"cannot read file: {e}", skill_file))

        outcome = try_parse_skill(skill_file, text, full=full)
        if not outcome.ok:
            return outcome

        try:
            await asyncio.to_thread(discover_resources, outcome.skill, self._categories)
        except OSError as e:
            return ParseOutcome(error=SkillParseError(f"cannot list resources: {e}", skill_file))

        return outcome
