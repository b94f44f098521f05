"""
Skills MCP server

Exposes the skill catalog as MCP tools over stdio so any MCP-capable agent
can walk the disclosure levels itself.

Start with:
    skill-disclosure serve

Tools:
    - list_skills: Level 1 catalog, optionally filtered by tag
    - get_skill_details: Level 2 instructions and resource inventory
    - read_skill_resource: Level 3 content of one resource
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from skill_disclosure.config import AppConfig
from skill_disclosure.skills.core_tools import (
    list_skills_text,
    skill_details_text,
    skill_resource_text,
)
from skill_disclosure.skills.loader import SkillLoader

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = """Skills MCP Server - progressive disclosure of agent skills.

Available tools:
- list_skills: list skills with descriptions and resource counts
- get_skill_details: load a skill's full instructions and resource list
- read_skill_resource: read one bundled resource file

Start with list_skills, then load only the skill you need.
"""


def create_server(loader: SkillLoader, name: str = "skills") -> FastMCP:
    """Build a FastMCP server backed by a shared loader."""
    mcp = FastMCP(name=name, instructions=SERVER_INSTRUCTIONS)

    @mcp.tool(
        name="list_skills",
        description=(
            "Lists all available skills with their names, descriptions, and resource counts. "
            "Use this to discover what skills are available."
        ),
    )
    async def list_skills(tag: Optional[str] = None) -> str:
        return await list_skills_text(loader, tag)

    @mcp.tool(
        name="get_skill_details",
        description=(
            "Gets full details about a skill including its instructions and available resources. "
            "Use this to understand what a skill does before using it."
        ),
    )
    async def get_skill_details(skill_id: str) -> str:
        return await skill_details_text(loader, skill_id)

    @mcp.tool(
        name="read_skill_resource",
        description=(
            "Reads the content of a specific resource file from a skill. "
            "Use this to access templates, references, or other bundled files."
        ),
    )
    async def read_skill_resource(skill_id: str, resource_path: str) -> str:
        return await skill_resource_text(loader, skill_id, resource_path)

    return mcp


def run_server(config: AppConfig) -> None:
    """Run the skills server on stdio until the client disconnects."""
    loader = SkillLoader(config.skills)
    logger.info("Serving skills from %s", loader.base_path)
    create_server(loader).run()
