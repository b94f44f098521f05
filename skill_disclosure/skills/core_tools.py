"""Core tools for progressive disclosure.

These tools give the model a stable schema for walking the disclosure levels
of a shared SkillLoader:
- list_skills(tag): Level 1 catalog
- get_skill_details(skill_id): Level 2 instructions and resource inventory
- read_skill_resource(skill_id, resource_path): Level 3 content of one file
"""

from typing import List, Optional

from langchain_core.tools import BaseTool, StructuredTool

from skill_disclosure.skills.formatting import (
    format_missing_resource,
    format_resource_content,
    format_skill_details,
    format_skill_list,
)
from skill_disclosure.skills.loader import SkillLoader


async def list_skills_text(loader: SkillLoader, tag: Optional[str] = None) -> str:
    if tag:
        skills = await loader.find_skills_by_tag(tag)
    else:
        skills = await loader.discover()
    return format_skill_list(skills, tag)


async def skill_details_text(loader: SkillLoader, skill_id: str) -> str:
    skill = await loader.load(skill_id)
    if skill is None:
        return f"Skill '{skill_id}' not found. Use `list_skills` to see available skills."
    return format_skill_details(skill)


async def skill_resource_text(loader: SkillLoader, skill_id: str, resource_path: str) -> str:
    skill = await loader.load(skill_id)
    if skill is None:
        return f"Skill '{skill_id}' not found."

    resource = skill.find_resource(resource_path)
    if resource is None:
        return format_missing_resource(skill, resource_path)

    content = await loader.load_resource_content(resource)
    if content is None:
        return f"Could not read content of resource '{resource_path}'."

    return format_resource_content(resource, content)


def create_skill_tools(loader: SkillLoader) -> List[BaseTool]:
    """Create LangChain tools bound to a loader.

    Args:
        loader: Shared skill catalog

    Returns:
        The list_skills, get_skill_details and read_skill_resource tools
    """

    async def list_skills(tag: Optional[str] = None) -> str:
        """Lists all available skills with their names, descriptions, and resource counts.

        Args:
            tag: Optional tag to filter skills by.
        """
        return await list_skills_text(loader, tag)

    async def get_skill_details(skill_id: str) -> str:
        """Gets full details about a skill including its instructions and available resources.

        Args:
            skill_id: The skill ID (folder name) to get details for.
        """
        return await skill_details_text(loader, skill_id)

    async def read_skill_resource(skill_id: str, resource_path: str) -> str:
        """Reads the content of a specific resource file from a skill.

        Args:
            skill_id: The skill ID containing the resource.
            resource_path: The relative path to the resource (e.g., 'templates/report.template.md').
        """
        return await skill_resource_text(loader, skill_id, resource_path)

    return [
        StructuredTool.from_function(coroutine=fn, parse_docstring=True)
        for fn in (list_skills, get_skill_details, read_skill_resource)
    ]
