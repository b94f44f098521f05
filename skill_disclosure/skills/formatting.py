"""Markdown renderings of skills for tool results and prompts."""
from __future__ import annotations

from typing import List, Optional

from skill_disclosure.skills.models import ResourceType, SkillDefinition, SkillResource


_SECTION_TITLES = {
    ResourceType.TEMPLATE: "Templates",
    ResourceType.REFERENCE: "References",
    ResourceType.SCRIPT: "Scripts",
    ResourceType.ASSET: "Assets",
}


def format_skill_list(skills: List[SkillDefinition], tag: Optional[str] = None) -> str:
    """Render the Level 1 catalog: names, descriptions and resource counts."""
    if not skills:
        if tag:
            return f"No skills found with tag '{tag}'."
        return "No skills found. Ensure the skills folder contains SKILL.md files."

    lines = [f"# Available Skills ({len(skills)})", ""]
    for skill in skills:
        lines.append(f"## {skill.name} (`{skill.id}`)")
        lines.append("")
        lines.append(skill.description)
        lines.append("")
        if skill.tags:
            lines.append(f"**Tags:** {', '.join(skill.tags)}")
        lines.append(f"**Resources:** {skill.total_resource_count} files")
        for resource_type, title in _SECTION_TITLES.items():
            lines.append(f"  - {title}: {len(skill.resources_of(resource_type))}")
        lines.append("")

    lines.append("---")
    lines.append("Use `get_skill_details` to load full instructions for a specific skill.")
    return "\n".join(lines) + "\n"


def _resource_line(resource: SkillResource) -> str:
    return f"- `{resource.relative_path}` ({resource.file_size} bytes)"


def format_skill_details(skill: SkillDefinition) -> str:
    """Render a fully loaded skill: metadata, instructions and resource inventory."""
    lines = [
        f"# {skill.name}",
        "",
        f"**ID:** {skill.id}",
        f"**Version:** {skill.version or 'not specified'}",
        f"**Author:** {skill.author or 'not specified'}",
        f"**Category:** {skill.category or 'not specified'}",
    ]
    if skill.tags:
        lines.append(f"**Tags:** {', '.join(skill.tags)}")

    lines += ["", "## Description", "", skill.description, ""]
    lines += ["## Instructions", "", skill.instructions or "No instructions available.", ""]

    if skill.total_resource_count > 0:
        lines += ["## Available Resources", ""]
        for resource_type, title in _SECTION_TITLES.items():
            resources = skill.resources_of(resource_type)
            if not resources:
                continue
            lines.append(f"### {title}")
            lines.extend(_resource_line(r) for r in resources)
            lines.append("")
        lines.append("---")
        lines.append("Use `read_skill_resource` to read resource contents.")

    return "\n".join(lines) + "\n"


def format_resource_content(resource: SkillResource, content: str) -> str:
    return f"# {resource.file_name}\n\n```\n{content}\n```"


def format_missing_resource(skill: SkillDefinition, resource_path: str) -> str:
    available = "\n".join(f"  - {r.relative_path}" for r in skill.all_resources)
    return (
        f"Resource '{resource_path}' not found in skill '{skill.id}'.\n\n"
        f"Available resources:\n{available}"
    )


def build_system_prompt(skill: SkillDefinition) -> str:
    """Build the system prompt used when executing a skill with a chat model.

    Args:
        skill: Fully loaded skill

    Returns:
        Markdown prompt with the skill's description, instructions and a
        list of bundled resources
    """
    lines = [f"# {skill.name}", "", skill.description, ""]

    if skill.instructions:
        lines += ["## Instructions", "", skill.instructions]

    if skill.total_resource_count > 0:
        lines += ["", "## Available Resources", ""]
        lines.append("The following resources are bundled with this skill:")
        lines.extend(f"- {r.resource_type.label}: {r.relative_path}" for r in skill.all_resources)

    return "\n".join(lines) + "\n"
