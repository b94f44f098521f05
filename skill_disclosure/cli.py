"""
skill-disclosure CLI

Typer commands for browsing the skill catalog level by level, serving it over
MCP, and executing a skill with a chat model.
"""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skill_disclosure.config import AppConfig, ConfigError, load_config
from skill_disclosure.skills.core_tools import create_skill_tools, skill_resource_text
from skill_disclosure.skills.formatting import format_skill_details
from skill_disclosure.skills.loader import SkillLoader


app = typer.Typer(
    name="skill-disclosure",
    help="Agent skills loader with progressive disclosure",
    add_completion=False,
)

console = Console()

PREVIEW_CHARS = 500


def _preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj["config"]


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="JSON settings file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Agent skills loader with progressive disclosure."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = {"config": load_config(config)}
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)


@app.command("list")
def list_command(
    ctx: typer.Context,
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only skills with this tag"),
):
    """List discovered skills (metadata only)."""

    async def _list():
        loader = SkillLoader(_config(ctx).skills)
        skills = await (loader.find_skills_by_tag(tag) if tag else loader.discover())

        if not skills:
            console.print("[yellow]No skills found.[/yellow]")
            return

        table = Table(title=f"Skills in {loader.base_path}")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Description")
        table.add_column("Tags")
        table.add_column("Resources", justify="right")
        for skill in skills:
            table.add_row(
                escape(skill.id),
                escape(skill.name),
                escape(skill.description),
                escape(", ".join(skill.tags)),
                str(skill.total_resource_count),
            )
        console.print(table)

    asyncio.run(_list())


@app.command()
def show(
    ctx: typer.Context,
    skill_id: str = typer.Argument(..., help="Skill id (folder name)"),
):
    """Load a skill fully and print its instructions and resources."""

    async def _show():
        loader = SkillLoader(_config(ctx).skills)
        skill = await loader.load(skill_id)
        if skill is None:
            console.print(f"[red]Skill '{escape(skill_id)}' not found.[/red]")
            raise typer.Exit(code=1)
        console.print(Markdown(format_skill_details(skill)))

    asyncio.run(_show())


@app.command()
def resource(
    ctx: typer.Context,
    skill_id: str = typer.Argument(..., help="Skill id (folder name)"),
    path: str = typer.Argument(..., help="Resource path relative to the skill folder"),
):
    """Print the content of one skill resource."""

    async def _resource():
        loader = SkillLoader(_config(ctx).skills)
        console.print(await skill_resource_text(loader, skill_id, path), markup=False)

    asyncio.run(_resource())


@app.command()
def demo(ctx: typer.Context):
    """Walk through the three disclosure levels on the first discovered skill."""

    async def _demo():
        settings = _config(ctx).skills
        loader = SkillLoader(settings)

        console.print(f"Skills base path: {loader.base_path}")
        console.print(f"Skill file name:  {settings.skill_file_name}")
        console.print(f"Cache duration:   {settings.cache_duration_minutes} minutes\n")

        console.print(Panel("LEVEL 1: Discovery (metadata only)", style="bold"))
        skills = await loader.discover()
        if not skills:
            console.print("No skills found. Expected structure:")
            console.print("  skills/\n    └── your-skill/\n        └── SKILL.md")
            return

        for skill in skills:
            console.print(f"[cyan]{escape(skill.name)}[/cyan] ({escape(skill.id)})")
            console.print(f"  {skill.description}", markup=False)
            console.print(f"  Tags: [{', '.join(skill.tags)}]", markup=False)
            console.print(f"  Resources: {skill.total_resource_count} files")
            console.print(f"  Instructions loaded: {skill.instructions is not None}")
            console.print(f"  Fully loaded: {skill.is_fully_loaded}\n")

        first = skills[0]
        console.print(Panel(f"LEVEL 2: Full load of '{escape(first.name)}'", style="bold"))
        loaded = await loader.load(first.id)
        if loaded is None:
            console.print(f"[red]Could not load '{escape(first.id)}'.[/red]")
            return

        console.print(f"Version: {loaded.version or 'not specified'}")
        console.print(f"Fully loaded: {loaded.is_fully_loaded}")
        console.print(f"Instructions length: {len(loaded.instructions or '')} characters\n")
        console.print(_preview(loaded.instructions or ""), markup=False)
        console.print()
        for res in loaded.all_resources:
            status = "[LOADED]" if res.is_loaded else "[pending]"
            console.print(f"  {res.resource_type.label:<10} {res.relative_path:<40} {status}", markup=False)
        console.print()

        console.print(Panel("LEVEL 3: Resource loading (on demand)", style="bold"))
        if not loaded.templates:
            console.print(f"No templates found for {loaded.name} skill.")
            return

        template = loaded.templates[0]
        console.print(f"Loading: {template.relative_path} ({template.file_size} bytes)")
        console.print(f"Was loaded: {template.is_loaded}")
        content = await loader.load_resource_content(template)
        console.print(f"Now loaded: {template.is_loaded}")
        console.print(f"Content length: {len(content or '')} characters\n")
        if content is not None:
            console.print(_preview(content), markup=False)

    asyncio.run(_demo())


@app.command()
def serve(ctx: typer.Context):
    """Serve the skill catalog as an MCP server over stdio."""
    from skill_disclosure.server import run_server

    run_server(_config(ctx))


@app.command()
def run(
    ctx: typer.Context,
    skill_id: str = typer.Argument(..., help="Skill id (folder name)"),
    user_input: str = typer.Argument(..., help="Request to execute with the skill"),
    max_turns: int = typer.Option(10, "--max-turns", help="Maximum model calls"),
):
    """Execute a skill with the configured chat model and MCP tool servers."""
    from skill_disclosure.executor import SkillExecutor, create_chat_model
    from skill_disclosure.tools.mcp_client import McpClientService
    from skill_disclosure.tools.router import ToolRouter

    settings = _config(ctx)

    async def _run():
        loader = SkillLoader(settings.skills)
        async with McpClientService(settings.mcp_servers) as mcp:
            servers = mcp.get_connected_server_names()
            if servers:
                console.print(f"Connected MCP servers: {', '.join(servers)}")

            router = ToolRouter(local_tools=create_skill_tools(loader), mcp=mcp)
            executor = SkillExecutor(create_chat_model(settings.model), router)

            with console.status("[bold green]Executing skill...", spinner="dots"):
                result = await executor.execute_by_id(loader, skill_id, user_input, max_turns=max_turns)

        for record in result.tool_calls:
            console.print(f"[dim]tool {escape(record.tool_name)}({escape(record.arguments)}) -> {escape(record.result)}[/dim]")

        if not result.success:
            console.print(f"[red]Error: {escape(result.error or '')}[/red]")
            if result.response:
                console.print(result.response, markup=False)
            raise typer.Exit(code=1)

        console.print(Markdown(result.response))
        console.print(f"[dim]{result.turn_count} turn(s), {len(result.tool_calls)} tool call(s)[/dim]")

    asyncio.run(_run())


if __name__ == "__main__":
    app()
