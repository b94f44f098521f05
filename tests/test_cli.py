from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from skill_disclosure.cli import app

runner = CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Path:
    skill_dir = tmp_path / "skills" / "report-writer"
    (skill_dir / "templates").mkdir(parents=True)
    (skill_dir / "SKILL.md").write_text(
        "---\nname: Report Writer\ndescription: Writes reports\ntags:\n  - docs\n---\n\nUse the template.\n",
        encoding="utf-8",
    )
    (skill_dir / "templates" / "report.template.md").write_text("# Title", encoding="utf-8")

    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"Skills": {"base_path": str(tmp_path / "skills")}}), encoding="utf-8")
    return path


def test_list(settings: Path) -> None:
    result = runner.invoke(app, ["--config", str(settings), "list"])

    assert result.exit_code == 0
    assert "report-writer" in result.output


def test_list_by_unknown_tag(settings: Path) -> None:
    result = runner.invoke(app, ["--config", str(settings), "list", "--tag", "nope"])

    assert result.exit_code == 0
    assert "No skills found." in result.output


def test_show_unknown_skill_fails(settings: Path) -> None:
    result = runner.invoke(app, ["--config", str(settings), "show", "ghost"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_resource(settings: Path) -> None:
    result = runner.invoke(
        app, ["--config", str(settings), "resource", "report-writer", "templates/report.template.md"]
    )

    assert result.exit_code == 0
    assert "# Title" in result.output


def test_demo_walks_all_levels(settings: Path) -> None:
    result = runner.invoke(app, ["--config", str(settings), "demo"])

    assert result.exit_code == 0
    assert "LEVEL 1" in result.output
    assert "LEVEL 3" in result.output
    assert "Now loaded: True" in result.output


def test_invalid_config_exits(tmp_path: Path) -> None:
    bad = tmp_path / "settings.json"
    bad.write_text("{oops", encoding="utf-8")

    result = runner.invoke(app, ["--config", str(bad), "list"])

    assert result.exit_code == 2
