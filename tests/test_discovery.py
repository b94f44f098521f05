from __future__ import annotations

from pathlib import Path

from skill_disclosure.config import SkillsConfig
from skill_disclosure.skills.discovery import (
    categories_from_config,
    discover_resources,
    find_skill_files,
)
from skill_disclosure.skills.models import ResourceType, SkillDefinition


def _touch(path: Path, text: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _skill(base: Path) -> SkillDefinition:
    return SkillDefinition(
        id=base.name,
        name=base.name,
        description="",
        file_path=base / "SKILL.md",
        base_directory=base,
    )


def test_find_skill_files_recurses_and_sorts(tmp_path: Path) -> None:
    root = tmp_path / "skills"
    _touch(root / "zeta" / "SKILL.md")
    _touch(root / "alpha" / "SKILL.md")
    _touch(root / "group" / "nested" / "SKILL.md")
    _touch(root / "no-skill" / "README.md")

    found = find_skill_files(root)

    assert [p.parent.name for p in found] == ["alpha", "nested", "zeta"]
    assert all(p.is_absolute() for p in found)


def test_find_skill_files_missing_directory(tmp_path: Path) -> None:
    assert find_skill_files(tmp_path / "does-not-exist") == []


def test_resources_are_categorized_by_folder(tmp_path: Path) -> None:
    base = tmp_path / "report-writer"
    _touch(base / "SKILL.md")
    _touch(base / "templates" / "report.template.md", "# {{title}}")
    _touch(base / "templates" / "notes.txt")
    _touch(base / "references" / "guide.md", "guide")
    _touch(base / "scripts" / "build.py", "print('hi')")
    _touch(base / "assets" / "img" / "logo.png", "png")

    skill = _skill(base)
    discover_resources(skill, categories_from_config(SkillsConfig()))

    assert [r.relative_path for r in skill.templates] == ["templates/report.template.md"]
    assert [r.relative_path for r in skill.references] == ["references/guide.md"]
    assert [r.relative_path for r in skill.scripts] == ["scripts/build.py"]
    assert [r.relative_path for r in skill.assets] == ["assets/img/logo.png"]

    logo = skill.assets[0]
    assert logo.file_name == "logo.png"
    assert logo.resource_type is ResourceType.ASSET
    assert logo.file_size == 3
    assert logo.is_loaded is False
    assert logo.content is None


def test_non_asset_folders_are_not_recursive(tmp_path: Path) -> None:
    base = tmp_path / "s"
    _touch(base / "references" / "deep" / "hidden.md")

    skill = _skill(base)
    discover_resources(skill, categories_from_config(SkillsConfig()))

    assert skill.references == []


def test_custom_folder_names_and_patterns(tmp_path: Path) -> None:
    base = tmp_path / "s"
    _touch(base / "tpl" / "letter.txt")
    config = SkillsConfig(templates_directory="tpl", template_pattern="*.txt")

    skill = _skill(base)
    discover_resources(skill, categories_from_config(config))

    assert [r.relative_path for r in skill.templates] == ["tpl/letter.txt"]


def test_rediscovery_replaces_handles(tmp_path: Path) -> None:
    base = tmp_path / "s"
    _touch(base / "references" / "a.md")
    categories = categories_from_config(SkillsConfig())

    skill = _skill(base)
    discover_resources(skill, categories)
    first = skill.references[0]
    first.set_content("cached")

    _touch(base / "references" / "b.md")
    discover_resources(skill, categories)

    assert [r.relative_path for r in skill.references] == ["references/a.md", "references/b.md"]
    assert skill.references[0] is not first
    assert skill.references[0].is_loaded is False


def test_find_resource_ignores_case_and_backslashes(tmp_path: Path) -> None:
    base = tmp_path / "s"
    _touch(base / "assets" / "img" / "Logo.png")

    skill = _skill(base)
    discover_resources(skill, categories_from_config(SkillsConfig()))

    assert skill.find_resource("assets\\img\\logo.PNG") is skill.assets[0]
    assert skill.find_resource("assets/img/missing.png") is None
    assert str(skill.assets[0]) == "Asset: assets/img/Logo.png"
