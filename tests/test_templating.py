"""Tests for generators/templating.py."""

from pathlib import Path

import pytest

from core.errors import KeystoneError
from generators.templating import (
    build_context,
    copy_template_tree,
    process_conditionals,
    process_template,
    substitute_placeholders,
)

# ---------------------------------------------------------------------------
# Template engine
# ---------------------------------------------------------------------------


class TestSubstitutePlaceholders:
    """Placeholder substitution."""

    def test_replaces_known_keys(self) -> None:
        content = "Hello [NAME], welcome to [PROJECT]."
        result = substitute_placeholders(content, {"NAME": "Alice", "PROJECT": "Keystone"})
        assert result == "Hello Alice, welcome to Keystone."

    def test_leaves_unknown_keys(self) -> None:
        content = "Hello [NAME], see [UNKNOWN]."
        result = substitute_placeholders(content, {"NAME": "Alice"})
        assert result == "Hello Alice, see [UNKNOWN]."


class TestProcessConditionals:
    """Conditional block processing."""

    def test_if_active_keeps_content(self) -> None:
        content = "before\n[IF:MANAGED]\npackaged\n[/IF:MANAGED]\nafter"
        result = process_conditionals(content, {"MANAGED"})
        assert "packaged" in result
        assert "[IF:MANAGED]" not in result

    def test_if_inactive_removes_content(self) -> None:
        content = "before\n[IF:MANAGED]\npackaged\n[/IF:MANAGED]\nafter"
        result = process_conditionals(content, set())
        assert "packaged" not in result
        assert "before" in result
        assert "after" in result

    def test_ifnot_active_removes_content(self) -> None:
        content = "before\n[IFNOT:MANAGED]\nunpackaged\n[/IFNOT:MANAGED]\nafter"
        result = process_conditionals(content, {"MANAGED"})
        assert "unpackaged" not in result

    def test_ifnot_inactive_keeps_content(self) -> None:
        content = "before\n[IFNOT:MANAGED]\nunpackaged\n[/IFNOT:MANAGED]\nafter"
        result = process_conditionals(content, set())
        assert "unpackaged" in result


class TestProcessTemplate:
    """Full template processing pipeline."""

    def test_full_pipeline(self) -> None:
        content = (
            "# [PROJECT_NAME]\n\n"
            "[IF:HAS_GIT_REMOTE]\nRemote: [GIT_REMOTE_URI]\n[/IF:HAS_GIT_REMOTE]\n"
            "[IFNOT:HAS_GIT_REMOTE]\nNo remote\n[/IFNOT:HAS_GIT_REMOTE]\n"
        )
        result = process_template(
            content,
            {"PROJECT_NAME": "Acme", "GIT_REMOTE_URI": "https://example.com/acme.git"},
            {"HAS_GIT_REMOTE"},
        )
        assert "# Acme" in result
        assert "Remote: https://example.com/acme.git" in result
        assert "No remote" not in result

    def test_cleans_double_blank_lines(self) -> None:
        content = "line1\n\n\n\n\nline2"
        result = process_template(content, {}, set())
        assert "\n\n\n" not in result


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TestBuildContext:
    """Answers -> placeholder values and tags."""

    def test_keys_uppercased(self) -> None:
        values, _ = build_context({"project_name": "Acme", "project_alias": "acme"})
        assert values == {"PROJECT_NAME": "Acme", "PROJECT_ALIAS": "acme"}

    def test_booleans_and_tags(self) -> None:
        values, tags = build_context({"is_initializing_git": True, "has_git_remote": False})
        assert values["IS_INITIALIZING_GIT"] == "true"
        assert values["HAS_GIT_REMOTE"] == "false"
        assert tags == {"IS_INITIALIZING_GIT"}

    def test_none_and_lists(self) -> None:
        values, tags = build_context({"missing": None, "items": ["a", "b"]})
        assert values["MISSING"] == ""
        assert values["ITEMS"] == "a, b"
        assert tags == set()


# ---------------------------------------------------------------------------
# Tree copy
# ---------------------------------------------------------------------------


@pytest.fixture
def template(tmp_path: Path) -> Path:
    src = tmp_path / "template"
    (src / "[PROJECT_ALIAS]" / "classes").mkdir(parents=True)
    (src / "[PROJECT_ALIAS]" / "classes" / ".gitkeep").write_text("")
    (src / "README.md").write_text("# [PROJECT_NAME]\n[IF:MANAGED]\nmanaged\n[/IF:MANAGED]\n")
    (src / "_gitignore").write_text(".sfdx/\n")
    (src / "logo.bin").write_bytes(b"\xff\xfe\x00[PROJECT_NAME]")
    (src / ".DS_Store").write_bytes(b"\x00\x01")
    (src / "__pycache__").mkdir()
    (src / "__pycache__" / "x.pyc").write_bytes(b"\x00")
    return src


class TestCopyTemplateTree:
    """copy_template_tree renders a template directory into a new project."""

    def test_renders_text_files(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        copy_template_tree(template, dest, {"PROJECT_NAME": "Acme", "PROJECT_ALIAS": "acme"}, set())
        readme = (dest / "README.md").read_text()
        assert readme.startswith("# Acme")
        assert "managed" not in readme

    def test_placeholders_in_paths(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        created = copy_template_tree(template, dest, {"PROJECT_ALIAS": "acme"}, set())
        assert (dest / "acme" / "classes" / ".gitkeep").is_file()
        assert "acme/classes/.gitkeep" in created

    def test_gitignore_renamed(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        created = copy_template_tree(template, dest, {}, set())
        assert (dest / ".gitignore").read_text() == ".sfdx/\n"
        assert not (dest / "_gitignore").exists()
        assert ".gitignore" in created

    def test_binary_copied_verbatim(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        copy_template_tree(template, dest, {"PROJECT_NAME": "Acme"}, set())
        assert (dest / "logo.bin").read_bytes() == b"\xff\xfe\x00[PROJECT_NAME]"

    def test_ignored_files_skipped(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        created = copy_template_tree(template, dest, {}, set())
        assert ".DS_Store" not in created
        assert not (dest / "__pycache__").exists()

    def test_empty_existing_destination_allowed(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        dest.mkdir()
        assert copy_template_tree(template, dest, {}, set())

    def test_non_empty_destination_rejected(self, tmp_path: Path, template: Path) -> None:
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "keep.txt").write_text("mine")
        with pytest.raises(KeystoneError, match="not empty"):
            copy_template_tree(template, dest, {}, set())
        assert (dest / "keep.txt").read_text() == "mine"

    def test_missing_template_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(KeystoneError, match="not found"):
            copy_template_tree(tmp_path / "nope", tmp_path / "out", {}, set())
