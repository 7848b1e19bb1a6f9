"""Template engine and tree copier.

Template text uses [KEY] placeholders and [IF:TAG]...[/IF:TAG] /
[IFNOT:TAG]...[/IFNOT:TAG] blocks. Placeholders are also substituted in
file and directory names, and a file named `_gitignore` is written as
`.gitignore` (a real .gitignore would be dropped by packaging).
"""

import logging
import re
from pathlib import Path
from typing import Any, Mapping

from core.errors import KeystoneError
from core.ignore import load_ignore_spec, should_ignore

logger = logging.getLogger("keystone.templating")

RENAMED_FILES = {"_gitignore": ".gitignore"}


# ---------------------------------------------------------------------------
# Template engine
# ---------------------------------------------------------------------------


def process_conditionals(content: str, active_tags: set[str]) -> str:
    """Process [IF:X]...[/IF:X] and [IFNOT:X]...[/IFNOT:X] blocks.

    Included bodies are stripped of leading/trailing blank lines but keep
    a trailing newline so they don't concatenate with subsequent content.
    Excluded blocks collapse to empty string. Runs iteratively to handle
    nested conditionals.
    """

    def _include_body(body: str) -> str:
        stripped = body.strip("\n")
        return stripped + "\n" if stripped else ""

    if_pat = re.compile(r"\[IF:(\w+)\]\n?(.*?)\[/IF:\1\]\n?", re.DOTALL)
    ifnot_pat = re.compile(r"\[IFNOT:(\w+)\]\n?(.*?)\[/IFNOT:\1\]\n?", re.DOTALL)

    for _ in range(10):  # nesting depth limit
        prev = content
        content = if_pat.sub(
            lambda m: _include_body(m.group(2)) if m.group(1) in active_tags else "",
            content,
        )
        content = ifnot_pat.sub(
            lambda m: _include_body(m.group(2)) if m.group(1) not in active_tags else "",
            content,
        )
        if content == prev:
            break

    return content


def substitute_placeholders(content: str, values: Mapping[str, str]) -> str:
    """Replace [KEY] placeholders with values. Unknown keys left as-is."""
    for key, value in values.items():
        content = content.replace(f"[{key}]", value)
    return content


def process_template(
    content: str, values: Mapping[str, str], active_tags: set[str],
) -> str:
    """Full template processing: conditionals first, then placeholders."""
    content = process_conditionals(content, active_tags)
    content = substitute_placeholders(content, values)
    content = re.sub(r"\n{3,}", "\n\n", content)
    return content


# ---------------------------------------------------------------------------
# Answers -> template context
# ---------------------------------------------------------------------------


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def build_context(answers: Mapping[str, Any]) -> tuple[dict[str, str], set[str]]:
    """Map answers to ({KEY: text}, {TAG}) for process_template.

    `project_name` becomes [PROJECT_NAME]; every answer that is True also
    becomes an active tag, so `is_initializing_git` enables [IF:IS_INITIALIZING_GIT].
    """
    values = {key.upper(): _format_value(value) for key, value in answers.items()}
    tags = {key.upper() for key, value in answers.items() if value is True}
    return values, tags


# ---------------------------------------------------------------------------
# Tree copy
# ---------------------------------------------------------------------------


def _render_rel_path(rel: Path, values: Mapping[str, str]) -> Path:
    parts = [substitute_placeholders(part, values) for part in rel.parts]
    parts[-1] = RENAMED_FILES.get(parts[-1], parts[-1])
    return Path(*parts)


def copy_template_tree(
    source: Path, destination: Path, values: Mapping[str, str], active_tags: set[str],
) -> list[str]:
    """Copy a template directory to destination, rendering as it goes.

    Text files are run through process_template; anything that isn't
    UTF-8 is copied byte for byte. Refuses to write into a non-empty
    destination. Returns the written paths relative to destination.
    """
    if not source.is_dir():
        raise KeystoneError(f"Template directory not found: {source}")
    if destination.exists() and any(destination.iterdir()):
        raise KeystoneError(f"Destination {destination} already exists and is not empty")

    spec = load_ignore_spec(source)
    created: list[str] = []
    for path in sorted(source.rglob("*")):
        rel = path.relative_to(source)
        if should_ignore(rel.as_posix() + ("/" if path.is_dir() else ""), spec):
            continue
        if path.is_dir():
            continue

        out = destination / _render_rel_path(rel, values)
        out.parent.mkdir(parents=True, exist_ok=True)
        data = path.read_bytes()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            out.write_bytes(data)
        else:
            out.write_text(process_template(text, values, active_tags))
        created.append(out.relative_to(destination).as_posix())
        logger.debug("Wrote %s", out)

    return created
