"""Ignore rules for template copying.

Uses pathspec to match .gitignore-style patterns. Template trees can carry
a .keystoneignore file; its patterns are merged with the defaults below.
"""

from __future__ import annotations

from pathlib import Path

import pathspec

IGNORE_FILE = ".keystoneignore"

# Patterns always ignored when copying a template.
# Uses .gitignore syntax (pathspec gitwildmatch).
DEFAULT_IGNORE_PATTERNS = [
    # VCS
    ".git/",
    # OS metadata
    ".DS_Store",
    "Thumbs.db",
    "desktop.ini",
    # Python
    "__pycache__/",
    "*.pyc",
    "*.pyo",
    # Editor leftovers
    "*.swp",
    "*~",
    # The ignore file itself
    IGNORE_FILE,
]


def load_ignore_spec(template_dir: Path) -> pathspec.PathSpec:
    """Load ignore patterns from .keystoneignore + defaults.

    Reads .keystoneignore from template_dir (if it exists) and merges with
    DEFAULT_IGNORE_PATTERNS. Returns a compiled PathSpec for matching.
    """
    lines = list(DEFAULT_IGNORE_PATTERNS)
    ignore_file = template_dir / IGNORE_FILE
    if ignore_file.is_file():
        try:
            text = ignore_file.read_text(encoding="utf-8", errors="replace")
            for line in text.splitlines():
                stripped = line.strip()
                if stripped and not stripped.startswith("#"):
                    lines.append(stripped)
        except OSError:
            pass
    return pathspec.GitIgnoreSpec.from_lines(lines)


def should_ignore(rel_path: str, spec: pathspec.PathSpec) -> bool:
    """Check if a template-relative path (forward slashes) should be skipped."""
    return spec.match_file(rel_path)
