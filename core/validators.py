"""Answer validators for interview questions.

Every validator takes the raw string the user typed and returns True when
it is acceptable, otherwise a non-empty message explaining what is wrong.
Validators never return False. Passing anything other than a str raises
TypeError.
"""

import re
from typing import Iterable

from core.config import DEFAULT_ALIAS_MAX_LENGTH, DEFAULT_NAME_MAX_LENGTH

# scheme://host/path or git@host:path, optional .git suffix and trailing slash
GIT_URI_PATTERN = re.compile(
    r"(^(git|ssh|https?)|(^git@[\w.\-]+))(:(//)?)([\w.@:/\-~]+?)(\.git)?(/)?$"
)
DEFAULT_REMOTE_PROTOCOLS = ("http", "https")

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
NAME_PATTERN = re.compile(r"^[\w .,'()&-]+$")

# Leading ~, whitespace not escaped by a backslash, or shell-sensitive chars
BAD_PATH_PATTERN = re.compile(r"(^~|(?<!\\)\s|[\"'`;&*|])")

NAMESPACE_PATTERN = re.compile(r"^[A-Za-z](?!.*__)[A-Za-z0-9_]*(?<!_)$")
NAMESPACE_MAX_LENGTH = 15


def _require_str(value: object) -> None:
    if not isinstance(value, str):
        raise TypeError(f"Expected str, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Core checks (bool)
# ---------------------------------------------------------------------------


def is_git_uri_valid(uri: str, protocols: Iterable[str] | None = None) -> bool:
    """Syntax check for a git remote URI, optionally limited to protocols."""
    _require_str(uri)
    if not GIT_URI_PATTERN.match(uri):
        return False
    if protocols is None:
        return True
    scheme = uri.split(":", 1)[0].lower()
    return scheme in {p.lower() for p in protocols}


def is_local_path_valid(path: str) -> bool:
    """Reject paths that would misbehave when handed to a shell."""
    _require_str(path)
    return bool(path.strip()) and not BAD_PATH_PATTERN.search(path)


def is_alias_valid(alias: str, max_length: int | None = None) -> bool:
    _require_str(alias)
    if not ALIAS_PATTERN.match(alias):
        return False
    return max_length is None or len(alias) <= max_length


# ---------------------------------------------------------------------------
# Question validators (True | message)
# ---------------------------------------------------------------------------


def standard_name(value: str, max_length: int = DEFAULT_NAME_MAX_LENGTH) -> bool | str:
    _require_str(value)
    stripped = value.strip()
    if 1 <= len(stripped) <= max_length and NAME_PATTERN.match(stripped):
        if any(c.isalnum() for c in stripped):
            return True
    return (
        f"Names must be 1-{max_length} characters long and use letters, "
        f"numbers, spaces and basic punctuation"
    )


def standard_alias(value: str, max_length: int = DEFAULT_ALIAS_MAX_LENGTH) -> bool | str:
    if is_alias_valid(value, max_length):
        return True
    return (
        f"Alias must be 1-{max_length} chars long and include only "
        f"letters (a-Z), numbers (0-9), dash (-), and underscore (_)"
    )


def target_path(value: str) -> bool | str:
    if is_local_path_valid(value):
        return True
    return (
        "Target Directory can not be empty, begin with ~, have unescaped "
        "spaces, or contain invalid characters (' \" ` ; & * |)"
    )


def git_remote_uri(
    value: str, protocols: Iterable[str] | None = DEFAULT_REMOTE_PROTOCOLS,
) -> bool | str:
    if is_git_uri_valid(value, protocols):
        return True
    if protocols is None:
        return "Please provide a valid URI for your Git remote"
    allowed = "/".join(protocols)
    return f"Please provide a valid URI ({allowed} only) for your Git remote"


def namespace_prefix(value: str) -> bool | str:
    _require_str(value)
    if len(value) <= NAMESPACE_MAX_LENGTH and NAMESPACE_PATTERN.match(value):
        return True
    return (
        f"Namespace Prefix must be 1-{NAMESPACE_MAX_LENGTH} characters, start "
        f"with a letter, use only letters, numbers and single underscores, "
        f"and not end with an underscore"
    )


def package_id(value: str, prefix: str) -> bool | str:
    """Validate a 15 or 18 character record ID that starts with prefix."""
    _require_str(value)
    if (
        len(value) in (15, 18)
        and value.startswith(prefix)
        and value.isalnum()
    ):
        return True
    return f"ID must be 15 or 18 alphanumeric characters beginning with {prefix}"


def metadata_package_id(value: str) -> bool | str:
    return package_id(value, "033")


def package_version_id(value: str) -> bool | str:
    return package_id(value, "04t")
