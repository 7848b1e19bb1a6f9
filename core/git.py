"""Git probes and repository setup.

Thin wrappers over the git executable. Probes (is_git_installed,
is_remote_reachable) never raise. Repository operations raise ShellError
on a non-zero exit so the generator can turn them into status warnings.
"""

import asyncio
import logging
import shutil
import subprocess
from pathlib import Path

from core.config import get_settings
from core.errors import RemoteCheckError, ShellError

logger = logging.getLogger("keystone.git")

# git ls-remote --exit-code: 2 means the remote answered but has no refs
LS_REMOTE_EMPTY = 2


def _git() -> str:
    return get_settings().git_executable


def _run(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
    """Run git synchronously. Missing git or a timeout raises ShellError."""
    cmd = [_git(), *args]
    logger.debug("Running %s (cwd=%s)", cmd, cwd)
    try:
        result = subprocess.run(
            cmd, cwd=cwd, capture_output=True, text=True,
            timeout=get_settings().git_timeout,
        )
    except FileNotFoundError as e:
        raise ShellError(cmd, 127, stderr=str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise ShellError(cmd, 124, stderr=f"timed out after {e.timeout}s") from e
    logger.debug("%s exited %d", cmd, result.returncode)
    return result


def _check(args: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
    result = _run(args, cwd)
    if result.returncode != 0:
        raise ShellError([_git(), *args], result.returncode, result.stdout, result.stderr)
    return result


# ---------------------------------------------------------------------------
# Probes
# ---------------------------------------------------------------------------


def is_git_installed() -> bool:
    return shutil.which(_git()) is not None


def is_remote_reachable(uri: str) -> bool:
    """True if `git ls-remote` can read the remote. Any failure is False."""
    try:
        result = _run(["ls-remote", "-h", uri])
    except ShellError as e:
        logger.debug("Remote %s unreachable: %s", uri, e)
        return False
    return result.returncode == 0


def is_remote_empty(uri: str) -> bool:
    """Check whether a reachable remote has any commits.

    Returns False when the remote has refs, True when it answered with none.
    Raises RemoteCheckError when it could not be reached at all.
    """
    try:
        result = _run(["ls-remote", "--exit-code", "-h", uri])
    except ShellError as e:
        raise RemoteCheckError(uri, e.code, str(e)) from e
    if result.returncode == 0:
        return False
    if result.returncode == LS_REMOTE_EMPTY:
        return True
    raise RemoteCheckError(
        uri, result.returncode,
        f"Git remote {uri} does not exist or is unreachable",
    )


async def is_remote_empty_async(uri: str, delay: float | None = None) -> bool:
    """Async is_remote_empty, optionally waiting first for a new remote to settle."""
    if delay is None:
        delay = get_settings().remote_probe_delay
    if delay > 0:
        await asyncio.sleep(delay)
    return await asyncio.to_thread(is_remote_empty, uri)


# ---------------------------------------------------------------------------
# Repository setup
# ---------------------------------------------------------------------------


def git_init(path: Path) -> None:
    _check(["init"], cwd=path)


def git_add_and_commit(path: Path, message: str) -> None:
    """Stage everything and commit. ShellError if there is nothing to commit."""
    _check(["add", "-A"], cwd=path)
    _check(["commit", "-m", message], cwd=path)


def git_remote_add_origin(path: Path, uri: str) -> None:
    _check(["remote", "add", "origin", uri], cwd=path)


def repo_name_from_uri(uri: str) -> str:
    """'https://github.com/org/my-repo.git' -> 'my-repo'."""
    name = uri.rstrip("/").rsplit("/", 1)[-1]
    name = name.rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name
