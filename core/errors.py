"""Keystone error types.

User-facing failures derive from KeystoneError so the CLI can report them
and exit cleanly. InterviewScopeError is a programming error and is kept
outside that hierarchy on purpose: nothing should catch it at runtime.
"""


class KeystoneError(RuntimeError):
    """Base class for recoverable, user-facing failures."""


class ShellError(KeystoneError):
    """A host command exited non-zero."""

    def __init__(
        self, command: list[str], code: int, stdout: str = "", stderr: str = "",
    ) -> None:
        self.command = command
        self.code = code
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or stdout.strip()
        msg = f"'{' '.join(command)}' exited with code {code}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class RemoteCheckError(KeystoneError):
    """A git remote could not be reached or did not respond as expected."""

    def __init__(self, uri: str, code: int | None, message: str = "") -> None:
        self.uri = uri
        self.code = code
        super().__init__(message or f"Git remote {uri} is unreachable (code {code})")


class OrgDiscoveryError(KeystoneError):
    """The org CLI is missing, failed, or returned output we can't use."""


class GeneratorStatusError(KeystoneError):
    """A GeneratorStatus lifecycle method was called out of order."""


class InterviewScopeError(Exception):
    """A question builder ran without the shared context it needs."""
