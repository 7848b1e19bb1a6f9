"""Run-wide status accumulator.

One GeneratorStatus is created per command run. The interview appends to
it when it aborts; the generator appends a message for every pipeline
step; the CLI prints the collected messages at the end. Messages are only
ever appended, never cleared.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum

from core.errors import GeneratorStatusError


class StatusType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


@dataclass
class StatusMessage:
    type: StatusType
    title: str
    message: str


_COLORS = {
    StatusType.SUCCESS: "\033[32m",
    StatusType.WARNING: "\033[33m",
    StatusType.ERROR: "\033[31m",
    StatusType.INFO: "\033[36m",
}


@dataclass
class GeneratorStatus:
    """Lifecycle: start() once, then abort() or complete()."""

    running: bool = False
    aborted: bool = False
    completed: bool = False
    messages: list[StatusMessage] = field(default_factory=list)

    def start(self, message: StatusMessage | None = None) -> None:
        if self.running or self.aborted or self.completed:
            raise GeneratorStatusError("start() can only be called once per run")
        self.running = True
        if message is not None:
            self.add_message(message)

    def abort(self, message: StatusMessage | None = None) -> None:
        """Mark the run aborted. A second call is a no-op."""
        if self.aborted:
            return
        if self.completed:
            raise GeneratorStatusError("Can not abort a completed run")
        self.aborted = True
        self.running = False
        if message is not None:
            self.add_message(message)

    def complete(self, messages: list[StatusMessage] | None = None) -> None:
        if self.aborted or not self.running:
            raise GeneratorStatusError("Can not complete a run that is not running")
        self.completed = True
        self.running = False
        for message in messages or []:
            self.add_message(message)

    def add_message(self, message: StatusMessage) -> None:
        for attr in ("title", "message"):
            value = getattr(message, attr)
            if not isinstance(value, str):
                raise TypeError(f"Expected str for {attr}, got {type(value).__name__}")
        message.type = StatusType(message.type)
        self.messages.append(message)

    def add(self, type: StatusType | str, title: str, message: str) -> None:
        self.add_message(StatusMessage(StatusType(type), title, message))

    def _has(self, type: StatusType) -> bool:
        return any(m.type == type for m in self.messages)

    @property
    def has_error(self) -> bool:
        return self._has(StatusType.ERROR)

    @property
    def has_warning(self) -> bool:
        return self._has(StatusType.WARNING)

    @property
    def has_success(self) -> bool:
        return self._has(StatusType.SUCCESS)

    @property
    def has_info(self) -> bool:
        return self._has(StatusType.INFO)

    def print_status_messages(self) -> None:
        """Print one line per message, errors to stderr."""
        if not self.messages:
            return
        width = max(len(m.title) for m in self.messages) + 1
        print()
        for m in self.messages:
            color = _COLORS[m.type]
            line = f"  {color}{m.title + ':':<{width}}\033[0m {m.message}"
            print(line, file=sys.stderr if m.type == StatusType.ERROR else sys.stdout)
