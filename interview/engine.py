"""Interview engine.

Runs an ordered list of question groups, then a final confirmation.

    AWAITING_GROUP(i) -> AWAITING_GROUP(i)      group confirmation asked to restart
    AWAITING_GROUP(i) -> AWAITING_GROUP(i + 1)  group done
    AWAITING_GROUP(i) -> ABORTED                group abort rule returned a reason
    AWAITING_GROUP(N) -> AWAITING_CONFIRMATION
    AWAITING_CONFIRMATION -> PROCEEDING         proceed
    AWAITING_CONFIRMATION -> AWAITING_GROUP(0)  restart, user answers kept
    AWAITING_CONFIRMATION -> ABORTED            neither

A host abort (GeneratorStatus.aborted) is checked at the top of every
state and moves straight to ABORTED.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Union

from core.status import GeneratorStatus, StatusMessage, StatusType
from interview.prompt import Prompter, evaluate
from interview.questions import Question, WhenRule
from interview.scope import Answers, InterviewScope, SharedData

logger = logging.getLogger("keystone.interview")


def _print_status(msg: str) -> None:
    print(f"\033[36m[keystone]\033[0m {msg}")


def _print_bold(msg: str) -> None:
    print(f"\033[36m[keystone]\033[0m \033[1m{msg}\033[0m")


QuestionBuilder = Callable[[InterviewScope], list[Question]]
Probe = Callable[[Answers, InterviewScope], Union[None, Awaitable[None]]]
AbortRule = Callable[[Answers, InterviewScope], Union[str, bool, None]]
DisplayRule = Callable[[Answers, InterviewScope], list[tuple[str, Any]]]


class InterviewState(str, Enum):
    AWAITING_GROUP = "awaiting_group"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    PROCEEDING = "proceeding"
    ABORTED = "aborted"


@dataclass
class ConfirmationRecord:
    proceed: bool = False
    restart: bool = False
    abort: bool = False

    @classmethod
    def from_answers(cls, raw: Mapping[str, Any], invert: bool = False) -> "ConfirmationRecord":
        """Turn raw confirmation answers into an engine decision.

        With invert=True a "yes" to the `restart` question means "carry on",
        so restart is the raw answer XOR invert. When no question was shown
        the user is allowed to proceed.
        """
        if raw.get("proceed") is True:
            return cls(proceed=True)
        if "restart" not in raw:
            if "proceed" in raw:
                return cls(abort=True)
            return cls(proceed=True)
        restart = bool(raw["restart"]) != invert
        if invert:
            return cls(proceed=not restart, restart=restart)
        return cls(restart=restart, abort=not restart)


@dataclass
class Confirmation:
    questions: QuestionBuilder
    invert: bool = False
    probes: list[Probe] = field(default_factory=list)  # run before rendering


@dataclass
class InterviewGroup:
    title: str
    questions: QuestionBuilder
    confirmation: Confirmation | None = None
    abort: AbortRule | None = None
    when: WhenRule = True
    probes: list[Probe] = field(default_factory=list)


def merge_answers(defaults: Mapping[str, Any], user: Mapping[str, Any]) -> Mapping[str, Any]:
    """Defaults overlaid with user answers, as a read-only snapshot."""
    return MappingProxyType({**defaults, **user})


class Interview:
    """One interview run. Owns the user answers and confirmation record."""

    def __init__(
        self,
        default_answers: Mapping[str, Any],
        shared: SharedData | None = None,
        status: GeneratorStatus | None = None,
        confirmation: Confirmation | None = None,
        display: DisplayRule | None = None,
        prompter: Prompter | None = None,
    ) -> None:
        self.default_answers = MappingProxyType(dict(default_answers))
        self.user_answers: Answers = {}
        self.scope = InterviewScope(
            user_answers=self.user_answers,
            default_answers=self.default_answers,  # type: ignore[arg-type]
            shared=shared or SharedData(),
        )
        self.status = status
        self.confirmation = confirmation
        self.display = display
        self.prompter = prompter or Prompter()
        self.groups: list[InterviewGroup] = []

        self.state = InterviewState.AWAITING_GROUP
        self.group_index = 0
        self.record = ConfirmationRecord()
        self.final_answers: Mapping[str, Any] | None = None
        self.abort_reason = ""

    def create_group(self, title: str, questions: QuestionBuilder, **kwargs: Any) -> InterviewGroup:
        group = InterviewGroup(title, questions, **kwargs)
        self.groups.append(group)
        return group

    @property
    def aborted(self) -> bool:
        return self.state == InterviewState.ABORTED

    # -----------------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------------

    async def start(self) -> Mapping[str, Any] | None:
        """Run to completion. Returns final answers, or None if aborted."""
        self.state = InterviewState.AWAITING_GROUP
        self.group_index = 0

        while True:
            if self.status is not None and self.status.aborted:
                self._host_abort()

            if self.state == InterviewState.ABORTED:
                return None

            if self.state == InterviewState.PROCEEDING:
                self.final_answers = merge_answers(self.default_answers, self.user_answers)
                logger.debug("Final answers: %s", dict(self.final_answers))
                return self.final_answers

            if self.state == InterviewState.AWAITING_GROUP:
                if self.group_index >= len(self.groups):
                    self.state = InterviewState.AWAITING_CONFIRMATION
                    continue
                await self._run_group(self.groups[self.group_index])
                continue

            await self._run_final_confirmation()

    async def _run_group(self, group: InterviewGroup) -> None:
        """One pass over a group. Leaves state/group_index set for the next step."""
        if not await evaluate(group.when, dict(self.user_answers), self.scope):
            logger.debug("Skipping group %r", group.title)
            self.group_index += 1
            return

        print()
        _print_bold(group.title)
        for probe in group.probes:
            await evaluate(probe, dict(self.user_answers), self.scope)

        answers = await self.prompter.prompt(group.questions(self.scope), self.scope)
        self.user_answers.update(answers)

        if group.confirmation is not None:
            record = await self._confirm(group.confirmation)
            if record.restart:
                logger.debug("Repeating group %r", group.title)
                print()
                return

        if group.abort is not None:
            reason = await evaluate(group.abort, dict(self.user_answers), self.scope)
            if reason:
                self._abort(reason if isinstance(reason, str) else f"{group.title} aborted")
                return

        self.group_index += 1

    async def _run_final_confirmation(self) -> None:
        if self.display is not None:
            rows = await evaluate(self.display, dict(self.user_answers), self.scope)
            if rows:
                print()
                width = max(len(str(label)) for label, _ in rows) + 1
                for label, value in rows:
                    _print_status(f"  {str(label) + ':':<{width}} {value}")

        if self.confirmation is None:
            record = ConfirmationRecord(proceed=True)
        else:
            print()
            record = await self._confirm(self.confirmation)
        self.record = record

        if record.proceed:
            self.state = InterviewState.PROCEEDING
        elif record.restart:
            logger.debug("Restarting interview with %d answers kept", len(self.user_answers))
            print()
            self.group_index = 0
            self.state = InterviewState.AWAITING_GROUP
        else:
            command = self.scope.shared.command_name or "Command"
            self._abort(f"{command} canceled by user")

    async def _confirm(self, confirmation: Confirmation) -> ConfirmationRecord:
        for probe in confirmation.probes:
            await evaluate(probe, dict(self.user_answers), self.scope)
        raw = await self.prompter.prompt(confirmation.questions(self.scope), self.scope)
        record = ConfirmationRecord.from_answers(raw, confirmation.invert)
        logger.debug("Confirmation %s -> %s", raw, record)
        return record

    # -----------------------------------------------------------------------
    # Abort
    # -----------------------------------------------------------------------

    def _abort(self, reason: str) -> None:
        logger.info("Interview aborted: %s", reason)
        self.state = InterviewState.ABORTED
        self.record.abort = True
        self.abort_reason = reason
        if self.status is not None:
            self.status.abort(StatusMessage(StatusType.ERROR, "Command Aborted", reason))

    def _host_abort(self) -> None:
        self.state = InterviewState.ABORTED
        self.record.abort = True
        if not self.abort_reason and self.status is not None and self.status.messages:
            self.abort_reason = self.status.messages[-1].message
