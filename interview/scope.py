"""State shared between the interview engine and question builders.

Predicates and default rules never reach for ambient state. They receive
the in-progress answers plus an InterviewScope, and read everything else
(discovered choices, probe results, limits) from it.
"""

from dataclasses import dataclass, field
from typing import Any

from core.config import DEFAULT_ALIAS_MAX_LENGTH, DEFAULT_NAME_MAX_LENGTH
from core.errors import InterviewScopeError
from core.orgs import OrgInfo
from interview.choices import ChoiceItem

Answers = dict[str, Any]


@dataclass
class SharedData:
    """Discovered context handed to question builders by reference."""

    command_name: str = ""
    confirmation_question: str = "Create a new project based on the above settings?"
    dev_hub_choices: list[ChoiceItem] | None = None
    env_hub_choices: list[ChoiceItem] | None = None
    org_map: dict[str, OrgInfo] = field(default_factory=dict)
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH
    alias_max_length: int = DEFAULT_ALIAS_MAX_LENGTH


@dataclass
class DerivedState:
    """Probe results. Written only by probe stages, read by predicates."""

    is_git_remote_reachable: bool | None = None


@dataclass
class InterviewScope:
    user_answers: Answers
    default_answers: Answers
    shared: SharedData = field(default_factory=SharedData)
    derived: DerivedState = field(default_factory=DerivedState)

    def current(self, name: str, answers: Answers | None = None) -> Any:
        """Latest known value for name: in-progress, then user, then default."""
        if answers is not None and name in answers:
            return answers[name]
        if name in self.user_answers:
            return self.user_answers[name]
        return self.default_answers.get(name)


def validate_interview_scope(scope: object, *required: str) -> None:
    """Fail fast when a builder runs without the shared context it needs.

    `required` names SharedData attributes that must be populated.
    """
    if not isinstance(scope, InterviewScope):
        raise InterviewScopeError(
            f"Expected an InterviewScope, got {type(scope).__name__}"
        )
    for attr in required:
        if getattr(scope.shared, attr, None) is None:
            raise InterviewScopeError(f"Interview scope is missing shared '{attr}'")
