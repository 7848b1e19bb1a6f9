"""Question records and the parameterized builders generators compose.

A builder returns a list of Question records. Default and visibility
rules are either plain values or callables taking (answers, scope), where
`answers` is the user's answers so far overlaid with the answers given
earlier in the same prompt pass.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Union

from core import validators
from core.config import DEFAULT_NAME_MAX_LENGTH
from core.errors import InterviewScopeError, RemoteCheckError
from core.git import is_remote_empty_async
from interview.choices import NOT_SPECIFIED, ChoiceItem, selectable
from interview.scope import Answers, InterviewScope

logger = logging.getLogger("keystone.interview")

Rule = Callable[[Answers, InterviewScope], Any]
WhenRule = Union[bool, Callable[[Answers, InterviewScope], Union[bool, Awaitable[bool]]]]
Validator = Callable[[str], Union[bool, str]]


class QuestionKind(str, Enum):
    INPUT = "input"
    CONFIRM = "confirm"
    LIST = "list"


@dataclass
class Question:
    kind: QuestionKind
    name: str
    message: str
    default: Any = None  # value or Rule
    choices: list[ChoiceItem] = field(default_factory=list)
    validate: Validator | None = None
    filter: Callable[[Any], Any] | None = None
    when: WhenRule = True


def current_value(name: str) -> Rule:
    """Default rule: the value already given for name, else its default."""

    def _rule(answers: Answers, scope: InterviewScope) -> Any:
        return scope.current(name, answers)

    return _rule


def answered(name: str, value: Any = True) -> Rule:
    """Visibility rule: name currently holds value."""

    def _rule(answers: Answers, scope: InterviewScope) -> bool:
        return scope.current(name, answers) == value

    return _rule


def escape_local_path(path: Path | str) -> str:
    """Render a path the way it is typed at the prompt, spaces backslash-escaped."""
    return str(path).replace(" ", "\\ ")


def resolve_local_path(value: str) -> Path:
    """Inverse of escape_local_path, made absolute."""
    return Path(value.replace("\\ ", " ")).expanduser().resolve()


# ---------------------------------------------------------------------------
# Directory & identity
# ---------------------------------------------------------------------------


def provide_target_directory(
    message: str = "What is the target directory for this project?",
) -> list[Question]:
    return [
        Question(
            QuestionKind.INPUT, "target_directory", message,
            default=current_value("target_directory"),
            validate=validators.target_path,
        ),
    ]


def provide_developer_info(
    name_max_length: int, alias_max_length: int,
) -> list[Question]:
    return [
        Question(
            QuestionKind.INPUT, "developer_name",
            "What is your company's name (or your name if individual developer)?",
            default=current_value("developer_name"),
            validate=lambda v: validators.standard_name(v, name_max_length),
            filter=str.strip,
        ),
        Question(
            QuestionKind.INPUT, "developer_alias",
            f"Provide an alias for the above (1-{alias_max_length} chars: "
            f"a-Z, 0-9, -, and _ only)",
            default=current_value("developer_alias"),
            validate=lambda v: validators.standard_alias(v, alias_max_length),
        ),
    ]


def provide_project_info(
    name_max_length: int, alias_max_length: int,
) -> list[Question]:
    return [
        Question(
            QuestionKind.INPUT, "project_name", "What is the name of your project?",
            default=current_value("project_name"),
            validate=lambda v: validators.standard_name(v, name_max_length),
            filter=str.strip,
        ),
        Question(
            QuestionKind.INPUT, "project_alias",
            f"Provide an alias for the above (1-{alias_max_length} chars: "
            f"a-Z, 0-9, -, and _ only)",
            default=current_value("project_alias"),
            validate=lambda v: validators.standard_alias(v, alias_max_length),
        ),
    ]


def provide_package_info(
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
) -> list[Question]:
    """Managed package details, asked only when building a managed package."""
    managed = answered("is_creating_managed_package")
    return [
        Question(
            QuestionKind.CONFIRM, "is_creating_managed_package",
            "Are you building a managed package?",
            default=current_value("is_creating_managed_package"),
        ),
        Question(
            QuestionKind.INPUT, "namespace_prefix",
            "What is the namespace prefix for your managed package?",
            default=current_value("namespace_prefix"),
            validate=validators.namespace_prefix,
            when=managed,
        ),
        Question(
            QuestionKind.INPUT, "package_name", "What is the name of your package?",
            default=current_value("package_name"),
            validate=lambda v: validators.standard_name(v, name_max_length),
            filter=str.strip,
            when=managed,
        ),
        Question(
            QuestionKind.INPUT, "metadata_package_id",
            "What is the Metadata Package ID (033) of your package?",
            default=current_value("metadata_package_id"),
            validate=validators.metadata_package_id,
            when=managed,
        ),
        Question(
            QuestionKind.INPUT, "package_version_id",
            "What is the Package Version ID (04t) of your most recent release?",
            default=current_value("package_version_id"),
            validate=validators.package_version_id,
            when=managed,
        ),
    ]


# ---------------------------------------------------------------------------
# Hub selection
# ---------------------------------------------------------------------------


def choose_hub(name: str, message: str, choices: list[ChoiceItem] | None) -> list[Question]:
    """List question over discovered hub choices. Hidden when nothing is selectable."""
    if choices is None:
        raise InterviewScopeError(f"No choice list supplied for '{name}'")
    return [
        Question(
            QuestionKind.LIST, name, message,
            default=current_value(name),
            choices=choices,
            when=bool(selectable(choices)),
        ),
    ]


def choose_dev_hub(choices: list[ChoiceItem] | None) -> list[Question]:
    return choose_hub(
        "dev_hub_username", "Which DevHub do you want to use for this project?", choices,
    )


def choose_env_hub(choices: list[ChoiceItem] | None) -> list[Question]:
    return choose_hub(
        "env_hub_username", "Which Environment Hub do you want to use for this project?",
        choices,
    )


def confirm_no_hub(
    name: str, label: str, choices: list[ChoiceItem] | None, required: bool = True,
) -> list[Question]:
    """Offer another pass at a hub list after the sentinel was picked.

    A required hub always re-offers. An optional one only re-offers when the
    list held at least one real org besides the separator and sentinel.
    """
    if choices is None:
        raise InterviewScopeError(f"No choice list supplied for '{name}'")

    if required:
        message = f"Selecting a {label} is required. Would you like to see the choices again?"
    else:
        message = (
            f"Selecting a {label} is recommended but NOT required. "
            f"Would you like to see the choices again?"
        )

    def _when(answers: Answers, scope: InterviewScope) -> bool:
        if scope.current(name, answers) != NOT_SPECIFIED:
            return False
        return required or len(choices) > 2

    return [Question(QuestionKind.CONFIRM, "restart", message, default=True, when=_when)]


def confirm_no_dev_hub(choices: list[ChoiceItem] | None) -> list[Question]:
    return confirm_no_hub("dev_hub_username", "DevHub", choices, required=True)


def confirm_no_env_hub(choices: list[ChoiceItem] | None) -> list[Question]:
    return confirm_no_hub("env_hub_username", "Environment Hub", choices, required=False)


# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------


def _wants_git_remote(answers: Answers, scope: InterviewScope) -> bool:
    return bool(
        scope.current("is_initializing_git", answers)
        and scope.current("has_git_remote", answers)
    )


def provide_git_remote() -> list[Question]:
    return [
        Question(
            QuestionKind.CONFIRM, "is_initializing_git",
            "Would you like to initialize Git for this project? (RECOMMENDED)",
            default=current_value("is_initializing_git"),
        ),
        Question(
            QuestionKind.CONFIRM, "has_git_remote",
            "Have you created a Remote Git Repository for your project?",
            default=current_value("has_git_remote"),
            when=answered("is_initializing_git"),
        ),
        Question(
            QuestionKind.INPUT, "git_remote_uri", "What is the URI of your Git Remote?",
            default=current_value("git_remote_uri"),
            validate=validators.git_remote_uri,
            filter=str.strip,
            when=_wants_git_remote,
        ),
    ]


async def probe_git_remote(answers: Answers, scope: InterviewScope) -> None:
    """Record whether the chosen git remote can be reached.

    Re-runs on every pass; a remote can come online between prompts. An
    empty but reachable remote counts as reachable.
    """
    if not _wants_git_remote(answers, scope):
        scope.derived.is_git_remote_reachable = None
        return
    uri = scope.current("git_remote_uri", answers)
    try:
        await is_remote_empty_async(uri)
        reachable = True
    except RemoteCheckError as e:
        logger.info("Git remote check failed: %s", e)
        reachable = False
    scope.derived.is_git_remote_reachable = reachable


def confirm_no_git_remote() -> list[Question]:
    """Acknowledge an unreachable remote, or skipping one altogether.

    Both questions answer "continue anyway?", the opposite of a restart
    request, so the confirmation using them must be inverted.
    """

    def _unreachable(answers: Answers, scope: InterviewScope) -> bool:
        return scope.derived.is_git_remote_reachable is False

    def _skipping_remote(answers: Answers, scope: InterviewScope) -> bool:
        if "restart" in answers:
            return False
        return bool(
            scope.current("is_initializing_git", answers)
            and scope.current("has_git_remote", answers) is not True
        )

    return [
        Question(
            QuestionKind.CONFIRM, "restart",
            "The Git Remote you specified does not exist or is unreachable. Continue anyway?",
            default=False,
            when=_unreachable,
        ),
        Question(
            QuestionKind.CONFIRM, "restart",
            "Specifying a Git Remote is strongly recommended. Skip anyway?",
            default=False,
            when=_skipping_remote,
        ),
    ]


# ---------------------------------------------------------------------------
# Final confirmation
# ---------------------------------------------------------------------------


def confirm_proceed_restart(message: str) -> list[Question]:
    return [
        Question(QuestionKind.CONFIRM, "proceed", message, default=False),
        Question(
            QuestionKind.CONFIRM, "restart",
            "Would you like to start again and enter new values?",
            default=True,
            when=lambda answers, scope: not answers.get("proceed"),
        ),
    ]
