"""Selectable choices for list questions."""

from dataclasses import dataclass
from typing import Union

from core.orgs import OrgInfo

NOT_SPECIFIED = "NOT_SPECIFIED"
NOT_LISTED_LABEL = "<Not Listed>"


@dataclass(frozen=True)
class Choice:
    name: str  # shown in the list
    value: str  # stored in the answers
    short: str = ""  # shown once selected

    def __post_init__(self) -> None:
        if not self.short:
            object.__setattr__(self, "short", self.name)


@dataclass(frozen=True)
class Separator:
    """Visual divider inside a choice list. Never selectable."""

    line: str = "-" * 20


ChoiceItem = Union[Choice, Separator]


def not_specified_choice(label: str = NOT_LISTED_LABEL) -> Choice:
    return Choice(name=label, value=NOT_SPECIFIED, short="Not Specified")


def build_org_choices(
    orgs: list[OrgInfo], not_listed_label: str = NOT_LISTED_LABEL,
) -> list[ChoiceItem]:
    """Org choices sorted by alias then username, then separator + sentinel.

    Always returns len(orgs) + 2 items and the sentinel is always last.
    """
    ordered = sorted(orgs, key=lambda o: (o.alias.lower(), o.username.lower()))
    alias_width = max((len(o.alias) for o in ordered), default=0)
    choices: list[ChoiceItem] = [
        Choice(
            name=f"{o.alias:<{alias_width}} -- {o.username}",
            value=o.username,
            short=f"{o.alias} ({o.username})",
        )
        for o in ordered
    ]
    choices.append(Separator())
    choices.append(not_specified_choice(not_listed_label))
    return choices


def selectable(choices: list[ChoiceItem]) -> list[Choice]:
    return [c for c in choices if isinstance(c, Choice)]
