"""Tests for interview/choices.py."""

import pytest

from core.orgs import OrgInfo
from interview.choices import (
    NOT_SPECIFIED,
    Choice,
    Separator,
    build_org_choices,
    not_specified_choice,
    selectable,
)


def _org(username: str, alias: str = "") -> OrgInfo:
    return OrgInfo(username=username, alias=alias, connected_status="Connected")


class TestBuildOrgChoices:
    """Org list -> choices + separator + sentinel."""

    @pytest.mark.parametrize("count", [0, 1, 2, 5])
    def test_length_and_sentinel_last(self, count: int) -> None:
        orgs = [_org(f"user{i}@acme.com", f"org{i}") for i in range(count)]
        choices = build_org_choices(orgs)
        assert len(choices) == count + 2
        assert isinstance(choices[-2], Separator)
        last = choices[-1]
        assert isinstance(last, Choice)
        assert last.value == NOT_SPECIFIED

    def test_sorted_by_alias(self) -> None:
        orgs = [_org("b@acme.com", "beta"), _org("a@acme.com", "Alpha"), _org("z@acme.com")]
        values = [c.value for c in selectable(build_org_choices(orgs))]
        assert values == ["a@acme.com", "b@acme.com", "z@acme.com", NOT_SPECIFIED]

    def test_labels(self) -> None:
        choices = build_org_choices([_org("a@acme.com", "alpha"), _org("b@acme.com", "be")])
        first = choices[0]
        assert isinstance(first, Choice)
        assert first.name == "alpha -- a@acme.com"
        assert first.short == "alpha (a@acme.com)"
        assert choices[1].name == "be    -- b@acme.com"

    def test_custom_sentinel_label(self) -> None:
        choices = build_org_choices([], not_listed_label="<None>")
        assert choices[-1].name == "<None>"


class TestChoice:
    """Choice defaults."""

    def test_short_defaults_to_name(self) -> None:
        assert Choice(name="Label", value="v").short == "Label"

    def test_not_specified_choice(self) -> None:
        choice = not_specified_choice()
        assert choice.value == NOT_SPECIFIED
        assert choice.short == "Not Specified"

    def test_selectable_drops_separators(self) -> None:
        items = [Choice("a", "a"), Separator(), Choice("b", "b")]
        assert [c.value for c in selectable(items)] == ["a", "b"]
