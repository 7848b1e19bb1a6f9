"""keystone create demo - demo project wired to a DevHub and Environment Hub."""

import logging
from typing import Any

from core.errors import OrgDiscoveryError
from core.orgs import (
    build_org_map,
    discover_orgs,
    identify_env_hub_orgs,
    identify_hub_orgs,
)
from core.status import StatusMessage, StatusType
from generators.base import ProjectGenerator
from interview.choices import NOT_SPECIFIED, build_org_choices
from interview.engine import Confirmation, Interview
from interview.questions import (
    choose_dev_hub,
    choose_env_hub,
    confirm_no_dev_hub,
    confirm_no_env_hub,
    confirm_no_git_remote,
    escape_local_path,
    probe_git_remote,
    provide_developer_info,
    provide_git_remote,
    provide_project_info,
    provide_target_directory,
)
from interview.scope import Answers, InterviewScope, validate_interview_scope

logger = logging.getLogger("keystone.generator.demo")

DEV_HUB_REQUIRED = "A connection to your DevHub is required to continue."


def _print_status(msg: str) -> None:
    print(f"\033[36m[keystone]\033[0m {msg}")


def _dev_hub_group(scope: InterviewScope) -> list:
    validate_interview_scope(scope, "dev_hub_choices")
    return choose_dev_hub(scope.shared.dev_hub_choices)


def _env_hub_group(scope: InterviewScope) -> list:
    validate_interview_scope(scope, "env_hub_choices")
    return choose_env_hub(scope.shared.env_hub_choices)


def _require_dev_hub(answers: Answers, scope: InterviewScope) -> str | bool:
    if answers.get("dev_hub_username", NOT_SPECIFIED) == NOT_SPECIFIED:
        return DEV_HUB_REQUIRED
    return False


class CreateDemoGenerator(ProjectGenerator):
    command_name = "keystone:create:demo"
    template_name = "demo"
    confirmation_question = "Create a new demo project based on the above settings?"

    def default_answers(self) -> dict[str, Any]:
        return {
            "target_directory": escape_local_path(self.output_dir),
            "developer_name": "Universal Containers",
            "developer_alias": "univ-ctrs",
            "project_name": "Universal Containers Demo App",
            "project_alias": "uc-demo-app",
            "project_type": "demo",
            "dev_hub_username": NOT_SPECIFIED,
            "env_hub_username": NOT_SPECIFIED,
            "is_initializing_git": True,
            "has_git_remote": True,
            "git_remote_uri": "https://github.com/my-org/my-repo.git",
        }

    def initializing(self) -> None:
        super().initializing()
        _print_status("Scanning authenticated orgs...")
        try:
            orgs = discover_orgs()
        except OrgDiscoveryError as e:
            logger.error("Org discovery failed: %s", e)
            self.status.abort(StatusMessage(StatusType.ERROR, "Org Discovery", f"Failed - {e}"))
            return
        if not orgs:
            self.status.abort(StatusMessage(
                StatusType.ERROR, "Org Discovery",
                "Failed - No connected orgs found. Authenticate to your DevHub and try again.",
            ))
            return

        hubs = identify_hub_orgs(orgs)
        env_hubs = identify_env_hub_orgs(orgs)
        _print_status(f"  Found {len(orgs)} connected orgs ({len(hubs)} DevHubs)")
        self.shared.dev_hub_choices = build_org_choices(hubs)
        self.shared.env_hub_choices = build_org_choices(env_hubs)
        self.shared.org_map = build_org_map(orgs)

    def build_interview(self, interview: Interview) -> None:
        limits = (self.settings.name_max_length, self.settings.project_alias_max_length)
        interview.create_group("Target Directory", lambda scope: provide_target_directory())
        interview.create_group(
            "DevHub", _dev_hub_group,
            confirmation=Confirmation(lambda scope: confirm_no_dev_hub(scope.shared.dev_hub_choices)),
            abort=_require_dev_hub,
        )
        interview.create_group(
            "Environment Hub", _env_hub_group,
            confirmation=Confirmation(lambda scope: confirm_no_env_hub(scope.shared.env_hub_choices)),
        )
        interview.create_group(
            "Developer Info",
            lambda scope: provide_developer_info(
                scope.shared.name_max_length, scope.shared.alias_max_length,
            ),
        )
        interview.create_group("Project Info", lambda scope: provide_project_info(*limits))
        interview.create_group(
            "Git", lambda scope: provide_git_remote(),
            confirmation=Confirmation(
                lambda scope: confirm_no_git_remote(), invert=True, probes=[probe_git_remote],
            ),
        )

    def _alias_for(self, username: str) -> str:
        org = self.shared.org_map.get(username)
        return org.alias if org else NOT_SPECIFIED

    def display_answers(self, answers: Answers, scope: InterviewScope) -> list[tuple[str, Any]]:
        def current(name: str) -> Any:
            return scope.current(name, answers)

        rows: list[tuple[str, Any]] = [
            ("Target Directory", current("target_directory")),
            ("Dev Hub Alias", self._alias_for(current("dev_hub_username"))),
            ("Env Hub Alias", self._alias_for(current("env_hub_username"))),
            ("Developer Name", current("developer_name")),
            ("Developer Alias", current("developer_alias")),
            ("Project Name", current("project_name")),
            ("Project Alias", current("project_alias")),
            ("Initialize Git Repo", current("is_initializing_git")),
        ]
        if current("is_initializing_git"):
            rows.append(("Has Git Remote", current("has_git_remote")))
            if current("has_git_remote"):
                rows.append(("Git Remote URI", current("git_remote_uri")))
        return rows

    def configure_answers(self, answers: dict[str, Any]) -> None:
        answers["dev_hub_alias"] = self._alias_for(answers["dev_hub_username"])
        answers["env_hub_alias"] = self._alias_for(answers["env_hub_username"])
