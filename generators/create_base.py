"""keystone create base - plain or managed-package project, no org discovery."""

from typing import Any

from generators.base import ProjectGenerator
from interview.engine import Confirmation, Interview
from interview.questions import (
    confirm_no_git_remote,
    escape_local_path,
    probe_git_remote,
    provide_git_remote,
    provide_package_info,
    provide_project_info,
    provide_target_directory,
)
from interview.scope import Answers, InterviewScope

DEFAULT_PACKAGE_DIRECTORY = "force-app"


class CreateBaseGenerator(ProjectGenerator):
    command_name = "keystone:create:base"
    template_name = "base"

    def default_answers(self) -> dict[str, Any]:
        return {
            "project_name": "My Project",
            "project_alias": "my-project",
            "project_type": "base",
            "target_directory": escape_local_path(self.output_dir),
            "is_creating_managed_package": True,
            "namespace_prefix": "my_ns_prefix",
            "package_name": "My Managed Package",
            "package_directory": DEFAULT_PACKAGE_DIRECTORY,
            "metadata_package_id": "033000000000000",
            "package_version_id": "04t000000000000",
            "is_initializing_git": True,
            "has_git_remote": True,
            "git_remote_uri": "https://github.com/my-org/my-repo.git",
        }

    def build_interview(self, interview: Interview) -> None:
        interview.create_group(
            "Project Info",
            lambda scope: provide_project_info(
                scope.shared.name_max_length, self.settings.project_alias_max_length,
            ),
        )
        interview.create_group("Target Directory", lambda scope: provide_target_directory())
        interview.create_group(
            "Packaging", lambda scope: provide_package_info(scope.shared.name_max_length),
        )
        interview.create_group(
            "Git", lambda scope: provide_git_remote(),
            confirmation=Confirmation(
                lambda scope: confirm_no_git_remote(), invert=True, probes=[probe_git_remote],
            ),
        )

    def display_answers(self, answers: Answers, scope: InterviewScope) -> list[tuple[str, Any]]:
        def current(name: str) -> Any:
            return scope.current(name, answers)

        rows: list[tuple[str, Any]] = [
            ("Project Name", current("project_name")),
            ("Project Alias", current("project_alias")),
            ("Target Directory", current("target_directory")),
            ("Managed Package", current("is_creating_managed_package")),
        ]
        if current("is_creating_managed_package"):
            rows += [
                ("Namespace Prefix", current("namespace_prefix")),
                ("Package Name", current("package_name")),
                ("Metadata Package ID", current("metadata_package_id")),
                ("Package Version ID", current("package_version_id")),
            ]
        rows.append(("Initialize Git Repo", current("is_initializing_git")))
        if current("is_initializing_git") and current("has_git_remote"):
            rows.append(("Git Remote URI", current("git_remote_uri")))
        return rows

    def configure_answers(self, answers: dict[str, Any]) -> None:
        if answers.get("is_creating_managed_package"):
            answers["package_directory"] = answers["namespace_prefix"]
            answers["namespace"] = answers["namespace_prefix"]
        else:
            answers["package_directory"] = DEFAULT_PACKAGE_DIRECTORY
            answers["namespace"] = ""
