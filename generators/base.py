"""Generator lifecycle shared by every `keystone create` command.

Phases run in order: initializing, prompting, configuring, writing,
install, end. Any phase may abort the shared GeneratorStatus; later
phases check it and stand down, and end() reports what happened.
"""

import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Mapping

from core.config import TEMPLATES_DIR, Settings, get_settings
from core.errors import KeystoneError, ShellError
from core.git import (
    git_add_and_commit,
    git_init,
    git_remote_add_origin,
    is_git_installed,
    is_remote_reachable,
    repo_name_from_uri,
)
from core.status import GeneratorStatus, StatusMessage, StatusType
from generators.templating import build_context, copy_template_tree
from interview.engine import Confirmation, Interview
from interview.prompt import Prompter
from interview.questions import confirm_proceed_restart, resolve_local_path
from interview.scope import Answers, InterviewScope, SharedData

logger = logging.getLogger("keystone.generator")

SUCCESS = StatusType.SUCCESS
WARNING = StatusType.WARNING
ERROR = StatusType.ERROR


def _print_status(msg: str) -> None:
    print(f"\033[36m[keystone]\033[0m {msg}")


def _print_error(msg: str) -> None:
    print(f"\033[31m[keystone error]\033[0m {msg}", file=sys.stderr)


class ProjectGenerator:
    """Base class. Subclasses supply defaults, groups, and a template name."""

    command_name = "keystone:create"
    template_name = ""
    confirmation_question = "Create a new project based on the above settings?"
    commit_message = "Initial commit"

    def __init__(
        self,
        output_dir: Path,
        settings: Settings | None = None,
        status: GeneratorStatus | None = None,
        prompter: Prompter | None = None,
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self.output_dir = Path(output_dir).expanduser().resolve()
        self.settings = settings or get_settings()
        self.status = status or GeneratorStatus()
        self.prompter = prompter
        self.templates_dir = templates_dir
        self.shared = SharedData(
            command_name=self.command_name,
            confirmation_question=self.confirmation_question,
            name_max_length=self.settings.name_max_length,
            alias_max_length=self.settings.alias_max_length,
        )
        self.final_answers: Mapping[str, Any] | None = None
        self.answers: dict[str, Any] = {}
        self.destination_root: Path | None = None
        self.install_complete = True

    # -----------------------------------------------------------------------
    # Subclass hooks
    # -----------------------------------------------------------------------

    def default_answers(self) -> dict[str, Any]:
        raise NotImplementedError

    def build_interview(self, interview: Interview) -> None:
        raise NotImplementedError

    def display_answers(self, answers: Answers, scope: InterviewScope) -> list[tuple[str, Any]]:
        return [(key.replace("_", " ").title(), value) for key, value in answers.items()]

    def configure_answers(self, answers: dict[str, Any]) -> None:
        """Derive extra template values from the final answers, in place."""

    def resolve_destination(self, answers: Mapping[str, Any]) -> Path:
        return resolve_local_path(answers["target_directory"]) / answers["project_alias"]

    # -----------------------------------------------------------------------
    # Phases
    # -----------------------------------------------------------------------

    def initializing(self) -> None:
        self.status.start()

    async def prompting(self) -> None:
        interview = Interview(
            self.default_answers(),
            shared=self.shared,
            status=self.status,
            confirmation=Confirmation(
                lambda scope: confirm_proceed_restart(scope.shared.confirmation_question)
            ),
            display=self.display_answers,
            prompter=self.prompter,
        )
        self.build_interview(interview)
        self.final_answers = await interview.start()

    def configuring(self) -> None:
        assert self.final_answers is not None
        self.answers = dict(self.final_answers)
        if not (self.answers.get("is_initializing_git") and self.answers.get("has_git_remote")):
            self.answers["has_git_remote"] = False
            self.answers["git_remote_uri"] = ""
        self.configure_answers(self.answers)
        self.destination_root = self.resolve_destination(self.answers)
        logger.debug("Configured answers: %s", self.answers)

    def writing(self) -> None:
        assert self.destination_root is not None
        print()
        _print_status(f"Creating project at {self.destination_root}...")
        values, tags = build_context(self.answers)
        try:
            created = copy_template_tree(
                self.templates_dir / self.template_name, self.destination_root, values, tags,
            )
        except (KeystoneError, OSError) as e:
            logger.error("Project creation failed: %s", e)
            self.status.abort(StatusMessage(ERROR, "Project Creation", f"Failed - {e}"))
            return
        for f in created:
            _print_status(f"  Created: {f}")
        self.status.add(SUCCESS, "Project Creation", f"Success - Project created at {self.destination_root}")

    def install(self) -> None:
        """Initialize git, commit, and attach the remote. Failures become warnings."""
        assert self.destination_root is not None
        answers = self.answers
        if answers.get("is_initializing_git") is not True:
            self.status.add(
                SUCCESS, "Git Initialization",
                "Skipped - Git initialization skipped at user's request",
            )
            return

        print()
        _print_status("Adding project to Git...")
        if not is_git_installed():
            self._warn(
                "Initializing Git",
                "Warning - git executable not found in your environment - no Git operations attempted",
            )
            return

        try:
            git_init(self.destination_root)
        except ShellError as e:
            logger.warning("git init failed: %s", e)
            self._warn("Git Initialization", "Warning - Git could not be initialized in your project folder")
            return
        self.status.add(
            SUCCESS, "Git Initialization",
            f"Success - Repository created successfully ({answers.get('project_alias', '')})",
        )

        try:
            git_add_and_commit(self.destination_root, self.commit_message)
        except ShellError as e:
            logger.warning("git commit failed: %s", e)
            self._warn(
                "Git Commit",
                "Warning - Attempt to stage and commit project files failed - Nothing to commit",
            )
        else:
            self.status.add(
                SUCCESS, "Git Commit",
                "Success - Staged all project files and executed the initial commit",
            )

        uri = answers.get("git_remote_uri") or ""
        if not uri:
            return
        if not is_remote_reachable(uri):
            self._warn("Git Remote", f"Warning - Could not add Git Remote - {uri} is invalid/unreachable")
            return
        try:
            git_remote_add_origin(self.destination_root, uri)
        except ShellError as e:
            logger.warning("git remote add failed: %s", e)
            self._warn(
                "Git Remote",
                'Warning - Could not add Git Remote - A remote named "origin" already exists',
            )
        else:
            self.status.add(
                SUCCESS, "Git Remote",
                f'Success - Remote repository {repo_name_from_uri(uri)} ({uri}) added as "origin"',
            )

    def end(self) -> int:
        """Print the run summary. 0 on success (warnings included), 1 on abort."""
        if self.status.aborted:
            self.status.print_status_messages()
            print()
            _print_error(f"{self.command_name} exited without creating a project")
            return 1

        if self.status.running:
            self.status.complete()
        if self.install_complete and not self.status.has_warning:
            self.status.add(SUCCESS, "Command Succeeded", f"{self.command_name} completed successfully")
        else:
            self.status.add(WARNING, "Command Succeeded", f"{self.command_name} completed with warnings")
        self.status.print_status_messages()
        print()
        return 0

    # -----------------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------------

    async def run(self) -> int:
        """Run every phase. Returns the process exit code.

        asyncio.run() replaces the SIGINT handler with one that only cancels
        the main task, which never fires while input() blocks. Ctrl+C must
        raise KeyboardInterrupt at the prompt, so the default handler is
        put back until the run finishes.
        """
        previous = None
        if threading.current_thread() is threading.main_thread():
            previous = signal.signal(signal.SIGINT, signal.default_int_handler)
        try:
            return await self._run()
        except KeyboardInterrupt:
            print()
            self._abort("Command Aborted", f"{self.command_name} canceled by user")
        except EOFError:
            self._abort(
                "Command Aborted",
                "No terminal input available. Run keystone in an interactive terminal.",
            )
        finally:
            if previous is not None:
                signal.signal(signal.SIGINT, previous)
        return self.end()

    async def _run(self) -> int:
        logger.info("Starting %s in %s", self.command_name, self.output_dir)
        self.initializing()
        if not self.status.aborted:
            await self.prompting()
        if not self.status.aborted and self.final_answers is not None:
            self.configuring()
            self.writing()
            if not self.status.aborted:
                self.install()
        return self.end()

    def _warn(self, title: str, message: str) -> None:
        self.install_complete = False
        self.status.add(WARNING, title, message)

    def _abort(self, title: str, message: str) -> None:
        if not self.status.running and not self.status.aborted and not self.status.completed:
            self.status.start()
        if self.status.completed:
            return
        self.status.abort(StatusMessage(ERROR, title, message))
