"""
The capture flow: ask for an idea, let the user write it down, then
commit and push it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from eureka.config import DEFAULT_BRANCH, DEFAULT_SSH_KEY, ConfigKey, ConfigManager, load_config
from eureka.git import IDEA_FILE, GitManagement
from eureka.printer import Printer
from eureka.program_access import ProgramAccess
from eureka.reader import Reader

logger = logging.getLogger(__name__)


@dataclass
class EurekaOptions:
    clear_config: bool = False
    view: bool = False


class Eureka:
    """Wires config, terminal I/O and git together for one run."""

    def __init__(
        self,
        config_manager: ConfigManager,
        printer: Printer,
        reader: Reader,
        make_git: Callable[[str], GitManagement],
        program_access: ProgramAccess,
        config: dict[str, Any] | None = None,
    ):
        self.config_manager = config_manager
        self.printer = printer
        self.reader = reader
        self.make_git = make_git
        self.program_access = program_access
        self.config = config or load_config()

    @property
    def branch(self) -> str:
        return self.config.get("git", {}).get("branch") or DEFAULT_BRANCH

    def run(self, opts: EurekaOptions) -> None:
        if opts.clear_config:
            self.config_manager.clear()
            self.printer.success("Cleared stored configuration.")
            return

        if self.config_manager.is_missing():
            self.printer.banner()
            self.setup_repo_path()
            self.setup_ssh_key()

        if opts.view:
            self.program_access.open_pager(self.idea_file())
            return

        summary = self.ask_for_idea()
        self.program_access.open_editor(self.idea_file())
        self.git_add_commit_push(summary)

    def repo_path(self) -> Path:
        repo = self.config_manager.read(ConfigKey.REPO)
        if repo is None:
            raise ValueError("No repository configured")
        return Path(repo).expanduser()

    def idea_file(self) -> Path:
        return self.repo_path() / IDEA_FILE

    def setup_repo_path(self) -> None:
        if self.config_manager.read(ConfigKey.REPO) is not None:
            return
        while True:
            self.printer.input_header("Absolute path to your idea repo:")
            answer = self.reader.read_input()
            if answer and Path(answer).expanduser().is_dir():
                self.config_manager.write(ConfigKey.REPO, answer)
                return
            self.printer.error(f"Not a directory: {answer!r}")

    def setup_ssh_key(self) -> None:
        if self.config_manager.read(ConfigKey.SSH_KEY) is not None:
            return
        self.printer.input_header(f"Path to your ssh private key [{DEFAULT_SSH_KEY}]:")
        answer = self.reader.read_input()
        self.config_manager.write(ConfigKey.SSH_KEY, answer or str(DEFAULT_SSH_KEY))

    def ask_for_idea(self) -> str:
        summary = ""
        while not summary:
            self.printer.input_header(">> Idea summary:")
            summary = self.reader.read_input()
        return summary

    def git_add_commit_push(self, subject: str) -> None:
        branch = self.branch

        ssh_key = self.config_manager.read(ConfigKey.SSH_KEY) or str(DEFAULT_SSH_KEY)
        git = self.make_git(ssh_key)

        self.printer.println(f"Adding and committing your new idea to {branch}..")
        git.open(self.repo_path())
        git.checkout_branch(branch)
        git.add()
        commit_id = git.commit(subject)
        logger.info("Committed idea as %s", commit_id)
        self.printer.success("Added and committed!")

        self.printer.println("Pushing your new idea..")
        git.push(branch)
        self.printer.success("Pushed!")
