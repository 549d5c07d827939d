import io
from pathlib import Path

import pygit2
import pytest
from rich.console import Console

from eureka.printer import Printer


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.config and environment overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("EUREKA_REPO", raising=False)
    monkeypatch.delenv("EUREKA_LOG", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.delenv("PAGER", raising=False)


def make_repo(path: Path) -> pygit2.Repository:
    """Repository on `main` with identity, one commit "initial-msg" and an untracked README.md."""
    repo = pygit2.init_repository(str(path), initial_head="main")
    repo.config["user.name"] = "some-name"
    repo.config["user.email"] = "some-email"

    tree_id = repo.index.write_tree()
    signature = repo.default_signature
    repo.create_commit("HEAD", signature, signature, "initial-msg", tree_id, [])

    (path / "README.md").write_text("# Ideas\n", encoding="utf-8")
    return repo


@pytest.fixture
def repo_path(tmp_path) -> Path:
    path = tmp_path / "ideas-repo"
    make_repo(path)
    return path


@pytest.fixture
def remote_path(tmp_path, repo_path) -> Path:
    """Bare repository registered as origin of repo_path."""
    path = tmp_path / "remote.git"
    pygit2.init_repository(str(path), bare=True)
    pygit2.Repository(str(repo_path)).remotes.create("origin", str(path))
    return path


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def printer(output) -> Printer:
    return Printer(Console(file=output, force_terminal=False, width=120))
