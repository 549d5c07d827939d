import subprocess

import pytest

from eureka import program_access
from eureka.program_access import ProgramAccess, ProgramError


@pytest.fixture
def runs(monkeypatch):
    calls = []

    def fake_run(cmd, check):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(program_access.subprocess, "run", fake_run)
    return calls


def test_defaults(runs, tmp_path):
    access = ProgramAccess()
    access.open_editor(tmp_path / "README.md")
    access.open_pager(tmp_path / "README.md")

    assert runs == [
        ["vi", str(tmp_path / "README.md")],
        ["less", str(tmp_path / "README.md")],
    ]


def test_environment_with_arguments(runs, monkeypatch, tmp_path):
    monkeypatch.setenv("EDITOR", "code --wait")
    ProgramAccess().open_editor(tmp_path / "README.md")

    assert runs == [["code", "--wait", str(tmp_path / "README.md")]]


def test_config_beats_environment(runs, monkeypatch, tmp_path):
    monkeypatch.setenv("PAGER", "more")
    ProgramAccess({"editor": {"pager": "bat --plain"}}).open_pager(tmp_path / "README.md")

    assert runs == [["bat", "--plain", str(tmp_path / "README.md")]]


def test_non_zero_exit_raises(monkeypatch, tmp_path):
    def fake_run(cmd, check):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(program_access.subprocess, "run", fake_run)

    with pytest.raises(ProgramError, match="exited with status 1"):
        ProgramAccess().open_editor(tmp_path / "README.md")


def test_missing_program_raises(monkeypatch, tmp_path):
    monkeypatch.setenv("EDITOR", "definitely-not-an-editor")

    def fake_run(cmd, check):
        raise FileNotFoundError(2, "No such file", cmd[0])

    monkeypatch.setattr(program_access.subprocess, "run", fake_run)

    with pytest.raises(ProgramError, match="definitely-not-an-editor"):
        ProgramAccess().open_editor(tmp_path / "README.md")
