from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from shellgate.cli import LaunchOpener, app
from shellgate.host import ContextStack
from shellgate.session import Session


def test_run_forwards_plain_command() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["run", "ls -la", "--no-plugins"])

    assert result.exit_code == 0
    assert "forwarded" in result.stdout
    assert "'ls -la'" in result.stdout


def test_run_suppresses_calculator_and_prints_result() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["run", "calc 6 * 7", "--no-plugins"])

    assert result.exit_code == 0
    assert "suppressed" in result.stdout
    assert "42" in result.stdout


def test_hooks_lists_builtin_plugin() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["hooks"])

    assert result.exit_code == 0
    assert "provide_processors: " in result.stdout
    assert "builtin" in result.stdout


def test_config_prints_chain_and_processors() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    assert "preprocessors: substitution, credential_prefix, relabel" in result.stdout
    assert "processor man" in result.stdout


def test_log_level_comes_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    levels: list[str | None] = []

    def capture(*, profile: str = "default", level: str | None = None) -> None:
        levels.append(level)

    monkeypatch.setattr("shellgate.cli.configure_logging", capture)
    monkeypatch.setenv("SHELLGATE_LOG_LEVEL", "ERROR")

    result = CliRunner().invoke(app, ["config"])

    assert result.exit_code == 0
    assert levels == ["ERROR"]


def test_launch_opener_launches_and_takes_view(monkeypatch: pytest.MonkeyPatch, session: Session, tmp_path: Path) -> None:
    launched: list[str] = []
    monkeypatch.setattr("shellgate.cli.typer.launch", lambda target: launched.append(target) or 0)
    contexts = ContextStack("*shell*")
    target = tmp_path / "notes.txt"
    target.write_text("notes", encoding="utf-8")

    LaunchOpener(contexts).open(target, session)
    LaunchOpener(contexts).open(tmp_path / "missing.txt", session)

    assert launched == [str(target)]
    assert contexts.current_context() == f"file:{target}"
    assert "no such file" in session.output.text("*shell*")


def test_repl_runs_lines_until_exit(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    lines = iter(["calc 6 * 7", "echo hi", "", "exit", "never reached"])
    prompts: list[str] = []
    forwarded: list[str] = []

    class FakePromptSession:
        def prompt(self, message: str) -> str:
            prompts.append(message)
            return next(lines)

    def fake_run(args: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        forwarded.append(args[-1])
        return subprocess.CompletedProcess(args, 0, stdout="hi from bash\n", stderr="")

    monkeypatch.setattr("shellgate.cli.PromptSession", FakePromptSession)
    monkeypatch.setattr("shellgate.host.subprocess.run", fake_run)

    result = CliRunner().invoke(app, ["repl", "--workspace", str(tmp_path)])

    assert result.exit_code == 0
    assert "42" in result.stdout
    assert "hi from bash" in result.stdout
    assert forwarded == ["echo hi"]
    assert prompts == ["*shell* $ "] * 4


def test_repl_stops_on_end_of_input(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    class ClosedPromptSession:
        def prompt(self, message: str) -> str:
            raise EOFError

    monkeypatch.setattr("shellgate.cli.PromptSession", ClosedPromptSession)

    result = CliRunner().invoke(app, ["repl", "--workspace", str(tmp_path)])

    assert result.exit_code == 0
