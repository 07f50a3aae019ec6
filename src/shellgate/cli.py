"""shellgate command line interface."""

from __future__ import annotations

from pathlib import Path

import typer
from prompt_toolkit import PromptSession
from rich.console import Console
from rich.table import Table

from shellgate.config import get_settings
from shellgate.framework import ShellGate
from shellgate.host import (
    BufferedOutput,
    ContextStack,
    HostServices,
    ManPageViewer,
    RecordingChannel,
    SessionDirectory,
    SubprocessChannel,
)
from shellgate.logging_utils import configure_logging
from shellgate.session import Session
from shellgate.types import PipelineOutcome, RunState

app = typer.Typer(name="shellgate", help="Rewrite or intercept shell commands before they run", add_completion=False)
console = Console()


class LaunchOpener:
    """Opens files with the desktop's default application."""

    def __init__(self, contexts: ContextStack) -> None:
        self._contexts = contexts

    def open(self, path: Path, session: Session) -> None:
        if not path.exists():
            session.diagnostic(f"ff: no such file: {path}")
            return
        typer.launch(str(path))
        self._contexts.set_visible_context(f"file:{path}")


def _load_gate(services: HostServices | None = None, **overrides: object) -> ShellGate:
    settings = get_settings(**overrides)
    configure_logging(profile="cli", level=settings.log_level)
    gate = ShellGate(settings, services)
    gate.load_plugins()
    return gate


@app.command("run")
def run(
    line: str = typer.Argument(..., help="Command line to run through the pipeline"),
    label: str | None = typer.Option(None, "--label", "-l", help="Initial session label"),
    no_plugins: bool = typer.Option(False, "--no-plugins", help="Skip entry point plugins"),
) -> None:
    """Run one line against an in-memory shell and show what would reach it."""

    overrides: dict[str, object] = {"load_plugins": False} if no_plugins else {}
    gate = _load_gate(**overrides)
    channel = RecordingChannel()
    session = gate.create_session(channel, label=label)
    outcome = gate.create_runner().run(line, session)

    table = Table(show_header=False, box=None)
    table.add_row("state", outcome.state.value)
    table.add_row("forwarded", repr(channel.last))
    table.add_row("label", session.label)
    if outcome.diagnostic:
        table.add_row("diagnostic", outcome.diagnostic)
    console.print(table)

    output = gate.services.output
    if isinstance(output, BufferedOutput):
        for text in output.lines(session.shell_context):
            typer.echo(text)


@app.command("repl")
def repl(
    workspace: Path | None = typer.Option(None, "--workspace", "-w", help="Working directory"),  # noqa: B008
) -> None:
    """Interactive shell with the pipeline in front of bash."""

    settings = get_settings()
    configure_logging(profile="cli", level=settings.log_level)
    contexts = ContextStack(settings.shell_label)
    output = BufferedOutput()
    services = HostServices(
        contexts=contexts,
        output=output,
        opener=LaunchOpener(contexts),
        viewer=ManPageViewer(contexts, output),
        directory=SessionDirectory(),
    )
    gate = ShellGate(settings, services)
    gate.load_plugins()
    cwd = (workspace or settings.workspace_path or Path.cwd()).resolve()
    channel = SubprocessChannel(output, settings.shell_label, cwd=cwd, noop_token=settings.noop_token)
    session = gate.create_session(channel, cwd=cwd)
    runner = gate.create_runner()
    prompt_session: PromptSession[str] = PromptSession()

    while True:
        try:
            line = prompt_session.prompt(f"{session.label} $ ")
        except (EOFError, KeyboardInterrupt):
            break
        if line.strip() in {"exit", "logout"}:
            break
        seen_views = len(contexts.secondary)
        outcome = runner.run(line, session)
        _render_turn(outcome, session, output, contexts.secondary[seen_views:])


def _render_turn(outcome: PipelineOutcome, session: Session, output: BufferedOutput, new_views: list[str]) -> None:
    for text in output.drain(session.shell_context):
        console.print(text, markup=False, highlight=False)
    for view in new_views:
        console.rule(view)
        for text in output.drain(view):
            console.print(text, markup=False, highlight=False)
    if outcome.state is RunState.ABORTED and outcome.diagnostic:
        console.print(f"[dim]{outcome.diagnostic}[/dim]")


@app.command("hooks")
def list_hooks() -> None:
    """Show hook implementation mapping."""

    gate = _load_gate()
    report = gate.hook_report()
    if not report:
        typer.echo("(no hook implementations)")
        return
    for hook_name, plugins in report.items():
        typer.echo(f"{hook_name}: {', '.join(plugins)}")
    for plugin_name, error in gate.failed_plugins.items():
        typer.echo(f"failed {plugin_name}: {error}")


@app.command("config")
def show_config() -> None:
    """Print the effective chain order and command mapping."""

    gate = _load_gate()
    config = gate.config
    typer.echo(f"preprocessors: {', '.join(config.chain.names()) or '(none)'}")
    for name in config.registry.names():
        typer.echo(f"processor {name}")
