"""Session context passed into every pipeline run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from shellgate.host import ContextService, LabelDirectory, OutputSink, SessionDirectory, ShellChannel
from shellgate.types import ContextId


@dataclass
class Session:
    """One shell channel with its label, visible-context handle and output sink.

    ``shell_context`` identifies the shell's own view and stays stable when
    the human-visible ``label`` changes.
    """

    label: str
    channel: ShellChannel
    contexts: ContextService
    output: OutputSink
    directory: LabelDirectory = field(default_factory=SessionDirectory)
    shell_context: ContextId = ""
    cwd: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        if not self.shell_context:
            self.shell_context = self.label
        self.directory.claim(self.label)

    def rename(self, label: str) -> None:
        old = self.label
        self.directory.rename(old, label)
        self.label = label
        logger.info("session.renamed old={} new={}", old, label)

    def write(self, text: str) -> None:
        """Append text to the shell's own output."""

        self.output.append(self.shell_context, text)

    def diagnostic(self, text: str) -> None:
        logger.warning("session.diagnostic label={} message={}", self.label, text)
        self.write(text)
