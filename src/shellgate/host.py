"""Host collaborator contracts and in-memory reference hosts."""

from __future__ import annotations

import shutil
import subprocess
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from shellgate.builtin.evaluators import Calculator, PythonEvaluator
from shellgate.types import ContextId, Evaluator, Naming

if TYPE_CHECKING:
    from shellgate.session import Session


class ShellChannel(Protocol):
    """Next-input-line contract of the underlying shell process."""

    def forward(self, text: str) -> None: ...


class ContextService(Protocol):
    """What the user currently sees."""

    def current_context(self) -> ContextId: ...

    def set_visible_context(self, context: ContextId) -> None: ...

    def open_secondary_view(self, context: ContextId) -> None: ...


class OutputSink(Protocol):
    def append(self, context: ContextId, text: str) -> None: ...


class LabelDirectory(Protocol):
    def claim(self, label: str) -> None: ...

    def label_in_use(self, label: str) -> bool: ...

    def rename(self, old: str, new: str) -> None: ...


class FileOpener(Protocol):
    def open(self, path: Path, session: Session) -> None: ...


class DocumentationViewer(Protocol):
    def show(self, topic: str, session: Session) -> None: ...


class RecordingChannel:
    """Shell channel that keeps every forwarded line."""

    def __init__(self) -> None:
        self.forwarded: list[str] = []

    def forward(self, text: str) -> None:
        self.forwarded.append(text)

    @property
    def last(self) -> str | None:
        return self.forwarded[-1] if self.forwarded else None


class ContextStack:
    """Visible context plus the secondary views opened next to it."""

    def __init__(self, initial: ContextId) -> None:
        self._visible = initial
        self.secondary: list[ContextId] = []

    def current_context(self) -> ContextId:
        return self._visible

    def set_visible_context(self, context: ContextId) -> None:
        self._visible = context

    def open_secondary_view(self, context: ContextId) -> None:
        if context in self.secondary:
            self.secondary.remove(context)
        self.secondary.append(context)


class BufferedOutput:
    """Output sink keeping appended text per context."""

    def __init__(self) -> None:
        self._buffers: defaultdict[ContextId, list[str]] = defaultdict(list)

    def append(self, context: ContextId, text: str) -> None:
        self._buffers[context].append(text)

    def lines(self, context: ContextId) -> list[str]:
        return list(self._buffers.get(context, []))

    def text(self, context: ContextId) -> str:
        return "\n".join(self._buffers.get(context, []))

    def drain(self, context: ContextId) -> list[str]:
        return self._buffers.pop(context, [])


class SessionDirectory:
    """Labels of all live sessions; used to detect relabel collisions."""

    def __init__(self, labels: list[str] | None = None) -> None:
        self._labels: set[str] = set(labels or [])

    def claim(self, label: str) -> None:
        self._labels.add(label)

    def label_in_use(self, label: str) -> bool:
        return label in self._labels

    def rename(self, old: str, new: str) -> None:
        self._labels.discard(old)
        self._labels.add(new)

    def labels(self) -> list[str]:
        return sorted(self._labels)


class RecordingOpener:
    """Editor stand-in: opening a file makes it the visible context."""

    def __init__(self, contexts: ContextService) -> None:
        self._contexts = contexts
        self.opened: list[Path] = []

    def open(self, path: Path, session: Session) -> None:
        _ = session
        self.opened.append(path)
        self._contexts.set_visible_context(f"file:{path}")


class RecordingViewer:
    """Documentation viewer stand-in that opens a side view per topic."""

    def __init__(self, contexts: ContextService) -> None:
        self._contexts = contexts
        self.topics: list[str] = []

    def show(self, topic: str, session: Session) -> None:
        _ = session
        self.topics.append(topic)
        self._contexts.open_secondary_view(f"doc:{topic}")


class ManPageViewer:
    """Renders ``man`` pages into a side view."""

    def __init__(self, contexts: ContextService, output: OutputSink) -> None:
        self._contexts = contexts
        self._output = output

    def show(self, topic: str, session: Session) -> None:
        context = f"doc:{topic}"
        man_executable = shutil.which("man")
        if man_executable is None:
            session.diagnostic(f"man: not available, cannot show {topic}")
            return
        try:
            result = subprocess.run(  # noqa: S603
                [man_executable, "-P", "cat", topic],
                capture_output=True,
                text=True,
                cwd=session.cwd,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            session.diagnostic(f"man: {exc!s}")
            return
        if result.returncode != 0:
            session.diagnostic((result.stderr or f"man: no entry for {topic}").strip())
            return
        self._output.append(context, result.stdout.rstrip())
        self._contexts.open_secondary_view(context)


class SubprocessChannel:
    """Shell channel running each forwarded line with ``bash -lc``."""

    def __init__(self, output: OutputSink, context: ContextId, *, cwd: Path, noop_token: str = "") -> None:
        self._output = output
        self._context = context
        self._cwd = cwd
        self._noop_token = noop_token

    def forward(self, text: str) -> None:
        if text == self._noop_token or not text.strip():
            return
        bash_executable = shutil.which("bash") or "bash"
        try:
            # Forwarded text is the user's own command line.
            result = subprocess.run(  # noqa: S603
                [bash_executable, "-lc", text],
                cwd=self._cwd,
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("channel.forward_failed command={} error={}", text, exc)
            self._output.append(self._context, f"error: {exc!s}")
            return

        output = ((result.stdout or "") + (result.stderr or "")).rstrip()
        if output:
            self._output.append(self._context, output)
        if result.returncode != 0:
            self._output.append(self._context, f"exit={result.returncode}")


@dataclass
class HostServices:
    """Collaborators shared by a session and the built-in handlers."""

    contexts: ContextService
    output: OutputSink
    opener: FileOpener
    viewer: DocumentationViewer
    directory: LabelDirectory
    evaluate: Evaluator = field(default_factory=PythonEvaluator)
    calculate: Evaluator = field(default_factory=Calculator)
    naming: Naming | None = None

    @classmethod
    def in_memory(cls, shell_context: ContextId) -> HostServices:
        """Reference host recording every side effect."""

        contexts = ContextStack(shell_context)
        return cls(
            contexts=contexts,
            output=BufferedOutput(),
            opener=RecordingOpener(contexts),
            viewer=RecordingViewer(contexts),
            directory=SessionDirectory(),
        )
