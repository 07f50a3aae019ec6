"""Shared pipeline dataclasses and handler contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from shellgate.session import Session

type ContextId = str
type Naming = Callable[[str], str | None]
type Evaluator = Callable[[str], str]


class Preprocessor(Protocol):
    """One rewrite step. Returning ``None`` or ``""`` vetoes the command."""

    def __call__(self, command: str, session: Session) -> str | None: ...


class Processor(Protocol):
    """Name-dispatched handler. ``True`` means handled here, do not forward."""

    def __call__(self, args: list[str], session: Session) -> bool: ...


@dataclass(frozen=True)
class TokenizedCommand:
    """Command name and ordered arguments split from one line."""

    name: str | None
    args: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Continue:
    """Chain completed; ``text`` is the preprocessed command."""

    text: str


@dataclass(frozen=True)
class Abort:
    """Chain stopped at ``step``; the command is discarded."""

    step: str
    reason: str = ""


type ChainResult = Continue | Abort


@dataclass(frozen=True)
class DispatchResult:
    """Result of invoking the matched processor."""

    name: str
    handled: bool
    context_before: ContextId
    context_after: ContextId

    @property
    def context_changed(self) -> bool:
        return self.context_before != self.context_after


class RunState(Enum):
    IDLE = "idle"
    PREPROCESSING = "preprocessing"
    ABORTED = "aborted"
    DISPATCHING = "dispatching"
    SUPPRESSED = "suppressed"
    FORWARDED = "forwarded"


@dataclass(frozen=True)
class PipelineOutcome:
    """End state of one pipeline run."""

    state: RunState
    payload: str
    command: str | None = None
    tokens: TokenizedCommand | None = None
    diagnostic: str = ""
