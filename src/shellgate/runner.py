"""Pipeline runner: preprocess, dispatch, then forward or suppress."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from loguru import logger

from shellgate.chain import PreprocessorChain
from shellgate.registry import ProcessorRegistry
from shellgate.session import Session
from shellgate.tokenizer import tokenize
from shellgate.types import Abort, DispatchResult, PipelineOutcome, RunState, TokenizedCommand


@dataclass
class PipelineConfig:
    """Process-wide configuration shared by every run."""

    chain: PreprocessorChain = field(default_factory=PreprocessorChain)
    registry: ProcessorRegistry = field(default_factory=ProcessorRegistry)
    noop_token: str = ""


class PipelineRunner:
    """Runs one command line at a time through the two pipeline stages."""

    def __init__(self, config: PipelineConfig) -> None:
        self._config = config
        self._state = RunState.IDLE
        self._run_lock = threading.RLock()

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def state(self) -> RunState:
        return self._state

    def run(self, line: str, session: Session) -> PipelineOutcome:
        with self._run_lock, logger.contextualize(label=session.label):
            # A run started from inside a processor hands the state back to the outer run.
            outer_state = self._state
            try:
                outcome = self._run(line, session)
                session.channel.forward(outcome.payload)
            finally:
                self._state = outer_state
        return outcome

    def _run(self, line: str, session: Session) -> PipelineOutcome:
        logger.info("pipeline.run.start label={} line={}", session.label, line)
        self._state = RunState.PREPROCESSING
        result = self._config.chain.run(line, session)
        if isinstance(result, Abort):
            self._state = RunState.ABORTED
            logger.info("pipeline.aborted step={} reason={}", result.step, result.reason or "-")
            return PipelineOutcome(
                state=RunState.ABORTED,
                payload=self._config.noop_token,
                diagnostic=result.reason,
            )

        command = result.text
        self._state = RunState.DISPATCHING
        tokens = tokenize(command)
        dispatched = self._dispatch(tokens, session)

        if dispatched is not None and dispatched.handled:
            self._state = RunState.SUPPRESSED
            self._restore_shell_view(dispatched, session)
            logger.info("pipeline.suppressed name={}", dispatched.name)
            return PipelineOutcome(
                state=RunState.SUPPRESSED,
                payload=self._config.noop_token,
                command=command,
                tokens=tokens,
            )

        self._state = RunState.FORWARDED
        logger.info("pipeline.forwarded command={}", command)
        return PipelineOutcome(state=RunState.FORWARDED, payload=command, command=command, tokens=tokens)

    def _dispatch(self, tokens: TokenizedCommand, session: Session) -> DispatchResult | None:
        before = session.contexts.current_context()
        try:
            return self._config.registry.dispatch(tokens, session)
        except Exception as exc:
            logger.opt(exception=True).error("processor.error name={}", tokens.name)
            session.diagnostic(f"{tokens.name}: {exc!s}")
            # A processor that blew up still owned the command.
            return DispatchResult(
                name=tokens.name or "",
                handled=True,
                context_before=before,
                context_after=session.contexts.current_context(),
            )

    @staticmethod
    def _restore_shell_view(result: DispatchResult, session: Session) -> None:
        if not result.context_changed or result.context_after == session.shell_context:
            return
        contexts = session.contexts
        contexts.set_visible_context(session.shell_context)
        contexts.open_secondary_view(result.context_after)
        logger.debug("pipeline.view_restored shell={} secondary={}", session.shell_context, result.context_after)
