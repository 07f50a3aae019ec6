"""Built-in processors. Each one handles its command locally."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from shellgate.errors import HandlerFault
from shellgate.host import DocumentationViewer, FileOpener
from shellgate.session import Session
from shellgate.types import Evaluator


class OpenFileProcessor:
    """``ff PATH``: open the file in the editor instead of the shell."""

    def __init__(self, opener: FileOpener) -> None:
        self._opener = opener

    def __call__(self, args: list[str], session: Session) -> bool:
        if not args:
            session.diagnostic("ff: missing file name")
            return True
        path = Path(args[0]).expanduser()
        if not path.is_absolute():
            path = session.cwd / path
        self._opener.open(path, session)
        return True


class DocumentationProcessor:
    """``man TOPIC``: show documentation in a side view."""

    def __init__(self, viewer: DocumentationViewer) -> None:
        self._viewer = viewer

    def __call__(self, args: list[str], session: Session) -> bool:
        if not args:
            session.diagnostic("man: what manual page do you want?")
            return True
        self._viewer.show(args[0], session)
        return True


class ExpressionProcessor:
    """Evaluate the arguments as one expression and print the result.

    The result is written only when evaluation left the visible context
    alone; an evaluation that switched views shows its own output.
    """

    name = "expression"

    def __init__(self, evaluator: Evaluator) -> None:
        self._evaluator = evaluator

    def __call__(self, args: list[str], session: Session) -> bool:
        expression = " ".join(args)
        before = session.contexts.current_context()
        try:
            result = _evaluate(self.name, self._evaluator, expression)
        except HandlerFault as fault:
            _report_fault(fault, session)
            return True
        if session.contexts.current_context() == before and result:
            session.write(result)
        return True


class CalculatorProcessor:
    """Evaluate the arguments with the calculator and print the result."""

    name = "calculator"

    def __init__(self, evaluator: Evaluator) -> None:
        self._evaluator = evaluator

    def __call__(self, args: list[str], session: Session) -> bool:
        try:
            result = _evaluate(self.name, self._evaluator, " ".join(args))
        except HandlerFault as fault:
            _report_fault(fault, session)
            return True
        session.write(result)
        return True


def _evaluate(name: str, evaluator: Evaluator, expression: str) -> str:
    try:
        return str(evaluator(expression))
    except Exception as exc:
        raise HandlerFault(name, exc) from exc


def _report_fault(fault: HandlerFault, session: Session) -> None:
    logger.opt(exception=fault.error).warning("processor.fault processor={} label={}", fault.processor, session.label)
    session.write(f"error: {fault.error!s}")
