from __future__ import annotations

import pytest
from simpleeval import InvalidExpression

from shellgate.builtin.evaluators import Calculator, PythonEvaluator
from shellgate.builtin.processors import (
    CalculatorProcessor,
    DocumentationProcessor,
    ExpressionProcessor,
    OpenFileProcessor,
)
from shellgate.host import HostServices, RecordingOpener, RecordingViewer
from shellgate.session import Session


def test_open_file_resolves_relative_path(session: Session, host: HostServices) -> None:
    opener = host.opener
    assert isinstance(opener, RecordingOpener)

    assert OpenFileProcessor(opener)(["readme.txt", "ignored"], session) is True
    assert opener.opened == [session.cwd / "readme.txt"]


def test_open_file_without_argument_reports(session: Session, host: HostServices) -> None:
    opener = host.opener
    assert isinstance(opener, RecordingOpener)

    assert OpenFileProcessor(opener)([], session) is True
    assert opener.opened == []
    assert "missing file name" in host.output.text("*shell*")


def test_documentation_uses_first_argument(session: Session, host: HostServices) -> None:
    viewer = host.viewer
    assert isinstance(viewer, RecordingViewer)

    assert DocumentationProcessor(viewer)(["emacs", "extra"], session) is True
    assert viewer.topics == ["emacs"]


def test_expression_joins_args_and_writes_result(session: Session, host: HostServices) -> None:
    expressions: list[str] = []

    def evaluate(expression: str) -> str:
        expressions.append(expression)
        return "3"

    assert ExpressionProcessor(evaluate)(["1", "+", "2"], session) is True
    assert expressions == ["1 + 2"]
    assert host.output.lines("*shell*") == ["3"]


def test_expression_result_skipped_when_view_changed(session: Session, host: HostServices) -> None:
    def evaluate(expression: str) -> str:
        session.contexts.set_visible_context("other")
        return "value"

    assert ExpressionProcessor(evaluate)(["open-other"], session) is True
    assert host.output.lines("*shell*") == []


def test_expression_error_degrades_to_diagnostic(session: Session, host: HostServices) -> None:
    def evaluate(expression: str) -> str:
        raise ZeroDivisionError("division by zero")

    assert ExpressionProcessor(evaluate)(["1/0"], session) is True
    assert host.output.lines("*shell*") == ["error: division by zero"]


def test_calculator_writes_result(session: Session, host: HostServices) -> None:
    assert CalculatorProcessor(Calculator())(["2", "*", "(3", "+", "4)"], session) is True
    assert host.output.lines("*shell*") == ["14"]


def test_calculator_error_degrades_to_diagnostic(session: Session, host: HostServices) -> None:
    assert CalculatorProcessor(Calculator())(["__import__('os')"], session) is True
    assert host.output.lines("*shell*")[0].startswith("error: ")


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("1 + 2", "3"),
        ("7 / 2", "3.5"),
        ("2 ^ 10", "1024"),
        ("-3 % 2", "1"),
        ("sqrt(16)", "4"),
        ("floor(pi)", "3"),
    ],
)
def test_calculator(expression: str, expected: str) -> None:
    assert Calculator()(expression) == expected


@pytest.mark.parametrize("expression", ["", "'a' * 3"])
def test_calculator_rejects_non_numbers(expression: str) -> None:
    with pytest.raises(ValueError):
        Calculator()(expression)


@pytest.mark.parametrize("expression", ["x + 1", "open('f')", "__import__('os')"])
def test_calculator_rejects_unknown_names(expression: str) -> None:
    with pytest.raises(InvalidExpression):
        Calculator()(expression)


@pytest.mark.parametrize(
    "expression",
    ["factorial(10**7)", "comb(10**7, 5000)", "(10**10000)**10000", "2 ** 1000000", "9 ^ 9 ^ 9"],
)
def test_calculator_refuses_unbounded_work(expression: str) -> None:
    with pytest.raises(InvalidExpression):
        Calculator()(expression)


def test_calculator_allows_large_but_bounded_power() -> None:
    assert Calculator()("2 ** 64") == "18446744073709551616"


def test_python_evaluator_keeps_namespace() -> None:
    evaluator = PythonEvaluator()

    assert evaluator("x = 21") == ""
    assert evaluator("x * 2") == "42"
    assert evaluator("'a' + 'b'") == "'ab'"
