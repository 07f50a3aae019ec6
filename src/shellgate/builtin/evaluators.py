"""Default evaluators used by the expression and calculator processors."""

from __future__ import annotations

import ast
import math
from typing import Any

from simpleeval import DEFAULT_OPERATORS, NumberTooHigh, SimpleEval, safe_power

# Functions whose cost grows without bound in their argument are left out.
_UNBOUNDED_FUNCTIONS = {"factorial", "comb", "perm", "prod"}
MATH_FUNCTIONS = {
    name: value
    for name, value in vars(math).items()
    if not name.startswith("_") and callable(value) and name not in _UNBOUNDED_FUNCTIONS
}
MATH_CONSTANTS = {name: value for name, value in vars(math).items() if isinstance(value, float)}
MAX_RESULT_BITS = 100_000


class PythonEvaluator:
    """Evaluate Python source in a namespace kept across calls.

    Expressions return ``repr`` of their value; statements run through
    ``exec`` and return an empty string.
    """

    def __init__(self, namespace: dict[str, Any] | None = None) -> None:
        self.namespace: dict[str, Any] = namespace if namespace is not None else {}

    def __call__(self, source: str) -> str:
        try:
            code = compile(source, "<shellgate>", "eval")
        except SyntaxError:
            exec(compile(source, "<shellgate>", "exec"), self.namespace)  # noqa: S102
            return ""
        value = eval(code, self.namespace)  # noqa: S307
        return repr(value)


def bounded_power(base: Any, exponent: Any) -> Any:
    """``safe_power`` that also refuses integer results above ``MAX_RESULT_BITS``."""

    if isinstance(base, int) and isinstance(exponent, int) and exponent > 0 and abs(base) > 1:
        if exponent * abs(base).bit_length() > MAX_RESULT_BITS:
            raise NumberTooHigh(f"{base}**{exponent} is too large")
    return safe_power(base, exponent)


class Calculator:
    """Numeric evaluator backed by simpleeval with the ``math`` module whitelisted."""

    def __init__(self) -> None:
        self._evaluator = SimpleEval(
            operators={**DEFAULT_OPERATORS, ast.Pow: bounded_power},
            functions=dict(MATH_FUNCTIONS),
            names=dict(MATH_CONSTANTS),
        )

    def __call__(self, expression: str) -> str:
        if not expression.strip():
            raise ValueError("empty expression")
        value = self._evaluator.eval(expression.replace("^", "**"))
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"not a number: {value!r}")
        return _format_number(value)


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return str(value)
