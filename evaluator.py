"""evaluator.py

Fallback for addressed lines that are not commands: a small calculator with
memory.

- `2 ** 10`          -> "1024"
- `r = 3`            -> stores r, no reply
- `pi * r ** 2`      -> "28.274333882308138"

Backed by simpleeval, so arbitrary Python is never executed. The variable
context lives until `clear`.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Optional

from simpleeval import DEFAULT_FUNCTIONS, DEFAULT_NAMES, SimpleEval

from utils.errors import EvalError

_ASSIGN_RE = re.compile(r"^\s*([A-Za-z_]\w*)\s*=(?!=)\s*(.+)$", re.DOTALL)

_MATH_FUNCTIONS = {
    name: getattr(math, name)
    for name in ("sqrt", "sin", "cos", "tan", "asin", "acos", "atan", "log", "log2", "log10", "exp", "floor", "ceil")
}

# Evaluation runs on the dispatch loop; bigger factorials stall it
MAX_FACTORIAL = 1000


def _factorial(n: Any) -> int:
    if n > MAX_FACTORIAL:
        raise ValueError(f"factorial argument too large (max {MAX_FACTORIAL})")
    return math.factorial(n)


def _base_names() -> Dict[str, Any]:
    names = dict(DEFAULT_NAMES)
    names.update({"pi": math.pi, "e": math.e, "tau": math.tau})
    return names


def _format(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class Evaluator:
    """Expression evaluator with a persistent variable context."""

    def __init__(self) -> None:
        self.variables: Dict[str, Any] = {}
        self._engine = SimpleEval(
            functions={**DEFAULT_FUNCTIONS, **_MATH_FUNCTIONS, "factorial": _factorial, "abs": abs, "min": min, "max": max, "round": round},
            names=_base_names(),
        )

    def clear(self) -> None:
        """Forget all assigned variables."""
        self.variables = {}

    def _eval(self, expr: str) -> Any:
        self._engine.names = {**_base_names(), **self.variables}
        try:
            return self._engine.eval(expr.strip())
        except Exception as e:  # simpleeval surfaces plain Python errors from user input
            raise EvalError(str(e) or type(e).__name__, cause=e) from e

    def evaluate(self, text: str) -> Optional[str]:
        """Evaluate one line. Returns text to reply with, or None for nothing.

        Raises EvalError when the line is not a valid expression.
        """
        text = (text or "").strip()
        if not text:
            return None
        m = _ASSIGN_RE.match(text)
        if m:
            name, expr = m.group(1), m.group(2)
            self.variables[name] = self._eval(expr)
            return None
        return _format(self._eval(text))
