"""The table of functions callable as `\\name` in an equation.

Every function takes exactly one argument. To add one, add a row to FUNCTIONS.
`domain` says whether the function is defined at a value; outside of it the call folds to Undefined.
"""

from typing import Callable, Dict, NamedTuple, Optional

import numpy as np


class Function(NamedTuple):
    name: str
    evaluate: Callable[[float], float]
    domain: Callable[[float], bool]
    domain_reason: str = ""


def _everywhere(value: float) -> bool:
    return True


FUNCTIONS: Dict[str, Function] = {
    f.name: f
    for f in [
        Function("sqrt", np.sqrt, lambda v: v >= 0, "square root of a negative number"),
        Function("ln", np.log, lambda v: v > 0, "natural logarithm of a non-positive number"),
        Function("log", np.log10, lambda v: v > 0, "logarithm of a non-positive number"),
        Function("exp", np.exp, _everywhere),
        Function("sin", np.sin, _everywhere),
        Function("cos", np.cos, _everywhere),
        Function("tan", np.tan, _everywhere),
        Function("abs", np.abs, _everywhere),
    ]
}


def lookup(name: str) -> Optional[Function]:
    """Case-sensitive. None if there is no such function."""
    return FUNCTIONS.get(name)


def apply(function: Function, value: float) -> Optional[float]:
    """Evaluates function at value.

    Returns None if value is outside the function's domain or the result isn't a finite number
    (ex: exp(1000) overflows).
    """
    if not function.domain(value):
        return None
    with np.errstate(all="ignore"):
        result = float(function.evaluate(np.float64(value)))
    if not np.isfinite(result):
        return None
    return result
