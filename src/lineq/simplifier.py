"""text -> tokens -> Equation -> simplified left - right -> LinearForm"""

import time
from typing import Optional, Tuple, Union

from .canonical import LinearForm, collect
from .errors import SimplifyError
from .expr import Equation
from .lexer import tokenize
from .parser import parse
from .simplify import simplify_with_passes


def simplify_expression(text: str, **kwargs) -> LinearForm:
    """
    Turns an equation into its canonical linear form.

    Args:
        text: the equation, ex: "2x + 5y = -12 + 3x -9(y - 5)"
    kwargs:
        debug: prints the parsed equation & the simplified tree before reading off the linear form.
        max_passes: upper bound on simplification passes. defaults to the size of the tree plus a few.
        zero_tolerance: coefficients with an absolute value at most this are dropped. defaults to 0,
            so only exact zeros are dropped.

        Examples of valid uses:
            simplify_expression("2^10 = x")
            simplify_expression("0.1x + 0.2x = 0.3x", zero_tolerance=1e-12)

    Returns:
        The linear form. ex: "2x + 5y = -12 + 3x -9(y - 5)" -> LinearForm(terms={x: -1, y: 14}, constant=33)

    Raises:
        LexError, ParseError: the text isn't a well formed equation
        NonLinearError: it is, but it isn't linear
        UndefinedError: some constant part of it has no value, ex: 1/0
    """
    return Simplifier(**kwargs).simplify_expression(text)


class Simplifier:
    """
    Holds the options for simplify_expression. Stateless apart from that, so one instance can be shared.
    """

    logger = None

    def __init__(self, *, debug: bool = False, max_passes: Optional[int] = None, zero_tolerance: float = 0.0):
        self._debug = debug
        self._max_passes = max_passes
        self._zero_tolerance = zero_tolerance

    def simplify_expression(self, text: str) -> LinearForm:
        start = time.time()
        try:
            form, passes = self._simplify_expression(text)
        except SimplifyError as error:
            if self.logger is not None:
                self.logger.log(text, time.time() - start, error, 0)
            raise

        if self.logger is not None:
            self.logger.log(text, time.time() - start, form, passes)
        return form

    def try_simplify(self, text: str) -> Union[LinearForm, SimplifyError]:
        """Like simplify_expression, but returns the error instead of raising it."""
        try:
            return self.simplify_expression(text)
        except SimplifyError as error:
            return error

    def parse(self, text: str) -> Equation:
        return parse(tokenize(text))

    def _simplify_expression(self, text: str) -> Tuple[LinearForm, int]:
        equation = self.parse(text)
        expr, passes = simplify_with_passes(equation.as_difference(), self._max_passes)

        if self._debug:
            from .debug.utils import debug_repr

            print(f"parsed:     {debug_repr(equation.left)} = {debug_repr(equation.right)}")
            print(f"simplified: {debug_repr(expr)} = 0  ({passes} passes)")

        return collect(expr, zero_tolerance=self._zero_tolerance), passes
