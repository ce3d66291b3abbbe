"""Errors a caller can get back from `simplify_expression`.

All four kinds derive from SimplifyError so callers can catch them in one place and still
tell them apart with `error.kind` (or isinstance checks).

Anything else (NotImplementedError, AssertionError) coming out of this package is a bug in the
package, not a problem with the input.
"""

from enum import Enum
from typing import Optional


class SimplifyError(ValueError):
    """Base class -- all user-facing failures."""

    kind: str = "SimplifyError"

    def __init__(self, reason: str, position: Optional[int] = None):
        self.reason = reason
        self.position = position
        super().__init__(self._message())

    def _message(self) -> str:
        if self.position is None:
            return f"{self.kind}: {self.reason}"
        return f"{self.kind}: {self.reason} (at position {self.position})"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, SimplifyError)
            and self.kind == other.kind
            and self.reason == other.reason
            and self.position == other.position
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.reason, self.position))


class LexError(SimplifyError):
    kind = "LexError"

    def __init__(self, position: int, character: str, reason: Optional[str] = None):
        self.character = character
        if reason is None:
            reason = f"unrecognized character {character!r}"
        super().__init__(reason, position)


class ParseErrorKind(Enum):
    UNCLOSED_PAREN = "UnclosedParen"
    MISSING_OPERAND = "MissingOperand"
    INVALID_EQUATION_STRUCTURE = "InvalidEquationStructure"
    TRAILING_TOKENS = "TrailingTokens"
    UNKNOWN_FUNCTION = "UnknownFunction"


class ParseError(SimplifyError):
    kind = "ParseError"

    def __init__(self, error_kind: ParseErrorKind, position: int, reason: Optional[str] = None):
        self.error_kind = error_kind
        if reason is None:
            reason = error_kind.value
        super().__init__(reason, position)


class NonLinearKind(Enum):
    POWER_TERM = "PowerTerm"
    PRODUCT_OF_VARIABLES = "ProductOfVariables"
    UNRESOLVED_FUNCTION = "UnresolvedFunction"


class NonLinearError(SimplifyError):
    kind = "NonLinearError"

    def __init__(self, error_kind: NonLinearKind, reason: str):
        self.error_kind = error_kind
        super().__init__(f"{error_kind.value}: {reason}")


class UndefinedError(SimplifyError):
    kind = "UndefinedError"

    def __init__(self, reason: str):
        super().__init__(reason)
