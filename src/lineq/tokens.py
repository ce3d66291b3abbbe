"""Token variants produced by the lexer.

Tokens are immutable. Every token remembers where its first character was in the input
(0-based offset) and the exact text it was built from, so errors can point at it.
"""

from dataclasses import dataclass
from typing import Literal

OperatorKind = Literal["+", "-", "*", "/", "^"]


@dataclass(frozen=True)
class Token:
    """Base class -- all tokens."""

    position: int
    lexeme: str

    @property
    def end(self) -> int:
        """offset right after the last character of this token."""
        return self.position + len(self.lexeme)


@dataclass(frozen=True)
class Number(Token):
    value: float


@dataclass(frozen=True)
class Identifier(Token):
    name: str


@dataclass(frozen=True)
class Operator(Token):
    kind: OperatorKind


@dataclass(frozen=True)
class LeftParen(Token):
    pass


@dataclass(frozen=True)
class RightParen(Token):
    pass


@dataclass(frozen=True)
class FunctionMarker(Token):
    """`\\name`. name is without the backslash."""

    name: str


@dataclass(frozen=True)
class Equals(Token):
    pass
