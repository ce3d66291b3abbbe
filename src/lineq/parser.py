"""Recursive descent parser: tokens -> Equation.

From loosest to tightest binding:

    equation   := expression "=" expression
    expression := product (("+" | "-") product)*
    product    := unary (("*" | "/") unary | <implicit> unary)*
    unary      := "-" unary | power
    power      := call ("^" unary)?                      # right-associative
    call       := FUNCTION call | primary
    primary    := NUMBER | IDENTIFIER | "(" expression ")"

<implicit> is a multiplication nobody wrote down. It's inferred when a unary ends with a number or ")" and the next
token is an identifier, "(" or a function, or when it ends with an identifier and the next token is "(" or a function.
`2x`, `2(x)`, `(x)(y)`, `(x)y`, `x(y)`, `2\\sqrt(x)`. `x y` and `(x)2` are not products; they end up as trailing tokens.

Brackets, unary minuses, exponents and function calls can nest at most MAX_NESTING deep.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Type

from .errors import ParseError, ParseErrorKind
from .expr import Add, Call, Const, Div, Equation, Expr, Mul, Neg, Pow, Sub, Variable
from .lexer import tokenize
from .tokens import Equals, FunctionMarker, Identifier, LeftParen, Number, Operator, RightParen, Token

MAX_NESTING = 100

# token that ends the left operand -> tokens that can start the right operand
_IMPLICIT_MULTIPLICATION = {
    Number: (Identifier, LeftParen, FunctionMarker),
    RightParen: (Identifier, LeftParen, FunctionMarker),
    Identifier: (LeftParen, FunctionMarker),
}


def parse(tokens: Sequence[Token]) -> Equation:
    return Parser(tokens).equation()


def parse_equation(text: str) -> Equation:
    """tokenize + parse"""
    return parse(tokenize(text))


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self._tokens = list(tokens)
        self._current = 0
        self._depth = 0

    def equation(self) -> Equation:
        equals = [t for t in self._tokens if isinstance(t, Equals)]
        if len(equals) != 1:
            position = equals[1].position if len(equals) > 1 else self._end_position()
            raise ParseError(
                ParseErrorKind.INVALID_EQUATION_STRUCTURE,
                position,
                f"expected exactly one '=', found {len(equals)}",
            )

        left = self.expression()
        if not self._match(Equals):
            self._raise_trailing()
        right = self.expression()
        if self._peek() is not None:
            self._raise_trailing()

        return Equation(left, right)

    def expression(self) -> Expr:
        expr = self.product()
        while True:
            operator = self._match_operator("+", "-")
            if operator is None:
                return expr
            right = self.product()
            expr = Add(expr, right) if operator.kind == "+" else Sub(expr, right)

    def product(self) -> Expr:
        expr = self.unary()
        while True:
            operator = self._match_operator("*", "/")
            if operator is not None:
                right = self.unary()
                expr = Mul(expr, right) if operator.kind == "*" else Div(expr, right)
            elif self._implicit_multiplication():
                expr = Mul(expr, self.unary())
            else:
                return expr

    def unary(self) -> Expr:
        operator = self._match_operator("-")
        if operator is not None:
            with self._nested(operator):
                return Neg(self.unary())
        return self.power()

    def power(self) -> Expr:
        base = self.call()
        operator = self._match_operator("^")
        if operator is not None:
            with self._nested(operator):
                return Pow(base, self.unary())
        return base

    def call(self) -> Expr:
        marker = self._match(FunctionMarker)
        if marker is not None:
            with self._nested(marker):
                return Call(marker.name, self.call())
        return self.primary()

    def primary(self) -> Expr:
        token = self._peek()
        if isinstance(token, Number):
            self._advance()
            return Const(token.value)
        if isinstance(token, Identifier):
            self._advance()
            return Variable(token.name)
        if isinstance(token, LeftParen):
            self._advance()
            with self._nested(token):
                group = self.expression()
            if self._match(RightParen) is None:
                raise ParseError(
                    ParseErrorKind.UNCLOSED_PAREN,
                    token.position,
                    f"'(' at position {token.position} is never closed",
                )
            return group

        raise ParseError(
            ParseErrorKind.MISSING_OPERAND, self._position(), f"expected an operand, found {self._describe(token)}"
        )

    @contextmanager
    def _nested(self, token: Token) -> Iterator[None]:
        self._depth += 1
        if self._depth > MAX_NESTING:
            raise ParseError(
                ParseErrorKind.INVALID_EQUATION_STRUCTURE,
                token.position,
                f"nested more than {MAX_NESTING} levels deep",
            )
        try:
            yield
        finally:
            self._depth -= 1

    def _implicit_multiplication(self) -> bool:
        """True if the last consumed token and the next one are two operands with nothing in between."""
        previous = self._previous()
        upcoming = self._peek()
        if previous is None or upcoming is None:
            return False
        return isinstance(upcoming, _IMPLICIT_MULTIPLICATION.get(type(previous), ()))

    def _raise_trailing(self):
        token = self._peek()
        raise ParseError(ParseErrorKind.TRAILING_TOKENS, token.position, f"unexpected {self._describe(token)}")

    def _match(self, cls: Type[Token]) -> Optional[Token]:
        token = self._peek()
        if isinstance(token, cls):
            self._advance()
            return token
        return None

    def _match_operator(self, *kinds: str) -> Optional[Operator]:
        token = self._peek()
        if isinstance(token, Operator) and token.kind in kinds:
            self._advance()
            return token
        return None

    def _peek(self) -> Optional[Token]:
        if self._current < len(self._tokens):
            return self._tokens[self._current]
        return None

    def _previous(self) -> Optional[Token]:
        if self._current == 0:
            return None
        return self._tokens[self._current - 1]

    def _advance(self) -> Token:
        token = self._tokens[self._current]
        self._current += 1
        return token

    def _position(self) -> int:
        token = self._peek()
        return token.position if token is not None else self._end_position()

    def _end_position(self) -> int:
        return self._tokens[-1].end if self._tokens else 0

    @staticmethod
    def _describe(token: Optional[Token]) -> str:
        if token is None:
            return "end of input"
        return repr(token.lexeme)
