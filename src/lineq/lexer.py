"""Turns equation text into tokens.

>>> [(t.position, t.lexeme) for t in tokenize("2x = \\sqrt 4")]
[(0, '2'), (1, 'x'), (3, '='), (5, '\\sqrt'), (11, '4')]

Whitespace only separates tokens; whether two tokens next to each other multiply is the parser's call.
"""

import string
from typing import List

from .errors import LexError, ParseError, ParseErrorKind
from .functions import lookup
from .tokens import Equals, FunctionMarker, Identifier, LeftParen, Number, Operator, RightParen, Token

WHITESPACE = " \t\r\n"
DIGITS = string.digits
LETTERS = string.ascii_letters + "_"
OPERATORS = "+-*/^"
DECIMAL_SEPARATOR = "."


def tokenize(text: str) -> List[Token]:
    """Raises LexError on characters that can't start a token, ParseError for unknown `\\name`s."""
    tokens = []
    i = 0
    while i < len(text):
        char = text[i]
        if char in WHITESPACE:
            i += 1
        elif char in DIGITS:
            i = _consume_number(text, i, tokens)
        elif char in LETTERS:
            end = _consume_run(text, i, LETTERS)
            tokens.append(Identifier(i, text[i:end], text[i:end]))
            i = end
        elif char == "\\":
            i = _consume_function_marker(text, i, tokens)
        elif char in OPERATORS:
            tokens.append(Operator(i, char, char))
            i += 1
        elif char == "(":
            tokens.append(LeftParen(i, char))
            i += 1
        elif char == ")":
            tokens.append(RightParen(i, char))
            i += 1
        elif char == "=":
            tokens.append(Equals(i, char))
            i += 1
        else:
            raise LexError(i, char)

    return tokens


def _consume_run(text: str, start: int, allowed: str) -> int:
    """returns the index of the first character at or after start that isn't in allowed."""
    end = start
    while end < len(text) and text[end] in allowed:
        end += 1
    return end


def _consume_number(text: str, start: int, tokens: List[Token]) -> int:
    end = _consume_run(text, start, DIGITS)
    if end < len(text) and text[end] == DECIMAL_SEPARATOR:
        fraction_end = _consume_run(text, end + 1, DIGITS)
        if fraction_end == end + 1:
            raise LexError(end, DECIMAL_SEPARATOR, "malformed number: decimal point must be followed by a digit")
        end = fraction_end

    # a second decimal point right after a number is never valid.
    if end < len(text) and text[end] == DECIMAL_SEPARATOR:
        raise LexError(end, DECIMAL_SEPARATOR, "malformed number: more than one decimal point")

    lexeme = text[start:end]
    tokens.append(Number(start, lexeme, float(lexeme)))
    return end


def _consume_function_marker(text: str, start: int, tokens: List[Token]) -> int:
    end = _consume_run(text, start + 1, string.ascii_letters)
    if end == start + 1:
        raise LexError(start, "\\", "expected a function name after '\\'")

    name = text[start + 1 : end]
    if lookup(name) is None:
        raise ParseError(ParseErrorKind.UNKNOWN_FUNCTION, start, f"unknown function '\\{name}'")
    tokens.append(FunctionMarker(start, text[start:end], name))
    return end
