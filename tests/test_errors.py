from lineq.errors import (
    LexError,
    NonLinearError,
    NonLinearKind,
    ParseError,
    ParseErrorKind,
    SimplifyError,
    UndefinedError,
)


def test_every_kind_is_a_simplify_error():
    errors = [
        LexError(3, "#"),
        ParseError(ParseErrorKind.TRAILING_TOKENS, 5),
        NonLinearError(NonLinearKind.POWER_TERM, "x^2"),
        UndefinedError("division by zero"),
    ]
    for error in errors:
        assert isinstance(error, SimplifyError)
        assert isinstance(error, ValueError)


def test_messages():
    assert str(LexError(3, "#")) == "LexError: unrecognized character '#' (at position 3)"
    assert str(ParseError(ParseErrorKind.TRAILING_TOKENS, 5)) == "ParseError: TrailingTokens (at position 5)"
    assert str(NonLinearError(NonLinearKind.POWER_TERM, "x^2")) == "NonLinearError: PowerTerm: x^2"
    assert str(UndefinedError("division by zero")) == "UndefinedError: division by zero"


def test_attributes():
    error = LexError(3, "#")
    assert (error.position, error.character) == (3, "#")

    error = ParseError(ParseErrorKind.UNCLOSED_PAREN, 0, "'(' at position 0 is never closed")
    assert error.error_kind == ParseErrorKind.UNCLOSED_PAREN
    assert error.reason == "'(' at position 0 is never closed"

    assert NonLinearError(NonLinearKind.PRODUCT_OF_VARIABLES, "x * y").position is None


def test_equality():
    assert UndefinedError("division by zero") == UndefinedError("division by zero")
    assert UndefinedError("division by zero") != UndefinedError("overflow while adding")
    assert LexError(3, "#") != LexError(4, "#")
    assert len({LexError(3, "#"), LexError(3, "#")}) == 1
