from .canonical import LinearForm, Term, canonicalize
from .errors import (
    LexError,
    NonLinearError,
    NonLinearKind,
    ParseError,
    ParseErrorKind,
    SimplifyError,
    UndefinedError,
)
from .expr import (
    Add,
    Call,
    Const,
    Div,
    Equation,
    Expr,
    Mul,
    Neg,
    Pow,
    Prod,
    Sub,
    Sum,
    Undefined,
    Variable,
    latex,
    symbols,
)
from .functions import FUNCTIONS
from .lexer import tokenize
from .parser import parse, parse_equation
from .simplifier import Simplifier, simplify_expression
from .simplify import simplify
