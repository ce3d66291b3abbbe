"""RULES OF EXPRs:

1. Exprs shall NOT be mutated in place after __post_init__. Every node owns its children; nothing is shared
between two trees, so a subtree can be moved into a new tree without copying.

2. Constructing an Expr never simplifies it. `2 * x + 3 * x` builds Add(Mul(2, x), Mul(3, x)), exactly what
the parser would build. Use simplify() to get the normal form, which is made of flat Sums and Prods instead.

Note on equality: (expr1 == expr2) is true iff the two trees have the same structure, not the same value.
x + 2 != 2 + x. If you want to compare values, simplify both first.

Floats only. Equations come in as text, and text like 0.1 was never exact to begin with.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, List, Tuple, Union


def _cast(x):
    """Cast x to an Expr if possible."""
    if isinstance(x, Expr):
        return x
    if isinstance(x, bool):
        raise NotImplementedError(f"Cannot cast {x} to Expr")
    if isinstance(x, (int, float)):
        return Const(x)
    if isinstance(x, str):
        return Variable(x)
    raise NotImplementedError(f"Cannot cast {x} to Expr")


def cast(func):
    """Decorator to cast all arguments to Expr."""

    def wrapper(*args, **kwargs) -> "Expr":
        return func(*map(_cast, args), **{k: _cast(v) for k, v in kwargs.items()})

    return wrapper


# Binding strength, used to decide where reprs need brackets.
_SUM = 1
_PRODUCT = 2
_NEGATION = 3
_POWER = 4
_ATOM = 5


class Expr(ABC):
    """Base class for all expressions."""

    precedence: ClassVar[int] = _ATOM

    @cast
    def __add__(self, other) -> "Expr":
        return Add(self, other)

    @cast
    def __radd__(self, other) -> "Expr":
        return Add(other, self)

    @cast
    def __sub__(self, other) -> "Expr":
        return Sub(self, other)

    @cast
    def __rsub__(self, other) -> "Expr":
        return Sub(other, self)

    @cast
    def __mul__(self, other) -> "Expr":
        return Mul(self, other)

    @cast
    def __rmul__(self, other) -> "Expr":
        return Mul(other, self)

    @cast
    def __truediv__(self, other) -> "Expr":
        return Div(self, other)

    @cast
    def __rtruediv__(self, other) -> "Expr":
        return Div(other, self)

    @cast
    def __pow__(self, other) -> "Expr":
        return Pow(self, other)

    @cast
    def __rpow__(self, other) -> "Expr":
        return Pow(other, self)

    def __neg__(self) -> "Expr":
        return Neg(self)

    @abstractmethod
    def children(self) -> List["Expr"]:
        raise NotImplementedError(f"Cannot get children of {self.__class__.__name__}")

    @abstractmethod
    def __repr__(self) -> str:
        raise NotImplementedError(f"Cannot represent {self.__class__.__name__}")

    @abstractmethod
    def latex(self) -> str:
        raise NotImplementedError(f"Cannot convert {self.__class__.__name__} to latex")

    def simplify(self) -> "Expr":
        from .simplify import simplify

        return simplify(self)

    @property
    def is_subtraction(self) -> bool:
        """Returns True if the expression would be printed with a leading minus sign."""
        return False

    def _bracket(self, child: "Expr", strict: bool = False) -> str:
        """repr of child, in brackets if it binds weaker than self.

        strict: also bracket when child binds exactly as strongly (right side of - and /, left side of ^)
        """
        if child.precedence < self.precedence or (strict and child.precedence == self.precedence):
            return f"({child!r})"
        return repr(child)


def format_number(value: float) -> str:
    """2.0 -> "2", 0.5 -> "0.5" """
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


@dataclass(eq=True)
class Const(Expr):
    """A number."""

    value: float

    def __post_init__(self):
        # + 0.0 turns -0.0 into 0.0 so they print the same.
        self.value = float(self.value) + 0.0

    def children(self) -> List[Expr]:
        return []

    def __repr__(self) -> str:
        return format_number(self.value)

    def latex(self) -> str:
        return format_number(self.value)

    @property
    def precedence(self) -> int:
        return _NEGATION if self.value < 0 else _ATOM

    @property
    def is_subtraction(self) -> bool:
        return self.value < 0


@dataclass(eq=True)
class Variable(Expr):
    """An unknown. The name can be more than one letter long; `xy` is one variable."""

    name: str

    def __post_init__(self):
        assert len(self.name) > 0, "Variable name cannot be empty"

    def children(self) -> List[Expr]:
        return []

    def __repr__(self) -> str:
        return self.name

    def latex(self) -> str:
        if len(self.name) > 1:
            return "\\mathrm{" + self.name + "}"
        return self.name


@dataclass(eq=True)
class Undefined(Expr):
    """Result of an operation that has no numeric value, ex: 1/0.

    Anything built from an Undefined is Undefined. reason says what went wrong first.
    """

    reason: str

    def children(self) -> List[Expr]:
        return []

    def __repr__(self) -> str:
        return "undefined"

    def latex(self) -> str:
        return "\\text{undefined}"


@dataclass(eq=True)
class Neg(Expr):
    operand: Expr

    precedence: ClassVar[int] = _NEGATION

    def __post_init__(self):
        self.operand = _cast(self.operand)

    def children(self) -> List[Expr]:
        return [self.operand]

    def __repr__(self) -> str:
        return "-" + self._bracket(self.operand, strict=True)

    def latex(self) -> str:
        from .latex import bracketfy

        if self.operand.precedence <= self.precedence:
            return "-" + bracketfy(self.operand)
        return "-" + self.operand.latex()

    @property
    def is_subtraction(self) -> bool:
        return True


@dataclass(eq=True)
class Binary(Expr):
    """Base class for two-operand expressions. Subclasses set `symbol` and `precedence`."""

    left: Expr
    right: Expr

    symbol: ClassVar[str] = ""

    def __post_init__(self):
        self.left = _cast(self.left)
        self.right = _cast(self.right)

    def children(self) -> List[Expr]:
        return [self.left, self.right]

    def __repr__(self) -> str:
        return f"{self._bracket(self.left)}{self.symbol}{self._bracket(self.right, strict=True)}"


@dataclass(eq=True)
class Add(Binary):
    symbol: ClassVar[str] = "+"
    precedence: ClassVar[int] = _SUM

    def __repr__(self) -> str:
        # x + -3 reads better as x - 3
        if self.right.is_subtraction:
            return f"{self.left!r} - {_strip_minus(self.right)}"
        return f"{self.left!r} + {self._bracket(self.right)}"

    def latex(self) -> str:
        if self.right.is_subtraction:
            return f"{self.left.latex()} - {_strip_minus(self.right, latex=True)}"
        return f"{self.left.latex()} + {self.right.latex()}"


@dataclass(eq=True)
class Sub(Binary):
    symbol: ClassVar[str] = "-"
    precedence: ClassVar[int] = _SUM

    def __repr__(self) -> str:
        return f"{self.left!r} - {self._bracket(self.right, strict=True)}"

    def latex(self) -> str:
        from .latex import bracketfy

        right = self.right.latex() if self.right.precedence > self.precedence else bracketfy(self.right)
        return f"{self.left.latex()} - {right}"


@dataclass(eq=True)
class Mul(Binary):
    symbol: ClassVar[str] = "*"
    precedence: ClassVar[int] = _PRODUCT

    def __repr__(self) -> str:
        # -1*x reads better as -x
        if self.left == Const(-1):
            return "-" + self._bracket(self.right, strict=True)
        return super().__repr__()

    def latex(self) -> str:
        from .latex import bracketfy

        def _factor_latex(factor: Expr) -> str:
            if factor.precedence < self.precedence:
                return bracketfy(factor)
            return factor.latex()

        if self.left == Const(-1):
            return "-" + _factor_latex(self.right)
        return _factor_latex(self.left) + " \\cdot " + _factor_latex(self.right)

    @property
    def is_subtraction(self) -> bool:
        return self.left.is_subtraction


# repr=False: Div prints with Binary.__repr__, not the dataclass one.
@dataclass(eq=True, repr=False)
class Div(Binary):
    symbol: ClassVar[str] = "/"
    precedence: ClassVar[int] = _PRODUCT

    def latex(self) -> str:
        from .latex import group

        # the fraction bar does the bracketing.
        return "\\frac " + group(self.left) + group(self.right)

    @property
    def is_subtraction(self) -> bool:
        return self.left.is_subtraction


@dataclass(eq=True)
class Pow(Binary):
    """base ^ exponent. Right-associative: 2^3^2 is 2^(3^2)."""

    symbol: ClassVar[str] = "^"
    precedence: ClassVar[int] = _POWER

    @property
    def base(self) -> Expr:
        return self.left

    @property
    def exponent(self) -> Expr:
        return self.right

    def __repr__(self) -> str:
        return f"{self._bracket(self.left, strict=True)}^{self._bracket(self.right)}"

    def latex(self) -> str:
        from .latex import bracketfy, group

        base = bracketfy(self.base) if self.base.precedence <= self.precedence else self.base.latex()
        return base + "^" + group(self.exponent)


@dataclass(eq=True)
class Call(Expr):
    """A function from the registry (see functions.py) applied to one argument."""

    function: str
    argument: Expr

    def __post_init__(self):
        self.argument = _cast(self.argument)

    def children(self) -> List[Expr]:
        return [self.argument]

    def __repr__(self) -> str:
        return f"\\{self.function}({self.argument!r})"

    def latex(self) -> str:
        from .latex import bracketfy

        if self.function == "sqrt":
            return "\\sqrt{" + self.argument.latex() + "}"
        if self.function == "abs":
            return "\\left| " + self.argument.latex() + " \\right|"
        return "\\" + self.function + " " + bracketfy(self.argument)


@dataclass(eq=True, repr=False)
class Associative(Expr):
    """Base class for flat sums & products.

    The parser never makes these. simplify() turns chains of Add/Sub (or Mul/Div) into one of them, so a sum
    of a thousand terms is one node with a thousand children instead of a thousand nested nodes.
    """

    terms: List[Expr]

    def __post_init__(self):
        assert len(self.terms) >= 2, f"{self.__class__.__name__} needs at least 2 terms"
        self.terms = [_cast(t) for t in self.terms]

    def children(self) -> List[Expr]:
        return list(self.terms)


@dataclass(eq=True, repr=False)
class Sum(Associative):
    precedence: ClassVar[int] = _SUM

    def __repr__(self) -> str:
        ongoing_str = repr(self.terms[0])
        for term in self.terms[1:]:
            if term.is_subtraction:
                ongoing_str += f" - {_strip_minus(term)}"
            else:
                ongoing_str += f" + {self._bracket(term)}"
        return ongoing_str

    def latex(self) -> str:
        ongoing_str = self.terms[0].latex()
        for term in self.terms[1:]:
            if term.is_subtraction:
                ongoing_str += f" - {_strip_minus(term, latex=True)}"
            else:
                ongoing_str += f" + {term.latex()}"
        return ongoing_str


@dataclass(eq=True, repr=False)
class Prod(Associative):
    """The numeric coefficient, if there is one, is terms[0]."""

    precedence: ClassVar[int] = _PRODUCT

    def _signed_terms(self) -> Tuple[str, List[Expr]]:
        # -1*x*y reads better as -x*y
        if self.terms[0] == Const(-1):
            return "-", self.terms[1:]
        return "", self.terms

    def __repr__(self) -> str:
        sign, terms = self._signed_terms()
        return sign + "*".join(self._bracket(t, strict=i > 0) for i, t in enumerate(terms))

    def latex(self) -> str:
        from .latex import bracketfy

        def _factor_latex(factor: Expr) -> str:
            if factor.precedence < self.precedence:
                return bracketfy(factor)
            return factor.latex()

        sign, terms = self._signed_terms()
        return sign + " \\cdot ".join(_factor_latex(t) for t in terms)

    @property
    def is_subtraction(self) -> bool:
        return self.terms[0].is_subtraction


def _strip_minus(expr: Expr, latex: bool = False) -> str:
    """repr (or latex) of -expr, for an expr that is printed with a leading minus."""
    if isinstance(expr, Const):
        positive = Const(-expr.value)
    elif isinstance(expr, Neg):
        positive = expr.operand
    elif isinstance(expr, Prod) and expr.terms[0] == Const(-1):
        positive = expr.terms[1] if len(expr.terms) == 2 else Prod(expr.terms[1:])
    elif isinstance(expr, Prod):
        positive = Prod([_negated_left(expr.terms[0])] + expr.terms[1:])
    elif isinstance(expr, (Mul, Div)) and expr.left == Const(-1):
        positive = expr.right
    elif isinstance(expr, (Mul, Div)):
        positive = expr.__class__(_negated_left(expr.left), expr.right)
    else:
        raise NotImplementedError(f"Cannot strip the minus sign of {expr.__class__.__name__}")

    if latex:
        return positive.latex() if positive.precedence > _SUM else "\\left(" + positive.latex() + "\\right)"
    return repr(positive) if positive.precedence > _SUM else f"({positive!r})"


def _negated_left(expr: Expr) -> Expr:
    if isinstance(expr, Const):
        return Const(-expr.value)
    if isinstance(expr, Neg):
        return expr.operand
    if isinstance(expr, (Mul, Div)):
        return expr.__class__(_negated_left(expr.left), expr.right)
    raise NotImplementedError(f"Cannot negate {expr.__class__.__name__}")


@dataclass
class Equation:
    """left = right, as parsed. Neither side is simplified."""

    left: Expr
    right: Expr

    def __post_init__(self):
        self.left = _cast(self.left)
        self.right = _cast(self.right)

    def as_difference(self) -> Expr:
        """left - right, which is 0 whenever the equation holds."""
        return Sub(self.left, self.right)

    def swap(self) -> "Equation":
        return Equation(self.right, self.left)

    def __repr__(self) -> str:
        return f"{self.left!r} = {self.right!r}"

    def latex(self) -> str:
        return f"{self.left.latex()} = {self.right.latex()}"


def symbols(names: str) -> Union[Variable, List[Variable]]:
    """symbols("x y") -> [Variable("x"), Variable("y")]"""
    variables = [Variable(name) for name in names.split()]
    return variables[0] if len(variables) == 1 else variables


def latex(expr: Expr) -> str:
    return expr.latex()
