"""From a simplified expression to the linear form  c1*v1 + c2*v2 + ... = constant.

canonicalize(left, right) works on left - right = 0: simplify it, read off one Term per term of the sum, then
merge the terms by variable. The constants add up on the left of `= 0`, so the reported constant is their negation.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

from .errors import NonLinearError, NonLinearKind, UndefinedError
from .expr import Add, Call, Const, Div, Expr, Mul, Neg, Pow, Prod, Sub, Sum, Undefined, Variable, format_number
from .simplify import simplify_with_passes
from .utils import find_undefined, has_variable, signed_terms


class Term(NamedTuple):
    """coefficient * variable. variable is None for a constant."""

    variable: Optional[str]
    coefficient: float

    def negate(self) -> "Term":
        return Term(self.variable, -self.coefficient)


@dataclass(frozen=True)
class LinearForm:
    """sum(coefficient * variable for variable, coefficient in terms.items()) = constant

    Every coefficient in terms is non-zero. Both fields are read-only.
    """

    terms: Mapping[str, float]
    constant: float

    def __post_init__(self):
        # frozen dataclass, so go around __setattr__.
        object.__setattr__(self, "terms", MappingProxyType({k: float(v) for k, v in self.terms.items()}))
        object.__setattr__(self, "constant", float(self.constant) + 0.0)

    def __hash__(self) -> int:
        return hash((frozenset(self.terms.items()), self.constant))

    def __repr__(self) -> str:
        return f"LinearForm(terms={dict(self.terms)}, constant={self.constant})"

    def __str__(self) -> str:
        """ex: -x + 14y = 33"""
        return self._render(lambda name: name, "*") + f" = {format_number(self.constant)}"

    def latex(self) -> str:
        def _variable(name: str) -> str:
            return name if len(name) == 1 else "\\mathrm{" + name + "}"

        return self._render(_variable, " \\cdot ") + f" = {format_number(self.constant)}"

    def _render(self, variable_fn, times: str) -> str:
        """left hand side. `times` goes between a coefficient and a variable name longer than one letter."""
        if not self.terms:
            return "0"

        ongoing_str = ""
        for i, (name, coeff) in enumerate(self.terms.items()):
            magnitude = abs(coeff)
            if magnitude == 1:
                body = variable_fn(name)
            else:
                body = format_number(magnitude) + ("" if len(name) == 1 else times) + variable_fn(name)

            if i == 0:
                ongoing_str += f"-{body}" if coeff < 0 else body
            elif coeff < 0:
                ongoing_str += f" - {body}"
            else:
                ongoing_str += f" + {body}"
        return ongoing_str

    @property
    def variables(self) -> List[str]:
        return sorted(self.terms)

    @property
    def is_identity(self) -> bool:
        """0 = 0: true for every value of every variable."""
        return not self.terms and self.constant == 0

    @property
    def is_contradiction(self) -> bool:
        """0 = c with c != 0: never true."""
        return not self.terms and self.constant != 0

    def negate(self) -> "LinearForm":
        """The same equation with its sides swapped."""
        return LinearForm({k: -v for k, v in self.terms.items()}, -self.constant)

    def evaluate(self, values: Mapping[str, float]) -> float:
        """left hand side minus right hand side at values. 0 means values satisfy the equation."""
        return sum(coeff * values[name] for name, coeff in self.terms.items()) - self.constant


def canonicalize(
    left: Expr, right: Expr, *, max_passes: Optional[int] = None, zero_tolerance: float = 0.0
) -> LinearForm:
    """Raises UndefinedError or NonLinearError if left = right isn't a linear equation."""
    form, _ = canonicalize_with_passes(left, right, max_passes=max_passes, zero_tolerance=zero_tolerance)
    return form


def canonicalize_with_passes(
    left: Expr, right: Expr, *, max_passes: Optional[int] = None, zero_tolerance: float = 0.0
) -> Tuple[LinearForm, int]:
    expr, passes = simplify_with_passes(Sub(left, right), max_passes)
    return collect(expr, zero_tolerance=zero_tolerance), passes


def collect(expr: Expr, *, zero_tolerance: float = 0.0) -> LinearForm:
    """Reads the linear form off expr = 0, where expr is already simplified."""
    undefined = find_undefined(expr)
    if undefined is not None:
        raise UndefinedError(undefined.reason)

    coefficients: Dict[str, float] = {}
    constant = 0.0
    for sign, leaf in signed_terms(expr):
        term = to_term(leaf)
        if term.variable is None:
            constant += sign * term.coefficient
        else:
            coefficients[term.variable] = coefficients.get(term.variable, 0.0) + sign * term.coefficient

    terms = {name: coeff for name, coeff in coefficients.items() if abs(coeff) > zero_tolerance}
    return LinearForm(terms, -constant)


def _factors(expr: Expr) -> Tuple[float, List[Expr]]:
    """coefficient and the non-constant factors of a product."""
    if isinstance(expr, Const):
        return expr.value, []
    if isinstance(expr, Neg):
        coeff, factors = _factors(expr.operand)
        return -coeff, factors
    if isinstance(expr, Mul):
        c1, f1 = _factors(expr.left)
        c2, f2 = _factors(expr.right)
        return c1 * c2, f1 + f2
    if isinstance(expr, Prod):
        coeff, factors = 1.0, []
        for term in expr.terms:
            c, f = _factors(term)
            coeff *= c
            factors.extend(f)
        return coeff, factors
    return 1.0, [expr]


def to_term(leaf: Expr) -> Term:
    """One term of the sum -> Term. Raises NonLinearError if it isn't c, v or c*v."""
    if isinstance(leaf, Const):
        return Term(None, leaf.value)
    if isinstance(leaf, Variable):
        return Term(leaf.name, 1.0)
    if isinstance(leaf, Neg):
        return to_term(leaf.operand).negate()
    if isinstance(leaf, (Mul, Prod)):
        coeff, factors = _factors(leaf)
        if coeff == 0 or not factors:
            return Term(None, coeff)
        for factor in factors:
            if not isinstance(factor, Variable):
                raise _obstruction(factor)
        names = [f.name for f in factors]
        if len(names) == 1:
            return Term(names[0], coeff)
        repeated = [name for name in names if names.count(name) > 1]
        if repeated:
            raise NonLinearError(NonLinearKind.POWER_TERM, f"{repeated[0]} multiplied by itself in {leaf!r}")
        raise NonLinearError(NonLinearKind.PRODUCT_OF_VARIABLES, f"{' * '.join(names)} in {leaf!r}")
    if isinstance(leaf, (Pow, Div, Call)):
        raise _obstruction(leaf)
    if isinstance(leaf, Undefined):
        raise UndefinedError(leaf.reason)
    if isinstance(leaf, (Add, Sub, Sum)):
        raise AssertionError(f"expected a single term, got the sum {leaf!r}")

    raise NotImplementedError(f"to_term not implemented for {leaf.__class__.__name__}")


def _obstruction(expr: Expr) -> NonLinearError:
    """The error for a factor that keeps a term from being linear."""
    if isinstance(expr, Pow):
        if has_variable(expr.exponent):
            return NonLinearError(NonLinearKind.POWER_TERM, f"variable in the exponent of {expr!r}")
        return NonLinearError(NonLinearKind.POWER_TERM, f"{expr!r}")
    if isinstance(expr, Div):
        return NonLinearError(NonLinearKind.POWER_TERM, f"variable in the denominator of {expr!r}")
    if isinstance(expr, Call):
        return NonLinearError(NonLinearKind.UNRESOLVED_FUNCTION, f"{expr!r}")
    if isinstance(expr, (Add, Sub, Sum)):
        raise AssertionError(f"expected a simplified product, got a sum factor {expr!r}")

    raise NotImplementedError(f"no non-linear obstruction for {expr.__class__.__name__}")
