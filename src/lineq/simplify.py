"""Rewrites an expression into its normal form.

What the normal form looks like:
- Anything containing an Undefined is that Undefined.
- Anything without a variable is a single Const.
- No Add, Sub, Mul or Neg. Chains of them become flat Sums and Prods; a - b becomes a + (-1)*b and --a becomes a.
- No product has a sum as a factor. (a + b)*c becomes a*c + b*c.
- A Sum has at least two terms and no Sum among them. Like terms are combined (2x + 3x -> 5x), terms that cancel
  are dropped, and the constant, if it isn't 0, comes last.
- A Prod has at least two terms. The coefficient, if it isn't 1, comes first; the other factors are sorted by repr,
  so x*y and y*x are the same product.
- Division by a constant is multiplication by its reciprocal. Division by anything else stays a Div.
- x^1 is x, x^0 is 1.

Functions applied to a constant are evaluated with the registry in functions.py.

Every builder below (negate, multiply, ...) takes operands that are already in normal form and returns normal form,
so one bottom-up pass normally gets there. simplify() still loops until nothing changes (bounded), so a tree that
is already simplified comes back equal.

Chains (a + b + c + ..., a * b / c * ...) are walked with loops rather than recursion. A tree only recurses as deep
as its brackets, powers and function calls are nested.
"""

import warnings
from typing import List, Optional, Tuple

import numpy as np

from .expr import Add, Call, Const, Div, Expr, Mul, Neg, Pow, Prod, Sub, Sum, Undefined, Variable
from .functions import FUNCTIONS, apply
from .utils import node_count, signed_terms

# tweakable params
EXTRA_PASSES = 8  # on top of one pass per node.


def simplify(expr: Expr, max_passes: Optional[int] = None) -> Expr:
    return simplify_with_passes(expr, max_passes)[0]


def simplify_with_passes(expr: Expr, max_passes: Optional[int] = None) -> Tuple[Expr, int]:
    """Returns (simplified expr, number of passes it took).

    The last pass is the one that confirms nothing changed. If max_passes runs out first, warns and returns
    whatever the last pass made.
    """
    if max_passes is None:
        max_passes = node_count(expr) + EXTRA_PASSES

    for passes in range(1, max_passes + 1):
        new_expr = _rewrite(expr)
        if new_expr == expr:
            return new_expr, passes
        expr = new_expr

    warnings.warn(f"simplify did not reach a fixed point after {max_passes} passes: {expr}")
    return expr, max_passes


def _rewrite(expr: Expr) -> Expr:
    """One bottom-up pass."""
    if isinstance(expr, (Const, Variable, Undefined)):
        return expr
    if isinstance(expr, (Add, Sub, Neg, Sum)):
        terms = []
        for sign, term in signed_terms(expr):
            term = _rewrite(term)
            terms.extend(as_terms(term if sign > 0 else negate(term)))
        return _combine_like_terms(terms)
    if isinstance(expr, (Mul, Div)):
        return _rewrite_chain(expr)
    if isinstance(expr, Prod):
        result = _rewrite(expr.terms[0])
        for factor in expr.terms[1:]:
            result = multiply(result, _rewrite(factor))
        return result
    if isinstance(expr, Pow):
        return power(_rewrite(expr.base), _rewrite(expr.exponent))
    if isinstance(expr, Call):
        return call(expr.function, _rewrite(expr.argument))

    raise NotImplementedError(f"simplify not implemented for {expr.__class__.__name__}")


def _rewrite_chain(expr: Expr) -> Expr:
    """a * b / c * ... parses as Mul(Div(Mul(a, b), c), ...). Walk down the left side, then fold back up."""
    spine = []
    while isinstance(expr, (Mul, Div)):
        spine.append(expr)
        expr = expr.left

    result = _rewrite(expr)
    for node in reversed(spine):
        right = _rewrite(node.right)
        result = multiply(result, right) if isinstance(node, Mul) else divide(result, right)
    return result


def _first_undefined(*exprs: Expr) -> Optional[Undefined]:
    for e in exprs:
        if isinstance(e, Undefined):
            return e
    return None


def _const(value: float, reason: str) -> Expr:
    """Const(value), or Undefined if value isn't a finite number."""
    if not np.isfinite(value):
        return Undefined(reason)
    return Const(value)


def as_terms(expr: Expr) -> List[Expr]:
    """The terms of a sum. [expr] if expr isn't a sum."""
    if isinstance(expr, Sum):
        return list(expr.terms)
    return [expr]


def deconstruct_prod(expr: Expr) -> Tuple[float, List[Expr]]:
    """turns an expression into a coefficient and a list of the other factors.

    ex: 3*x*y -> (3, [x, y])
    ex: x -> (1, [x])
    ex: 4 -> (4, [])
    """
    if isinstance(expr, Const):
        return expr.value, []
    if isinstance(expr, Prod):
        first, *rest = expr.terms
        if isinstance(first, Const):
            return first.value, rest
        return 1.0, list(expr.terms)
    return 1.0, [expr]


def _build(cls, terms: List[Expr]) -> Expr:
    """cls(terms), or the only term if there's one."""
    return terms[0] if len(terms) == 1 else cls(terms)


def _build_prod(coeff: float, factors: List[Expr]) -> Expr:
    if not factors:
        return Const(coeff)
    factors = sorted(factors, key=repr)
    return _build(Prod, factors if coeff == 1 else [Const(coeff)] + factors)


def _combine_like_terms(terms: List[Expr]) -> Expr:
    """accumulate all like terms of a sum. Terms are alike if they're the same apart from the coefficient."""
    undefined = _first_undefined(*terms)
    if undefined is not None:
        return undefined

    constant = 0.0
    coeffs: List[float] = []
    non_const_factors: List[List[Expr]] = []

    for term in terms:
        if isinstance(term, Const):
            constant += term.value
            continue
        coeff, factors = deconstruct_prod(term)
        for i, other_factors in enumerate(non_const_factors):
            if factors == other_factors:
                coeffs[i] += coeff
                break
        else:
            coeffs.append(coeff)
            non_const_factors.append(factors)

    if not all(np.isfinite(c) for c in coeffs + [constant]):
        return Undefined("overflow while adding")

    final_terms = [_build_prod(c, f) for c, f in zip(coeffs, non_const_factors) if c != 0]
    if constant != 0 or not final_terms:
        final_terms.append(Const(constant))
    return _build(Sum, final_terms)


def negate(expr: Expr) -> Expr:
    if isinstance(expr, Undefined):
        return expr
    if isinstance(expr, Const):
        return Const(-expr.value)
    if isinstance(expr, Sum):
        return _combine_like_terms([negate(t) for t in expr.terms])
    return multiply(Const(-1), expr)


def multiply(left: Expr, right: Expr) -> Expr:
    undefined = _first_undefined(left, right)
    if undefined is not None:
        return undefined

    # distribute: (a + b)(c + d) -> ac + ad + bc + bd
    if isinstance(left, Sum) or isinstance(right, Sum):
        return _combine_like_terms([multiply(a, b) for a in as_terms(left) for b in as_terms(right)])

    c1, factors1 = deconstruct_prod(left)
    c2, factors2 = deconstruct_prod(right)
    coeff = c1 * c2
    if not np.isfinite(coeff):
        return Undefined("overflow while multiplying")
    if coeff == 0:
        return Const(0)
    return _build_prod(coeff, factors1 + factors2)


def divide(numerator: Expr, denominator: Expr) -> Expr:
    undefined = _first_undefined(numerator, denominator)
    if undefined is not None:
        return undefined

    if isinstance(denominator, Const):
        if denominator.value == 0:
            return Undefined("division by zero")
        reciprocal = _const(1 / denominator.value, "overflow while dividing")
        if isinstance(reciprocal, Undefined):
            return reciprocal
        return multiply(numerator, reciprocal)

    return Div(numerator, denominator)


def power(base: Expr, exponent: Expr) -> Expr:
    undefined = _first_undefined(base, exponent)
    if undefined is not None:
        return undefined

    if isinstance(base, Const) and isinstance(exponent, Const):
        b, x = base.value, exponent.value
        if b == 0 and x < 0:
            return Undefined("zero raised to a negative power")
        with np.errstate(all="ignore"):
            value = float(np.power(np.float64(b), np.float64(x)))
        if np.isnan(value):
            return Undefined("negative number raised to a fractional power")
        return _const(value, "overflow while raising to a power")

    if isinstance(exponent, Const):
        # Python does 0**0 = 1 and so do we.
        if exponent.value == 0:
            return Const(1)
        if exponent.value == 1:
            return base

    return Pow(base, exponent)


def call(function: str, argument: Expr) -> Expr:
    if isinstance(argument, Undefined):
        return argument

    f = FUNCTIONS[function]
    if isinstance(argument, Const):
        value = apply(f, argument.value)
        if value is None:
            reason = f.domain_reason or f"\\{f.name} is undefined at {argument!r}"
            return Undefined(f"{reason}: \\{f.name}({argument!r})")
        return Const(value)

    return Call(function, argument)
