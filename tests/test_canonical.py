from dataclasses import FrozenInstanceError

import pytest

from lineq.canonical import LinearForm, Term, canonicalize, collect, to_term
from lineq.debug.test_utils import x, y
from lineq.errors import NonLinearError, NonLinearKind, UndefinedError
from lineq.expr import Add, Call, Const, Div, Mul, Neg, Pow, Undefined, Variable


def nonlinear_kind(leaf) -> NonLinearKind:
    with pytest.raises(NonLinearError) as e:
        to_term(leaf)
    return e.value.error_kind


def test_str():
    assert str(LinearForm({"x": -1, "y": 14}, 33)) == "-x + 14y = 33"
    assert str(LinearForm({"x": 2, "y": -0.5}, -4)) == "2x - 0.5y = -4"
    assert str(LinearForm({"speed": 2.5}, 1)) == "2.5*speed = 1"
    assert str(LinearForm({}, 0)) == "0 = 0"
    assert str(LinearForm({}, -0.0)) == "0 = 0"


def test_latex():
    assert LinearForm({"x": -1, "y": 14}, 33).latex() == "-x + 14y = 33"
    assert LinearForm({"speed": 2.5, "t": -1}, 1).latex() == "2.5 \\cdot \\mathrm{speed} - t = 1"


def test_equality_ignores_order():
    a = LinearForm({"x": 1, "y": 2}, 3)
    b = LinearForm({"y": 2.0, "x": 1.0}, 3.0)
    assert a == b
    assert hash(a) == hash(b)
    assert a != LinearForm({"x": 1, "y": 2}, 4)
    assert a != LinearForm({"x": 1}, 3)


def test_read_only():
    form = LinearForm({"x": 1}, 3)
    with pytest.raises(TypeError):
        form.terms["x"] = 2
    with pytest.raises(FrozenInstanceError):
        form.constant = 4


def test_does_not_share_the_callers_dict():
    terms = {"x": 1.0}
    form = LinearForm(terms, 0)
    terms["y"] = 2.0
    assert dict(form.terms) == {"x": 1.0}


def test_negate():
    form = LinearForm({"x": -1, "y": 14}, 33)
    assert form.negate() == LinearForm({"x": 1, "y": -14}, -33)
    assert form.negate().negate() == form


def test_evaluate():
    form = LinearForm({"x": -1, "y": 14}, 33)
    assert form.evaluate({"x": 1, "y": 2.5}) == 1
    assert form.evaluate({"x": -33, "y": 0}) == 0
    with pytest.raises(KeyError):
        form.evaluate({"x": 1})


def test_identity_and_contradiction():
    assert LinearForm({}, 0).is_identity
    assert not LinearForm({}, 0).is_contradiction
    assert LinearForm({}, 5).is_contradiction
    assert not LinearForm({"x": 1}, 0).is_identity
    assert not LinearForm({"x": 1}, 5).is_contradiction


def test_variables():
    assert LinearForm({"y": 1, "x": 2, "b": 3}, 0).variables == ["b", "x", "y"]


def test_canonicalize():
    assert canonicalize(2 * x + 3, Const(7)) == LinearForm({"x": 2}, 4)
    assert canonicalize(x, y) == LinearForm({"x": 1, "y": -1}, 0)
    assert canonicalize(Const(3), Const(3)) == LinearForm({}, 0)


def test_zero_tolerance():
    left, right = 0.1 * x + 0.2 * x, 0.3 * x
    # floats: 0.1 + 0.2 - 0.3 isn't 0
    assert "x" in canonicalize(left, right).terms
    assert canonicalize(left, right, zero_tolerance=1e-12) == LinearForm({}, 0)


def test_collect_looks_through_sub_and_neg():
    assert collect(x - (y - 3)) == LinearForm({"x": 1, "y": -1}, -3)
    assert collect(Neg(x + 2 * y)) == LinearForm({"x": -1, "y": -2}, 0)
    assert collect(Add(x, x)) == LinearForm({"x": 2}, 0)


def test_collect_undefined():
    with pytest.raises(UndefinedError, match="division by zero"):
        collect(x + Undefined("division by zero"))


def test_to_term():
    assert to_term(Const(4)) == Term(None, 4.0)
    assert to_term(Variable("x")) == Term("x", 1.0)
    assert to_term(Mul(-3, x)) == Term("x", -3.0)
    assert to_term(Neg(Mul(3, x))) == Term("x", -3.0)
    assert to_term(Mul(Mul(2, x), 0.5)) == Term("x", 1.0)
    assert to_term(Mul(0, x)) == Term(None, 0.0)


def test_to_term_nonlinear():
    assert nonlinear_kind(Pow(x, 2)) == NonLinearKind.POWER_TERM
    assert nonlinear_kind(Mul(x, x)) == NonLinearKind.POWER_TERM
    assert nonlinear_kind(Div(1, x)) == NonLinearKind.POWER_TERM
    assert nonlinear_kind(Mul(Mul(2, x), y)) == NonLinearKind.PRODUCT_OF_VARIABLES
    assert nonlinear_kind(Call("sin", x)) == NonLinearKind.UNRESOLVED_FUNCTION
    assert nonlinear_kind(Mul(3, Call("sqrt", x))) == NonLinearKind.UNRESOLVED_FUNCTION


def test_nonlinear_reasons():
    with pytest.raises(NonLinearError, match="exponent"):
        to_term(Pow(2, x))
    with pytest.raises(NonLinearError, match="denominator"):
        to_term(Div(y, x))
    with pytest.raises(NonLinearError, match="^NonLinearError: PowerTerm: "):
        to_term(Pow(x, 2))


def test_to_term_undefined():
    with pytest.raises(UndefinedError):
        to_term(Undefined("zero raised to a negative power"))


def test_to_term_rejects_sums():
    # a sum inside a term means the expression wasn't simplified, not that the equation is non-linear.
    with pytest.raises(AssertionError):
        to_term(Add(x, 1))
    with pytest.raises(AssertionError):
        to_term(Mul(2, Add(x, 1)))
