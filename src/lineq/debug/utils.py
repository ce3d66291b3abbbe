from ..expr import Binary, Call, Const, Expr, Neg, Prod, Sum, Undefined, Variable, format_number


def debug_repr(expr: Expr) -> str:
    """Prefix notation with every bracket written out, so the exact structure is visible.

    >>> debug_repr(2 * x + 1)
    '(+ (* 2 x) 1)'
    >>> debug_repr(Sum([Prod([2, x, y]), x, 1]))
    '(+ (* 2 x y) x 1)'
    >>> debug_repr(-Call("sqrt", x))
    '(- (call sqrt x))'
    """
    if isinstance(expr, Const):
        return format_number(expr.value)
    if isinstance(expr, Variable):
        return expr.name
    if isinstance(expr, Undefined):
        return f"(undefined {expr.reason!r})"
    if isinstance(expr, Neg):
        return f"(- {debug_repr(expr.operand)})"
    if isinstance(expr, Binary):
        return f"({expr.symbol} {debug_repr(expr.left)} {debug_repr(expr.right)})"
    if isinstance(expr, Sum):
        return "(+ " + " ".join(debug_repr(t) for t in expr.terms) + ")"
    if isinstance(expr, Prod):
        return "(* " + " ".join(debug_repr(t) for t in expr.terms) + ")"
    if isinstance(expr, Call):
        return f"(call {expr.function} {debug_repr(expr.argument)})"

    raise NotImplementedError(f"debug_repr not implemented for {expr.__class__.__name__}")
