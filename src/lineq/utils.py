from typing import Iterator, List, Optional, Tuple, Type, Union

from .expr import Add, Expr, Neg, Sub, Sum, Undefined, Variable


def contains_cls(expr: Expr, cls: Union[Type[Expr], Tuple[Type[Expr], ...]]) -> bool:
    return any(isinstance(e, cls) for e in walk(expr))


def walk(expr: Expr) -> Iterator[Expr]:
    """expr and every subexpression in it, depth first, left to right.

    Uses its own stack, so a parsed sum of thousands of terms (thousands of nested Adds) is fine.
    """
    stack = [expr]
    while stack:
        e = stack.pop()
        yield e
        stack.extend(reversed(e.children()))


def node_count(expr: Expr) -> int:
    return sum(1 for _ in walk(expr))


def has_variable(expr: Expr) -> bool:
    return contains_cls(expr, Variable)


def find_undefined(expr: Expr) -> Optional[Undefined]:
    """The first Undefined in expr (depth first, left to right), if any."""
    return next((e for e in walk(expr) if isinstance(e, Undefined)), None)


def signed_terms(expr: Expr) -> List[Tuple[float, Expr]]:
    """(sign, term) for every term of a sum, left to right. Looks through Add, Sub, Neg and Sum.

    ex: x - (y - 3) -> [(1, x), (-1, y), (1, 3)]
    """
    terms = []
    stack = [(1.0, expr)]
    while stack:
        sign, e = stack.pop()
        if isinstance(e, Add):
            stack.append((sign, e.right))
            stack.append((sign, e.left))
        elif isinstance(e, Sub):
            stack.append((-sign, e.right))
            stack.append((sign, e.left))
        elif isinstance(e, Neg):
            stack.append((-sign, e.operand))
        elif isinstance(e, Sum):
            stack.extend((sign, t) for t in reversed(e.terms))
        else:
            terms.append((sign, e))
    return terms
