"""Version-name filter expressions.

A filter expression is a ``;``-separated list of alternative *terms*.  Each
term is a space-separated list of *factors*:

* ``^prefix`` -- the name starts with *prefix*
* ``suffix$`` -- the name ends with *suffix*
* anything else -- the name contains the text

Factors inside a term are ANDed by default (``factors="or"`` ORs them);
terms are always ORed.  Matching is case-insensitive.

Expressions are parsed into a small tree of immutable nodes and evaluated
by :func:`evaluate`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Const:
    value: bool

    def __str__(self) -> str:
        return "T" if self.value else "F"


@dataclass(frozen=True)
class Not:
    inner: Expr

    def __str__(self) -> str:
        return f"!{self.inner}"


@dataclass(frozen=True)
class And:
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} && {self.right})"


@dataclass(frozen=True)
class Or:
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} || {self.right})"


@dataclass(frozen=True)
class StartsWith:
    text: str

    def __str__(self) -> str:
        return f"StartsWith ({self.text})"


@dataclass(frozen=True)
class EndsWith:
    text: str

    def __str__(self) -> str:
        return f"EndsWith ({self.text})"


@dataclass(frozen=True)
class Contains:
    text: str

    def __str__(self) -> str:
        return f"Contains ({self.text})"


Expr = Union[Const, Not, And, Or, StartsWith, EndsWith, Contains]

TRUE = Const(True)
FALSE = Const(False)

FACTOR_MODES = ("and", "or")


# ---------------------------------------------------------------------------
# Combinators (fold constants and double negation)
# ---------------------------------------------------------------------------

def both(left: Expr, right: Expr) -> Expr:
    if left == TRUE:
        return right
    if left == FALSE:
        return FALSE
    return And(left, right)


def either(left: Expr, right: Expr) -> Expr:
    if left == FALSE:
        return right
    if left == TRUE:
        return TRUE
    return Or(left, right)


def negate(expr: Expr) -> Expr:
    if isinstance(expr, Not):
        return expr.inner
    if isinstance(expr, Const):
        return Const(not expr.value)
    return Not(expr)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate(expr: Expr, name: str) -> bool:
    """Return True if *name* passes *expr* (case-insensitive)."""
    return _eval(expr, name.lower())


def _eval(expr: Expr, name: str) -> bool:
    if isinstance(expr, Const):
        return expr.value
    if isinstance(expr, Not):
        return not _eval(expr.inner, name)
    if isinstance(expr, And):
        return _eval(expr.left, name) and _eval(expr.right, name)
    if isinstance(expr, Or):
        return _eval(expr.left, name) or _eval(expr.right, name)
    if isinstance(expr, StartsWith):
        return name.startswith(expr.text)
    if isinstance(expr, EndsWith):
        return name.endswith(expr.text)
    if isinstance(expr, Contains):
        return expr.text in name
    raise TypeError(f"Not a filter expression: {expr!r}")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_factor(factor: str) -> Expr:
    factor = factor.lower()
    if factor.startswith("^"):
        return StartsWith(factor[1:])
    if factor.endswith("$"):
        return EndsWith(factor[:-1])
    return Contains(factor)


def parse_term(term: str, *, factors: str = "and") -> Expr:
    """Parse one space-separated term.  Blank factors are ignored."""
    if factors not in FACTOR_MODES:
        raise ValueError(f"Invalid factor mode {factors!r}: expected 'and' or 'or'")
    result = TRUE if factors == "and" else FALSE
    for raw in term.split():
        f = parse_factor(raw)
        result = both(result, f) if factors == "and" else either(result, f)
    return result


def parse(expression: str, *, factors: str = "and") -> Expr:
    """Parse a full ``;``-separated expression.

    Blank terms are ignored; an expression with no terms at all matches
    everything.
    """
    terms = [t.strip() for t in expression.split(";")]
    terms = [t for t in terms if t]
    if not terms:
        return TRUE
    result: Expr = FALSE
    for t in terms:
        result = either(result, parse_term(t, factors=factors))
    return result


def parse_include_exclude(
    include: str | None, exclude: str | None, *, factors: str = "and",
) -> Expr:
    """Combine an include and an exclude expression.

    Empty include matches everything, empty exclude excludes nothing,
    both present means ``include AND NOT exclude``.
    """
    include = (include or "").strip()
    exclude = (exclude or "").strip()
    result = parse(include, factors=factors) if include else TRUE
    if exclude:
        result = both(result, negate(parse(exclude, factors=factors)))
    return result
