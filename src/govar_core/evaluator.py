"""Evaluator: declarations → values bound in an Environment."""

from __future__ import annotations

import logging
import operator
import re
from typing import Callable

from .environment import Environment
from .nodes import (
    BasicLit,
    Binary,
    Declaration,
    Decl,
    Ident,
    LitKind,
    Paren,
    TypeName,
    Unary,
    ValueSpec,
)
from .parser import parse
from .values import (
    FALSE,
    TRUE,
    Empty,
    Kind,
    Result,
    VBool,
    VChar,
    VFloat,
    VInt,
    VString,
    fits_float32,
    fits_int,
    to_bool,
    to_float32,
    wrap_int,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def evaluate(source: str, env: Environment | None = None) -> list[Result]:
    """Parse *source* and evaluate every declaration into *env*.

    Returns one entry per declared name, in source order.  A slot whose
    expression could not be evaluated holds ``Empty``; the name is still
    bound so that later references see "no value" too.

    Raises ``GovarParseError`` when *source* does not parse; nothing is
    bound in that case.
    """
    if env is None:
        env = Environment()
    return evaluate_declarations(parse(source), env)


def evaluate_declarations(decls: list[Decl], env: Environment) -> list[Result]:
    results: list[Result] = []
    for decl in decls:
        results.extend(_eval_decl(decl, env))
    return results


def evaluate_expression(expr, env: Environment) -> Result:
    """Reduce one expression node to a value, or ``Empty``."""
    if isinstance(expr, Paren):
        return evaluate_expression(expr.x, env)
    if isinstance(expr, Binary):
        return _eval_binary(expr, env)
    if isinstance(expr, Unary):
        return _eval_unary(expr, env)
    if isinstance(expr, Ident):
        return env.get(expr.name)
    if isinstance(expr, BasicLit):
        return _eval_literal(expr)
    logger.debug("unsupported expression %r", expr)
    return Empty


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

def _eval_decl(decl: Decl, env: Environment) -> list[Result]:
    # Function declarations are recognized by the parser but never run.
    if not isinstance(decl, Declaration):
        return []
    results: list[Result] = []
    for spec in decl.specs:
        results.extend(_eval_value_spec(spec, env))
    return results


def _eval_value_spec(spec: ValueSpec, env: Environment) -> list[Result]:
    values = spec.values or _zero_values(spec)
    results: list[Result] = []
    for i, name in enumerate(spec.names):
        value = evaluate_expression(values[i], env) if i < len(values) else Empty
        if value is Empty:
            logger.debug("%s: no value", name)
        env.set(name, value)
        results.append(value)
    return results


ZERO_VALUES: dict[str, BasicLit] = {
    "int": BasicLit(LitKind.INT, "0"),
    "string": BasicLit(LitKind.STRING, '""'),
    "byte": BasicLit(LitKind.CHAR, "'0'"),
    "rune": BasicLit(LitKind.CHAR, "'0'"),
    "float32": BasicLit(LitKind.FLOAT, "0.0"),
}


def _zero_values(spec: ValueSpec) -> list[BasicLit]:
    """One zero-value literal per name, or nothing for unknown types."""
    if not isinstance(spec.type, TypeName):
        return []
    zero = ZERO_VALUES.get(spec.type.name)
    if zero is None:
        return []
    return [zero] * len(spec.names)


# ---------------------------------------------------------------------------
# Operator tables
# ---------------------------------------------------------------------------

Operation = Callable[[object, object], Result]

_COMPARISONS = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}


def _trunc_div(a: int, b: int) -> int | None:
    if b == 0:
        return None
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _trunc_rem(a: int, b: int) -> int | None:
    q = _trunc_div(a, b)
    if q is None:
        return None
    return a - b * q


def _float_div(a: float, b: float) -> float | None:
    if b == 0:
        return None
    return a / b


def _comparison_table() -> dict[str, Operation]:
    def lift(fn):
        return lambda left, right: to_bool(fn(left.value, right.value))
    return {op: lift(fn) for op, fn in _COMPARISONS.items()}


def _integral_table(make, bits: int) -> dict[str, Operation]:
    """Arithmetic for integer-like kinds: results wrap to *bits*."""

    def lift(fn):
        def apply(left, right):
            result = fn(left.value, right.value)
            if result is None:
                return Empty
            return make(wrap_int(result, bits))
        return apply

    table = {
        "+": lift(operator.add),
        "-": lift(operator.sub),
        "*": lift(operator.mul),
        "/": lift(_trunc_div),
        "%": lift(_trunc_rem),
    }
    table.update(_comparison_table())
    return table


def _float_table() -> dict[str, Operation]:
    def lift(fn):
        def apply(left, right):
            result = fn(left.value, right.value)
            if result is None:
                return Empty
            return VFloat(to_float32(result))
        return apply

    table = {
        "+": lift(operator.add),
        "-": lift(operator.sub),
        "*": lift(operator.mul),
        "/": lift(_float_div),
    }
    table.update(_comparison_table())
    return table


def _string_table() -> dict[str, Operation]:
    table = {"+": lambda left, right: VString(left.value + right.value)}
    table.update(_comparison_table())
    return table


OPERATOR_TABLES: dict[Kind, dict[str, Operation]] = {
    Kind.Integer: _integral_table(VInt, 64),
    Kind.Character: _integral_table(VChar, 32),
    Kind.String: _string_table(),
    Kind.FloatingPoint: _float_table(),
    Kind.Boolean: {},
}

_missing = set(Kind) - set(OPERATOR_TABLES)
if _missing:
    raise RuntimeError(f"no operator table for {sorted(k.name for k in _missing)}")


# ---------------------------------------------------------------------------
# Binary / unary operations
# ---------------------------------------------------------------------------

def _promote(left: Result, right: Result) -> tuple[Result, Result]:
    """Widen an Integer operand paired with a FloatingPoint one."""
    if isinstance(left, VFloat) and isinstance(right, VInt):
        return left, VFloat(to_float32(float(right.value)))
    if isinstance(left, VInt) and isinstance(right, VFloat):
        return VFloat(to_float32(float(left.value))), right
    return left, right


def _eval_binary(expr: Binary, env: Environment) -> Result:
    left = evaluate_expression(expr.x, env)
    right = evaluate_expression(expr.y, env)
    if left is Empty or right is Empty:
        return Empty
    left, right = _promote(left, right)
    if left.kind is not right.kind:
        logger.debug("mismatched kinds %s %s %s", left.kind.name, expr.op, right.kind.name)
        return Empty
    operation = OPERATOR_TABLES[left.kind].get(expr.op)
    if operation is None:
        logger.debug("operator %s not defined for %s", expr.op, left.kind.name)
        return Empty
    return operation(left, right)


def _eval_unary(expr: Unary, env: Environment) -> Result:
    operand = evaluate_expression(expr.x, env)
    if expr.op == "-":
        if isinstance(operand, VInt):
            return VInt(wrap_int(-operand.value))
        return Empty
    if expr.op == "!":
        if isinstance(operand, VBool):
            return FALSE if operand is TRUE else TRUE
        return Empty
    logger.debug("unsupported unary operator %s", expr.op)
    return Empty


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

_DECIMAL_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_ESCAPE_RE = re.compile(r"x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}")
_OCTAL_ESCAPE_RE = re.compile(r"[0-7]{3}")

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}


def _eval_literal(lit: BasicLit) -> Result:
    if lit.kind is LitKind.INT:
        return _eval_int_literal(lit.text)
    if lit.kind is LitKind.FLOAT:
        return _eval_float_literal(lit.text)
    if lit.kind is LitKind.STRING:
        return VString(lit.text[1:-1])
    if lit.kind is LitKind.CHAR:
        return _eval_char_literal(lit.text)
    return Empty


def _eval_int_literal(text: str) -> Result:
    """Base-10 only; prefixed or underscored forms are "no value"."""
    if not _DECIMAL_RE.fullmatch(text):
        return Empty
    n = int(text, 10)
    if not fits_int(n):
        return Empty
    return VInt(n)


def _eval_float_literal(text: str) -> Result:
    if not _FLOAT_RE.fullmatch(text):
        return Empty
    x = float(text)
    if not fits_float32(x):
        return Empty
    return VFloat(to_float32(x))


def _eval_char_literal(text: str) -> Result:
    inner = text[1:-1]
    if not inner:
        return Empty
    if inner[0] != "\\":
        return VChar.of(inner[0])
    body = inner[1:]
    if body in _SIMPLE_ESCAPES:
        return VChar.of(_SIMPLE_ESCAPES[body])
    if _HEX_ESCAPE_RE.fullmatch(body):
        code = int(body[1:], 16)
        if body[0] == "x":
            return VChar(code)
        # \u and \U must name a Unicode scalar
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            return Empty
        return VChar(code)
    if _OCTAL_ESCAPE_RE.fullmatch(body):
        code = int(body, 8)
        return VChar(code) if code <= 0xFF else Empty
    return Empty
