"""Syntax tree shapes produced by the parser and consumed by the evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class LitKind(Enum):
    INT = auto()
    FLOAT = auto()
    CHAR = auto()
    STRING = auto()


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class BasicLit:
    kind: LitKind
    text: str  # source text, delimiters included


@dataclass(slots=True)
class Ident:
    name: str


@dataclass(slots=True)
class Paren:
    x: Expr


@dataclass(slots=True)
class Binary:
    x: Expr
    op: str
    y: Expr


@dataclass(slots=True)
class Unary:
    op: str
    x: Expr


@dataclass(slots=True)
class Call:
    func: Expr
    args: list[Expr] = field(default_factory=list)


@dataclass(slots=True)
class Selector:
    x: Expr
    name: str


Expr = Union[BasicLit, Ident, Paren, Binary, Unary, Call, Selector]


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class TypeName:
    name: str


@dataclass(slots=True)
class SliceType:
    elem: TypeExpr


@dataclass(slots=True)
class PointerType:
    elem: TypeExpr


TypeExpr = Union[TypeName, SliceType, PointerType]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ValueSpec:
    """``a, b T = x, y``: names paired with initializers by position."""

    names: list[str]
    type: TypeExpr | None = None
    values: list[Expr] = field(default_factory=list)


@dataclass(slots=True)
class Declaration:
    """A ``var`` or ``const`` declaration, possibly a parenthesized group."""

    keyword: str
    specs: list[ValueSpec] = field(default_factory=list)


@dataclass(slots=True)
class Param:
    name: str
    type: TypeExpr | None = None


@dataclass(slots=True)
class FuncDecl:
    """Function shape only; the body is kept as raw text and never run."""

    name: str
    params: list[Param] = field(default_factory=list)
    result: TypeExpr | None = None
    body: str = "{}"


Decl = Union[Declaration, FuncDecl]
