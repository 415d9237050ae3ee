"""Parser: source text → declaration nodes, built on a lark LALR grammar."""

from __future__ import annotations

from lark import Lark, Transformer, Tree, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from .errors import GovarParseError
from .nodes import (
    BasicLit,
    Binary,
    Call,
    Declaration,
    Decl,
    FuncDecl,
    Ident,
    LitKind,
    Param,
    Paren,
    PointerType,
    Selector,
    SliceType,
    TypeName,
    Unary,
    ValueSpec,
)


GRAMMAR = r"""
    start: (_decl | _SEMI)*

    _decl: value_decl
         | func_decl

    // -- var / const --------------------------------------------------

    value_decl: (VAR | CONST) (spec | "(" (spec | _SEMI)* ")")

    spec: name_list [type] "=" expr_list    -> value_spec
        | name_list type                    -> typed_spec

    name_list: NAME ("," NAME)*
    expr_list: expr ("," expr)*

    ?type: NAME                 -> type_name
         | "[" "]" type         -> slice_type
         | "*" type             -> pointer_type

    // -- func (shape only) --------------------------------------------

    func_decl: "func" NAME "(" [param_list] ")" [type] FUNC_BODY
    param_list: param ("," param)*
    param: NAME [type]

    // -- expressions, loosest binding first ---------------------------

    ?expr: lor

    ?lor: land
        | lor lor_op land           -> binary

    ?land: cmp
         | land land_op cmp         -> binary

    ?cmp: add
        | cmp rel_op add            -> binary

    ?add: mul
        | add add_op mul            -> binary

    ?mul: unary_expr
        | mul mul_op unary_expr     -> binary

    ?unary_expr: primary
               | unary_op unary_expr     -> unary

    ?primary: operand
            | primary "(" [expr_list] ")"   -> call
            | primary "." NAME              -> selector

    ?operand: "(" expr ")"      -> paren
            | NAME              -> ident
            | INT               -> int_lit
            | FLOAT             -> float_lit
            | CHAR              -> char_lit
            | STRING            -> string_lit
            | RAW_STRING        -> string_lit

    !lor_op: "||"
    !land_op: "&&"
    !rel_op: "==" | "!=" | "<" | "<=" | ">" | ">="
    !add_op: "+" | "-" | "|" | "^"
    !mul_op: "*" | "/" | "%" | "<<" | ">>" | "&" | "&^"
    !unary_op: "+" | "-" | "!" | "^"

    // -- terminals ----------------------------------------------------

    VAR: "var"
    CONST: "const"
    _SEMI: ";"

    NAME: /[^\W\d]\w*/
    INT: /0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|[0-9][0-9_]*/
    FLOAT.2: /(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+/
    CHAR: /'(?:[^'\\\n]|\\(?:x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|[^\n]))'/
    STRING: /"(?:[^"\\\n]|\\[^\n])*"/
    RAW_STRING: /`[^`]*`/
    FUNC_BODY: /\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}/

    LINE_COMMENT: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*(?:.|\n)*?\*\//

    %import common.WS
    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""


# ---------------------------------------------------------------------------
# Tree → nodes
# ---------------------------------------------------------------------------

@v_args(inline=True)
class NodeBuilder(Transformer):
    """Turns the lark parse tree into ``nodes`` dataclasses."""

    def start(self, *decls) -> list[Decl]:
        return list(decls)

    # -- declarations ---------------------------------------------------

    def value_decl(self, keyword, *specs) -> Declaration:
        return Declaration(keyword=str(keyword), specs=list(specs))

    def value_spec(self, names, type_, values) -> ValueSpec:
        return ValueSpec(names=names, type=type_, values=values)

    def typed_spec(self, names, type_) -> ValueSpec:
        return ValueSpec(names=names, type=type_)

    def name_list(self, *names) -> list[str]:
        return [str(n) for n in names]

    def expr_list(self, *exprs) -> list:
        return list(exprs)

    def type_name(self, name) -> TypeName:
        return TypeName(str(name))

    def slice_type(self, elem) -> SliceType:
        return SliceType(elem)

    def pointer_type(self, elem) -> PointerType:
        return PointerType(elem)

    def func_decl(self, name, params, result, body) -> FuncDecl:
        return FuncDecl(name=str(name), params=params or [], result=result, body=str(body))

    def param_list(self, *params) -> list[Param]:
        return list(params)

    def param(self, name, type_) -> Param:
        return Param(str(name), type_)

    # -- expressions ----------------------------------------------------

    def binary(self, x, op, y) -> Binary:
        return Binary(x, op, y)

    def unary(self, op, x) -> Unary:
        return Unary(op, x)

    def call(self, func, args) -> Call:
        return Call(func, args or [])

    def selector(self, x, name) -> Selector:
        return Selector(x, str(name))

    def paren(self, x) -> Paren:
        return Paren(x)

    def ident(self, name) -> Ident:
        return Ident(str(name))

    def int_lit(self, token) -> BasicLit:
        return BasicLit(LitKind.INT, str(token))

    def float_lit(self, token) -> BasicLit:
        return BasicLit(LitKind.FLOAT, str(token))

    def char_lit(self, token) -> BasicLit:
        return BasicLit(LitKind.CHAR, str(token))

    def string_lit(self, token) -> BasicLit:
        return BasicLit(LitKind.STRING, str(token))

    def operator(self, token) -> str:
        return str(token)

    lor_op = land_op = rel_op = add_op = mul_op = unary_op = operator


_parser = Lark(GRAMMAR, parser="lalr", maybe_placeholders=True)
_builder = NodeBuilder()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def parse_tree(source: str) -> Tree:
    """Parse *source* into the raw lark tree (used by the ``ast`` front end)."""
    try:
        return _parser.parse(source)
    except UnexpectedInput as exc:
        line, column = _position(exc)
        raise GovarParseError(_describe(exc), line, column) from exc


def parse(source: str) -> list[Decl]:
    """Parse *source* into a list of top-level declarations."""
    return _builder.transform(parse_tree(source))


def _describe(exc: UnexpectedInput) -> str:
    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "unexpected end of input"
        return f"unexpected token {exc.token.value!r}"
    if isinstance(exc, UnexpectedCharacters):
        return f"unexpected character {exc.char!r}"
    return "unexpected end of input"


def _position(exc: UnexpectedInput) -> tuple[int | None, int | None]:
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)
    if not isinstance(line, int) or line < 1:
        return None, None
    return line, column
