"""govar-core: evaluator for Go-style variable declarations."""

from .environment import Environment, PRELUDE
from .evaluator import evaluate, evaluate_declarations, evaluate_expression
from .parser import parse, parse_tree
from .values import (
    FALSE,
    TRUE,
    Empty,
    Kind,
    Result,
    Value,
    VBool,
    VChar,
    VFloat,
    VInt,
    VString,
    _Empty,
)
from .errors import GovarError, GovarParseError
from .repl import GovarRepl

__all__ = [
    "evaluate",
    "evaluate_declarations",
    "evaluate_expression",
    "parse",
    "parse_tree",
    "Environment",
    "PRELUDE",
    "Empty",
    "FALSE",
    "TRUE",
    "Kind",
    "Result",
    "Value",
    "VBool",
    "VChar",
    "VFloat",
    "VInt",
    "VString",
    "GovarError",
    "GovarParseError",
    "GovarRepl",
]
