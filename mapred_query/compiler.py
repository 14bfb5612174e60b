"""
Compiles the source of an anonymous function into a callable.

The source must be exactly one ``lambda`` expression. Only pure
expression syntax and a fixed set of attribute names are accepted, and
the lambda is evaluated in a fresh namespace whose builtins are limited
to side-effect free helpers.
"""
from __future__ import annotations

import ast
import builtins
from typing import Any, Callable, Dict, Union

import structlog

from .errors import CompilationError

log = structlog.get_logger(__name__)

_ALLOWED_NODES = (
    ast.Expression,
    ast.Lambda,
    ast.arguments,
    ast.arg,
    ast.Name,
    ast.Load,
    ast.Store,
    ast.Constant,
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.keyword,
    ast.Attribute,
    ast.Subscript,
    ast.Slice,
    ast.Tuple,
    ast.List,
    ast.Dict,
    ast.Set,
    ast.ListComp,
    ast.SetComp,
    ast.DictComp,
    ast.GeneratorExp,
    ast.comprehension,
    ast.Starred,
    ast.JoinedStr,
    ast.FormattedValue,
    ast.operator,
    ast.unaryop,
    ast.boolop,
    ast.cmpop,
    ast.expr_context,
)

# Only these attribute names may be read; frame, code and format
# attributes can reach outside the namespace.
_ALLOWED_ATTRIBUTES = frozenset((
    # str / bytes
    "capitalize", "casefold", "count", "decode", "encode", "endswith", "find",
    "index", "isalnum", "isalpha", "isdigit", "islower", "isspace", "isupper",
    "join", "lower", "lstrip", "partition", "replace", "rfind", "rindex",
    "rpartition", "rsplit", "rstrip", "split", "splitlines", "startswith",
    "strip", "swapcase", "title", "upper", "zfill",
    # list / dict / set
    "append", "extend", "insert", "pop", "copy", "get", "items", "keys",
    "values", "update", "setdefault", "add", "union", "intersection",
    "difference", "issubset", "issuperset",
    # numbers
    "real", "imag", "conjugate", "bit_length", "is_integer",
    # stored objects handed to phases
    "bucket", "key", "value", "data", "metadata",
))

_SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bool", "dict", "divmod", "enumerate", "filter",
    "float", "frozenset", "int", "isinstance", "len", "list", "map", "max",
    "min", "range", "reversed", "round", "set", "sorted", "str", "sum",
    "tuple", "zip",
)


def _safe_builtins() -> Dict[str, Any]:
    return {name: getattr(builtins, name) for name in _SAFE_BUILTIN_NAMES}


def _check_node(node: ast.AST, source: str) -> None:
    if not isinstance(node, _ALLOWED_NODES):
        raise CompilationError(source, f"Unsupported syntax in anonymous function: {type(node).__name__}")
    if isinstance(node, ast.Name) and node.id.startswith("__"):
        raise CompilationError(source, f"Name not allowed in anonymous function: {node.id}")
    if isinstance(node, ast.Attribute) and node.attr not in _ALLOWED_ATTRIBUTES:
        raise CompilationError(source, f"Attribute not allowed in anonymous function: {node.attr}")


def define_anon(text: Union[str, bytes]) -> Callable[..., Any]:
    """
    Turn lambda source (str, or UTF-8 bytes) into a callable.

    Raises CompilationError if the text is not exactly one lambda
    expression or uses syntax outside the allowed subset.
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CompilationError(text, f"Anonymous function source is not UTF-8: {exc}") from exc
    if not isinstance(text, str):
        raise CompilationError(text, f"Anonymous function source must be str or bytes, got {type(text).__name__}")

    try:
        tree = ast.parse(text.strip(), filename="<anon>", mode="eval")
    except SyntaxError as exc:
        raise CompilationError(text, f"Cannot parse anonymous function: {exc.msg}") from exc

    if not isinstance(tree.body, ast.Lambda):
        raise CompilationError(text, "Anonymous function source must be a single lambda expression")
    for node in ast.walk(tree):
        _check_node(node, text)

    code = compile(tree, "<anon>", "eval")
    fun = eval(code, {"__builtins__": _safe_builtins()}, {})
    log.debug("anon.compiled", source=text)
    return fun


# Alias used by phase executors.
define_anon_erl = define_anon
