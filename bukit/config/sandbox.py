"""
Sandboxed evaluation of ``bu.star`` files.

``bu.star`` is written in a Starlark-like subset of Python. Before execution
the syntax tree is checked against a whitelist: no imports, classes,
``while`` loops, ``match`` statements, exception handling,
``global``/``nonlocal``, generators, decorators, dunder names, or
attribute access beyond ``bu.register_tool`` and the plain string/list/dict
methods. The script runs with a minimal set of
pure builtins and a single host binding, ``bu.register_tool``, which forwards
to the ConfigBuilder injected by the caller.

Example bu.star:

    bu.register_tool(
        name = "buck2",
        url_template = "https://github.com/facebook/buck2/releases/download/{version}/buck2-{platform}.zst",
        strategies = ["url", "host"],
    )
"""

import ast
import builtins
import logging
from types import SimpleNamespace
from typing import Dict

from bukit.config.definitions import ConfigBuilder
from bukit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

SAFE_BUILTIN_NAMES = (
    "abs",
    "all",
    "any",
    "bool",
    "dict",
    "enumerate",
    "float",
    "int",
    "len",
    "list",
    "max",
    "min",
    "range",
    "repr",
    "reversed",
    "sorted",
    "str",
    "tuple",
    "zip",
)

ALLOWED_ATTRIBUTES = frozenset(
    {
        "register_tool",
        # list
        "append",
        "extend",
        "insert",
        "pop",
        "remove",
        "index",
        "count",
        "clear",
        # dict
        "get",
        "items",
        "keys",
        "values",
        "update",
        "setdefault",
        # str
        "join",
        "split",
        "rsplit",
        "splitlines",
        "strip",
        "lstrip",
        "rstrip",
        "replace",
        "startswith",
        "endswith",
        "lower",
        "upper",
        "capitalize",
        "title",
        "find",
        "rfind",
        "partition",
        "rpartition",
        "isalnum",
        "isalpha",
        "isdigit",
        "islower",
        "isupper",
        "isspace",
    }
)

FORBIDDEN_NODES = {
    ast.Import: "import statements",
    ast.ImportFrom: "import statements",
    ast.ClassDef: "class definitions",
    ast.AsyncFunctionDef: "async functions",
    ast.AsyncFor: "async loops",
    ast.AsyncWith: "async with",
    ast.Await: "await",
    ast.While: "while loops",
    ast.Try: "try statements",
    ast.Raise: "raise statements",
    ast.With: "with statements",
    ast.Assert: "assert statements",
    ast.Delete: "del statements",
    ast.Global: "global statements",
    ast.Nonlocal: "nonlocal statements",
    ast.Yield: "yield",
    ast.YieldFrom: "yield",
    ast.GeneratorExp: "generator expressions",
    ast.NamedExpr: "assignment expressions",
}

if hasattr(ast, "TryStar"):
    FORBIDDEN_NODES[ast.TryStar] = "try statements"
if hasattr(ast, "Match"):
    FORBIDDEN_NODES[ast.Match] = "match statements"


def _starlark_print(*args) -> None:
    logger.info(" ".join(str(arg) for arg in args))


def _safe_builtins() -> Dict[str, object]:
    safe = {name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES}
    safe["print"] = _starlark_print
    return safe


class _Validator(ast.NodeVisitor):
    """Reject syntax outside the supported subset."""

    def __init__(self, filename: str):
        self.filename = filename

    def _reject(self, node: ast.AST, what: str) -> None:
        line = getattr(node, "lineno", "?")
        raise ConfigError(f"{self.filename}:{line}: {what} not allowed")

    def generic_visit(self, node: ast.AST) -> None:
        for node_type, description in FORBIDDEN_NODES.items():
            if isinstance(node, node_type):
                self._reject(node, description)
        super().generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        if node.id.startswith("__"):
            self._reject(node, f"name '{node.id}'")
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr not in ALLOWED_ATTRIBUTES:
            self._reject(node, f"attribute '{node.attr}'")
        self.generic_visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        if node.decorator_list:
            self._reject(node, "decorators")
        if node.name.startswith("__"):
            self._reject(node, f"function name '{node.name}'")
        self.generic_visit(node)

    def visit_arg(self, node: ast.arg) -> None:
        if node.arg.startswith("__"):
            self._reject(node, f"parameter name '{node.arg}'")
        self.generic_visit(node)

    def visit_keyword(self, node: ast.keyword) -> None:
        if node.arg is not None and node.arg.startswith("__"):
            self._reject(node, f"keyword '{node.arg}'")
        self.generic_visit(node)


def parse_source(source: str, filename: str = "bu.star") -> ast.Module:
    """
    Parse and validate declarative source text.

    Raises:
        ConfigError: On syntax errors or unsupported constructs
    """
    try:
        tree = ast.parse(source, filename=filename, mode="exec")
    except SyntaxError as e:
        raise ConfigError(f"{filename}:{e.lineno}: syntax error: {e.msg}") from e

    _Validator(filename).visit(tree)
    return tree


def evaluate(source: str, builder: ConfigBuilder, filename: str = "bu.star") -> None:
    """
    Evaluate ``source`` with ``bu.register_tool`` bound to ``builder``.

    Raises:
        ConfigError: If the source is rejected or evaluation fails
    """
    tree = parse_source(source, filename)
    code = compile(tree, filename, "exec")

    namespace: Dict[str, object] = {
        "__builtins__": _safe_builtins(),
        "bu": SimpleNamespace(register_tool=builder.register_tool),
    }

    logger.debug(f"Evaluating {filename}")
    try:
        exec(code, namespace)
    except Exception as e:
        raise ConfigError(f"Failed to evaluate {filename}: {e}") from e
