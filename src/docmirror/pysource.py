"""
Checking context for Python source files.

Reads a Python module with ``ast`` and describes its exported interface:
classes and explicit type aliases are type-level fields, functions and
module variables are value-level fields. Doc comments come from
docstrings, and from the string literal that follows an assignment.

Example:
    >>> checker = PythonChecker()
    >>> tree, typ = checker.typecheck("ids", "type Id = int\\nids: list[Id] = []\\n")
    >>> [(e.name, e.unresolved, e.resolved) for e in typ.value_fields()]
    [('ids', 'list[Id]', 'list[int]')]
"""

from __future__ import annotations

import ast
import copy
import inspect
from dataclasses import dataclass
from typing import Callable

from docmirror.errors import TypecheckError
from docmirror.model import FieldEntry, Metadata, ModuleType

# ast.TypeAlias (the ``type X = ...`` statement) exists from Python 3.12.
_TYPE_ALIAS_NODE = getattr(ast, "TypeAlias", None)

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)


@dataclass
class PythonEnvironment:
    """Options shared by checking and metadata collection.

    Attributes:
        include_private: Document ``_private`` names when no ``__all__`` exists
        attribute_docstrings: Read the string literal after an assignment as its comment
    """

    include_private: bool = False
    attribute_docstrings: bool = True


class PythonChecker:
    """Checking context for ``.py`` files.

    Manifesto:
        Python has no checker that hands back a module's type, so the
        interface is read from the declarations themselves. Nothing is
        imported or executed.

    Architecture:
        ```
        source ──► ast.parse() ──► ast.Module
                        │
                        ├──► aliases  (type X = ..., X: TypeAlias = ...)
                        │
                        ├──► type_fields:  ClassDef, aliases
                        │
                        └──► value_fields: FunctionDef, AnnAssign, Assign
        ```

    Features:
        - Honour ``__all__`` when it is a literal list or tuple
        - Keep annotations as written (unresolved) next to the alias-expanded text
        - Infer simple types for unannotated assignments
        - Keep duplicate declarations in source order

    Guardrails:
        - Do NOT import the module being documented
          ✅ Only the syntax tree is inspected

    Tags:
        - checker
        - ast
        - python
    """

    def __init__(self, environment: PythonEnvironment | None = None):
        self.environment = environment or PythonEnvironment()

    def typecheck(self, module_name: str, source: str) -> tuple[ast.Module, ModuleType]:
        """Parse ``source`` and describe its exported declarations.

        Raises:
            TypecheckError: If the source is not valid Python
        """
        try:
            tree = ast.parse(source, filename=module_name)
        except SyntaxError as e:
            raise TypecheckError(
                f"Invalid syntax in `{module_name}` at line {e.lineno}: {e.msg}",
                cause=e,
            ).with_context(module=module_name, line=e.lineno) from e
        except ValueError as e:
            raise TypecheckError(
                f"Unable to parse `{module_name}`: {e}",
                cause=e,
            ).with_context(module=module_name) from e

        exports = _exports(tree)
        resolver = AliasResolver(_aliases(tree))
        declarations = _Declarations(resolver)

        for node in tree.body:
            declarations.visit(node)

        def exported(entry: FieldEntry) -> bool:
            if exports is not None:
                return entry.name in exports
            return self.environment.include_private or not entry.name.startswith("_")

        typ = ModuleType(
            types=tuple(e for e in declarations.types if exported(e)),
            values=tuple(e for e in declarations.values if exported(e)),
        )
        return tree, typ

    def collect_metadata(self, environment: PythonEnvironment, expression: ast.Module) -> Metadata:
        """Collect docstrings for a module and its declarations."""
        return Metadata(
            comment=ast.get_docstring(expression),
            members=_members(expression.body, environment),
        )


class AliasResolver:
    """Expand type aliases inside annotation expressions."""

    def __init__(self, aliases: dict[str, ast.expr]):
        self.aliases = aliases

    def resolve(self, node: ast.expr) -> ast.expr:
        return _AliasExpander(self.aliases).visit(copy.deepcopy(node))

    def text(self, node: ast.expr) -> str:
        return ast.unparse(self.resolve(node))


class _AliasExpander(ast.NodeTransformer):
    def __init__(self, aliases: dict[str, ast.expr], active: frozenset[str] = frozenset()):
        self.aliases = aliases
        self.active = active

    def visit_Name(self, node: ast.Name) -> ast.expr:
        target = self.aliases.get(node.id)
        # Cyclic aliases stay as written.
        if target is None or node.id in self.active:
            return node
        inner = _AliasExpander(self.aliases, self.active | {node.id})
        return inner.visit(copy.deepcopy(target))

    def visit_Constant(self, node: ast.Constant) -> ast.expr:
        if not isinstance(node.value, str):
            return node
        # Forward reference
        try:
            parsed = ast.parse(node.value.strip(), mode="eval").body
        except SyntaxError:
            return node
        return self.visit(parsed)

    def visit_Subscript(self, node: ast.Subscript) -> ast.expr:
        node.value = self.visit(node.value)
        name = _base_name(node.value)
        # Literal strings are values, Annotated metadata is not a type.
        if name == "Literal":
            return node
        if name == "Annotated" and isinstance(node.slice, ast.Tuple) and node.slice.elts:
            node.slice.elts[0] = self.visit(node.slice.elts[0])
            return node
        node.slice = self.visit(node.slice)
        return node


class _Declarations(ast.NodeVisitor):
    """Collect type-level and value-level entries from top-level statements."""

    def __init__(self, resolver: AliasResolver):
        self.resolver = resolver
        self.types: list[FieldEntry] = []
        self.values: list[FieldEntry] = []
        self.classes: set[str] = set()
        self.known: dict[str, str] = {}

    def _value(self, name: str, unresolved: str, resolved: str) -> None:
        self.values.append(FieldEntry(name, unresolved, resolved))
        self.known[name] = resolved

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self.classes.add(node.name)
        self.types.append(
            FieldEntry(
                node.name,
                _class_text(node, ast.unparse),
                _class_text(node, self.resolver.text),
            )
        )

    def visit_FunctionDef(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        self._value(
            node.name,
            _signature(node, ast.unparse),
            _signature(node, self.resolver.text),
        )

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_TypeAlias(self, node) -> None:
        self.types.append(
            FieldEntry(node.name.id, ast.unparse(node.value), self.resolver.text(node.value))
        )

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if not isinstance(node.target, ast.Name):
            return
        name = node.target.id
        if _is_type_alias_annotation(node.annotation):
            if node.value is not None:
                self.types.append(
                    FieldEntry(name, ast.unparse(node.value), self.resolver.text(node.value))
                )
            return
        self._value(name, ast.unparse(node.annotation), self.resolver.text(node.annotation))

    def visit_Assign(self, node: ast.Assign) -> None:
        for target in node.targets:
            if isinstance(target, ast.Name):
                inferred = self._infer(node.value)
                self._value(target.id, inferred, inferred)
            elif isinstance(target, (ast.Tuple, ast.List)):
                for name, inferred in self._unpack(target.elts, node.value):
                    self._value(name, inferred, inferred)

    def _unpack(self, targets: list[ast.expr], value: ast.expr) -> list[tuple[str, str]]:
        elements = value.elts if isinstance(value, (ast.Tuple, ast.List)) else None
        starred = [i for i, t in enumerate(targets) if isinstance(t, ast.Starred)]
        star = starred[0] if len(starred) == 1 else None
        if elements is not None and star is None and len(elements) != len(targets):
            elements = None
        if elements is not None and star is not None and len(elements) < len(targets) - 1:
            elements = None

        pairs = []
        for index, target in enumerate(targets):
            if isinstance(target, ast.Starred):
                if isinstance(target.value, ast.Name):
                    pairs.append((target.value.id, "list"))
                continue
            if not isinstance(target, ast.Name):
                continue
            if elements is None:
                inferred = "Any"
            elif star is not None and index > star:
                inferred = self._infer(elements[index - len(targets)])
            else:
                inferred = self._infer(elements[index])
            pairs.append((target.id, inferred))
        return pairs

    def generic_visit(self, node: ast.AST) -> None:
        # Only top-level declarations are documented.
        return None

    def _infer(self, value: ast.expr) -> str:
        if isinstance(value, ast.Constant):
            return "None" if value.value is None else type(value.value).__name__
        if isinstance(value, ast.JoinedStr):
            return "str"
        if isinstance(value, (ast.List, ast.ListComp)):
            return "list"
        if isinstance(value, ast.Tuple):
            return "tuple"
        if isinstance(value, (ast.Dict, ast.DictComp)):
            return "dict"
        if isinstance(value, (ast.Set, ast.SetComp)):
            return "set"
        if isinstance(value, ast.GeneratorExp):
            return "Generator"
        if isinstance(value, ast.Lambda):
            return "Callable"
        if isinstance(value, ast.Call) and isinstance(value.func, ast.Name):
            if value.func.id in self.classes:
                return value.func.id
        if isinstance(value, ast.Name):
            if value.id in self.known:
                return self.known[value.id]
            if value.id in self.classes:
                return f"type[{value.id}]"
        return "Any"


def _base_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _is_type_alias_annotation(annotation: ast.expr) -> bool:
    return _base_name(annotation) == "TypeAlias"


def _aliases(tree: ast.Module) -> dict[str, ast.expr]:
    """Non-generic aliases declared at module level."""
    aliases: dict[str, ast.expr] = {}
    for node in tree.body:
        if _TYPE_ALIAS_NODE is not None and isinstance(node, _TYPE_ALIAS_NODE):
            if not node.type_params:
                aliases[node.name.id] = node.value
        elif (
            isinstance(node, ast.AnnAssign)
            and isinstance(node.target, ast.Name)
            and node.value is not None
            and _is_type_alias_annotation(node.annotation)
        ):
            aliases[node.target.id] = node.value
    return aliases


def _exports(tree: ast.Module) -> set[str] | None:
    """Names listed in a literal ``__all__``, or None when there is none."""
    exports: set[str] | None = None
    for node in tree.body:
        if isinstance(node, ast.Assign):
            targets = node.targets
        elif isinstance(node, (ast.AnnAssign, ast.AugAssign)):
            targets = [node.target]
        else:
            continue
        if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in targets):
            continue

        names = _string_list(node.value)
        if names is None:
            return None
        if isinstance(node, ast.AugAssign) and exports is not None:
            exports |= names
        else:
            exports = names
    return exports


def _string_list(node: ast.expr | None) -> set[str] | None:
    if not isinstance(node, (ast.List, ast.Tuple)):
        return None
    names = set()
    for element in node.elts:
        if not (isinstance(element, ast.Constant) and isinstance(element.value, str)):
            return None
        names.add(element.value)
    return names


def _class_text(node: ast.ClassDef, text: Callable[[ast.expr], str]) -> str:
    bases = [text(base) for base in node.bases]
    bases += [f"{kw.arg}={text(kw.value)}" if kw.arg else f"**{text(kw.value)}" for kw in node.keywords]
    if bases:
        return f"class {node.name}({', '.join(bases)})"
    return f"class {node.name}"


def _signature(node: ast.FunctionDef | ast.AsyncFunctionDef, text: Callable[[ast.expr], str]) -> str:
    """Signature text like ``(x: int, *, flag: bool = False) -> str``."""
    args = node.args
    parts = []

    def param(arg: ast.arg, default: ast.expr | None = None, prefix: str = "") -> str:
        part = prefix + arg.arg
        if arg.annotation is not None:
            part += f": {text(arg.annotation)}"
            if default is not None:
                part += f" = {ast.unparse(default)}"
        elif default is not None:
            part += f"={ast.unparse(default)}"
        return part

    positional = args.posonlyargs + args.args
    first_default = len(positional) - len(args.defaults)
    for index, arg in enumerate(positional):
        default = args.defaults[index - first_default] if index >= first_default else None
        parts.append(param(arg, default))
        if args.posonlyargs and index == len(args.posonlyargs) - 1:
            parts.append("/")

    if args.vararg is not None:
        parts.append(param(args.vararg, prefix="*"))
    elif args.kwonlyargs:
        parts.append("*")

    for arg, default in zip(args.kwonlyargs, args.kw_defaults):
        parts.append(param(arg, default))

    if args.kwarg is not None:
        parts.append(param(args.kwarg, prefix="**"))

    signature = f"({', '.join(parts)})"
    if node.returns is not None:
        signature += f" -> {text(node.returns)}"
    if isinstance(node, ast.AsyncFunctionDef):
        signature = f"async {signature}"
    return signature


def _target_names(node: ast.stmt) -> list[str]:
    if isinstance(node, ast.Assign):
        names = []
        for target in node.targets:
            if isinstance(target, ast.Name):
                names.append(target.id)
            elif isinstance(target, (ast.Tuple, ast.List)):
                for element in target.elts:
                    if isinstance(element, ast.Starred):
                        element = element.value
                    if isinstance(element, ast.Name):
                        names.append(element.id)
        return names
    if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
        return [node.target.id]
    if _TYPE_ALIAS_NODE is not None and isinstance(node, _TYPE_ALIAS_NODE):
        return [node.name.id]
    return []


def _attribute_docstring(body: list[ast.stmt], index: int) -> str | None:
    if index + 1 >= len(body):
        return None
    following = body[index + 1]
    if (
        isinstance(following, ast.Expr)
        and isinstance(following.value, ast.Constant)
        and isinstance(following.value.value, str)
    ):
        return inspect.cleandoc(following.value.value)
    return None


def _members(body: list[ast.stmt], environment: PythonEnvironment) -> dict[str, Metadata]:
    members: dict[str, Metadata] = {}

    def add(name: str, meta: Metadata) -> None:
        # A redefinition without a comment keeps the earlier comment.
        if name not in members or meta.comment is not None:
            members[name] = meta

    for index, node in enumerate(body):
        if isinstance(node, _FUNCTION_NODES):
            add(node.name, Metadata(comment=ast.get_docstring(node)))
        elif isinstance(node, ast.ClassDef):
            add(
                node.name,
                Metadata(
                    comment=ast.get_docstring(node),
                    members=_members(node.body, environment),
                ),
            )
        else:
            names = _target_names(node)
            if not names:
                continue
            comment = _attribute_docstring(body, index) if environment.attribute_docstrings else None
            for name in names:
                add(name, Metadata(comment=comment))
    return members
