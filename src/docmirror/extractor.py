"""
Extraction of (semantic type, metadata) from one source file.

The extractor is an adapter around a ``CheckingContext``. It reads the
file, asks the context to check it, asks the context for the metadata
tree, and annotates any failure with the file path. It does not interpret
the source itself.

Architecture:
    ::

        path ──► read_text() ──► context.typecheck(module_name, text)
                                        │
                                        ▼
                                (expression, SemanticType)
                                        │
                                        ▼
                 context.collect_metadata(context.environment, expression)
                                        │
                                        ▼
                              (SemanticType, Metadata)

Guardrails:
    ❌ DON'T: Skip a file that fails to check
    ✅ DO: Raise, annotated with the path; the run stops there

Tags:
    extractor, adapter, checking-context, docmirror
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from docmirror.errors import DocError, EncodingError, FileSystemError, TypecheckError
from docmirror.model import Metadata, SemanticType


@runtime_checkable
class CheckingContext(Protocol):
    """Handle to the type checker and metadata collector.

    One context is shared by every file of a run. Implementations raise
    ``TypecheckError`` for source they reject.
    """

    environment: Any

    def typecheck(self, module_name: str, source: str) -> tuple[Any, SemanticType]:
        """Check ``source`` as module ``module_name``.

        Returns:
            ``(expression, semantic_type)``
        """
        ...

    def collect_metadata(self, environment: Any, expression: Any) -> Metadata:
        """Collect the doc comment tree for a checked expression."""
        ...


def module_name_for(relative_path: Path) -> str:
    """Module name for a source path relative to the input root.

    Example:
        >>> module_name_for(Path("std/list.py"))
        'std.list'

    Raises:
        EncodingError: If the path is not valid text
    """
    relative_path = Path(relative_path)
    parts = relative_path.with_suffix("").parts
    name = ".".join(parts)
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(
            "Non-UTF-8 filename",
            path=repr(str(relative_path)),
            cause=e,
        ).with_context(stage="read") from e
    return name


def read_source(path: Path) -> str:
    """Read a source file as UTF-8 text.

    Raises:
        FileSystemError: If the file cannot be opened or read
        EncodingError: If the content is not valid UTF-8
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(
            f"Source file `{path}` is not valid UTF-8: {e.reason}",
            path=path,
            cause=e,
        ).with_context(stage="read") from e
    except OSError as e:
        raise FileSystemError(
            f"Unable to open source file `{path}`: {e.strerror or e}",
            path=path,
            cause=e,
        ).with_context(stage="read") from e


def extract(
    context: CheckingContext,
    path: Path,
    *,
    module_name: str | None = None,
) -> tuple[SemanticType, Metadata]:
    """Check one file and collect its metadata.

    Args:
        context: Shared checking context
        path: Source file to read
        module_name: Module name to check under (defaults to the file stem)

    Returns:
        ``(semantic_type, metadata)``

    Raises:
        FileSystemError: If the file cannot be read
        EncodingError: If the file is not text
        TypecheckError: If the context rejects the file
    """
    path = Path(path)
    name = module_name if module_name is not None else path.stem
    content = read_source(path)

    try:
        expr, typ = context.typecheck(name, content)
        meta = context.collect_metadata(context.environment, expr)
    except DocError as e:
        e.with_context(path=path, module=name, stage="typecheck")
        raise
    except Exception as e:
        raise TypecheckError(
            f"Unable to check `{path}`: {e}",
            path=path,
            cause=e,
        ).with_context(module=name, stage="typecheck") from e

    return typ, meta
