"""
Structured error types for docmirror.

Every failure that can stop a documentation run is a ``DocError``. Errors
carry a category, the offending path, and the chained underlying exception
so the surrounding tool can print one precise report and stop.

Manifesto:
    - **Fail fast:** The first error aborts the whole run
    - **Always located:** Every error knows which file triggered it
    - **Error chaining:** Original exceptions are preserved as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                        DocError                           │
        │          (category, context, cause, with_context)         │
        ├──────────────────────────────────────────────────────────┤
        │  FileSystemError   TypecheckError   EncodingError         │
        │  (STORAGE)         (TYPECHECK)      (ENCODING)            │
        │                                                           │
        │  RenderError                                              │
        │  (RENDER - a defect in the packaged template)             │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = FileSystemError("Unable to open output file", path="out/a.html")
    >>> error.context.path
    'out/a.html'
    >>> error.to_dict()["category"]
    'STORAGE'

Tags:
    error-handling, exception-hierarchy, error-context, docmirror
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and reporting."""

    STORAGE = "STORAGE"  # Read, write, directory creation
    TYPECHECK = "TYPECHECK"  # Raised by the checking context
    ENCODING = "ENCODING"  # Path or content is not text
    RENDER = "RENDER"  # Template engine failure
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        path: File that triggered the error
        module: Module name derived from the path
        stage: Pipeline stage (walk, read, typecheck, render, write)
        metadata: Additional key-value pairs
    """

    path: str | None = None
    module: str | None = None
    stage: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["path", "module", "stage"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DocError(Exception):
    """
    Base exception for all docmirror errors.

    Subclasses set ``default_category``. The ``path`` keyword is a shortcut
    for ``context.path`` since nearly every error is about one file.

    Examples:
        >>> try:
        ...     raise OSError("disk full")
        ... except OSError as e:
        ...     error = DocError("Write failed", path="out/a.html", cause=e)
        >>> error.cause
        OSError('disk full')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        if path is not None:
            self.context.path = str(path)
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    @property
    def path(self) -> str | None:
        return self.context.path

    def with_context(self, **kwargs: Any) -> DocError:
        """
        Add context to this error (fluent API).

        Usage:
            raise TypecheckError("Unknown name").with_context(path="std/list.py")
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, str(value) if key == "path" else value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        if self.context.path and self.context.path not in self.message:
            return f"{self.context.path}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class FileSystemError(DocError):
    """Read, write, or directory-creation failure."""

    default_category = ErrorCategory.STORAGE


class TypecheckError(DocError):
    """Error surfaced by the checking context for one source file."""

    default_category = ErrorCategory.TYPECHECK


class EncodingError(DocError):
    """A file path or its content cannot be interpreted as text."""

    default_category = ErrorCategory.ENCODING


class RenderError(DocError):
    """
    Template engine failure.

    The template is a packaged asset, so this always indicates a defect in
    the asset or in the data handed to it, never bad user input.
    """

    default_category = ErrorCategory.RENDER


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DocError",
    "FileSystemError",
    "TypecheckError",
    "EncodingError",
    "RenderError",
]
