"""
docmirror - mirrored documentation pages from a source tree.

Every documentable source file under an input directory becomes one HTML
page at the same relative location under an output directory, listing the
module's type-level and value-level declarations with their doc comments.

Example:
    >>> from pathlib import Path
    >>> from docmirror import PythonChecker, generate_for_path
    >>> generate_for_path(PythonChecker(), Path("src"), Path("site/api"))
"""

from docmirror.errors import (
    DocError,
    EncodingError,
    FileSystemError,
    RenderError,
    TypecheckError,
)
from docmirror.extractor import CheckingContext, extract
from docmirror.generator import generate, generate_for_path
from docmirror.model import Field, FieldEntry, Metadata, Module, ModuleType, Record, SemanticType
from docmirror.pysource import PythonChecker, PythonEnvironment
from docmirror.record import build_record
from docmirror.renderer import ModuleRenderer, render
from docmirror.settings import DocMirrorSettings
from docmirror.walker import walk
from docmirror.writer import write

__version__ = "0.1.0"

__all__ = [
    "CheckingContext",
    "DocError",
    "DocMirrorSettings",
    "EncodingError",
    "Field",
    "FieldEntry",
    "FileSystemError",
    "Metadata",
    "Module",
    "ModuleRenderer",
    "ModuleType",
    "PythonChecker",
    "PythonEnvironment",
    "Record",
    "RenderError",
    "SemanticType",
    "TypecheckError",
    "build_record",
    "extract",
    "generate",
    "generate_for_path",
    "render",
    "walk",
    "write",
    "__version__",
]
