"""
Documentation generation pipeline.

Walks a source tree and writes one documentation page per documentable
file, mirroring the tree under the output root.

Example:
    >>> from docmirror.pysource import PythonChecker
    >>> written = generate_for_path(PythonChecker(), Path("std"), Path("doc"))
    >>> written[0]
    PosixPath('doc/list.html')
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO

from docmirror.errors import RenderError
from docmirror.extractor import CheckingContext, extract, module_name_for
from docmirror.logging import LogContext, ensure_configured, get_logger
from docmirror.model import Metadata, Module, SemanticType
from docmirror.record import build_record
from docmirror.renderer import ModuleRenderer
from docmirror.walker import walk
from docmirror.writer import write

logger = get_logger(__name__)


def _render(renderer: ModuleRenderer, name: str, typ: SemanticType, meta: Metadata) -> str:
    module = Module(name=name, record=build_record(typ, meta))
    logger.debug("doc_record_built", module=name, record=module.record.to_dict())
    return renderer.render(module)


def generate(
    out: TextIO,
    name: str,
    typ: SemanticType,
    meta: Metadata,
    *,
    renderer: ModuleRenderer | None = None,
) -> str:
    """Build the record for one module, render it, and write it to ``out``.

    Args:
        out: Text stream receiving the page
        name: Module name
        typ: Semantic type of the module
        meta: Metadata tree of the module
        renderer: Renderer to reuse (a new one is created if omitted)

    Returns:
        The rendered page

    Raises:
        RenderError: If the template engine fails
    """
    text = _render(renderer or ModuleRenderer(), name, typ, meta)
    out.write(text)
    return text


def generate_for_path(
    context: CheckingContext,
    input_root: Path,
    output_root: Path,
    *,
    source_suffix: str = ".py",
    output_suffix: str = ".html",
    skip_patterns: Iterable[str] = (),
) -> list[Path]:
    """Generate documentation for every source file under ``input_root``.

    Files are processed one at a time, to completion, in walk order. The
    first error stops the run; pages written for earlier files are kept.

    Manifesto:
        One source file, one page, same place in the tree. A run either
        documents everything or tells you exactly which file it could not
        document and why.

    Architecture:
        ```
        walk(input_root)
            │
            ├──► extract(context, path) ──► (SemanticType, Metadata)
            │         │
            │         ▼
            │    build_record() ──► Record ──► ModuleRenderer.render()
            │         │
            │         ▼
            └──► write(output_root, relative_path, text)
        ```

    Guardrails:
        - Do NOT continue past a failing file
          ✅ Raise the annotated DocError
        - Do NOT roll back pages already written

    Args:
        context: Checking context shared by all files
        input_root: Directory to document
        output_root: Directory receiving the generated tree
        source_suffix: Suffix of documentable files
        output_suffix: Suffix of generated pages
        skip_patterns: fnmatch patterns for names to skip

    Returns:
        Paths of the written pages, in processing order

    Raises:
        DocError: The first failure, annotated with the offending path
    """
    ensure_configured()
    input_root = Path(input_root)
    output_root = Path(output_root)
    renderer = ModuleRenderer()
    written: list[Path] = []

    logger.info("doc_walk_started", input_root=str(input_root), output_root=str(output_root))

    for path in walk(input_root, source_suffix=source_suffix, skip_patterns=skip_patterns):
        relative_path = path.relative_to(input_root)

        with LogContext(source=str(relative_path)):
            name = module_name_for(relative_path)
            typ, meta = extract(context, path, module_name=name)

            try:
                text = _render(renderer, name, typ, meta)
            except RenderError as e:
                e.with_context(path=path)
                raise

            target = write(output_root, relative_path, text, output_suffix=output_suffix)
            written.append(target)

            logger.info("doc_written", module=name, output=str(target), size=len(text))

    logger.info("doc_walk_completed", files=len(written))
    return written
