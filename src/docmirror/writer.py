"""
Output writing.

Generated pages mirror the source tree: ``std/list.py`` under the input
root becomes ``std/list.html`` under the output root.
"""

from __future__ import annotations

from pathlib import Path

from docmirror.errors import FileSystemError


def output_path(output_root: Path, relative_path: Path, output_suffix: str = ".html") -> Path:
    """Mirrored output location for a source file.

    Args:
        output_root: Root of the generated tree
        relative_path: Source path relative to the input root
        output_suffix: Suffix replacing the source suffix

    Returns:
        ``output_root / relative_path`` with the suffix swapped
    """
    return Path(output_root) / Path(relative_path).with_suffix(output_suffix)


def write(
    output_root: Path,
    relative_path: Path,
    text: str,
    *,
    output_suffix: str = ".html",
) -> Path:
    """Write a rendered page, creating missing directories.

    Existing files are overwritten, so re-running a generation is safe.

    Args:
        output_root: Root of the generated tree
        relative_path: Source path relative to the input root
        text: Rendered page
        output_suffix: Suffix of generated pages

    Returns:
        Path of the written file

    Raises:
        FileSystemError: If a directory or the file cannot be written
    """
    target = output_path(output_root, relative_path, output_suffix)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(
            f"Unable to create output directory `{target.parent}`: {e.strerror or e}",
            path=target.parent,
            cause=e,
        ).with_context(stage="write") from e

    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(
            f"Unable to open output file `{target}`: {e.strerror or e}",
            path=target,
            cause=e,
        ).with_context(stage="write") from e

    return target
