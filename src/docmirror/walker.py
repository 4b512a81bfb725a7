"""
Source tree walking.

Example:
    >>> for path in walk(Path("std")):
    ...     print(path)
    std/list.py
    std/map.py
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Iterator

from docmirror.errors import FileSystemError


def walk(
    input_root: Path,
    *,
    source_suffix: str = ".py",
    skip_patterns: Iterable[str] = (),
) -> Iterator[Path]:
    """Yield every documentable file under ``input_root``.

    Entries are visited in sorted order, directories recursively. Symbolic
    links are not followed. Any entry whose name matches one of
    ``skip_patterns`` is ignored, together with everything below it.

    Args:
        input_root: Directory to walk
        source_suffix: Suffix of documentable files (e.g. ``.py``)
        skip_patterns: fnmatch patterns for names to skip

    Yields:
        Paths of documentable files (prefixed with ``input_root``)

    Raises:
        FileSystemError: If the root or any directory below it cannot be read
    """
    input_root = Path(input_root)
    if not input_root.is_dir():
        raise FileSystemError(
            f"Input directory `{input_root}` does not exist or is not a directory",
            path=input_root,
        ).with_context(stage="walk")

    yield from _walk_dir(input_root, source_suffix, tuple(skip_patterns))


def _walk_dir(directory: Path, source_suffix: str, skip_patterns: tuple[str, ...]) -> Iterator[Path]:
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise FileSystemError(
            f"Unable to read directory `{directory}`: {e.strerror or e}",
            path=directory,
            cause=e,
        ).with_context(stage="walk") from e

    for entry in entries:
        if any(fnmatch(entry.name, pattern) for pattern in skip_patterns):
            continue
        if entry.is_symlink():
            continue
        if entry.is_dir():
            yield from _walk_dir(entry, source_suffix, skip_patterns)
        elif entry.is_file() and entry.suffix == source_suffix:
            yield entry
