"""Shared pytest fixtures for docmirror tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
import structlog

from docmirror.errors import TypecheckError
from docmirror.model import FieldEntry, Metadata, ModuleType


class FakeChecker:
    """Checking context returning canned results keyed by module name.

    Modules listed in ``failing`` raise ``TypecheckError``; unknown modules
    check as empty.
    """

    def __init__(
        self,
        modules: dict[str, tuple[ModuleType, Metadata]] | None = None,
        failing: tuple[str, ...] = (),
    ):
        self.environment = {"env": "fake"}
        self.modules = modules or {}
        self.failing = set(failing)
        self.calls: list[str] = []
        self.environments: list[Any] = []

    def typecheck(self, module_name: str, source: str) -> tuple[Any, ModuleType]:
        self.calls.append(module_name)
        if module_name in self.failing:
            raise TypecheckError(f"cannot check {module_name}")
        typ, _ = self.modules.get(module_name, (ModuleType(), Metadata()))
        return (module_name, source), typ

    def collect_metadata(self, environment: Any, expression: Any) -> Metadata:
        self.environments.append(environment)
        name, _ = expression
        return self.modules.get(name, (ModuleType(), Metadata()))[1]


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep logging configuration from leaking between tests."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def make_tree(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Create a source tree from ``{relative_path: content}``."""

    def _make(files: dict[str, str], root_name: str = "src") -> Path:
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def output_root(tmp_path) -> Path:
    """Output directory (not created up front)."""
    return tmp_path / "out"


@pytest.fixture
def foo_bar_checker() -> FakeChecker:
    """One type field `Foo` ("the foo") and one value field `bar: Int`."""
    typ = ModuleType(
        types=(FieldEntry("Foo", "Foo", "Foo"),),
        values=(FieldEntry("bar", "Int", "Int"),),
    )
    meta = Metadata(members={"Foo": Metadata(comment="the foo")})
    return FakeChecker(modules={"a.b": (typ, meta)})


@pytest.fixture
def geometry_source() -> str:
    """Python module exercising classes, aliases, functions and variables."""
    return '''"""Geometry helpers."""
from typing import TypeAlias

Number: TypeAlias = int | float
"""A real number."""

Points: TypeAlias = list["Point"]


class Point:
    """A point in the plane."""

    x: Number = 0
    """Horizontal position."""

    def norm(self) -> float:
        """Euclidean norm."""
        return 0.0


origin: Point = Point()
"""The origin."""

scale: Number = 2


def distance(a: Point, b: Point, *, squared: bool = False) -> Number:
    """Distance between two points."""
    return 0


async def fetch(n: int = 3) -> Points:
    return []


_hidden = 1
count = 3
'''
