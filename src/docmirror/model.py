"""
Documentation data model.

``Module``, ``Record`` and ``Field`` are what the template sees. They are
frozen and hold tuples, so a built record can be shared with the renderer
without copying and is never changed afterwards.

``FieldEntry``, ``SemanticType`` and ``Metadata`` describe what a checking
context hands to the record builder.

Architecture:
    ::

        SemanticType ──► type_fields()  ──► FieldEntry(name, unresolved, resolved)
                     └─► value_fields() ──► FieldEntry(name, unresolved, resolved)

        Metadata(comment, members={name: Metadata, ...})

        Module(name, Record(types=(Field, ...), values=(Field, ...)))

Tags:
    model, dataclass, record, docmirror
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable


@dataclass(frozen=True)
class Field:
    """A documented declaration.

    Attributes:
        name: Declared name
        type: Textual type representation
        comment: Doc comment, ``""`` when there is none
    """

    name: str
    type: str
    comment: str = ""


@dataclass(frozen=True)
class Record:
    """Type-level and value-level fields of one module, in source order."""

    types: tuple[Field, ...] = ()
    values: tuple[Field, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Module:
    """The documentation unit for one source file."""

    name: str
    record: Record

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "record": self.record.to_dict()}


@dataclass(frozen=True)
class FieldEntry:
    """One field of a semantic type.

    Attributes:
        name: Declared name
        unresolved: Type text as written, aliases kept
        resolved: Type text with aliases expanded
    """

    name: str
    unresolved: str
    resolved: str


@runtime_checkable
class SemanticType(Protocol):
    """Ordered access to the fields of a checked module."""

    def type_fields(self) -> Iterable[FieldEntry]:
        """Type-level fields in declaration order."""
        ...

    def value_fields(self) -> Iterable[FieldEntry]:
        """Value-level fields in row order."""
        ...


@dataclass(frozen=True)
class ModuleType:
    """Plain ``SemanticType`` backed by two tuples."""

    types: tuple[FieldEntry, ...] = ()
    values: tuple[FieldEntry, ...] = ()

    def type_fields(self) -> Iterable[FieldEntry]:
        return iter(self.types)

    def value_fields(self) -> Iterable[FieldEntry]:
        return iter(self.values)


@dataclass
class Metadata:
    """Doc comment tree for a declaration and its members.

    Examples:
        >>> meta = Metadata(members={"Foo": Metadata(comment="the foo")})
        >>> meta.comment_for("Foo")
        'the foo'
        >>> meta.comment_for("bar")
        ''
    """

    comment: str | None = None
    members: dict[str, Metadata] = field(default_factory=dict)

    def comment_for(self, name: str) -> str:
        """Comment of member ``name``, or ``""`` if it has none."""
        member = self.members.get(name)
        if member is None or member.comment is None:
            return ""
        return member.comment

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metadata:
        """Build a tree from ``{"comment": ..., "members": {...}}`` mappings."""
        return cls(
            comment=data.get("comment"),
            members={
                name: cls.from_dict(child)
                for name, child in (data.get("members") or {}).items()
            },
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"comment": self.comment}
        if self.members:
            result["members"] = {name: m.to_dict() for name, m in self.members.items()}
        return result


__all__ = [
    "Field",
    "Record",
    "Module",
    "FieldEntry",
    "SemanticType",
    "ModuleType",
    "Metadata",
]
