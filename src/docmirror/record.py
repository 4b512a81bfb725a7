"""
Record building.

Turns a checked module's semantic type and its metadata tree into the
ordered ``Record`` the template renders.

Manifesto:
    The record shows a module the way its author wrote it. Type-level
    fields keep their definitions as written (aliases stay aliases), while
    value-level fields show what a caller actually gets (aliases expanded).
    Order is source order. Nothing is sorted, merged or dropped: if a name
    is declared twice, it is documented twice.

Examples:
    >>> typ = ModuleType(
    ...     types=(FieldEntry("Id", "int", "int"),),
    ...     values=(FieldEntry("ids", "list[Id]", "list[int]"),),
    ... )
    >>> record = build_record(typ, Metadata(members={"Id": Metadata("An id.")}))
    >>> record.types
    (Field(name='Id', type='int', comment='An id.'),)
    >>> record.values
    (Field(name='ids', type='list[int]', comment=''),)

Tags:
    record, builder, pure-function, docmirror
"""

from __future__ import annotations

from docmirror.model import Field, Metadata, Record, SemanticType


def build_record(typ: SemanticType, meta: Metadata) -> Record:
    """Build the documentation record for one module.

    Pure: reads ``typ`` and ``meta``, allocates a new ``Record``.

    Args:
        typ: Semantic type of the module
        meta: Metadata tree of the module

    Returns:
        Record with type-level fields (unresolved type text) and value-level
        fields (resolved type text)
    """
    return Record(
        types=tuple(
            Field(
                name=entry.name,
                type=entry.unresolved,
                comment=meta.comment_for(entry.name),
            )
            for entry in typ.type_fields()
        ),
        values=tuple(
            Field(
                name=entry.name,
                type=entry.resolved,
                comment=meta.comment_for(entry.name),
            )
            for entry in typ.value_fields()
        ),
    )
