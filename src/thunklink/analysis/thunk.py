"""
Thunk shape check

A link thunk is one of:

    return <link>

    local NAME = <link>
    export type A = NAME.A      -- zero or more
    return NAME
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..shared.errors import ThunkShapeError
from ..shared.nodes import Chunk, Expression, Identifier, LocalAssignment, ReturnStatement, TypeExport

_SHAPE_HELP = "a link thunk must `return require(...)`, optionally through one local binding"


@dataclass
class Thunk:
    path: Path
    source: str
    chunk: Chunk
    link: Expression
    return_statement: ReturnStatement
    binding: Optional[LocalAssignment] = None
    type_exports: List[TypeExport] = field(default_factory=list)

    @property
    def span_start(self) -> int:
        """Offset where the link statements begin (leading comments excluded)."""
        first = self.binding if self.binding is not None else self.return_statement
        return first.location.start

    @property
    def span_end(self) -> int:
        return self.return_statement.location.end

    @property
    def link_text(self) -> str:
        return self.link.location.text(self.source)


def extract_thunk(chunk: Chunk, source: str, path: Path) -> Thunk:
    """Check that chunk has a link shape and pick out its parts."""
    ret = chunk.return_statement
    if ret is None:
        raise ThunkShapeError(
            f"{path} does not end in a return statement",
            location=chunk.location,
            source_code=source,
            help=_SHAPE_HELP,
        )
    if not ret.values:
        raise ThunkShapeError(
            f"{path} returns nothing",
            location=ret.location,
            source_code=source,
            help=_SHAPE_HELP,
        )

    if not chunk.statements:
        return Thunk(path, source, chunk, ret.values[0], ret)

    binding = chunk.statements[0]
    exports = chunk.statements[1:]
    if not isinstance(binding, LocalAssignment):
        raise ThunkShapeError(
            f"{path} exports types before binding the required module",
            location=binding.location,
            source_code=source,
            help=_SHAPE_HELP,
        )
    for statement in exports:
        if not isinstance(statement, TypeExport):
            raise ThunkShapeError(
                f"{path} has more than one local binding",
                location=statement.location,
                source_code=source,
                help=_SHAPE_HELP,
            )

    returned = ret.values[0]
    if len(ret.values) != 1 or not isinstance(returned, Identifier) or returned.name != binding.name:
        raise ThunkShapeError(
            f"{path} must return `{binding.name}`",
            location=returned.location,
            source_code=source,
            help=_SHAPE_HELP,
        )

    return Thunk(path, source, chunk, binding.value, ret, binding, list(exports))
