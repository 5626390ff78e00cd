"""
Link Mutation Pass

Rewrites the link statements of a thunk so that it requires the target with
the given require text and re-exports the target's exported types:

    local REQUIRED_MODULE = require(script.Parent._Index["pkg"]["pkg"])
    export type Options<T = string> = REQUIRED_MODULE.Options<T>
    return REQUIRED_MODULE

When the target exports no types the thunk is just `return <require>`.

Only the link statements are replaced; text before the first of them (header
comments) and after the return is kept byte for byte, and generated lines use
the thunk's own newline style. The pass is deterministic.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from ..analysis.thunk import Thunk, extract_thunk
from ..frontend.exports import ExportedType, scan_exported_types
from ..frontend.parser import Parser
from ..shared.nodes import Chunk
from ..utils.config import REQUIRED_MODULE_NAME
from ..utils.io_utils import detect_newline

logger = logging.getLogger(__name__)


@dataclass
class Changed:
    """New thunk text plus its parse (guaranteed to be a valid thunk)."""
    source: str
    chunk: Chunk


class _Unchanged:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCHANGED"

    def __bool__(self) -> bool:
        return False


UNCHANGED = _Unchanged()

MutationOutcome = Union[Changed, _Unchanged]


def render_link_block(require_text: str, exported: List[ExportedType], newline: str) -> str:
    """Canonical link statements for a target with the given exported types."""
    if not exported:
        return f"return {require_text}"
    lines = [f"local {REQUIRED_MODULE_NAME} = {require_text}"]
    for export in exported:
        lines.append(
            f"export type {export.name}{export.declaration_generics()} = "
            f"{REQUIRED_MODULE_NAME}.{export.name}{export.reference_generics()}"
        )
    lines.append(f"return {REQUIRED_MODULE_NAME}")
    return newline.join(lines)


class LinkMutator:
    """Decides whether a thunk needs rewriting and produces the new text."""

    def __init__(self, parser: Parser):
        self.parser = parser

    def exported_types(self, target_source: str, target_file: Union[Path, str] = "<module>") -> List[ExportedType]:
        tokens = self.parser.tokenize(target_source, str(target_file))
        return scan_exported_types(tokens, target_source)

    def mutate(self, thunk: Thunk, require_text: str, target_source: str,
               target_file: Union[Path, str] = "<module>") -> MutationOutcome:
        exported = self.exported_types(target_source, target_file)
        source = thunk.source

        if not exported and thunk.binding is None:
            # Plain form stays plain: only the returned expression changes
            link = thunk.link.location
            new_source = source[:link.start] + require_text + source[link.end:]
        else:
            block = render_link_block(require_text, exported, detect_newline(source))
            new_source = source[:thunk.span_start] + block + source[thunk.span_end:]

        if new_source == source:
            return UNCHANGED

        logger.debug(f"{thunk.path}: re-exporting {len(exported)} type(s)")
        chunk = self.parser.parse(new_source, str(thunk.path))
        extract_thunk(chunk, new_source, thunk.path)
        return Changed(new_source, chunk)
