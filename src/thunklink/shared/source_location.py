"""
Source Location (Span)

Line/column for diagnostics plus character offsets for splicing.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a parsed node.

    - file, line, column (1-based) for error reporting
    - start/end: character offsets into the parsed text (end exclusive), so
      `source[loc.start:loc.end]` is the node's exact text
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"

    def text(self, source: str) -> str:
        """Slice of source covered by this location."""
        return source[self.start:self.end]
