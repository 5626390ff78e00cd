"""
Parser

Lark LALR parser for link thunks, plus a tokenizer for whole Luau modules.
"""

from typing import Any, List, Optional
from pathlib import Path
import logging

from lark import Lark
from lark.exceptions import UnexpectedInput, UnexpectedEOF, LarkError
from lark.lexer import Token

from ..shared.nodes import Chunk
from ..shared.errors import ThunkShapeError
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE
from .transformers.base import LuauTransformer

logger = logging.getLogger("thunklink.frontend.parser")


class Parser:
    """
    Parser for Luau source.

    - parse(): source → Chunk AST (thunk statement shapes only)
    - tokenize(): source → flat token list (any Luau module, separate basic lexer)
    - Preserves source locations and character offsets
    - Uses Lark parser with caching
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        tokens_path = Path(__file__).parent / "luau_tokens.lark"
        # Use Lark native caching for performance
        self.parser = Lark.open(
            grammar_path,
            start="chunk",
            parser='lalr',              # Required for caching
            cache=cache_file,
            propagate_positions=True,   # Offsets are needed for splicing
            maybe_placeholders=False,
        )
        # Keywords must stay NAMEs in target modules, so no contextual lexer here
        self.lexer = Lark.open(tokens_path, parser='lalr', lexer='basic')
        self.transformer = LuauTransformer()
        logger.debug(f"Parser: loaded {grammar_path.name} (cache: {cache_file}) and {tokens_path.name}")

    def parse(self, source: str, source_file: str = "<thunk>") -> Chunk:
        """Parse thunk source code to AST (Chunk node)."""
        try:
            self.transformer.current_file = source_file
            tree = self.parser.parse(source)
            return self.transformer.transform(tree)
        except UnexpectedInput as e:
            raise self._parse_error(e, source, source_file) from e
        except LarkError as e:
            raise ParseError(f"Parse error: {e}", source_file, source_code=source) from e

    def tokenize(self, source: str, source_file: str = "<module>") -> List[Token]:
        """Lex a whole Luau module, dropping whitespace and comments."""
        try:
            return list(self.lexer.lex(source))
        except UnexpectedInput as e:
            raise self._parse_error(e, source, source_file) from e

    def _parse_error(self, e: UnexpectedInput, source: str, source_file: str) -> "ParseError":
        if isinstance(e, UnexpectedEOF) or getattr(e, "line", -1) in (None, -1):
            lines = source.splitlines() or [""]
            location = SourceLocation(file=source_file, line=len(lines), column=len(lines[-1]) + 1)
            message = "unexpected end of file"
        else:
            location = SourceLocation(file=source_file, line=e.line, column=e.column)
            token = getattr(e, "token", None)
            if token is not None:
                message = f"unexpected {token.type} {str(token)!r}"
            else:
                char = getattr(e, "char", "")
                message = f"unexpected character {char!r}"
        return ParseError(message, source_file, location=location, source_code=source)


class ParseError(ThunkShapeError):
    """Parse error with source location"""
    error_code = "E0301"

    def __init__(self, message: str, source_file: str, location: Optional[Any] = None,
                 source_code: Optional[str] = None):
        self.source_file = source_file
        super().__init__(
            message,
            location=location,
            source_code=source_code,
            help="link thunks may only contain `local`, `export type` and `return` statements",
        )
