"""
Luau AST Transformer
Converts the Lark parse tree of a thunk to thunklink AST nodes
"""

from typing import Any, List, Optional
import logging

from lark import Transformer, v_args
from lark.lexer import Token

from ...shared import (
    SourceLocation, ThunkLinkError,
    Expression, Identifier, MemberAccess, IndexAccess, FunctionCall, MethodCall,
    ParenExpression, StringLiteral, Literal,
    Statement, LocalAssignment, TypeExport, ReturnStatement, Chunk,
)
from .literals import LiteralParser

logger: logging.Logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class LuauTransformer(Transformer):
    """
    Luau AST Transformer

    Every node gets a SourceLocation built from the Lark meta, including the
    character offsets the link mutator uses to splice replacement text.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_file: str = "<thunk>"

    def __default__(self, data, children, meta):
        # Every grammar rule reachable from `chunk` has a method below
        raise ThunkLinkError(f"Missing transformer method for grammar rule '{data}'")

    def _extract_location(self, meta: Any) -> SourceLocation:
        # Tokens carry positions directly; an empty Meta has none
        if meta is None or getattr(meta, "empty", False):
            return SourceLocation(file=self.current_file, line=1, column=1)
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    # ---- Statements ----

    def chunk(self, meta, *items) -> Chunk:
        statements: List[Statement] = []
        return_statement: Optional[ReturnStatement] = None
        for item in items:
            if isinstance(item, ReturnStatement):
                return_statement = item
            else:
                statements.append(item)
        return Chunk(statements, return_statement, location=self._extract_location(meta))

    def local_assign(self, meta, name: Token, value: Expression) -> LocalAssignment:
        return LocalAssignment(str(name), value, location=self._extract_location(meta))

    def type_export(self, meta, name: Token, *body: Token) -> TypeExport:
        return TypeExport(str(name), location=self._extract_location(meta))

    def return_stat(self, meta, values: Optional[List[Expression]] = None) -> ReturnStatement:
        return ReturnStatement(values or [], location=self._extract_location(meta))

    def explist(self, meta, *expressions: Expression) -> List[Expression]:
        return list(expressions)

    # ---- Literals ----

    def string_literal(self, meta, token: Token) -> StringLiteral:
        return StringLiteral(LiteralParser.parse_string(str(token)), location=self._extract_location(meta))

    def number_literal(self, meta, token: Token) -> Literal:
        return Literal(LiteralParser.parse_number(str(token)), location=self._extract_location(meta))

    def nil_literal(self, meta) -> Literal:
        return Literal(None, location=self._extract_location(meta))

    def true_literal(self, meta) -> Literal:
        return Literal(True, location=self._extract_location(meta))

    def false_literal(self, meta) -> Literal:
        return Literal(False, location=self._extract_location(meta))

    # ---- Prefix expressions ----

    def identifier(self, meta, name: Token) -> Identifier:
        return Identifier(str(name), location=self._extract_location(meta))

    def member_access(self, meta, obj: Expression, name: Token) -> MemberAccess:
        return MemberAccess(obj, str(name), location=self._extract_location(meta))

    def index_access(self, meta, obj: Expression, index: Expression) -> IndexAccess:
        return IndexAccess(obj, index, location=self._extract_location(meta))

    def function_call(self, meta, function_expr: Expression,
                      arguments: Optional[List[Expression]] = None) -> FunctionCall:
        return FunctionCall(function_expr, arguments or [], location=self._extract_location(meta))

    def string_call(self, meta, function_expr: Expression, token: Token) -> FunctionCall:
        argument = StringLiteral(
            LiteralParser.parse_string(str(token)),
            location=self._extract_location(token),
        )
        return FunctionCall(function_expr, [argument], location=self._extract_location(meta))

    def method_call(self, meta, obj: Expression, method: Token,
                    arguments: Optional[List[Expression]] = None) -> MethodCall:
        return MethodCall(obj, str(method), arguments or [], location=self._extract_location(meta))

    def paren(self, meta, inner: Expression) -> ParenExpression:
        return ParenExpression(inner, location=self._extract_location(meta))
