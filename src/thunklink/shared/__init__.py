"""
Shared components: AST nodes, source locations, errors.
"""

from .source_location import SourceLocation
from .errors import (
    Diagnostic, format_diagnostic,
    ThunkLinkError, ConfigurationError, ResolutionError, ThunkShapeError, ThunkLinkIOError,
)
from .nodes import (
    ASTNode, Expression, Statement, NodeType,
    Identifier, MemberAccess, IndexAccess, FunctionCall, MethodCall,
    ParenExpression, StringLiteral, Literal,
    LocalAssignment, TypeExport, ReturnStatement, Chunk,
)
from .ast_visitor import ASTVisitor
