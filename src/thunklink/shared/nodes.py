"""
Luau AST (Abstract Syntax Tree) Definitions

Only the nodes a link thunk can contain: a few statements (local binding,
exported type alias, return) and prefix expressions with literals.

Visitor Pattern Support:
- All AST nodes have accept() methods for polymorphic dispatch
- Every node carries a SourceLocation whose offsets address the parsed text
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union, TYPE_CHECKING, TypeVar

from .source_location import SourceLocation

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


class NodeType(Enum):
    """AST node types"""
    CHUNK = "chunk"
    LOCAL_ASSIGN = "local_assign"
    TYPE_EXPORT = "type_export"
    RETURN_STMT = "return_stmt"
    IDENTIFIER = "identifier"
    MEMBER_ACCESS = "member_access"
    INDEX_ACCESS = "index_access"
    FUNCTION_CALL = "function_call"
    METHOD_CALL = "method_call"
    PAREN_EXPR = "paren_expr"
    STRING_LITERAL = "string_literal"
    LITERAL = "literal"


class ASTNode:
    """
    Base class for all AST nodes

    - accept() for polymorphic dispatch to an ASTVisitor
    - __slots__ for memory efficiency and attribute checking
    """
    __slots__ = ('node_type', 'location')

    def __init__(self, node_type: NodeType, location: SourceLocation):
        self.node_type = node_type
        self.location = location

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class Expression(ASTNode):
    """Base class for expressions"""
    __slots__ = ()


class Statement(ASTNode):
    """Base class for statements"""
    __slots__ = ()


# ============================================
# EXPRESSIONS
# ============================================

class Identifier(Expression):
    """Identifier (variable or global name such as `script`)"""
    __slots__ = ('name',)

    def __init__(self, name: str, location: SourceLocation = None):
        super().__init__(NodeType.IDENTIFIER, location)
        self.name = name

    def __str__(self) -> str:
        return self.name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_identifier(self)


class MemberAccess(Expression):
    """Member access with a literal name (obj.Name)"""
    __slots__ = ('object', 'property')

    def __init__(self, object: Expression, property: str, location: SourceLocation = None):
        super().__init__(NodeType.MEMBER_ACCESS, location)
        self.object = object
        self.property = property

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_member_access(self)


class IndexAccess(Expression):
    """Bracket index (obj[expr]); static only when expr is a string literal"""
    __slots__ = ('object', 'index')

    def __init__(self, object: Expression, index: Expression, location: SourceLocation = None):
        super().__init__(NodeType.INDEX_ACCESS, location)
        self.object = object
        self.index = index

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_index_access(self)


class FunctionCall(Expression):
    """
    Function call: f(a, b) or the string-argument form f "a"

    Examples:
    - require(script.Parent.Foo) -> function_expr=Identifier("require")
    """
    __slots__ = ('function_expr', 'arguments')

    def __init__(self, function_expr: Expression, arguments: List[Expression],
                 location: SourceLocation = None):
        super().__init__(NodeType.FUNCTION_CALL, location)
        self.function_expr = function_expr
        self.arguments = arguments

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_function_call(self)


class MethodCall(Expression):
    """Method call (obj:Method(args))"""
    __slots__ = ('object', 'method', 'arguments')

    def __init__(self, object: Expression, method: str, arguments: List[Expression],
                 location: SourceLocation = None):
        super().__init__(NodeType.METHOD_CALL, location)
        self.object = object
        self.method = method
        self.arguments = arguments

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_method_call(self)


class ParenExpression(Expression):
    """Parenthesised expression; truncates multiple returns to one value"""
    __slots__ = ('inner',)

    def __init__(self, inner: Expression, location: SourceLocation = None):
        super().__init__(NodeType.PAREN_EXPR, location)
        self.inner = inner

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_paren(self)


class StringLiteral(Expression):
    """String literal; value holds the decoded contents"""
    __slots__ = ('value',)

    def __init__(self, value: str, location: SourceLocation = None):
        super().__init__(NodeType.STRING_LITERAL, location)
        self.value = value

    def __str__(self) -> str:
        return self.value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_string_literal(self)


class Literal(Expression):
    """Non-string literal value (number, boolean, nil)"""
    __slots__ = ('value',)

    def __init__(self, value: Union[int, float, bool, None], location: SourceLocation = None):
        super().__init__(NodeType.LITERAL, location)
        self.value = value

    def __str__(self) -> str:
        return "nil" if self.value is None else str(self.value)

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_literal(self)


# ============================================
# STATEMENTS
# ============================================

class LocalAssignment(Statement):
    """local name = value"""
    __slots__ = ('name', 'value')

    def __init__(self, name: str, value: Expression, location: SourceLocation = None):
        super().__init__(NodeType.LOCAL_ASSIGN, location)
        self.name = name
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_local_assignment(self)


class TypeExport(Statement):
    """
    export type Name... = ...

    The type body is kept as source text only (location); thunks never need
    to look inside it.
    """
    __slots__ = ('name',)

    def __init__(self, name: str, location: SourceLocation = None):
        super().__init__(NodeType.TYPE_EXPORT, location)
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_type_export(self)


class ReturnStatement(Statement):
    """return explist"""
    __slots__ = ('values',)

    def __init__(self, values: List[Expression], location: SourceLocation = None):
        super().__init__(NodeType.RETURN_STMT, location)
        self.values = values

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_return(self)


class Chunk(ASTNode):
    """Whole file: leading statements plus the optional final return"""
    __slots__ = ('statements', 'return_statement')

    def __init__(self, statements: List[Statement], return_statement: Optional[ReturnStatement],
                 location: SourceLocation = None):
        super().__init__(NodeType.CHUNK, location)
        self.statements = statements
        self.return_statement = return_statement

    def last_statement(self) -> Optional[Statement]:
        if self.return_statement is not None:
            return self.return_statement
        return self.statements[-1] if self.statements else None

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_chunk(self)
