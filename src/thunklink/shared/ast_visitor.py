"""
AST Visitor Pattern

- Abstract base class with visit_* methods for each expression node type
- Statement visits default to NotImplementedError; analyzers that only look
  at expressions do not have to implement them
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import (
        ASTNode, Identifier, MemberAccess, IndexAccess, FunctionCall, MethodCall,
        ParenExpression, StringLiteral, Literal,
        LocalAssignment, TypeExport, ReturnStatement, Chunk,
    )

T = TypeVar('T')


class ASTVisitor(ABC, Generic[T]):
    """Visitor over the Luau AST; T is the per-node result type."""

    @abstractmethod
    def visit_identifier(self, node: 'Identifier') -> T: ...

    @abstractmethod
    def visit_member_access(self, node: 'MemberAccess') -> T: ...

    @abstractmethod
    def visit_index_access(self, node: 'IndexAccess') -> T: ...

    @abstractmethod
    def visit_function_call(self, node: 'FunctionCall') -> T: ...

    @abstractmethod
    def visit_method_call(self, node: 'MethodCall') -> T: ...

    @abstractmethod
    def visit_paren(self, node: 'ParenExpression') -> T: ...

    @abstractmethod
    def visit_string_literal(self, node: 'StringLiteral') -> T: ...

    @abstractmethod
    def visit_literal(self, node: 'Literal') -> T: ...

    def visit_local_assignment(self, node: 'LocalAssignment') -> T:
        return self.visit_default(node)

    def visit_type_export(self, node: 'TypeExport') -> T:
        return self.visit_default(node)

    def visit_return(self, node: 'ReturnStatement') -> T:
        return self.visit_default(node)

    def visit_chunk(self, node: 'Chunk') -> T:
        return self.visit_default(node)

    def visit_default(self, node: 'ASTNode') -> T:
        raise NotImplementedError(
            f"{self.__class__.__name__} does not handle {node.__class__.__name__}"
        )
