"""
Require Expression Analysis

Turns a statically indexable instance path into its components:

    script.Parent.Foo          -> ("script", "Parent", "Foo")
    game["Replicated Storage"] -> ("game", "Replicated Storage")

Anything dynamic (computed index, call, method call, other root) is "not
applicable" and yields None. That is never an error; the caller decides.
"""

import re
from typing import Optional, Tuple

from typing_extensions import TypeAlias

from ..shared.ast_visitor import ASTVisitor
from ..shared.nodes import (
    Expression, Identifier, MemberAccess, IndexAccess, FunctionCall, MethodCall,
    ParenExpression, StringLiteral, Literal,
)
from ..utils.config import LUA_KEYWORDS, REQUIRE_FUNCTION, ROOT_ANCHOR, SELF_ANCHOR

PathComponents: TypeAlias = Tuple[str, ...]

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class RequirePathVisitor(ASTVisitor[Optional[PathComponents]]):
    """
    Collects path components from an access chain.

    Returns None as soon as any link of the chain is not a literal access.
    """

    def visit_identifier(self, node: Identifier) -> Optional[PathComponents]:
        if node.name in (SELF_ANCHOR, ROOT_ANCHOR):
            return (node.name,)
        return None

    def visit_member_access(self, node: MemberAccess) -> Optional[PathComponents]:
        base = node.object.accept(self)
        if base is None:
            return None
        return base + (node.property,)

    def visit_index_access(self, node: IndexAccess) -> Optional[PathComponents]:
        if not isinstance(node.index, StringLiteral):
            return None
        base = node.object.accept(self)
        if base is None:
            return None
        return base + (node.index.value,)

    def visit_function_call(self, node: FunctionCall) -> Optional[PathComponents]:
        return None

    def visit_method_call(self, node: MethodCall) -> Optional[PathComponents]:
        return None

    def visit_paren(self, node: ParenExpression) -> Optional[PathComponents]:
        return None

    def visit_string_literal(self, node: StringLiteral) -> Optional[PathComponents]:
        return None

    def visit_literal(self, node: Literal) -> Optional[PathComponents]:
        return None


def analyze(expression: Expression) -> Optional[PathComponents]:
    """
    Components of an instance path expression, or None when not applicable.

    A bare anchor (`script` alone) is not a require path.
    """
    components = expression.accept(RequirePathVisitor())
    if components is None or len(components) < 2:
        return None
    return components


def match_require(expression: Expression) -> Optional[PathComponents]:
    """Unwrap `require(<path>)` and analyze the path; None for any other shape."""
    if not isinstance(expression, FunctionCall):
        return None
    function_expr = expression.function_expr
    if not isinstance(function_expr, Identifier) or function_expr.name != REQUIRE_FUNCTION:
        return None
    if len(expression.arguments) != 1:
        return None
    return analyze(expression.arguments[0])


def quote_string(value: str) -> str:
    """Double-quoted Lua string literal for value."""
    out = []
    for ch in value:
        if ch in ('"', "\\"):
            out.append("\\" + ch)
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\{ord(ch):03d}")
        elif 0xDC80 <= ord(ch) <= 0xDCFF:
            # Undecodable byte carried through surrogateescape
            out.append(f"\\x{ord(ch) - 0xDC00:02X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def render_path(components: PathComponents) -> str:
    """Canonical instance path text: `.Name` where possible, `["..."]` otherwise."""
    text = components[0]
    for component in components[1:]:
        if _IDENTIFIER.fullmatch(component) and component not in LUA_KEYWORDS:
            text += f".{component}"
        else:
            text += f"[{quote_string(component)}]"
    return text


def render_require(components: PathComponents) -> str:
    return f"{REQUIRE_FUNCTION}({render_path(components)})"
