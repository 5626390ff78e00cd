"""
Exported type scanning

Finds the `export type Name<Generics> = ...` aliases a Luau module declares,
working on the flat token stream from Parser.tokenize().
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from lark.lexer import Token

from ..utils.config import LUA_KEYWORDS

_OPENERS = {"<": ">", "(": ")", "{": "}", "[": "]"}
_CLOSERS = {">", ")", "}", "]"}


@dataclass(frozen=True)
class GenericParam:
    """One generic parameter: `T`, `T = number`, `U...` or `U... = ...string`."""
    name: str
    is_pack: bool = False
    default: Optional[str] = None

    def declaration(self) -> str:
        text = self.name + ("..." if self.is_pack else "")
        if self.default is not None:
            text += f" = {self.default}"
        return text

    def reference(self) -> str:
        return self.name + ("..." if self.is_pack else "")


@dataclass(frozen=True)
class ExportedType:
    name: str
    generics: Tuple[GenericParam, ...] = field(default_factory=tuple)

    def declaration_generics(self) -> str:
        if not self.generics:
            return ""
        return "<" + ", ".join(param.declaration() for param in self.generics) + ">"

    def reference_generics(self) -> str:
        if not self.generics:
            return ""
        return "<" + ", ".join(param.reference() for param in self.generics) + ">"


def _is(token: Token, kind: str, value: Optional[str] = None) -> bool:
    return token.type == kind and (value is None or token.value == value)


def scan_exported_types(tokens: Sequence[Token], source: str) -> List[ExportedType]:
    """
    Collect exported type aliases in declaration order.

    `export type function` declarations are not aliases and are skipped.
    Default values are copied verbatim from `source` using token offsets.
    """
    exported: List[ExportedType] = []
    i = 0
    n = len(tokens)
    while i < n:
        if (
            i + 2 < n
            and _is(tokens[i], "NAME", "export")
            and _is(tokens[i + 1], "NAME", "type")
            and tokens[i + 2].type == "NAME"
            and tokens[i + 2].value not in LUA_KEYWORDS
        ):
            name = tokens[i + 2].value
            generics, i = _scan_generics(tokens, i + 3, source)
            exported.append(ExportedType(name, generics))
            continue
        i += 1
    return exported


def _scan_generics(tokens: Sequence[Token], i: int, source: str) -> Tuple[Tuple[GenericParam, ...], int]:
    """Parse an optional `<...>` list starting at index i; returns (params, next index)."""
    if i >= len(tokens) or not _is(tokens[i], "SYMBOL", "<"):
        return (), i

    # Split the bracketed run on top-level commas
    groups: List[List[Token]] = [[]]
    stack: List[str] = []
    i += 1
    while i < len(tokens):
        token = tokens[i]
        value = token.value if token.type == "SYMBOL" else None
        if not stack and value in (">", ">="):
            # `>=` closes the list and starts the alias body
            i += 1
            break
        if value in _OPENERS:
            stack.append(_OPENERS[value])
        elif value in _CLOSERS and stack and stack[-1] == value:
            stack.pop()
        elif value == ">=" and stack and stack[-1] == ">":
            stack.pop()
        if value == "," and not stack:
            groups.append([])
        else:
            groups[-1].append(token)
        i += 1

    params = tuple(
        param for param in (_parse_param(group, source) for group in groups) if param is not None
    )
    return params, i


def _parse_param(group: List[Token], source: str) -> Optional[GenericParam]:
    if not group or group[0].type != "NAME":
        return None
    name = group[0].value
    rest = group[1:]
    is_pack = bool(rest) and _is(rest[0], "SYMBOL", "...")
    if is_pack:
        rest = rest[1:]
    default = None
    if rest and _is(rest[0], "SYMBOL", "=") and len(rest) > 1:
        default = source[rest[1].start_pos:rest[-1].end_pos]
    return GenericParam(name, is_pack, default)
