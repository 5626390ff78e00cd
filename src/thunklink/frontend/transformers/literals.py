"""
Literal Parser - Extracted from LuauTransformer
Decodes Luau string and number literal tokens
"""

import re
from typing import Union

_LONG_BRACKET = re.compile(r"\[(=*)\[(.*)\]\1\]", re.DOTALL)

_SIMPLE_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
    '"': 0x22,
    "'": 0x27,
    "\n": 0x0A,
    "\r": 0x0A,
}


class LiteralParser:
    """Dedicated parser for literal tokens (strings and numbers)"""

    @staticmethod
    def parse_string(token: str) -> str:
        """Decode a quoted or long-bracket string token to its contents."""
        long_match = _LONG_BRACKET.fullmatch(token)
        if long_match:
            return LiteralParser._strip_first_newline(long_match.group(2))
        return LiteralParser._decode_escapes(token[1:-1])

    @staticmethod
    def parse_number(token: str) -> Union[int, float]:
        """Parse a numeric literal (decimal, hex, binary; `_` separators allowed)"""
        text = token.replace("_", "")
        lowered = text.lower()
        if lowered.startswith("0x"):
            return int(lowered[2:], 16)
        if lowered.startswith("0b"):
            return int(lowered[2:], 2)
        if "." in lowered or "e" in lowered:
            return float(lowered)
        return int(lowered)

    @staticmethod
    def _strip_first_newline(body: str) -> str:
        # Long strings skip a newline that immediately follows the opening bracket
        for prefix in ("\r\n", "\n\r", "\n", "\r"):
            if body.startswith(prefix):
                return body[len(prefix):]
        return body

    @staticmethod
    def _decode_escapes(body: str) -> str:
        out = bytearray()
        i = 0
        n = len(body)
        while i < n:
            ch = body[i]
            if ch != "\\" or i + 1 >= n:
                out.extend(ch.encode("utf-8"))
                i += 1
                continue

            esc = body[i + 1]
            if esc in _SIMPLE_ESCAPES:
                out.append(_SIMPLE_ESCAPES[esc])
                i += 2
                if esc == "\r" and i < n and body[i] == "\n":
                    i += 1
            elif esc == "z":
                # \z skips the following run of whitespace
                i += 2
                while i < n and body[i].isspace():
                    i += 1
            elif esc == "x":
                out.append(int(body[i + 2:i + 4], 16))
                i += 4
            elif esc == "u":
                close = body.index("}", i)
                out.extend(chr(int(body[i + 3:close], 16)).encode("utf-8"))
                i = close + 1
            elif esc.isdigit():
                j = i + 1
                while j < n and j < i + 4 and body[j].isdigit():
                    j += 1
                out.append(int(body[i + 1:j]) & 0xFF)
                i = j
            else:
                # Unknown escape: keep the character itself
                out.extend(esc.encode("utf-8"))
                i += 2
        return out.decode("utf-8", errors="surrogateescape")
