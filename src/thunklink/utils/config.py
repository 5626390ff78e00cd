"""
Configuration constants to replace magic values throughout thunklink
"""

import os
import tempfile

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "thunklink_luau_parser.cache")

# Packages directory layout
INDEX_DIRECTORY_NAME = "_Index"  # Nested package index written by the package manager

# Instance path conventions
SELF_ANCHOR = "script"  # Relative to the requiring module
ROOT_ANCHOR = "game"  # Relative to the sourcemap root
PARENT_COMPONENT = "Parent"  # Ascend one level
REQUIRE_FUNCTION = "require"

# Module files recognised at a sourcemap node
MODULE_FILE_EXTENSIONS = (".lua", ".luau")

# Link rewriting
REQUIRED_MODULE_NAME = "REQUIRED_MODULE"  # Local that holds the required module in typed thunks

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Reserved words (Luau adds `continue` and the contextual `export`/`type`, which stay valid names)
LUA_KEYWORDS = frozenset({
    "and", "break", "do", "else", "elseif", "end", "false", "for", "function",
    "if", "in", "local", "nil", "not", "or", "repeat", "return", "then", "true",
    "until", "while", "continue",
})

# Error reporting constants
ERROR_POINTER_CHAR = "^"
