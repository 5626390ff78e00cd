"""
Error Reporting

Every failure in a run is fatal: configuration, resolution, thunk shape and
I/O errors all abort with a rustc-style diagnostic. The only soft outcome,
an unsupported require shape, is a plain `None` from the analyzer and never
an exception.
"""

import os
from dataclasses import dataclass
from typing import Optional, List
from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("THUNKLINK_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Diagnostic dataclass
# ---------------------------------------------------------------------------

@dataclass
class Diagnostic:
    """Renderable view of a ThunkLinkError."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def format_diagnostic(
    diagnostic: Diagnostic,
    source: Optional[str] = None,
    color: bool = False,
) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0200]: unable to find child `Missing` of `Packages`
         --> Packages/Foo.lua:1:16
          |
        1 | return require(script.Parent.Missing)
          |                ^^^^^^^^^^^^^^^^^^^^^
          |
          = help: regenerate the sourcemap after installing packages
    """
    out: List[str] = []

    code_str = f"[{diagnostic.code}]" if diagnostic.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {diagnostic.message}", _BOLD, color=color)
    )

    loc = diagnostic.location
    if loc is None:
        _append_help(out, diagnostic, 1, color)
        return "\n".join(out)

    if source is None:
        out.append(
            _style(" --> ", _BOLD, _BLUE, color=color)
            + f"{loc.file}:{loc.line}:{loc.column}"
        )
        _append_help(out, diagnostic, 1, color)
        return "\n".join(out)

    src_lines = source.splitlines()
    err_line = loc.line
    err_col = max(loc.column, 1)
    gw = max(len(str(err_line)), 1)

    out.append(
        _style(" " * gw + "--> ", _BOLD, _BLUE, color=color)
        + f"{loc.file}:{loc.line}:{loc.column}"
    )
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))

    idx = err_line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""
    out.append(_style(str(err_line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    if loc.end_line == err_line and loc.end_column > err_col:
        span_len = loc.end_column - err_col
    elif loc.end_line > err_line:
        # Multi-line span: underline to the end of the first line
        span_len = len(code_line.rstrip()) - (err_col - 1)
    else:
        span_len = _guess_span(code_line, err_col - 1)
    carets = " " * (err_col - 1) + "^" * max(1, span_len)
    label_suffix = f" {diagnostic.label}" if diagnostic.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, _RED, color=color)
    )

    _append_help(out, diagnostic, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ";", ",", ")", "]", "}"):
            break
        length += 1
    return max(1, length)


def _append_help(out: List[str], diagnostic: Diagnostic, gw: int, color: bool) -> None:
    if not diagnostic.help:
        return
    pad = " " * (gw + 1)
    out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
    out.append(
        _style(f"{pad}= ", _BOLD, _CYAN, color=color)
        + _style("help: ", _BOLD, color=color)
        + diagnostic.help
    )


# ============================================================================
# Exception Classes
# ============================================================================

class ThunkLinkError(Exception):
    """
    Base exception for all thunklink errors.

    Carries an optional location inside a thunk (and that thunk's text) so
    the CLI can point at the offending require expression.
    """
    error_code = "E0001"

    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.location = location
        self.source_code = source_code
        self.help_text = help
        self.label_text = label

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            label=self.label_text,
        )

    def format(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return format_diagnostic(self.diagnostic(), self.source_code, color=use_color)

    def __str__(self):
        return self.format(color=False)


class ConfigurationError(ThunkLinkError):
    """Sourcemap cannot be loaded, is malformed, or disagrees with the filesystem."""
    error_code = "E0100"


class ResolutionError(ThunkLinkError):
    """An instance path does not lead to a module file in the sourcemap."""
    error_code = "E0200"


class ThunkShapeError(ThunkLinkError):
    """A packages entry is not a link thunk (a return of a require)."""
    error_code = "E0300"


class ThunkLinkIOError(ThunkLinkError):
    """A file could not be read or written."""
    error_code = "E0400"
