"""
Centralized file I/O utilities.

- Single place for encoding handling
- Reads and writes go through bytes so newline style survives a round trip
- OSError is reported as ThunkLinkIOError (fatal for the run)
"""

from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING
from ..shared.errors import ThunkLinkIOError


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding, keeping line endings as-is."""
    p = Path(path) if not isinstance(path, Path) else path
    try:
        data = p.read_bytes()
    except OSError as e:
        raise ThunkLinkIOError(f"could not read {p}: {e.strerror or e}") from e
    try:
        return data.decode(DEFAULT_FILE_ENCODING)
    except UnicodeDecodeError as e:
        raise ThunkLinkIOError(f"could not decode {p} as {DEFAULT_FILE_ENCODING}: {e}") from e


def write_source_file(path: Union[Path, str], text: str) -> None:
    """Replace the whole file with text."""
    p = Path(path) if not isinstance(path, Path) else path
    try:
        p.write_bytes(text.encode(DEFAULT_FILE_ENCODING))
    except OSError as e:
        raise ThunkLinkIOError(f"could not write {p}: {e.strerror or e}") from e


def detect_newline(text: str) -> str:
    """Newline style used by text ("\\r\\n" when any CRLF is present)."""
    return "\r\n" if "\r\n" in text else "\n"
