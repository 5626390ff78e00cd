"""
Pytest configuration and shared fixtures for all thunklink tests.

The parser is the only expensive object (grammar load); it is built once per
session with Lark native caching and shared, since it holds no per-file state
beyond the file name used in locations.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from thunklink.frontend.parser import Parser
from thunklink.passes.link_mutator import LinkMutator


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser shared across ALL tests."""
    return Parser()


# =============================================================================
# Class-scoped fixtures (shared within a test class)
# =============================================================================

@pytest.fixture(scope="class")
def parser(session_parser):
    """Class-scoped parser - returns session parser (safe to share)."""
    return session_parser


@pytest.fixture(scope="class")
def mutator(session_parser):
    """Link mutator over the shared parser."""
    return LinkMutator(session_parser)


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def no_color(monkeypatch):
    """Disable ANSI colours in diagnostics."""
    monkeypatch.setenv("NO_COLOR", "1")
