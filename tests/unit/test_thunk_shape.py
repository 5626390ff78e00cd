#!/usr/bin/env python3
"""
Tests for thunk shape checks.
"""

from pathlib import Path

import pytest
from thunklink.analysis.thunk import extract_thunk
from thunklink.frontend.parser import ParseError
from thunklink.shared.errors import ThunkShapeError

PATH = Path("Packages/Foo.lua")


def _thunk(parser, source):
    return extract_thunk(parser.parse(source, str(PATH)), source, PATH)


class TestThunkShapes:
    """Accepted thunk shapes"""

    def test_plain_return(self, parser):
        source = "-- header\nreturn require(script.Parent.Foo)\n"
        thunk = _thunk(parser, source)
        assert thunk.binding is None
        assert thunk.type_exports == []
        assert thunk.link_text == "require(script.Parent.Foo)"
        assert source[thunk.span_start:thunk.span_end] == "return require(script.Parent.Foo)"

    def test_typed_form(self, parser):
        source = (
            "local REQUIRED_MODULE = require(script.Parent.Foo)\n"
            "export type T = REQUIRED_MODULE.T\n"
            "return REQUIRED_MODULE\n"
        )
        thunk = _thunk(parser, source)
        assert thunk.binding.name == "REQUIRED_MODULE"
        assert [e.name for e in thunk.type_exports] == ["T"]
        assert thunk.link_text == "require(script.Parent.Foo)"
        assert source[thunk.span_start:thunk.span_end] == source.rstrip("\n")

    def test_binding_without_exports(self, parser):
        thunk = _thunk(parser, "local M = require(script.Parent.Foo)\nreturn M\n")
        assert thunk.binding.name == "M"
        assert thunk.type_exports == []

    def test_non_require_link_is_still_a_thunk(self, parser):
        thunk = _thunk(parser, "return script.Parent.Foo")
        assert thunk.link_text == "script.Parent.Foo"


class TestShapeViolations:
    """Everything else is a ThunkShapeError"""

    @pytest.mark.parametrize("source,fragment", [
        ("local M = require(script.Foo)\n", "does not end in a return"),
        ("", "does not end in a return"),
        ("return\n", "returns nothing"),
        ("local M = require(script.Foo)\nreturn require(script.Bar)\n", "must return `M`"),
        ("local M = require(script.Foo)\nreturn M, 1\n", "must return `M`"),
        ("export type T = number\nlocal M = require(script.Foo)\nreturn M\n", "before binding"),
        ("local M = require(script.Foo)\nlocal N = M\nreturn N\n", "more than one local"),
    ])
    def test_violations(self, parser, source, fragment):
        with pytest.raises(ThunkShapeError) as exc_info:
            _thunk(parser, source)
        assert fragment in exc_info.value.message
        assert not isinstance(exc_info.value, ParseError)
        assert exc_info.value.error_code == "E0300"

    def test_violation_points_at_source(self, parser, no_color):
        source = "local M = require(script.Foo)\nreturn require(script.Bar)\n"
        with pytest.raises(ThunkShapeError) as exc_info:
            _thunk(parser, source)
        rendered = str(exc_info.value)
        assert "error[E0300]" in rendered
        assert "Packages/Foo.lua:2:8" in rendered
        assert "2 | return require(script.Bar)" in rendered
