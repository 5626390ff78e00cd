#!/usr/bin/env python3
"""
Tests for the link mutation pass.
"""

from pathlib import Path

import pytest
from thunklink.analysis.thunk import extract_thunk
from thunklink.passes.link_mutator import UNCHANGED, Changed, render_link_block
from thunklink.frontend.exports import ExportedType, GenericParam
from thunklink.frontend.parser import ParseError

PATH = Path("Packages/Foo.lua")
REQUIRE = "require(script.Parent.A.B)"

PLAIN_TARGET = "local B = {}\nreturn B\n"
MODULE_TARGET = (
    "--!strict\n"
    "local M = {}\n"
    "\n"
    "function M.f(x: number): number\n"
    "\tlocal y = x * 2\n"
    "\treturn y\n"
    "end\n"
    "\n"
    "return M\n"
)
TYPED_TARGET = (
    "export type Options<T = string> = { value: T }\n"
    "export type Callback<A...> = (A...) -> ()\n"
    "export type function Ignored(t)\n\treturn t\nend\n"
    "local B = {}\n"
    "export type B = typeof(B)\n"
    "return B\n"
)
TYPED_THUNK = (
    "local REQUIRED_MODULE = require(script.Parent.A.B)\n"
    "export type Options<T = string> = REQUIRED_MODULE.Options<T>\n"
    "export type Callback<A...> = REQUIRED_MODULE.Callback<A...>\n"
    "export type B = REQUIRED_MODULE.B\n"
    "return REQUIRED_MODULE"
)


def _thunk(parser, source):
    return extract_thunk(parser.parse(source, str(PATH)), source, PATH)


class TestPlainTargets:
    """Targets without exported types"""

    def test_already_linked_is_unchanged(self, parser, mutator):
        thunk = _thunk(parser, f"return {REQUIRE}\n")
        assert mutator.mutate(thunk, REQUIRE, PLAIN_TARGET) is UNCHANGED

    def test_stale_link_replaced(self, parser, mutator):
        source = "-- Wally thunk\nreturn require(script.Parent.A.B.Parent.B)\n"
        outcome = mutator.mutate(_thunk(parser, source), REQUIRE, PLAIN_TARGET)
        assert isinstance(outcome, Changed)
        assert outcome.source == f"-- Wally thunk\nreturn {REQUIRE}\n"
        assert outcome.chunk.return_statement is not None

    def test_only_the_expression_changes(self, parser, mutator):
        source = "return  require(script.Old) ; -- trailing\n"
        outcome = mutator.mutate(_thunk(parser, source), REQUIRE, PLAIN_TARGET)
        assert outcome.source == f"return  {REQUIRE} ; -- trailing\n"

    def test_multi_statement_target_unchanged(self, parser, mutator):
        thunk = _thunk(parser, f"return {REQUIRE}\n")
        assert mutator.mutate(thunk, REQUIRE, MODULE_TARGET, "B.lua") is UNCHANGED

    def test_typed_thunk_reverts_to_plain(self, parser, mutator):
        source = "--!strict\n" + TYPED_THUNK + "\n"
        outcome = mutator.mutate(_thunk(parser, source), REQUIRE, PLAIN_TARGET)
        assert isinstance(outcome, Changed)
        assert outcome.source == f"--!strict\nreturn {REQUIRE}\n"


class TestTypedTargets:
    """Targets exporting types get a re-exporting thunk"""

    def test_plain_thunk_becomes_typed(self, parser, mutator):
        outcome = mutator.mutate(_thunk(parser, f"return {REQUIRE}\n"), REQUIRE, TYPED_TARGET)
        assert isinstance(outcome, Changed)
        assert outcome.source == TYPED_THUNK + "\n"

    def test_typed_thunk_is_stable(self, parser, mutator):
        source = TYPED_THUNK + "\n"
        assert mutator.mutate(_thunk(parser, source), REQUIRE, TYPED_TARGET) is UNCHANGED

    def test_multi_statement_typed_target(self, parser, mutator):
        target = MODULE_TARGET.replace("local M = {}\n", "export type Handler = (number) -> number\nlocal M = {}\n")
        outcome = mutator.mutate(_thunk(parser, f"return {REQUIRE}\n"), REQUIRE, target, "B.lua")
        assert isinstance(outcome, Changed)
        assert outcome.source == (
            f"local REQUIRED_MODULE = {REQUIRE}\n"
            "export type Handler = REQUIRED_MODULE.Handler\n"
            "return REQUIRED_MODULE\n"
        )
        assert mutator.mutate(_thunk(parser, outcome.source), REQUIRE, target, "B.lua") is UNCHANGED

    def test_new_export_added(self, parser, mutator):
        target = TYPED_TARGET.replace("return B\n", "export type Extra = number\nreturn B\n")
        outcome = mutator.mutate(_thunk(parser, TYPED_THUNK + "\n"), REQUIRE, target)
        assert isinstance(outcome, Changed)
        assert "export type Extra = REQUIRED_MODULE.Extra\n" in outcome.source

    def test_crlf_and_header_preserved(self, parser, mutator):
        source = "-- header\r\nreturn require(script.Parent.A.B)\r\n"
        outcome = mutator.mutate(_thunk(parser, source), REQUIRE, TYPED_TARGET)
        assert outcome.source.startswith("-- header\r\nlocal REQUIRED_MODULE = ")
        assert outcome.source.endswith("return REQUIRED_MODULE\r\n")
        assert "\n" not in outcome.source.replace("\r\n", "")

    def test_other_binding_name_normalized(self, parser, mutator):
        source = "local Module = require(script.Parent.A.B)\nexport type B = Module.B\nreturn Module\n"
        outcome = mutator.mutate(_thunk(parser, source), REQUIRE, TYPED_TARGET)
        assert outcome.source == TYPED_THUNK + "\n"

    def test_rewrite_is_idempotent(self, parser, mutator):
        first = mutator.mutate(_thunk(parser, "return require(script.Old)\n"), REQUIRE, TYPED_TARGET)
        assert mutator.mutate(_thunk(parser, first.source), REQUIRE, TYPED_TARGET) is UNCHANGED

    def test_unlexable_target_is_an_error(self, parser, mutator):
        with pytest.raises(ParseError):
            mutator.mutate(_thunk(parser, f"return {REQUIRE}\n"), REQUIRE, 'local s = "open\n', "B.lua")


class TestRenderLinkBlock:
    """Generated statements"""

    def test_plain(self):
        assert render_link_block(REQUIRE, [], "\n") == f"return {REQUIRE}"

    def test_generics(self):
        exported = [ExportedType("Fn", (GenericParam("T", default="string"), GenericParam("U", is_pack=True)))]
        assert render_link_block(REQUIRE, exported, "\n").splitlines() == [
            f"local REQUIRED_MODULE = {REQUIRE}",
            "export type Fn<T = string, U...> = REQUIRED_MODULE.Fn<T, U...>",
            "return REQUIRED_MODULE",
        ]

    def test_unchanged_is_falsy(self):
        assert not UNCHANGED
        assert repr(UNCHANGED) == "UNCHANGED"
