"""Tests for source wrapping and JS error parsing."""

from __future__ import annotations

from dataclasses import replace

import pytest

from livepreview.capabilities import COMPONENTS, HOOK_NAMES, build_capabilities, default_capabilities
from livepreview.compiler import BabelCompiler
from livepreview.diagnostics import (
    format_compile_error,
    is_reference_error,
    missing_identifier,
    parse_js_error,
    runtime_message,
)
from livepreview.harness import ENTRY_POINT, wrap_source


def test_wrap_source_puts_capabilities_in_scope():
    names = default_capabilities().names
    harness = wrap_source("function Preview() { return null; }", names)
    lines = harness.text.split("\n")

    assert lines[0] == "(function () {"
    assert lines[1] == f"  const {{ {', '.join(names)} }} = ShadcnUI;"
    assert lines[2] == f"  const {{ Fragment, {', '.join(HOOK_NAMES)} }} = React;"
    assert harness.text.endswith("})()")
    assert f"return <{ENTRY_POINT} />;" in harness.text


def test_line_offset_points_at_first_user_line():
    source = "const a = 1;\nfunction Preview() { return <div>{a}</div>; }"
    harness = wrap_source(source, ("Button",))
    lines = harness.text.split("\n")

    assert lines[harness.line_offset] == "const a = 1;"
    assert lines[harness.line_offset + 1].startswith("function Preview()")


def test_user_source_sits_in_its_own_block():
    # lets a snippet declare `const Button = ...` without clashing with the destructure
    harness = wrap_source("const Button = () => null;", ("Button",))
    lines = harness.text.split("\n")

    assert lines[harness.line_offset - 1] == "  {"
    assert lines[-2] == "  }"


def test_parse_babel_error_strips_prefix_and_frame():
    parsed = parse_js_error({
        "name": "SyntaxError",
        "message": "/preview.tsx: Unterminated JSX contents. (9:3)\n\n   7 | ...\n>  9 |",
        "loc": {"line": 9, "column": 3},
    })

    assert parsed == {"name": "SyntaxError", "message": "Unterminated JSX contents.", "line": 9, "column": 3}


def test_parse_error_position_from_message_suffix():
    parsed = parse_js_error({"name": "SyntaxError", "message": "unknown: Unexpected token (7:12)"})

    assert parsed["message"] == "Unexpected token"
    assert (parsed["line"], parsed["column"]) == (7, 12)


def test_parse_missing_error():
    assert parse_js_error(None) == {"name": "Error", "message": "Unknown error", "line": None, "column": None}


def test_compile_error_outside_user_lines_has_no_position():
    error = format_compile_error({"name": "SyntaxError", "message": "Unexpected token (2:5)"}, line_offset=4)

    assert error.line is None
    assert error.column is None
    assert error.message == "Unexpected token"
    assert error.stage == "compile"


def test_runtime_message_hints_at_missing_preview():
    message = runtime_message({"name": "ReferenceError", "message": "Preview is not defined"})

    assert message.startswith("ReferenceError: Preview is not defined. ")
    assert "function Preview()" in message


def test_runtime_message_for_other_reference_errors():
    error = {"name": "ReferenceError", "message": "Prevew is not defined"}

    assert runtime_message(error) == "ReferenceError: Prevew is not defined"
    assert is_reference_error(error)
    assert missing_identifier(error["message"]) == "Prevew"


def test_is_reference_error_rejects_other_kinds():
    assert not is_reference_error({"name": "TypeError", "message": "x is not a function"})
    assert not is_reference_error(None)


def test_harness_counts_user_lines():
    assert wrap_source("a;\nb;\nc;", ("Button",)).user_lines == 3
    assert wrap_source("", ("Button",)).user_lines == 1


def test_unclosed_block_lands_on_last_user_line():
    # Babel reports a missing `}` where the wrapper's own `}` sits, past the user's source
    source = "function Preview() {\n  return <div />;"
    harness = wrap_source(source, ("Button",))
    suffix_line = harness.line_offset + harness.user_lines + 2

    error = format_compile_error(
        {"name": "SyntaxError", "message": f"Unexpected token ({suffix_line}:1)"},
        harness.line_offset,
        harness.user_lines,
    )

    assert error.line == 2
    assert error.column is None
    assert error.message == "Unexpected token (2:0)"


@pytest.mark.asyncio
async def test_compiler_wraps_with_the_capability_hooks(fake_host):
    caps = replace(build_capabilities(components=COMPONENTS[:1]), hooks=("useState", "useId"))

    artifact = await BabelCompiler(fake_host).compile("function Preview() { return null; }", caps)

    lines = fake_host.transformed[0].split("\n")
    assert lines[1] == "  const { Accordion } = ShadcnUI;"
    assert lines[2] == "  const { Fragment, useState, useId } = React;"
    assert artifact.line_offset == 4
