"""
Parse JavaScript error descriptions coming back from the host page.
Pure Python, regex-based. Positions are mapped from harness lines back to the
lines the user actually wrote.
"""

import re

from livepreview.errors import CompileError
from livepreview.harness import ENTRY_POINT


# "/preview.tsx: Unexpected token (5:4)" or "unknown file: ..." or "unknown: ..."
_FILENAME_PREFIX = re.compile(r"^(?:/?preview\.tsx|unknown(?: file)?):\s*")
_POSITION_SUFFIX = re.compile(r"\s*\((\d+):(\d+)\)\s*$")
_REFERENCE = re.compile(r"^(\S+) is not defined$")


def parse_js_error(error: dict | None) -> dict:
    """
    Normalize a runtime `describe(err)` payload.

    Returns:
        {"name": str, "message": str, "line": int | None, "column": int | None}
    """
    if not error:
        return {"name": "Error", "message": "Unknown error", "line": None, "column": None}

    name = error.get("name") or "Error"
    raw = error.get("message")
    raw = "Unknown error" if raw is None else str(raw)

    # Babel appends a code frame after a blank line; it shows harness lines, drop it
    first = raw.strip().split("\n\n", 1)[0].strip()
    first = first.split("\n", 1)[0].strip() or raw.strip()
    message = _FILENAME_PREFIX.sub("", first)

    line = column = None
    loc = error.get("loc")
    if isinstance(loc, dict) and isinstance(loc.get("line"), int):
        line, column = loc["line"], loc.get("column")

    m = _POSITION_SUFFIX.search(message)
    if m:
        if line is None:
            line, column = int(m.group(1)), int(m.group(2))
        message = message[:m.start()].rstrip()

    return {"name": name, "message": message, "line": line, "column": column}


def relocate(parsed: dict, line_offset: int, user_lines: int | None = None) -> dict:
    """
    Shift a harness position into user-source coordinates.

    Positions in the harness prefix are dropped. Positions in the suffix (an
    unclosed block is reported where the wrapper closes it) land on the last
    user line, without a column.
    """
    line = parsed.get("line")
    if line is None:
        return parsed
    user_line = line - line_offset
    if user_line < 1:
        return {**parsed, "line": None, "column": None}
    if user_lines is not None and user_line > user_lines:
        return {**parsed, "line": user_lines, "column": None}
    return {**parsed, "line": user_line}


def format_message(parsed: dict) -> str:
    message = parsed["message"]
    if parsed.get("line") is not None:
        column = parsed.get("column")
        message = f"{message} ({parsed['line']}:{column if column is not None else 0})"
    return message


def format_compile_error(error: dict | None, line_offset: int, user_lines: int | None = None) -> CompileError:
    """Build the CompileError for a Babel failure, positioned in user lines."""
    parsed = relocate(parse_js_error(error), line_offset, user_lines)
    return CompileError(format_message(parsed), line=parsed.get("line"), column=parsed.get("column"))


def runtime_message(error: dict | None) -> str:
    """`Name: message` for errors raised while instantiating or rendering."""
    parsed = parse_js_error(error)
    message = f"{parsed['name']}: {parsed['message']}"
    return explain_reference_error(parsed["name"], parsed["message"], message)


def is_reference_error(error: dict | None) -> bool:
    return bool(error) and error.get("name") == "ReferenceError"


def missing_identifier(message: str) -> str | None:
    m = _REFERENCE.match(message.strip())
    return m.group(1) if m else None


def explain_reference_error(name: str, message: str, formatted: str) -> str:
    """Add a hint when the snippet never defined the entry point."""
    if name == "ReferenceError" and missing_identifier(message) == ENTRY_POINT:
        return (
            f"{formatted}. The snippet must define a component named "
            f"`{ENTRY_POINT}`, e.g. `function {ENTRY_POINT}() {{ return <div />; }}`"
        )
    return formatted
