"""
Static checks for preview snippets. Pure Python, no browser.
Catches the usual generated-JSX mistakes before they reach the compiler,
and the single-snippet rules (no modules, one `Preview` entry point).
"""

import re

from livepreview.capabilities import REACT_EXTRAS, default_capabilities
from livepreview.harness import ENTRY_POINT


# Identifiers in scope for every snippet besides the components themselves
_AMBIENT = {"React", "ShadcnUI", "LucideIcons"}

_DEFINES_PREVIEW = re.compile(
    rf"\b(?:function\s+{ENTRY_POINT}\b|(?:const|let|var)\s+{ENTRY_POINT}\s*=|class\s+{ENTRY_POINT}\b)"
)
_DEFINES_NAME = re.compile(
    r"\b(?:function|class|interface|type|enum)\s+([A-Z]\w*)|\b(?:const|let|var)\s+([A-Z]\w*)\s*[=:]"
)
_DESTRUCTURE = re.compile(r"\b(?:const|let|var)\s*\{([^}]*)\}\s*=")
_JSX_TAG = re.compile(r"(?<![\w.])<([A-Z]\w*)")

_TRUNCATION_PATTERNS = [
    r"//\s*\.\.\.",
    r"//\s*rest of",
    r"//\s*more items",
    r"//\s*etc\.?$",
    r"//\s*add more",
    r"//\s*remaining",
    r"//\s*continue",
    r"\{/\*\s*\.\.\.\s*\*/\}",
]


def validate_snippet(code: str, capabilities=None) -> dict:
    """
    Lint one snippet.

    Returns:
        {
            "valid": bool,
            "errors": [{"line": int, "type": str, "message": str, "fix_hint": str}],
            "warnings": [{"line": int, "type": str, "message": str}],
            "stats": {"lines": int, "components_used": [str]}
        }
    """
    capabilities = capabilities or default_capabilities()
    code = code or ""
    lines = code.split("\n")

    errors = []
    warnings = []

    if not code.strip():
        errors.append(_error(0, "empty_snippet", "Snippet is empty",
                             f"Define `function {ENTRY_POINT}() {{ ... }}`"))
        return _result(errors, warnings, lines, [])

    errors.extend(_check_module_syntax(lines))
    errors.extend(_check_entry_point(code))
    errors.extend(_check_jsx(lines))

    tag_warnings, used = _check_tags(code, lines, capabilities)
    warnings.extend(tag_warnings)
    warnings.extend(_check_keys(lines))

    if re.search(r"^\s*['\"]use client['\"]", code, re.M):
        warnings.append(_warning(1, "use_client", "\"use client\" has no effect in the preview"))

    return _result(errors, warnings, lines, used)


def format_report(validation: dict) -> str:
    """Human-readable summary of validate_snippet() output."""
    parts = []
    if validation["errors"]:
        parts.append(f"ERRORS ({len(validation['errors'])}):")
        for e in validation["errors"]:
            line_str = f"line {e['line']}: " if e.get("line") else ""
            parts.append(f"  [{e['type']}] {line_str}{e['message']}")
            if e.get("fix_hint"):
                parts.append(f"    Fix: {e['fix_hint']}")

    if validation["warnings"]:
        if parts:
            parts.append("")
        parts.append(f"WARNINGS ({len(validation['warnings'])}):")
        for w in validation["warnings"]:
            line_str = f"line {w['line']}: " if w.get("line") else ""
            parts.append(f"  [{w['type']}] {line_str}{w['message']}")

    return "\n".join(parts) if parts else "All checks passed."


def _error(line, kind, message, fix_hint) -> dict:
    return {"line": line, "type": kind, "message": message, "fix_hint": fix_hint}


def _warning(line, kind, message) -> dict:
    return {"line": line, "type": kind, "message": message}


def _result(errors, warnings, lines, used) -> dict:
    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "stats": {"lines": len(lines), "components_used": used},
    }


def _is_comment(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith(("//", "*", "/*"))


def _check_module_syntax(lines: list) -> list:
    errors = []
    for i, line in enumerate(lines, 1):
        if re.match(r"\s*import\s+[\w{*'\"]", line):
            errors.append(_error(i, "import_statement",
                                 "Imports are not supported; components, hooks and icons are already in scope",
                                 "Remove the import line"))
        elif re.match(r"\s*export\s+", line):
            errors.append(_error(i, "export_statement",
                                 "Exports are not supported in a preview snippet",
                                 f"Drop `export` / `export default` and keep `function {ENTRY_POINT}()`"))
    return errors


def _check_entry_point(code: str) -> list:
    if _DEFINES_PREVIEW.search(code):
        return []
    hint = f"Define `function {ENTRY_POINT}() {{ return (...); }}`"
    if re.search(r"\b(?:function\s+Prevew\b|(?:const|let|var)\s+Prevew\s*=)", code):
        return [_error(0, "misspelled_preview",
                       f"Found a component named `Prevew`; the entry point must be `{ENTRY_POINT}`",
                       "Rename `Prevew` to `Preview`")]
    return [_error(0, "missing_preview", f"No `{ENTRY_POINT}` component defined", hint)]


def _check_jsx(lines: list) -> list:
    errors = []

    for i, line in enumerate(lines, 1):
        if _is_comment(line):
            continue

        for m in re.finditer(r"\bclass\s*=\s*[\"{]", line):
            if not re.search(r"className\s*$", line[:m.start()]):
                errors.append(_error(i, "class_not_classname",
                                     "Use className= instead of class= in JSX",
                                     "Replace class= with className="))
                break

        if re.search(r"<label[^>]*\bfor\s*=", line):
            errors.append(_error(i, "for_not_htmlfor",
                                 "Use htmlFor= instead of for= on labels",
                                 "Replace for= with htmlFor="))

        if re.search(r"\bstyle\s*=\s*\"[^\"]*\"", line):
            errors.append(_error(i, "style_string",
                                 "style=\"...\" should be style={{...}} in JSX",
                                 "Convert the style string to an object: style={{ property: 'value' }}"))

        if "<!--" in line:
            errors.append(_error(i, "html_comment",
                                 "HTML comment <!-- --> found, use {/* */} in JSX",
                                 "Replace <!-- comment --> with {/* comment */}"))

    for i, line in enumerate(lines, 1):
        for pat in _TRUNCATION_PATTERNS:
            if re.search(pat, line, re.IGNORECASE):
                errors.append(_error(i, "truncation_comment",
                                     f"Truncation placeholder found: {line.strip()[:80]}",
                                     "Replace with the actual content"))
                break

    # 4+ identical lines repeated back to back
    if len(lines) > 8:
        for i in range(len(lines) - 7):
            block = lines[i:i + 4]
            if all(l.strip() for l in block) and lines[i + 4:i + 8] == block:
                errors.append(_error(i + 5, "duplicate_block",
                                     "4+ consecutive identical lines repeated, likely a copy-paste error",
                                     "Remove the duplicate block"))

    return errors


def _local_names(code: str) -> set:
    names = set()
    for m in _DEFINES_NAME.finditer(code):
        names.add(m.group(1) or m.group(2))
    for m in _DESTRUCTURE.finditer(code):
        for part in m.group(1).split(","):
            part = part.strip()
            if not part or part.startswith("..."):
                continue
            # `{ Mail: MailIcon }` binds MailIcon
            alias = part.split(":", 1)[-1].split("=", 1)[0].strip()
            if alias:
                names.add(alias)
    return names


def _check_tags(code: str, lines: list, capabilities) -> tuple[list, list]:
    known = set(capabilities.names)
    in_scope = known | _AMBIENT | set(REACT_EXTRAS) | set(capabilities.hooks) | _local_names(code)

    warnings = []
    used = set()
    reported = set()
    for i, line in enumerate(lines, 1):
        if _is_comment(line):
            continue
        for m in _JSX_TAG.finditer(line):
            name = m.group(1)
            if name in known:
                used.add(name)
            if name in in_scope or name in reported:
                continue
            reported.add(name)
            hint = " (icons are reached through LucideIcons)" if name in capabilities.icon_names else ""
            warnings.append(_warning(i, "unknown_component",
                                     f"<{name}> is not an available component{hint}"))
    return warnings, sorted(used)


def _check_keys(lines: list) -> list:
    warnings = []
    for i, line in enumerate(lines, 1):
        if ".map(" in line or ".map (" in line:
            block = "\n".join(lines[i - 1:min(i + 10, len(lines))])
            if "key=" not in block and "key =" not in block:
                warnings.append(_warning(i, "missing_key_prop",
                                         ".map() call may be missing key prop on returned elements"))
    return warnings
