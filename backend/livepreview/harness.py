"""
Wraps raw snippet text into the expression the compiler sees.

The wrapper destructures every capability name into scope, gives the snippet
its own block (so re-declaring a capability shadows it instead of clashing)
and appends the implicit `<Preview />` construction.
"""

from dataclasses import dataclass

from livepreview.capabilities import HOOK_NAMES, REACT_EXTRAS


ENTRY_POINT = "Preview"


@dataclass(frozen=True)
class Harness:
    text: str
    line_offset: int  # harness lines before the first line of user source
    user_lines: int = 1


def wrap_source(source: str, component_names, hook_names=HOOK_NAMES) -> Harness:
    prefix = [
        "(function () {",
        f"  const {{ {', '.join(component_names)} }} = ShadcnUI;",
        f"  const {{ {', '.join(REACT_EXTRAS + tuple(hook_names))} }} = React;",
        "  {",
    ]
    suffix = [
        f"  return <{ENTRY_POINT} />;",
        "  }",
        "})()",
    ]
    text = "\n".join(prefix + [source] + suffix)
    return Harness(text=text, line_offset=len(prefix), user_lines=source.count("\n") + 1)
