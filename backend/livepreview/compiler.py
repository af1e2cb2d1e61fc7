"""
Compile seam: snippet text in, executable artifact out.

BabelCompiler is the only place that knows the compiler runs inside the host
page; the engine just calls compile() and handles CompileError /
DependencyNotReadyError.
"""

from dataclasses import dataclass

from livepreview.diagnostics import format_compile_error
from livepreview.errors import DependencyNotReadyError
from livepreview.harness import wrap_source


@dataclass(frozen=True)
class CompiledArtifact:
    code: str
    source: str
    line_offset: int


class BabelCompiler:
    def __init__(self, host):
        self.host = host

    async def compile(self, source: str, capabilities) -> CompiledArtifact:
        """
        Wrap and transform `source` with `capabilities` (components and hooks) in scope.

        Raises:
            DependencyNotReadyError: Babel or tailwind-merge has not loaded into the page yet.
            CompileError: the snippet is not valid JSX/TSX.
        """
        if not await self.host.compiler_ready():
            raise DependencyNotReadyError("Babel compiler or class-name utilities not loaded yet")

        harness = wrap_source(source, capabilities.names, capabilities.hooks)
        result = await self.host.transform(harness.text)
        if not result.get("ok"):
            raise format_compile_error(result.get("error"), harness.line_offset, harness.user_lines)

        return CompiledArtifact(code=result["code"], source=source, line_offset=harness.line_offset)
