"""
Error taxonomy for the preview engine and the acquisition pipeline.

The three preview kinds (compile / instantiate / render) all end up as an
ErrorState plus the inline error panel; none of them escape render().
"""

from dataclasses import asdict, dataclass


COMPILE = "compile"
INSTANTIATE = "instantiate"
RENDER = "render"


class PreviewError(Exception):
    """A failure of one preview stage, in user-source coordinates."""

    stage = "preview"

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def to_state(self) -> "ErrorState":
        return ErrorState(stage=self.stage, message=self.message, line=self.line, column=self.column)


class CompileError(PreviewError):
    stage = COMPILE


class InstantiateError(PreviewError):
    stage = INSTANTIATE


class RenderError(PreviewError):
    stage = RENDER


class DependencyNotReadyError(Exception):
    """The in-page compiler has not finished loading yet. Retried, never shown."""


class EngineNotInitializedError(RuntimeError):
    """render()/refresh() was called before initialize()."""


class AcquisitionError(Exception):
    """Content, screenshot or generation call failed upstream."""


@dataclass(frozen=True)
class ErrorState:
    stage: str
    message: str
    line: int | None = None
    column: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)
