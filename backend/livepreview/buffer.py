"""
Source buffer: the snippet text the preview follows.

The editing surface owns the undo/redo history; the buffer only forwards to it
and tells listeners (the engine, in practice) when the text changed.
"""

import inspect
from typing import Callable, Protocol


class EditingSurface(Protocol):
    def get_value(self) -> str: ...

    def set_value(self, text: str) -> None: ...

    def undo(self) -> bool: ...

    def redo(self) -> bool: ...


class MemorySurface:
    """In-process editing surface with a linear history."""

    def __init__(self, initial: str = ""):
        self._history = [initial]
        self._index = 0

    def get_value(self) -> str:
        return self._history[self._index]

    def set_value(self, text: str) -> None:
        if text == self.get_value():
            return
        # a new edit drops the redo tail
        del self._history[self._index + 1:]
        self._history.append(text)
        self._index += 1

    def undo(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        return True

    def redo(self) -> bool:
        if self._index >= len(self._history) - 1:
            return False
        self._index += 1
        return True

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._history) - 1


class SourceBuffer:
    def __init__(self, surface: EditingSurface | None = None, initial: str | None = None):
        self.surface = surface if surface is not None else MemorySurface(initial or "")
        if surface is not None and initial is not None:
            surface.set_value(initial)
        self._listeners: list[Callable] = []

    def get(self) -> str:
        return self.surface.get_value()

    async def set(self, text: str) -> bool:
        """Replace the text. Returns True if listeners were notified."""
        before = self.get()
        self.surface.set_value(text)
        return await self._notify_if_changed(before)

    async def undo(self) -> bool:
        before = self.get()
        if not self.surface.undo():
            return False
        await self._notify_if_changed(before)
        return True

    async def redo(self) -> bool:
        before = self.get()
        if not self.surface.redo():
            return False
        await self._notify_if_changed(before)
        return True

    def on_change(self, listener: Callable) -> Callable[[], None]:
        """Register `listener(text)`; sync or async. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify_if_changed(self, before: str) -> bool:
        text = self.get()
        if text == before:
            return False
        for listener in list(self._listeners):
            result = listener(text)
            if inspect.isawaitable(result):
                await result
        return True
