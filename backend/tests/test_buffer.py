"""Tests for the source buffer and the in-memory editing surface."""

from __future__ import annotations

import pytest

from livepreview.buffer import MemorySurface, SourceBuffer

pytestmark = pytest.mark.asyncio


async def test_set_notifies_listeners():
    buffer = SourceBuffer(initial="a")
    seen = []
    buffer.on_change(seen.append)

    changed = await buffer.set("b")

    assert changed is True
    assert buffer.get() == "b"
    assert seen == ["b"]


async def test_set_same_text_does_not_notify():
    buffer = SourceBuffer(initial="a")
    seen = []
    buffer.on_change(seen.append)

    assert await buffer.set("a") is False
    assert seen == []


async def test_async_listener_is_awaited():
    buffer = SourceBuffer(initial="")
    rendered = []

    async def render(text):
        rendered.append(text)

    buffer.on_change(render)
    await buffer.set("function Preview() {}")

    assert rendered == ["function Preview() {}"]


async def test_unsubscribe_stops_notifications():
    buffer = SourceBuffer(initial="")
    seen = []
    unsubscribe = buffer.on_change(seen.append)

    await buffer.set("one")
    unsubscribe()
    unsubscribe()
    await buffer.set("two")

    assert seen == ["one"]


async def test_undo_redo_follow_surface_history():
    buffer = SourceBuffer(initial="v1")
    seen = []
    buffer.on_change(seen.append)
    await buffer.set("v2")
    await buffer.set("v3")

    assert await buffer.undo() is True
    assert buffer.get() == "v2"
    assert await buffer.undo() is True
    assert buffer.get() == "v1"
    assert await buffer.undo() is False

    assert await buffer.redo() is True
    assert buffer.get() == "v2"
    assert seen == ["v2", "v3", "v2", "v1", "v2"]


async def test_new_edit_drops_redo_tail():
    buffer = SourceBuffer(initial="v1")
    await buffer.set("v2")
    await buffer.undo()
    await buffer.set("v3")

    assert await buffer.redo() is False
    await buffer.undo()
    assert buffer.get() == "v1"


async def test_buffer_over_external_surface():
    surface = MemorySurface("start")
    buffer = SourceBuffer(surface)

    await buffer.set("edited")

    assert surface.get_value() == "edited"
    assert surface.can_undo
    assert not surface.can_redo
