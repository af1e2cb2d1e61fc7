"""Tests for the capability set handed to every snippet."""

from __future__ import annotations

import pytest

from livepreview.capabilities import (
    COMPONENTS,
    FACTORY_PARAMS,
    HOOK_NAMES,
    REACT_EXTRAS,
    ComponentSpec,
    build_capabilities,
    default_capabilities,
)
from livepreview.mock_data import MOCK_DATA


def test_default_set_is_cached_and_sorted():
    caps = default_capabilities()

    assert caps is default_capabilities()
    assert len(caps.names) == 34
    assert list(caps.names) == sorted(caps.names)
    for name in ("Button", "Card", "CardContent", "Input", "Label", "Tabs", "TabsTrigger", "Textarea"):
        assert name in caps.names


def test_reserved_names_never_collide_with_components():
    caps = default_capabilities()

    assert not set(caps.names) & set(HOOK_NAMES)
    assert not set(caps.names) & set(FACTORY_PARAMS)
    assert not set(caps.names) & set(REACT_EXTRAS)


def test_duplicate_component_names_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        build_capabilities(components=COMPONENTS + (ComponentSpec("Button", "button"),))


def test_component_shadowing_a_hook_rejected():
    with pytest.raises(ValueError, match="reserved"):
        build_capabilities(components=(ComponentSpec("useState", "div"),))


def test_payload_shape():
    payload = default_capabilities().to_payload()
    button = next(c for c in payload["components"] if c["name"] == "Button")

    assert button["tag"] == "button"
    assert button["defaultVariant"] == "default"
    assert button["defaultSize"] == "default"
    assert "outline" in button["variants"]
    assert button["attrs"] == {"type": "button"}
    assert payload["mockData"] == MOCK_DATA
    # icons come from lucide-react in the page, not from the payload
    assert "icons" not in payload


def test_component_without_variants_has_no_default_variant():
    payload = ComponentSpec("CardContent", "div", "p-6 pt-0").to_payload()

    assert payload["defaultVariant"] is None
    assert payload["defaultSize"] is None


def test_mock_data_is_read_only():
    caps = default_capabilities()

    with pytest.raises(TypeError):
        caps.mock_data["user"] = {}
    assert isinstance(caps.mock_data["products"], tuple)


def test_component_named_fragment_rejected():
    with pytest.raises(ValueError, match="reserved"):
        build_capabilities(components=(ComponentSpec("Fragment", "div"),))


def test_suggested_icons_cover_common_brands_and_actions():
    names = default_capabilities().icon_names

    assert list(names) == sorted(names)
    for name in ("Github", "Globe", "Phone", "Settings", "Users", "Twitter", "Facebook", "Mail"):
        assert name in names


def test_controlled_inputs_keep_their_change_handlers():
    payload = {c["name"]: c for c in default_capabilities().to_payload()["components"]}

    assert payload["Checkbox"]["behavior"] == "checkbox"
    assert "onCheckedChange" not in payload["Checkbox"]["omit"]
    assert "checked" not in payload["Checkbox"]["rename"]
    assert payload["Select"]["behavior"] == "select-root"
    assert "onValueChange" not in payload["Select"]["omit"]
    assert payload["SelectValue"]["behavior"] == "select-value"
    assert payload["SelectItem"]["behavior"] == "select-item"
