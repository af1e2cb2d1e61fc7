"""Tests for the host document and in-page runtime source."""

from __future__ import annotations

from livepreview.capabilities import COMPONENTS
from livepreview.config import Settings
from livepreview.runtime import MOUNT_ID, RUNTIME_JS, build_host_document


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


def test_document_loads_page_libraries_in_order():
    settings = _settings()
    doc = build_host_document(settings)

    react = doc.index(settings.react_url)
    lucide = doc.index(settings.lucide_url)
    runtime = doc.index("window.__preview = {")
    module = doc.index('<script type="module">')

    assert react < doc.index("window.react = window.React;") < lucide < runtime < module
    assert f'<div id="{MOUNT_ID}"' in doc


def test_class_name_libraries_come_from_the_configured_urls():
    doc = build_host_document(_settings(
        clsx_url="https://cdn.example/clsx.mjs",
        tailwind_merge_url="https://cdn.example/tw-merge.mjs",
    ))

    assert 'import { clsx } from "https://cdn.example/clsx.mjs";' in doc
    assert 'import { twMerge } from "https://cdn.example/tw-merge.mjs";' in doc
    assert "window.__preview.useClassNames(clsx, twMerge);" in doc


def test_cn_is_tailwind_merge_over_clsx():
    assert "classNames.twMerge(classNames.clsx(" in RUNTIME_JS
    # readiness covers the class-name utilities, not just Babel
    assert "missing.push('tailwind-merge')" in RUNTIME_JS
    assert "missing.push('babel')" in RUNTIME_JS


def test_icons_are_the_lucide_react_namespace():
    assert "caps.icons = window.LucideReact;" in RUNTIME_JS
    assert "makeIcon" not in RUNTIME_JS


def test_runtime_defines_every_declared_behavior():
    for behavior in {spec.behavior for spec in COMPONENTS if spec.behavior}:
        assert f"'{behavior}': function (spec, props, ref)" in RUNTIME_JS
