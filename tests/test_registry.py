from __future__ import annotations

import pytest

from orgpress.base import RenderTarget
from orgpress.errors import ValidationError
from orgpress.registry import TargetRegistry, build_default_registry
from orgpress.targets.html import HtmlTarget


class _PlainTarget(RenderTarget):
    name = "plain"
    suffix = ".txt"

    def render(self, document, options=None) -> str:
        return ""


def test_default_registry_lists_targets_with_suffixes() -> None:
    registry = build_default_registry()
    assert registry.names() == ["html", "latex"]
    assert registry.suffixes() == {"html": ".html", "latex": ".tex"}


def test_unknown_target_lists_supported_names() -> None:
    with pytest.raises(ValidationError, match="Supported targets: html, latex"):
        build_default_registry().get("pdf")


def test_lookup_ignores_case_and_spaces() -> None:
    registry = TargetRegistry()
    registry.register(_PlainTarget())
    assert isinstance(registry.get(" PLAIN "), _PlainTarget)


def test_duplicate_name_is_rejected() -> None:
    registry = TargetRegistry()
    registry.register(HtmlTarget())
    with pytest.raises(ValidationError, match="registered twice"):
        registry.register(HtmlTarget())


@pytest.mark.parametrize("suffix", ["", "txt", "."])
def test_suffix_must_start_with_a_dot(suffix: str) -> None:
    target = _PlainTarget()
    target.suffix = suffix
    with pytest.raises(ValidationError, match="invalid output suffix"):
        TargetRegistry().register(target)


def test_target_without_a_name_is_rejected() -> None:
    target = _PlainTarget()
    target.name = ""
    with pytest.raises(ValidationError, match="does not declare a target name"):
        TargetRegistry().register(target)
