"""Named render targets and the decorator that contributes the built-in ones."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .base import RenderTarget
from .errors import ValidationError

TargetFactory = Callable[[], RenderTarget]


@dataclass(slots=True)
class TargetRegistry:
    _targets: dict[str, RenderTarget] = field(default_factory=dict)

    def register(self, target: RenderTarget) -> None:
        """Add a target under its lower-cased name; its output suffix must start with a dot."""
        key = getattr(target, "name", "").lower().strip()
        if not key:
            raise ValidationError(f"{type(target).__name__} does not declare a target name.")
        suffix = getattr(target, "suffix", "")
        if not suffix.startswith(".") or len(suffix) < 2:
            raise ValidationError(f"Target '{key}' has an invalid output suffix {suffix!r}.")
        if key in self._targets:
            raise ValidationError(f"Target '{key}' is registered twice.")
        self._targets[key] = target

    def get(self, name: str) -> RenderTarget:
        key = name.lower().strip()
        target = self._targets.get(key)
        if target is None:
            supported = ", ".join(self.names()) or "<none>"
            raise ValidationError(f"Unknown target '{name}'. Supported targets: {supported}")
        return target

    def names(self) -> list[str]:
        return sorted(self._targets)

    def suffixes(self) -> dict[str, str]:
        """Output file suffix per target name."""
        return {name: self._targets[name].suffix for name in self.names()}


_FACTORIES: list[TargetFactory] = []


def register_target(factory: TargetFactory) -> TargetFactory:
    """Decorator for a module-level factory returning one built-in target."""
    _FACTORIES.append(factory)
    return factory


def build_default_registry() -> TargetRegistry:
    # Importing the targets package runs every @register_target in it.
    from . import targets as _targets  # noqa: F401

    registry = TargetRegistry()
    for factory in _FACTORIES:
        registry.register(factory())
    return registry
