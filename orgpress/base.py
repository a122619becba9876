from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .ir import Document


@dataclass(slots=True)
class BuildOptions:
    version: str = "undefined"
    source_dir: Path | None = None
    output_dir: Path | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class GeneratedArtifact:
    path: Path
    artifact_type: str
    document_id: str | None = None


class RenderTarget(ABC):
    """Base contract for render targets (html, latex, etc.)."""

    name: str
    suffix: str

    @abstractmethod
    def render(self, document: Document, options: BuildOptions | None = None) -> str:
        """Render one resolved document into the target markup."""

    def prepare(self, options: BuildOptions) -> list[GeneratedArtifact]:
        """Write assets shared by every document of a build."""
        return []
