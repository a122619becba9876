from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .base import BuildOptions, GeneratedArtifact, RenderTarget
from .errors import PublishError, ValidationError
from .ir import Document, MetadataRecord
from .log import get_logger
from .noweb import resolve_references
from .parsing import parse_file
from .registry import TargetRegistry
from .validation import validate_document

logger = get_logger(__name__)

SOURCE_SUFFIX = ".org"


@dataclass(slots=True)
class DocumentResult:
    source: Path
    document_id: str
    metadata: MetadataRecord | None = None
    artifacts: list[GeneratedArtifact] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.metadata.warnings if self.metadata else ()


@dataclass(slots=True)
class RunResult:
    target_name: str
    version: str
    output_dir: Path
    documents: list[DocumentResult]
    assets: list[GeneratedArtifact]

    @property
    def succeeded(self) -> list[DocumentResult]:
        return [result for result in self.documents if result.ok]

    @property
    def failed(self) -> list[DocumentResult]:
        return [result for result in self.documents if not result.ok]

    @property
    def artifacts(self) -> list[GeneratedArtifact]:
        collected = list(self.assets)
        for result in self.documents:
            collected.extend(result.artifacts)
        return collected

    def site_index(self) -> dict[str, Any]:
        """JSON-ready index of every built document and every failure."""
        return {
            "target": self.target_name,
            "version": self.version,
            "documents": [
                {
                    "id": result.document_id,
                    "source": str(result.source),
                    "output": [str(artifact.path) for artifact in result.artifacts],
                    "metadata": result.metadata.to_dict() if result.metadata else None,
                    "warnings": list(result.warnings),
                }
                for result in self.succeeded
            ],
            "failed": [
                {"id": result.document_id, "source": str(result.source), "error": result.error}
                for result in self.failed
            ],
            "assets": [str(artifact.path) for artifact in self.assets],
        }


def publish(document: Document, target: RenderTarget, options: BuildOptions | None = None) -> str:
    """Resolve, validate and render one parsed document."""
    resolved = resolve_references(document)
    validate_document(resolved)
    return target.render(resolved, options)


def discover_sources(source: Path) -> tuple[Path, list[Path]]:
    """Return the source root and every Org file under it, sorted by path."""
    if source.is_file():
        return source.parent, [source]
    if not source.is_dir():
        raise ValidationError(f"Source path does not exist: {source}")
    return source, sorted(path for path in source.rglob(f"*{SOURCE_SUFFIX}") if path.is_file())


def run_build(
    *,
    registry: TargetRegistry,
    target_name: str,
    source: Path,
    output_dir: Path,
    version: str,
    extra: dict[str, Any] | None = None,
    workers: int = 1,
) -> RunResult:
    target = registry.get(target_name)

    source_dir, paths = discover_sources(source)
    options = BuildOptions(
        version=version,
        source_dir=source_dir,
        output_dir=output_dir,
        extra=dict(extra or {}),
    )
    output_dir.mkdir(parents=True, exist_ok=True)
    assets = target.prepare(options)

    def build(path: Path) -> DocumentResult:
        return _build_one(path, target, options, source_dir, output_dir)

    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            documents = list(pool.map(build, paths))
    else:
        documents = [build(path) for path in paths]

    result = RunResult(
        target_name=target.name,
        version=version,
        output_dir=output_dir,
        documents=documents,
        assets=assets,
    )
    logger.info(
        "build_finished",
        target=target.name,
        documents=len(documents),
        failed=len(result.failed),
    )
    return result


def _build_one(
    path: Path,
    target: RenderTarget,
    options: BuildOptions,
    source_dir: Path,
    output_dir: Path,
) -> DocumentResult:
    relative = path.relative_to(source_dir)
    document_id = relative.with_suffix("").as_posix()
    result = DocumentResult(source=path, document_id=document_id)
    # Pages in subdirectories reach shared assets at the output root.
    document_options = replace(
        options,
        extra={**options.extra, "_asset_prefix": "../" * (len(relative.parts) - 1)},
    )
    output_path = output_dir / relative.with_suffix(target.suffix)
    try:
        document = parse_file(path)
        result.metadata = document.metadata
        rendered = publish(document, target, document_options)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered, encoding="utf-8")
    except (PublishError, OSError) as exc:
        result.error = str(exc)
        logger.error("document_build_failed", source=str(path), error=str(exc))
        return result

    result.artifacts.append(
        GeneratedArtifact(path=output_path, artifact_type=target.name, document_id=document_id)
    )
    return result
