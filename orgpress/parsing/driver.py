"""Top-level entry points: parse_document and parse_file."""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ..errors import PublishError
from ..ir import Document
from ..log import get_logger
from ..metadata import extract_metadata
from .blocks import build_blocks
from .inline import FootnoteLabels
from .scanner import scan_blocks

logger = get_logger(__name__)


def parse_document(text: str, *, source: Path | None = None) -> Document:
    labels = FootnoteLabels()
    body = build_blocks(scan_blocks(text, source=source), labels=labels, source=source)
    metadata, blocks = extract_metadata(body.keywords, body.blocks, source=source)
    if body.warnings:
        metadata = replace(metadata, warnings=body.warnings + metadata.warnings)
    logger.debug(
        "document_parsed",
        source=str(source) if source else None,
        blocks=len(blocks),
        footnotes=len(body.footnotes),
    )
    return Document(metadata=metadata, blocks=blocks, footnotes=body.footnotes, source=source)


def parse_file(path: Path) -> Document:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PublishError(f"Could not read {path}: {exc}") from exc
    return parse_document(text, source=path)
