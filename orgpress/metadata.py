"""Front-matter keywords and the trailing changelog section, as a MetadataRecord."""
from __future__ import annotations

import re
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from .ir import (
    Block,
    Bold,
    ChangelogEntry,
    Heading,
    InlineSpan,
    Keyword,
    ListBlock,
    MetadataRecord,
    Paragraph,
    PlainText,
    spans_text,
)
from .log import get_logger

logger = get_logger(__name__)

CHANGELOG_TITLES = frozenset({"changelog", "change log"})
_KNOWN_KEYS = frozenset(
    {"title", "tags", "filetags", "keywords", "summary", "description", "date", "author"}
)
_TAG_SPLIT_RE = re.compile(r"[\s,:]+")


def extract_metadata(
    keywords: Sequence[Keyword],
    blocks: tuple[Block, ...],
    *,
    source: Path | None = None,
) -> tuple[MetadataRecord, tuple[Block, ...]]:
    """
    Build the metadata record for a document.

    Returns the record and the block tree with the changelog section removed.
    Missing fields default to empty values; malformed ones are reported as
    warnings and never raise.
    """
    warnings: list[str] = []
    titles: list[str] = []
    tags: list[str] = []
    terms: list[str] = []
    summaries: list[str] = []
    date = ""
    author = ""
    properties: list[tuple[str, str]] = []

    for keyword in keywords:
        value = keyword.value.strip()
        key = keyword.key
        if key in _KNOWN_KEYS and not value:
            _warn(warnings, f"line {keyword.line}: empty #+{key} keyword", source)
            continue
        if key == "title":
            titles.append(value)
        elif key in ("tags", "filetags"):
            tags.extend(_split_tags(value))
        elif key == "keywords":
            terms.extend(_split_keywords(value))
        elif key in ("summary", "description"):
            summaries.append(value)
        elif key == "date":
            date = value
        elif key == "author":
            author = value
        else:
            properties.append((key, value))

    changelog: list[ChangelogEntry] = []
    remaining = _take_changelog(blocks, changelog, warnings, source)

    record = MetadataRecord(
        title=" ".join(titles),
        tags=_unique(tags),
        keywords=_unique(terms),
        summary=" ".join(summaries),
        date=date,
        author=author,
        properties=tuple(properties),
        changelog=tuple(changelog),
        warnings=tuple(warnings),
    )
    return record, remaining


def _warn(warnings: list[str], message: str, source: Path | None) -> None:
    logger.warning("metadata_malformed", source=str(source) if source else None, detail=message)
    warnings.append(message)


def _unique(values: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(value for value in values if value))


def _split_tags(value: str) -> list[str]:
    return [tag for tag in _TAG_SPLIT_RE.split(value) if tag]


def _split_keywords(value: str) -> list[str]:
    if "," in value:
        return [term.strip() for term in value.split(",") if term.strip()]
    return value.split()


def _take_changelog(
    blocks: tuple[Block, ...],
    entries: list[ChangelogEntry],
    warnings: list[str],
    source: Path | None,
) -> tuple[Block, ...]:
    kept: list[Block] = []
    for block in blocks:
        if isinstance(block, Heading):
            if spans_text(block.title).strip().lower() in CHANGELOG_TITLES:
                entries.extend(_changelog_entries(block, warnings, source))
                continue
            children = _take_changelog(block.children, entries, warnings, source)
            if children != block.children:
                block = replace(block, children=children)
        kept.append(block)
    return tuple(kept)


def _changelog_entries(
    section: Heading, warnings: list[str], source: Path | None
) -> list[ChangelogEntry]:
    entries: list[ChangelogEntry] = []
    for child in section.children:
        if isinstance(child, ListBlock):
            candidates = [item.spans for item in child.items]
        elif isinstance(child, Paragraph):
            candidates = [child.spans]
        elif isinstance(child, Heading):
            # "** 2020-01-02" followed by prose.
            description = " ".join(
                spans_text(block.spans) for block in child.children if isinstance(block, Paragraph)
            )
            entries.append(
                ChangelogEntry(
                    date=spans_text(child.title).strip(),
                    description=" ".join(description.split()),
                )
            )
            continue
        else:
            continue
        for spans in candidates:
            entry = _entry_from_spans(spans)
            if entry is None:
                line = child.source.start_line if child.source else "?"
                _warn(warnings, f"line {line}: changelog entry without a bold date marker", source)
                continue
            entries.append(entry)
    return entries


def _entry_from_spans(spans: tuple[InlineSpan, ...]) -> ChangelogEntry | None:
    leading = list(spans)
    while leading and isinstance(leading[0], PlainText) and not leading[0].text.strip():
        leading.pop(0)
    if not leading or not isinstance(leading[0], Bold):
        return None
    description = spans_text(tuple(leading[1:])).strip().lstrip(":-").strip()
    return ChangelogEntry(date=leading[0].text.strip(), description=" ".join(description.split()))
