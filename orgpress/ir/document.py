"""Immutable document tree: blocks, inline spans, footnotes and metadata."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Union


@dataclass(frozen=True, slots=True)
class SourceRef:
    path: Path | None
    start_line: int
    end_line: int


@dataclass(frozen=True, slots=True)
class PlainText:
    text: str


@dataclass(frozen=True, slots=True)
class Bold:
    text: str


@dataclass(frozen=True, slots=True)
class Code:
    text: str
    verbatim: bool = False  # =verbatim= rather than ~code~


@dataclass(frozen=True, slots=True)
class Link:
    url: str
    text: str


@dataclass(frozen=True, slots=True)
class FootnoteRef:
    label: str


InlineSpan = Union[PlainText, Bold, Code, Link, FootnoteRef]


@dataclass(frozen=True, slots=True)
class Footnote:
    label: str
    body: tuple[InlineSpan, ...]
    source: SourceRef | None = None


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    title: tuple[InlineSpan, ...]
    children: tuple["Block", ...] = ()
    tags: tuple[str, ...] = ()
    footnotes: tuple[Footnote, ...] = ()
    source: SourceRef | None = None


@dataclass(frozen=True, slots=True)
class Paragraph:
    spans: tuple[InlineSpan, ...]
    footnotes: tuple[Footnote, ...] = ()
    source: SourceRef | None = None


@dataclass(frozen=True, slots=True)
class CodeBlock:
    language: str
    text: str
    name: str | None = None
    noweb_ref: str | None = None
    noweb: str = "no"
    references: tuple[str, ...] = ()
    header_args: tuple[tuple[str, str], ...] = ()
    source: SourceRef | None = None

    @property
    def names(self) -> tuple[str, ...]:
        """Every name this block can be referenced by."""
        return tuple(dict.fromkeys(n for n in (self.name, self.noweb_ref) if n))

    @property
    def exported(self) -> bool:
        return self.header_arg("exports", "code") not in ("none", "results")

    def header_arg(self, key: str, default: str | None = None) -> str | None:
        for arg_key, value in self.header_args:
            if arg_key == key:
                return value
        return default


@dataclass(frozen=True, slots=True)
class Quote:
    children: tuple["Block", ...]
    source: SourceRef | None = None


@dataclass(frozen=True, slots=True)
class Drawer:
    name: str
    properties: tuple[tuple[str, str], ...]
    source: SourceRef | None = None


@dataclass(frozen=True, slots=True)
class ListItem:
    spans: tuple[InlineSpan, ...]
    term: tuple[InlineSpan, ...] | None = None


@dataclass(frozen=True, slots=True)
class ListBlock:
    kind: str  # "unordered" | "ordered" | "description"
    items: tuple[ListItem, ...]
    footnotes: tuple[Footnote, ...] = ()
    source: SourceRef | None = None


Block = Union[Heading, Paragraph, CodeBlock, Quote, Drawer, ListBlock]


@dataclass(frozen=True, slots=True)
class Keyword:
    key: str
    value: str
    line: int


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    date: str
    description: str


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    title: str = ""
    tags: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    summary: str = ""
    date: str = ""
    author: str = ""
    properties: tuple[tuple[str, str], ...] = ()
    changelog: tuple[ChangelogEntry, ...] = ()
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "tags": list(self.tags),
            "keywords": list(self.keywords),
            "summary": self.summary,
            "date": self.date,
            "author": self.author,
            "properties": dict(self.properties),
            "changelog": [
                {"date": entry.date, "description": entry.description}
                for entry in self.changelog
            ],
        }


@dataclass(frozen=True, slots=True)
class Document:
    metadata: MetadataRecord
    blocks: tuple[Block, ...]
    footnotes: tuple[Footnote, ...] = ()
    source: Path | None = None

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def tags(self) -> tuple[str, ...]:
        return self.metadata.tags

    @property
    def keywords(self) -> tuple[str, ...]:
        return self.metadata.keywords

    @property
    def summary(self) -> str:
        return self.metadata.summary

    @property
    def changelog(self) -> tuple[ChangelogEntry, ...]:
        return self.metadata.changelog

    def iter_blocks(self) -> Iterator[Block]:
        """Depth-first walk over every block, headings before their children."""
        yield from iter_blocks(self.blocks)

    def code_blocks(self) -> list[CodeBlock]:
        return [block for block in self.iter_blocks() if isinstance(block, CodeBlock)]

    def all_footnotes(self) -> list[Footnote]:
        """Document-level definitions followed by block-owned inline ones."""
        found = list(self.footnotes)
        for block in self.iter_blocks():
            found.extend(getattr(block, "footnotes", ()))
        return found


def iter_blocks(blocks: tuple[Block, ...]) -> Iterator[Block]:
    for block in blocks:
        yield block
        if isinstance(block, (Heading, Quote)):
            yield from iter_blocks(block.children)


def spans_text(spans: tuple[InlineSpan, ...] | None) -> str:
    """Plain-text projection of inline content (links keep their label)."""
    if not spans:
        return ""
    parts: list[str] = []
    for span in spans:
        if isinstance(span, FootnoteRef):
            continue
        parts.append(span.text)
    return "".join(parts)

