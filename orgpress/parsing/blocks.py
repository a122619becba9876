"""Block parser: turns the raw block stream into the typed, nested tree."""
from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ..ir import (
    Block,
    CodeBlock,
    Drawer,
    Footnote,
    Heading,
    InlineSpan,
    Keyword,
    ListBlock,
    ListItem,
    Paragraph,
    Quote,
    SourceRef,
    spans_text,
)
from ..log import get_logger
from ..noweb import NOWEB_EXPAND_MODES, NOWEB_STRIP_MODES, find_references
from .inline import FootnoteLabels, parse_inline
from .regex import (
    DESCRIPTION_ITEM_RE,
    HEADING_TAGS_RE,
    LIST_ITEM_RE,
    PROPERTY_RE,
    SRC_COMMA_ESCAPE_RE,
)
from .scanner import RawBlock, scan_blocks

logger = get_logger(__name__)

# Keywords that describe the next element rather than the file.
_AFFILIATED_KEYWORDS = frozenset({"name", "caption", "results", "header", "label", "plot"})

FOOTNOTE_SECTION_TITLE = "footnotes"


@dataclass(slots=True)
class _OpenHeading:
    level: int
    title: tuple[InlineSpan, ...]
    tags: tuple[str, ...]
    footnotes: tuple[Footnote, ...]
    source: SourceRef
    children: list = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ParsedBody:
    blocks: tuple[Block, ...]
    keywords: tuple[Keyword, ...]
    footnotes: tuple[Footnote, ...]
    warnings: tuple[str, ...] = ()


def build_blocks(
    raw_blocks: Iterable[RawBlock],
    *,
    labels: FootnoteLabels,
    source: Path | None = None,
) -> ParsedBody:
    """
    Assemble the typed block tree.

    Headings nest through an explicit stack of open ancestors: a depth-N
    heading closes every open heading of depth >= N and becomes a child of
    whatever remains on top (or of the root).
    """
    root: list = []
    stack: list[_OpenHeading] = []
    keywords: list[Keyword] = []
    definitions: list[Footnote] = []
    warnings: list[str] = []
    pending_name: str | None = None

    for raw in raw_blocks:
        if raw.kind == "heading":
            while stack and stack[-1].level >= raw.level:
                stack.pop()
            heading = _open_heading(raw, labels, source)
            (stack[-1].children if stack else root).append(heading)
            stack.append(heading)
            pending_name = None
            continue

        if raw.kind == "end":
            message = f"line {raw.start_line}: {raw.name} has no matching opening line"
            logger.warning(
                "block_end_unmatched", source=str(source) if source else None, detail=message
            )
            warnings.append(message)
            continue

        if raw.kind == "keyword":
            if raw.name == "name":
                pending_name = raw.header.strip() or None
            elif raw.name not in _AFFILIATED_KEYWORDS and not raw.name.startswith("attr_"):
                keywords.append(Keyword(key=raw.name, value=raw.header, line=raw.start_line))
            continue

        if raw.kind == "footnote":
            ref = _source_ref(raw, source)
            body, nested = parse_inline(" ".join(raw.lines), labels, source=ref)
            definitions.append(Footnote(label=raw.name, body=body, source=ref))
            definitions.extend(nested)
            continue

        if raw.kind == "quote":
            inner = build_blocks(
                scan_blocks(
                    "\n".join(raw.lines),
                    source=source,
                    first_line=raw.start_line + 1,
                    allow_headings=False,
                ),
                labels=labels,
                source=source,
            )
            definitions.extend(inner.footnotes)
            warnings.extend(inner.warnings)
            block: Block = Quote(children=inner.blocks, source=_source_ref(raw, source))
        else:
            block = _build_leaf(raw, pending_name, labels, source)
        pending_name = None
        (stack[-1].children if stack else root).append(block)

    return ParsedBody(
        blocks=_freeze(root),
        keywords=tuple(keywords),
        footnotes=tuple(definitions),
        warnings=tuple(warnings),
    )


def _source_ref(raw: RawBlock, source: Path | None) -> SourceRef:
    return SourceRef(path=source, start_line=raw.start_line, end_line=raw.end_line)


def _open_heading(raw: RawBlock, labels: FootnoteLabels, source: Path | None) -> _OpenHeading:
    title_text = raw.header
    tags: tuple[str, ...] = ()
    tag_match = HEADING_TAGS_RE.match(title_text)
    if tag_match:
        title_text = tag_match.group("title")
        tags = tuple(tag for tag in tag_match.group("tags").split(":") if tag)
    ref = _source_ref(raw, source)
    title, footnotes = parse_inline(title_text, labels, source=ref)
    return _OpenHeading(level=raw.level, title=title, tags=tags, footnotes=footnotes, source=ref)


def _freeze(nodes: list) -> tuple[Block, ...]:
    frozen: list[Block] = []
    for node in nodes:
        if not isinstance(node, _OpenHeading):
            frozen.append(node)
            continue
        children = _freeze(node.children)
        # The conventional footnote section is empty once its definitions are pulled out.
        if not children and spans_text(node.title).strip().lower() == FOOTNOTE_SECTION_TITLE:
            continue
        frozen.append(
            Heading(
                level=node.level,
                title=node.title,
                children=children,
                tags=node.tags,
                footnotes=node.footnotes,
                source=node.source,
            )
        )
    return tuple(frozen)


def _build_leaf(
    raw: RawBlock,
    name: str | None,
    labels: FootnoteLabels,
    source: Path | None,
) -> Block:
    ref = _source_ref(raw, source)
    if raw.kind == "src":
        return _code_block(raw, name, ref)
    if raw.kind == "example":
        return CodeBlock(language="", text=_src_body(raw.lines), name=name, source=ref)
    if raw.kind == "fixed":
        return CodeBlock(language="", text="\n".join(raw.lines), name=name, source=ref)
    if raw.kind == "drawer":
        return Drawer(name=raw.name, properties=_drawer_properties(raw.lines), source=ref)
    if raw.kind == "list":
        return _list_block(raw, labels, ref)
    text = "\n".join(line.strip() for line in raw.lines)
    spans, footnotes = parse_inline(text, labels, source=ref)
    return Paragraph(spans=spans, footnotes=footnotes, source=ref)


def _parse_src_params(params: str) -> tuple[str, tuple[tuple[str, str], ...]]:
    """Split ``swift :noweb yes :exports both`` into language and header args."""
    tokens = params.split()
    language = ""
    if tokens and not tokens[0].startswith(":"):
        language = tokens.pop(0)
    args: list[tuple[str, list[str]]] = []
    for token in tokens:
        if token.startswith(":") and len(token) > 1:
            args.append((token[1:].lower(), []))
        elif args:
            args[-1][1].append(token)
    return language, tuple((key, " ".join(values)) for key, values in args)


def _src_body(lines: tuple[str, ...]) -> str:
    text = textwrap.dedent("\n".join(lines))
    return SRC_COMMA_ESCAPE_RE.sub(r"\1", text)


def _code_block(raw: RawBlock, name: str | None, ref: SourceRef) -> CodeBlock:
    language, header_args = _parse_src_params(raw.header)
    args = dict(header_args)
    text = _src_body(raw.lines)
    noweb = (args.get("noweb") or "no").lower()
    references: tuple[str, ...] = ()
    if noweb in NOWEB_EXPAND_MODES or noweb in NOWEB_STRIP_MODES:
        references = find_references(text)
    return CodeBlock(
        language=language,
        text=text,
        name=name,
        noweb_ref=args.get("noweb-ref") or None,
        noweb=noweb,
        references=references,
        header_args=header_args,
        source=ref,
    )


def _drawer_properties(lines: tuple[str, ...]) -> tuple[tuple[str, str], ...]:
    properties: list[tuple[str, str]] = []
    for line in lines:
        if not line.strip():
            continue
        match = PROPERTY_RE.match(line)
        if match:
            properties.append((match.group("key"), match.group("value") or ""))
        else:
            properties.append(("", line.strip()))
    return tuple(properties)


def _list_block(raw: RawBlock, labels: FootnoteLabels, ref: SourceRef) -> ListBlock:
    # Nested items are flattened into one list, in document order.
    entries: list[list[str]] = []
    first_bullet = ""
    for line in raw.lines:
        if not line.strip():
            continue
        match = LIST_ITEM_RE.match(line)
        if match:
            if not first_bullet:
                first_bullet = match.group("bullet")
            entries.append([match.group("text") or ""])
        elif entries:
            entries[-1].append(line.strip())

    texts = ["\n".join(parts) for parts in entries]
    if first_bullet[:1].isdigit():
        kind = "ordered"
    elif texts and DESCRIPTION_ITEM_RE.match(texts[0]):
        kind = "description"
    else:
        kind = "unordered"

    items: list[ListItem] = []
    footnotes: list[Footnote] = []
    for text in texts:
        term: tuple[InlineSpan, ...] | None = None
        described = DESCRIPTION_ITEM_RE.match(text) if kind == "description" else None
        if described:
            term, term_notes = parse_inline(described.group("term"), labels, source=ref)
            footnotes.extend(term_notes)
            text = described.group("text") or ""
        spans, notes = parse_inline(text, labels, source=ref)
        footnotes.extend(notes)
        items.append(ListItem(spans=spans, term=term))
    return ListBlock(kind=kind, items=tuple(items), footnotes=tuple(footnotes), source=ref)
