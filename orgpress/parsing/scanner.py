"""Block scanner: splits Org text into a lazy stream of raw block boundaries."""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..errors import MalformedBlockError
from .regex import (
    BLOCK_BEGIN_RE,
    BLOCK_END_PATTERN,
    BLOCK_END_RE,
    COMMENT_RE,
    DRAWER_BEGIN_RE,
    DRAWER_END_RE,
    FIXED_WIDTH_RE,
    FOOTNOTE_DEF_RE,
    HEADING_RE,
    KEYWORD_RE,
    LIST_ITEM_RE,
)

# Delimited block type -> raw block kind; anything unlisted is kept literally.
_DELIMITED_KINDS = {
    "src": "src",
    "quote": "quote",
    "verse": "quote",
    "center": "quote",
    "example": "example",
}
# Container blocks may hold blocks of their own type; src and example bodies are literal.
_NESTING_TYPES = frozenset({"quote", "verse", "center"})


@dataclass(frozen=True, slots=True)
class RawBlock:
    kind: str
    start_line: int
    end_line: int
    lines: tuple[str, ...] = ()
    name: str = ""  # keyword key, drawer name, block type or footnote label
    header: str = ""  # heading title, keyword value or block parameters
    level: int = 0


def _indent(line: str) -> int:
    return len(line.expandtabs()) - len(line.expandtabs().lstrip())


def _line_kind(line: str, allow_headings: bool) -> str:
    """Guess which kind of block a line would open."""
    if not line.strip():
        return "blank"
    if allow_headings and HEADING_RE.match(line):
        return "heading"
    if BLOCK_BEGIN_RE.match(line):
        return "begin"
    if BLOCK_END_RE.match(line) or DRAWER_END_RE.match(line):
        return "end"
    if KEYWORD_RE.match(line):
        return "keyword"
    if COMMENT_RE.match(line):
        return "comment"
    if DRAWER_BEGIN_RE.match(line):
        return "drawer"
    if FIXED_WIDTH_RE.match(line):
        return "fixed"
    if FOOTNOTE_DEF_RE.match(line):
        return "footnote"
    if LIST_ITEM_RE.match(line):
        return "item"
    return "paragraph"


def scan_blocks(
    text: str,
    *,
    source: Path | None = None,
    first_line: int = 1,
    allow_headings: bool = True,
) -> Iterator[RawBlock]:
    """
    Yield raw blocks in document order.

    Line numbers are 1-based and offset by ``first_line`` so nested scans
    (quote bodies) report positions in the enclosing file.
    """
    lines = text.splitlines()
    index = 0
    while index < len(lines):
        line = lines[index]
        lineno = first_line + index
        kind = _line_kind(line, allow_headings)

        if kind in ("blank", "comment"):
            index += 1
        elif kind == "heading":
            match = HEADING_RE.match(line)
            yield RawBlock(
                kind="heading",
                start_line=lineno,
                end_line=lineno,
                header=match.group("title"),
                level=len(match.group("stars")),
            )
            index += 1
        elif kind == "keyword":
            match = KEYWORD_RE.match(line)
            yield RawBlock(
                kind="keyword",
                start_line=lineno,
                end_line=lineno,
                name=match.group("key").lower(),
                header=match.group("value"),
            )
            index += 1
        elif kind == "end":
            yield RawBlock(kind="end", start_line=lineno, end_line=lineno, name=line.strip())
            index += 1
        elif kind == "begin":
            block, index = _scan_delimited(lines, index, first_line, source)
            yield block
        elif kind == "drawer":
            block, index = _scan_drawer(lines, index, first_line, source)
            yield block
        elif kind == "fixed":
            block, index = _scan_fixed_width(lines, index, first_line)
            yield block
        elif kind == "footnote":
            block, index = _scan_footnote(lines, index, first_line, allow_headings)
            yield block
        elif kind == "item":
            block, index = _scan_list(lines, index, first_line, allow_headings)
            yield block
        else:
            block, index = _scan_paragraph(lines, index, first_line, allow_headings)
            yield block


def _scan_delimited(
    lines: list[str], index: int, first_line: int, source: Path | None
) -> tuple[RawBlock, int]:
    match = BLOCK_BEGIN_RE.match(lines[index])
    block_type = match.group("kind").lower()
    end_re = re.compile(BLOCK_END_PATTERN.format(kind=re.escape(block_type)), re.IGNORECASE)
    nests = block_type in _NESTING_TYPES
    depth = 0
    for end in range(index + 1, len(lines)):
        if nests:
            inner = BLOCK_BEGIN_RE.match(lines[end])
            if inner and inner.group("kind").lower() == block_type:
                depth += 1
                continue
        if end_re.match(lines[end]):
            if depth:
                depth -= 1
                continue
            block = RawBlock(
                kind=_DELIMITED_KINDS.get(block_type, "example"),
                start_line=first_line + index,
                end_line=first_line + end,
                lines=tuple(lines[index + 1 : end]),
                name=block_type,
                header=match.group("params") or "",
            )
            return block, end + 1
    raise MalformedBlockError(
        f"Unterminated #+begin_{block_type} block (no matching #+end_{block_type})",
        source=source,
        line=first_line + index,
    )


def _scan_drawer(
    lines: list[str], index: int, first_line: int, source: Path | None
) -> tuple[RawBlock, int]:
    name = DRAWER_BEGIN_RE.match(lines[index]).group("name")
    for end in range(index + 1, len(lines)):
        if DRAWER_END_RE.match(lines[end]):
            block = RawBlock(
                kind="drawer",
                start_line=first_line + index,
                end_line=first_line + end,
                lines=tuple(lines[index + 1 : end]),
                name=name.upper(),
            )
            return block, end + 1
    raise MalformedBlockError(
        f"Unterminated :{name}: drawer (no matching :END:)",
        source=source,
        line=first_line + index,
    )


def _scan_fixed_width(lines: list[str], index: int, first_line: int) -> tuple[RawBlock, int]:
    end = index
    texts: list[str] = []
    while end < len(lines) and _line_kind(lines[end], False) == "fixed":
        texts.append(FIXED_WIDTH_RE.match(lines[end]).group("text") or "")
        end += 1
    block = RawBlock(
        kind="fixed",
        start_line=first_line + index,
        end_line=first_line + end - 1,
        lines=tuple(texts),
    )
    return block, end


def _scan_footnote(
    lines: list[str], index: int, first_line: int, allow_headings: bool
) -> tuple[RawBlock, int]:
    match = FOOTNOTE_DEF_RE.match(lines[index])
    texts = [match.group("text")]
    end = index + 1
    while end < len(lines) and _line_kind(lines[end], allow_headings) == "paragraph":
        texts.append(lines[end].strip())
        end += 1
    block = RawBlock(
        kind="footnote",
        start_line=first_line + index,
        end_line=first_line + end - 1,
        lines=tuple(texts),
        name=match.group("label"),
    )
    return block, end


def _continues_list(line: str, base_indent: int, allow_headings: bool) -> bool:
    if allow_headings and HEADING_RE.match(line):
        return False
    if LIST_ITEM_RE.match(line):
        return _indent(line) >= base_indent
    return _indent(line) > base_indent


def _scan_list(
    lines: list[str], index: int, first_line: int, allow_headings: bool
) -> tuple[RawBlock, int]:
    base_indent = _indent(lines[index])
    end = index + 1
    while end < len(lines):
        if lines[end].strip():
            if not _continues_list(lines[end], base_indent, allow_headings):
                break
            end += 1
            continue
        following = end + 1
        while following < len(lines) and not lines[following].strip():
            following += 1
        if following < len(lines) and _continues_list(lines[following], base_indent, allow_headings):
            end = following
            continue
        break
    block = RawBlock(
        kind="list",
        start_line=first_line + index,
        end_line=first_line + end - 1,
        lines=tuple(lines[index:end]),
    )
    return block, end


def _scan_paragraph(
    lines: list[str], index: int, first_line: int, allow_headings: bool
) -> tuple[RawBlock, int]:
    end = index + 1
    while end < len(lines) and _line_kind(lines[end], allow_headings) == "paragraph":
        end += 1
    block = RawBlock(
        kind="paragraph",
        start_line=first_line + index,
        end_line=first_line + end - 1,
        lines=tuple(lines[index:end]),
    )
    return block, end
