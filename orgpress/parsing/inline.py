"""Inline markup scan: bold, code, verbatim, links and footnote references."""
from __future__ import annotations

import itertools

from ..ir import Bold, Code, Footnote, FootnoteRef, InlineSpan, Link, PlainText, SourceRef
from .regex import EMPHASIS_POST, EMPHASIS_PRE, FOOTNOTE_LABEL_RE

_EMPHASIS_MARKERS = frozenset("*~=")


class FootnoteLabels:
    """Per-document source of labels for anonymous ``[fn:: ...]`` footnotes."""

    def __init__(self, prefix: str = "anon") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def next_label(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


def parse_inline(
    text: str,
    labels: FootnoteLabels,
    *,
    source: SourceRef | None = None,
) -> tuple[tuple[InlineSpan, ...], tuple[Footnote, ...]]:
    """
    Scan ``text`` once, left to right, into inline spans.

    Returns the spans plus any footnotes defined inline (``[fn:: body]`` or
    ``[fn:label: body]``); the caller attaches those to its enclosing block.
    A marker that never closes is kept as literal text.
    """
    spans: list[InlineSpan] = []
    footnotes: list[Footnote] = []
    plain: list[str] = []

    def flush() -> None:
        if plain:
            spans.append(PlainText("".join(plain)))
            plain.clear()

    index = 0
    while index < len(text):
        char = text[index]
        if text.startswith("[[", index):
            link = _scan_link(text, index)
            if link is not None:
                flush()
                spans.append(link[0])
                index = link[1]
                continue
        elif text.startswith("[fn:", index):
            note = _scan_footnote(text, index, labels, source)
            if note is not None:
                ref, defined, index = note
                flush()
                spans.append(ref)
                footnotes.extend(defined)
                continue
        elif char in _EMPHASIS_MARKERS:
            close = _find_emphasis_close(text, index)
            if close is not None:
                flush()
                content = text[index + 1 : close]
                if char == "*":
                    spans.append(Bold(content))
                else:
                    spans.append(Code(content, verbatim=char == "="))
                index = close + 1
                continue
        plain.append(char)
        index += 1
    flush()
    return tuple(spans), tuple(footnotes)


def _scan_link(text: str, start: int) -> tuple[Link, int] | None:
    close = text.find("]]", start + 2)
    if close < 0:
        return None
    inner = text[start + 2 : close]
    if "[[" in inner:
        return None
    if "][" in inner:
        url, label = inner.split("][", 1)
    else:
        url, label = inner, inner
    url = url.strip()
    if not url:
        return None
    label = " ".join(label.split()) or url
    return Link(url=url, text=label), close + 2


def _matching_bracket(text: str, start: int) -> int | None:
    depth = 0
    for position in range(start, len(text)):
        if text[position] == "[":
            depth += 1
        elif text[position] == "]":
            depth -= 1
            if depth == 0:
                return position
    return None


def _scan_footnote(
    text: str,
    start: int,
    labels: FootnoteLabels,
    source: SourceRef | None,
) -> tuple[FootnoteRef, tuple[Footnote, ...], int] | None:
    close = _matching_bracket(text, start)
    if close is None:
        return None
    inner = text[start + len("[fn:") : close]
    if inner.startswith(":"):
        label, body_text = labels.next_label(), inner[1:]
    elif ":" in inner:
        label, body_text = inner.split(":", 1)
    else:
        label, body_text = inner, None
    if not FOOTNOTE_LABEL_RE.match(label):
        return None
    if body_text is None:
        return FootnoteRef(label), (), close + 1

    body, nested = parse_inline(" ".join(body_text.split()), labels, source=source)
    return FootnoteRef(label), (Footnote(label=label, body=body, source=source), *nested), close + 1


def _find_emphasis_close(text: str, start: int) -> int | None:
    marker = text[start]
    if start > 0 and text[start - 1] not in EMPHASIS_PRE:
        return None
    if start + 1 >= len(text) or text[start + 1].isspace() or text[start + 1] == marker:
        return None
    search = start + 2
    while True:
        close = text.find(marker, search)
        if close < 0:
            return None
        # Org allows emphasis to span at most one line break.
        if text.count("\n", start, close) > 1:
            return None
        after_ok = close + 1 == len(text) or text[close + 1] in EMPHASIS_POST
        if not text[close - 1].isspace() and after_ok:
            return close
        search = close + 1
