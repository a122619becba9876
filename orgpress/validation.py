from __future__ import annotations

from typing import Any, Iterator

from .errors import DuplicateFootnoteError, UnresolvedFootnoteError, ValidationError
from .ir import (
    Document,
    Footnote,
    FootnoteRef,
    Heading,
    InlineSpan,
    ListBlock,
    Paragraph,
)


def validate_document(document: Document) -> None:
    """Reject duplicate footnote definitions and references nothing defines."""
    defined: dict[str, Footnote] = {}
    for note in document.all_footnotes():
        if note.label in defined:
            raise DuplicateFootnoteError(
                f"Footnote 'fn:{note.label}' is defined more than once",
                source=document.source,
                line=note.source.start_line if note.source else None,
            )
        defined[note.label] = note

    for label in _referenced_labels(document):
        if label not in defined:
            raise UnresolvedFootnoteError(label, source=document.source)


def _iter_spans(document: Document) -> Iterator[InlineSpan]:
    for block in document.iter_blocks():
        if isinstance(block, Heading):
            yield from block.title
        elif isinstance(block, Paragraph):
            yield from block.spans
        elif isinstance(block, ListBlock):
            for item in block.items:
                yield from item.term or ()
                yield from item.spans
    for note in document.all_footnotes():
        yield from note.body


def _referenced_labels(document: Document) -> list[str]:
    labels: dict[str, None] = {}
    for span in _iter_spans(document):
        if isinstance(span, FootnoteRef):
            labels.setdefault(span.label, None)
    return list(labels)


def bool_option(extra: dict[str, Any], key: str, default: bool) -> bool:
    """Read a boolean target option, accepting the strings true/false."""
    value = extra.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValidationError(f"Option '{key}' must be true or false, got {value!r}.")


def str_option(extra: dict[str, Any], key: str, default: str) -> str:
    value = extra.get(key, default)
    if not isinstance(value, str):
        raise ValidationError(f"Option '{key}' must be a string, got {value!r}.")
    return value
