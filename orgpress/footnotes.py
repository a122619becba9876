"""Document-scoped footnote lookup with numbering by first reference."""
from __future__ import annotations

from typing import Iterator

from .errors import UnresolvedFootnoteError
from .ir import Document, Footnote


class FootnoteIndex:
    """
    Resolves footnote labels for one render.

    References are weak: a label is looked up here at render time, and an
    unknown label raises UnresolvedFootnoteError.
    """

    def __init__(self, document: Document) -> None:
        self._source = document.source
        self._definitions: dict[str, Footnote] = {}
        for note in document.all_footnotes():
            self._definitions.setdefault(note.label, note)
        self._numbers: dict[str, int] = {}
        self._order: list[str] = []

    def lookup(self, label: str) -> Footnote:
        note = self._definitions.get(label)
        if note is None:
            raise UnresolvedFootnoteError(label, source=self._source)
        return note

    def number(self, label: str) -> tuple[int, bool]:
        """Return the footnote number and whether this is its first reference."""
        self.lookup(label)
        if label in self._numbers:
            return self._numbers[label], False
        self._order.append(label)
        self._numbers[label] = len(self._order)
        return self._numbers[label], True

    def referenced(self) -> Iterator[tuple[int, Footnote]]:
        """Yield referenced footnotes by number, including ones numbered during iteration."""
        position = 0
        while position < len(self._order):
            label = self._order[position]
            position += 1
            yield position, self._definitions[label]
