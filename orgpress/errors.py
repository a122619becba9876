from __future__ import annotations

from pathlib import Path


class PublishError(Exception):
    """Base error for all parse/render failures of a single document."""


class StructuralError(PublishError):
    """Errors raised while building the document tree from Org text."""

    def __init__(self, message: str, *, source: Path | None = None, line: int | None = None) -> None:
        self.source = source
        self.line = line
        location = str(source) if source is not None else "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


class MalformedBlockError(StructuralError):
    """A block or drawer delimiter was opened but never closed."""


class UndefinedReferenceError(StructuralError):
    """A code block references a noweb name no block defines."""


class DuplicateFootnoteError(StructuralError):
    """The same footnote label has more than one definition."""


class CyclicReferenceError(PublishError):
    """Noweb expansion revisited a name that is still being expanded."""

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__("Cyclic noweb reference: " + " -> ".join(chain))


class UnresolvedFootnoteError(PublishError):
    """A footnote reference has no matching definition."""

    def __init__(self, label: str, *, source: Path | None = None) -> None:
        self.label = label
        self.source = source
        where = f" in {source}" if source is not None else ""
        super().__init__(f"Unresolved footnote reference 'fn:{label}'{where}")


class ValidationError(PublishError):
    """Errors raised while validating documents or target options."""
