"""Intermediate representation types for parsed Org documents."""

from .document import (
    Block,
    Bold,
    ChangelogEntry,
    Code,
    CodeBlock,
    Document,
    Drawer,
    Footnote,
    FootnoteRef,
    Heading,
    InlineSpan,
    Keyword,
    Link,
    ListBlock,
    ListItem,
    MetadataRecord,
    Paragraph,
    PlainText,
    Quote,
    SourceRef,
    iter_blocks,
    spans_text,
)

__all__ = [
    "Block",
    "Bold",
    "ChangelogEntry",
    "Code",
    "CodeBlock",
    "Document",
    "Drawer",
    "Footnote",
    "FootnoteRef",
    "Heading",
    "InlineSpan",
    "Keyword",
    "Link",
    "ListBlock",
    "ListItem",
    "MetadataRecord",
    "Paragraph",
    "PlainText",
    "Quote",
    "SourceRef",
    "iter_blocks",
    "spans_text",
]
