"""Org parser: block scanning, tree building and inline markup."""

from .blocks import ParsedBody, build_blocks
from .driver import parse_document, parse_file
from .inline import FootnoteLabels, parse_inline
from .scanner import RawBlock, scan_blocks

__all__ = [
    "FootnoteLabels",
    "ParsedBody",
    "RawBlock",
    "build_blocks",
    "parse_document",
    "parse_file",
    "parse_inline",
    "scan_blocks",
]
